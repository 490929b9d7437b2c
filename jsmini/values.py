"""Script values: type tests, conversions, wrapper objects and native calls."""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Iterable

from .numbers import number_to_string
from .properties import JSObject, JSTypeError, ObjectClass, undefined
from .strings import utf16_length

_INT_MAX = 2**31 - 1
_WHITESPACE = "\t\n\x0b\x0c\r \xa0\ufeff\u2028\u2029"
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")

_CALLABLE_CLASSES = (ObjectClass.FUNCTION, ObjectClass.SCRIPT, ObjectClass.CFUNCTION)


class NativeFunction(JSObject):
    """A function object backed by a Python callable.

    The callable is invoked as ``fn(this, *args)``; ``args`` is padded with
    ``undefined`` up to ``length``. ``constructor``, if given, is used by
    ``new`` instead of ``fn`` and is invoked the same way with a null this.
    """

    def __init__(
        self,
        name: str,
        fn: Callable[..., Any],
        length: int = 0,
        constructor: Callable[..., Any] | None = None,
    ) -> None:
        super().__init__(ObjectClass.CFUNCTION, None)
        self.name = name
        self.fn = fn
        self.length = length
        self.constructor = constructor

    def __repr__(self) -> str:
        return f"<NativeFunction {self.name}>"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_array_index(name: str) -> int | None:
    """Return the array index ``name`` spells, or None if it is not one."""
    if not name:
        return None
    if name[0] == "0":
        return 0 if len(name) == 1 else None
    n = 0
    for c in name:
        if not "0" <= c <= "9":
            return None
        if n >= _INT_MAX // 10:
            return None
        n = n * 10 + (ord(c) - ord("0"))
    return n


def type_of(value: Any) -> str:
    """The result of the ``typeof`` operator."""
    if value is undefined:
        return "undefined"
    if value is None:
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if _is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, JSObject):
        if value.cls in (ObjectClass.FUNCTION, ObjectClass.CFUNCTION):
            return "function"
        return "object"
    raise JSTypeError(f"not a script value: {value!r}")


def is_callable(value: Any) -> bool:
    """True for function, script and native function objects."""
    return isinstance(value, JSObject) and value.cls in _CALLABLE_CLASSES


def to_boolean(value: Any) -> bool:
    """ToBoolean."""
    if value is undefined or value is None:
        return False
    if isinstance(value, bool):
        return value
    if _is_number(value):
        return not (math.isnan(value) or value == 0)
    if isinstance(value, str):
        return value != ""
    return True


def _string_to_number(s: str) -> float:
    text = s.strip(_WHITESPACE)
    if not text:
        return 0.0
    if _HEX.fullmatch(text):
        return float(int(text[2:], 16))
    if text in ("Infinity", "+Infinity"):
        return math.inf
    if text == "-Infinity":
        return -math.inf
    if _DECIMAL.fullmatch(text):
        return float(text)
    return math.nan


def _to_primitive(obj: JSObject, hint: str) -> Any:
    if obj.primitive is not None:
        if hint == "string" and obj.cls is ObjectClass.DATE:
            pass
        else:
            return obj.primitive
    order = ("valueOf", "toString") if hint == "number" else ("toString", "valueOf")
    for method in order:
        prop = obj.get_property(method)
        if prop is None or prop.getter is not None:
            continue
        if is_callable(prop.value):
            result = call(prop.value, obj, [])
            if not isinstance(result, JSObject):
                return result
    raise JSTypeError("cannot convert object to primitive")


def to_number(value: Any) -> float:
    """ToNumber."""
    if value is undefined:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return float(value)
    if isinstance(value, str):
        return _string_to_number(value)
    if isinstance(value, JSObject):
        return to_number(_to_primitive(value, "number"))
    raise JSTypeError(f"not a script value: {value!r}")


def to_string(value: Any) -> str:
    """ToString."""
    if value is undefined:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return number_to_string(float(value))
    if isinstance(value, str):
        return value
    if isinstance(value, JSObject):
        return to_string(_to_primitive(value, "string"))
    raise JSTypeError(f"not a script value: {value!r}")


def new_array(items: Iterable[Any] = ()) -> JSObject:
    """A new simple array holding ``items``."""
    obj = JSObject(ObjectClass.ARRAY, None)
    obj.array = list(items)
    obj.length = len(obj.array)
    return obj


def new_string_object(s: str) -> JSObject:
    """A new String wrapper object around ``s``."""
    obj = JSObject(ObjectClass.STRING, None)
    obj.primitive = s
    obj.length = utf16_length(s)
    return obj


def to_object(value: Any) -> JSObject:
    """ToObject: wrap primitives, pass objects through."""
    if value is undefined or value is None:
        raise JSTypeError("cannot convert null or undefined to object")
    if isinstance(value, JSObject):
        return value
    if isinstance(value, bool):
        obj = JSObject(ObjectClass.BOOLEAN, None)
        obj.primitive = value
        return obj
    if _is_number(value):
        obj = JSObject(ObjectClass.NUMBER, None)
        obj.primitive = float(value)
        return obj
    if isinstance(value, str):
        return new_string_object(value)
    raise JSTypeError(f"not a script value: {value!r}")


def call(fn: Any, this: Any = undefined, args: Iterable[Any] = ()) -> Any:
    """Call a function object with ``this`` and ``args``; return its result."""
    if not is_callable(fn):
        raise JSTypeError(f"{type_of(fn)} is not callable")
    arglist = list(args)
    if isinstance(fn, NativeFunction):
        if len(arglist) < fn.length:
            arglist.extend([undefined] * (fn.length - len(arglist)))
        return fn.fn(this, *arglist)
    if callable(fn.internal):
        return fn.internal(this, *arglist)
    raise JSTypeError("function has no callable body")