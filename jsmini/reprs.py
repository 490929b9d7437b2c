"""Readable source-like representations of script values."""

from __future__ import annotations

import math
import re
from typing import Any

from .access import get_index, get_property, has_index, has_property
from .numbers import number_to_string, to_integer
from .properties import JSObject, JSTypeError, ObjectClass, undefined
from .values import to_number, to_string

_HEX = "0123456789ABCDEF"
_IDENT = re.compile(r"[0-9]+|[A-Za-z_][A-Za-z0-9_]*")
_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _repr_number(n: float) -> str:
    if n == 0 and math.copysign(1.0, n) < 0:
        return "-0"
    return number_to_string(n)


def _repr_string(s: str) -> str:
    out = ['"']
    for c in s:
        code = ord(c)
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif code < 0x20:
            out.append("\\x" + _HEX[(code >> 4) & 15] + _HEX[code & 15])
        elif code < 128:
            out.append(c)
        elif code < 0x10000:
            out.append("\\u" + "".join(_HEX[(code >> shift) & 15] for shift in (12, 8, 4, 0)))
        else:
            out.append(c)
    out.append('"')
    return "".join(out)


def _repr_ident(name: str) -> str:
    return name if _IDENT.fullmatch(name) else _repr_string(name)


def _repr_object(obj: JSObject, ancestors: list[JSObject]) -> str:
    if any(a is obj for a in ancestors):
        return "{}"
    inner = ancestors + [obj]
    parts = [
        _repr_ident(key) + ": " + _repr(get_property(obj, key), inner)
        for key in obj.iterate(own=True)
    ]
    return "{" + ", ".join(parts) + "}"


def _repr_array(obj: JSObject, ancestors: list[JSObject]) -> str:
    if any(a is obj for a in ancestors):
        return "[]"
    inner = ancestors + [obj]
    n = to_integer(to_number(get_property(obj, "length")))
    parts = [_repr(get_index(obj, i), inner) if has_index(obj, i) else "" for i in range(n)]
    return "[" + ", ".join(parts) + "]"


def _repr_function(obj: JSObject) -> str:
    info = obj.internal
    name = getattr(info, "name", "") or ""
    params = getattr(info, "params", ()) or ()
    return "function " + name + "(" + ", ".join(params) + ") { [byte code] }"


def _repr_regexp(obj: JSObject) -> str:
    state = obj.internal
    flags = getattr(state, "flags", "")
    suffix = "".join(f for f in "gim" if f in flags)
    return "/" + getattr(state, "source", "") + "/" + suffix


def _repr_error(obj: JSObject, ancestors: list[JSObject]) -> str:
    out = "(new " + to_string(get_property(obj, "name")) + "("
    if has_property(obj, "message"):
        out += _repr(get_property(obj, "message"), ancestors + [obj])
    return out + "))"


def _repr_any_object(obj: JSObject, ancestors: list[JSObject]) -> str:
    cls = obj.cls
    if cls is ObjectClass.ARRAY:
        return _repr_array(obj, ancestors)
    if cls in (ObjectClass.FUNCTION, ObjectClass.SCRIPT):
        return _repr_function(obj)
    if cls is ObjectClass.CFUNCTION:
        return "function " + str(getattr(obj, "name", "")) + "() { [native code] }"
    if cls is ObjectClass.BOOLEAN:
        return "(new Boolean(" + ("true" if obj.primitive else "false") + "))"
    if cls is ObjectClass.NUMBER:
        return "(new Number(" + _repr_number(obj.primitive) + "))"
    if cls is ObjectClass.STRING:
        return "(new String(" + _repr_string(obj.primitive) + "))"
    if cls is ObjectClass.REGEXP:
        return _repr_regexp(obj)
    if cls is ObjectClass.DATE:
        return "(new Date(" + number_to_string(obj.primitive) + "))"
    if cls is ObjectClass.ERROR:
        return _repr_error(obj, ancestors)
    if cls is ObjectClass.MATH:
        return "Math"
    if cls is ObjectClass.JSON:
        return "JSON"
    if cls is ObjectClass.ITERATOR:
        return "[iterator "
    if cls is ObjectClass.USERDATA:
        return "[userdata " + str(getattr(obj.internal, "tag", "")) + "]"
    return _repr_object(obj, ancestors)


def _repr(value: Any, ancestors: list[JSObject]) -> str:
    if value is undefined:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _repr_number(float(value))
    if isinstance(value, str):
        return _repr_string(value)
    if isinstance(value, JSObject):
        return _repr_any_object(value, ancestors)
    raise JSTypeError(f"not a script value: {value!r}")


def repr_value(value: Any) -> str:
    """A source-like representation of ``value``; cycles print as ``{}`` or ``[]``."""
    return _repr(value, [])