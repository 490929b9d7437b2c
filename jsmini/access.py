"""Property access that honours attributes, accessors and built-in slots."""

from __future__ import annotations

from typing import Any, Iterable

from .properties import (
    Attr,
    JSObject,
    JSRangeError,
    JSReferenceError,
    JSTypeError,
    ObjectClass,
    undefined,
)
from .numbers import to_integer
from .strings import rune_at
from .values import NativeFunction, call, is_array_index, is_callable, to_number, type_of

ARRAY_LIMIT = 1 << 26

_REGEXP_FIELDS = ("source", "global", "ignoreCase", "multiline", "lastIndex")
_ABSENT = object()


def _regexp_field(obj: JSObject, name: str) -> Any:
    state = obj.internal
    flags = getattr(state, "flags", "")
    if name == "source":
        return getattr(state, "source", "")
    if name == "global":
        return "g" in flags
    if name == "ignoreCase":
        return "i" in flags
    if name == "multiline":
        return "m" in flags
    return getattr(state, "last", 0)


def _userdata_hook(obj: JSObject, hook: str) -> Any:
    """Optional ``has``/``put``/``delete`` hooks on a userdata payload."""
    if obj.cls is ObjectClass.USERDATA:
        return getattr(obj.internal, hook, None)
    return None


def unflatten_array(obj: JSObject) -> None:
    """Move the elements of a simple array into ordinary properties."""
    if obj.cls is not ObjectClass.ARRAY or not obj.simple:
        return
    for i, item in enumerate(obj.array):
        prop = obj.set_property(str(i))
        if prop is not None:
            prop.value = item
    obj.array = []
    obj.simple = False


def _lookup(obj: JSObject, name: str) -> tuple[bool, Any]:
    if obj.cls is ObjectClass.ARRAY:
        if name == "length":
            return True, obj.length
        if obj.simple:
            k = is_array_index(name)
            if k is not None:
                if k < len(obj.array):
                    return True, obj.array[k]
                return False, undefined
    elif obj.cls is ObjectClass.STRING:
        if name == "length":
            return True, obj.length
        k = is_array_index(name)
        if k is not None and k < obj.length:
            rune = rune_at(obj.primitive, k)
            return True, chr(rune) if rune >= 0 else undefined
    elif obj.cls is ObjectClass.REGEXP:
        if name in _REGEXP_FIELDS:
            return True, _regexp_field(obj, name)
    else:
        has = _userdata_hook(obj, "has")
        if has is not None:
            found, value = has(name)
            if found:
                return True, value

    prop = obj.get_property(name)
    if prop is None:
        return False, undefined
    if prop.getter is not None:
        return True, call(prop.getter, obj, [])
    return True, prop.value


def has_property(obj: JSObject, name: str) -> bool:
    """True if ``name`` is found on ``obj`` or along its prototype chain."""
    return _lookup(obj, name)[0]


def get_property(obj: JSObject, name: str) -> Any:
    """The value of ``name``, running a getter if there is one; else undefined."""
    return _lookup(obj, name)[1]


def has_index(obj: JSObject, k: int) -> bool:
    if obj.cls is ObjectClass.ARRAY and obj.simple:
        return 0 <= k < len(obj.array)
    return has_property(obj, str(k))


def get_index(obj: JSObject, k: int) -> Any:
    if obj.cls is ObjectClass.ARRAY and obj.simple:
        return obj.array[k] if 0 <= k < len(obj.array) else undefined
    return get_property(obj, str(k))


def _set_array_index(obj: JSObject, k: int, value: Any) -> None:
    newlen = k + 1
    if newlen > ARRAY_LIMIT:
        raise JSRangeError("array too large")
    if newlen > len(obj.array):
        obj.array.append(value)
    else:
        obj.array[k] = value
    if newlen > obj.length:
        obj.length = newlen


def _readonly(name: str, strict: bool) -> None:
    if strict:
        raise JSTypeError(f"'{name}' is read-only")


def set_property(
    obj: JSObject, name: str, value: Any, strict: bool = False, transient: bool = False
) -> None:
    """Assign ``value`` to ``name`` as the assignment operator does.

    ``transient`` marks a wrapper made for a primitive: no property is created
    on it. In ``strict`` mode failed assignments raise a TypeError.
    """
    if obj.cls is ObjectClass.ARRAY:
        if name == "length":
            rawlen = to_number(value)
            newlen = to_integer(rawlen)
            if newlen != rawlen or newlen < 0:
                raise JSRangeError("invalid array length")
            if newlen > ARRAY_LIMIT:
                raise JSRangeError("array too large")
            if obj.simple:
                obj.length = newlen
                if newlen <= len(obj.array):
                    del obj.array[newlen:]
            else:
                obj.resize_array(newlen)
            return
        k = is_array_index(name)
        if k is not None:
            if obj.simple and k <= len(obj.array):
                _set_array_index(obj, k, value)
                return
            unflatten_array(obj)
            if obj.length < k + 1:
                obj.length = k + 1
    elif obj.cls is ObjectClass.STRING:
        if name == "length":
            return _readonly(name, strict)
        k = is_array_index(name)
        if k is not None and k < obj.length:
            return _readonly(name, strict)
    elif obj.cls is ObjectClass.REGEXP:
        if name == "lastIndex":
            obj.internal.last = to_integer(to_number(value))
            return
        if name in _REGEXP_FIELDS:
            return _readonly(name, strict)
    else:
        put = _userdata_hook(obj, "put")
        if put is not None and put(name, value):
            return

    prop, own = obj.find_property(name)
    if prop is not None:
        if prop.setter is not None:
            call(prop.setter, obj, [value])
            return
        if strict and prop.getter is not None:
            raise JSTypeError(f"setting property '{name}' that only has a getter")
        if prop.atts & Attr.READONLY:
            return _readonly(name, strict)

    if prop is None or not own:
        if transient:
            if strict:
                raise JSTypeError(f"cannot create property '{name}' on transient object")
            return
        prop = obj.set_property(name, strict)

    if prop is not None:
        if prop.atts & Attr.READONLY:
            return _readonly(name, strict)
        prop.value = value


def set_index(
    obj: JSObject, k: int, value: Any, strict: bool = False, transient: bool = False
) -> None:
    if obj.cls is ObjectClass.ARRAY and obj.simple and 0 <= k <= len(obj.array):
        _set_array_index(obj, k, value)
    else:
        set_property(obj, str(k), value, strict, transient)


def define_property(
    obj: JSObject,
    name: str,
    value: Any = _ABSENT,
    atts: Attr = Attr.NONE,
    getter: Any = None,
    setter: Any = None,
    strict: bool = False,
    raise_on_fail: bool = False,
) -> None:
    """Define an own property; leave ``value`` out to define accessors only."""
    fail = False
    if obj.cls is ObjectClass.ARRAY:
        if name == "length":
            fail = True
        elif obj.simple:
            unflatten_array(obj)
    elif obj.cls is ObjectClass.STRING:
        k = is_array_index(name)
        fail = name == "length" or (k is not None and k < obj.length)
    elif obj.cls is ObjectClass.REGEXP:
        fail = name in _REGEXP_FIELDS
    else:
        put = _userdata_hook(obj, "put")
        if put is not None and put(name, None if value is _ABSENT else value):
            return

    if fail:
        if strict or raise_on_fail:
            raise JSTypeError(f"'{name}' is read-only or non-configurable")
        return

    prop = obj.set_property(name, strict)
    if prop is None:
        return
    if value is not _ABSENT:
        if not prop.atts & Attr.READONLY:
            prop.value = value
        elif strict:
            raise JSTypeError(f"'{name}' is read-only")
    for accessor, field in ((getter, "getter"), (setter, "setter")):
        if accessor is None:
            continue
        if not prop.atts & Attr.DONTCONF:
            setattr(prop, field, accessor)
        elif strict:
            raise JSTypeError(f"'{name}' is non-configurable")
    prop.atts |= atts


def delete_property(obj: JSObject, name: str, strict: bool = False) -> bool:
    """Delete an own property; False if it cannot be deleted."""
    dontconf = False
    if obj.cls is ObjectClass.ARRAY:
        if name == "length":
            dontconf = True
        elif obj.simple:
            unflatten_array(obj)
    elif obj.cls is ObjectClass.STRING:
        k = is_array_index(name)
        dontconf = name == "length" or (k is not None and k < obj.length)
    elif obj.cls is ObjectClass.REGEXP:
        dontconf = name in _REGEXP_FIELDS
    else:
        delete = _userdata_hook(obj, "delete")
        if delete is not None and delete(name):
            return True

    if not dontconf:
        prop = obj.get_own_property(name)
        if prop is None:
            return True
        if not prop.atts & Attr.DONTCONF:
            obj.delete_property(name)
            return True

    if strict:
        raise JSTypeError(f"'{name}' is non-configurable")
    return False


def delete_index(obj: JSObject, k: int, strict: bool = False) -> bool:
    # The last element of a simple array goes without unflattening.
    if obj.cls is ObjectClass.ARRAY and obj.simple and obj.array and k == len(obj.array) - 1:
        obj.array.pop()
        return True
    return delete_property(obj, str(k), strict)


def construct(fn: Any, args: Iterable[Any] = ()) -> Any:
    """The ``new`` operator.

    Native constructors build their own result and get a null this. Other
    functions get a new object whose prototype is their ``prototype``
    property (none if that is not an object).
    """
    if not is_callable(fn):
        raise JSTypeError(f"{type_of(fn)} is not callable")
    arglist = list(args)
    if isinstance(fn, NativeFunction) and fn.constructor is not None:
        if len(arglist) < fn.length:
            arglist.extend([undefined] * (fn.length - len(arglist)))
        return fn.constructor(None, *arglist)

    proto = get_property(fn, "prototype")
    newobj = JSObject(ObjectClass.OBJECT, proto if isinstance(proto, JSObject) else None)
    result = call(fn, newobj, arglist)
    return result if isinstance(result, JSObject) else newobj


class Environment:
    """A scope: a variables object and a link to the enclosing scope."""

    def __init__(self, variables: JSObject, outer: "Environment | None" = None) -> None:
        self.variables = variables
        self.outer = outer

    def _chain(self):
        env: Environment | None = self
        while env is not None:
            yield env
            env = env.outer

    @property
    def global_object(self) -> JSObject:
        """The variables object of the outermost scope."""
        *_, last = self._chain()
        return last.variables

    def init_var(self, name: str, value: Any = undefined) -> None:
        """Declare ``name`` in this scope as a non-enumerable, fixed binding."""
        define_property(self.variables, name, value, Attr.DONTENUM | Attr.DONTCONF)

    def _find(self, name: str) -> tuple[bool, Any]:
        for env in self._chain():
            prop = env.variables.get_property(name)
            if prop is not None:
                if prop.getter is not None:
                    return True, call(prop.getter, env.variables, [])
                return True, prop.value
        return False, undefined

    def has_var(self, name: str) -> bool:
        return self._find(name)[0]

    def get_var(self, name: str) -> Any:
        """The value bound to ``name``; ReferenceError if it is not bound."""
        found, value = self._find(name)
        if not found:
            raise JSReferenceError(f"'{name}' is not defined")
        return value

    def set_var(self, name: str, value: Any, strict: bool = False) -> None:
        """Assign to the nearest binding, or create a global one."""
        for env in self._chain():
            prop = env.variables.get_property(name)
            if prop is None:
                continue
            if prop.setter is not None:
                call(prop.setter, env.variables, [value])
            elif not prop.atts & Attr.READONLY:
                prop.value = value
            elif strict:
                raise JSTypeError(f"'{name}' is read-only")
            return
        if strict:
            raise JSReferenceError(f"assignment to undeclared variable '{name}'")
        set_property(self.global_object, name, value)

    def delete_var(self, name: str, strict: bool = False) -> bool:
        for env in self._chain():
            prop = env.variables.get_own_property(name)
            if prop is None:
                continue
            if prop.atts & Attr.DONTCONF:
                if strict:
                    raise JSTypeError(f"'{name}' is non-configurable")
                return False
            env.variables.delete_property(name)
            return True
        return delete_property(self.global_object, name, strict)