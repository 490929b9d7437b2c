"""Object.prototype methods and the Object constructor's functions."""

from __future__ import annotations

from typing import Any

from .access import define_property as _define
from .access import get_property, has_property, set_property, unflatten_array
from .properties import Attr, JSObject, JSTypeError, ObjectClass, undefined
from .values import is_array_index, new_array, to_boolean, to_object, to_string

_TAGS = {
    ObjectClass.SCRIPT: "Function",
    ObjectClass.CFUNCTION: "Function",
}

_REGEXP_NAMES = ("source", "global", "ignoreCase", "multiline", "lastIndex")


def _require_object(value: Any) -> JSObject:
    if not isinstance(value, JSObject):
        raise JSTypeError("not an object")
    return value


def _name(name: Any) -> str:
    return name if isinstance(name, str) else to_string(name)


def _to_function(value: Any) -> JSObject | None:
    if value is undefined or value is None:
        return None
    if isinstance(value, JSObject) and value.cls in (ObjectClass.FUNCTION, ObjectClass.CFUNCTION):
        return value
    raise JSTypeError("not a function")


def to_string_tag(value: Any) -> str:
    """Object.prototype.toString: ``[object Class]``."""
    if value is undefined:
        return "[object Undefined]"
    if value is None:
        return "[object Null]"
    obj = to_object(value)
    if obj.cls is ObjectClass.USERDATA:
        return "[object " + str(getattr(obj.internal, "tag", "")) + "]"
    return "[object " + _TAGS.get(obj.cls, obj.cls.value) + "]"


def has_own_property(value: Any, name: Any) -> bool:
    """Object.prototype.hasOwnProperty."""
    obj = to_object(value)
    name = _name(name)
    k = is_array_index(name)
    if obj.cls is ObjectClass.STRING and k is not None and k < obj.length:
        return True
    if obj.cls is ObjectClass.ARRAY and obj.simple and k is not None and k < len(obj.array):
        return True
    return obj.get_own_property(name) is not None


def is_prototype_of(obj: Any, value: Any) -> bool:
    """Object.prototype.isPrototypeOf."""
    self = to_object(obj)
    if isinstance(value, JSObject):
        proto = value.prototype
        while proto is not None:
            if proto is self:
                return True
            proto = proto.prototype
    return False


def property_is_enumerable(obj: Any, name: Any) -> bool:
    """Object.prototype.propertyIsEnumerable."""
    prop = to_object(obj).get_own_property(_name(name))
    return prop is not None and not prop.atts & Attr.DONTENUM


def get_prototype_of(value: Any) -> JSObject | None:
    """Object.getPrototypeOf; None stands for null."""
    return _require_object(value).prototype


def get_own_property_descriptor(value: Any, name: Any) -> Any:
    """Object.getOwnPropertyDescriptor; undefined if the property is not found."""
    obj = _require_object(value)
    prop = obj.get_property(_name(name))
    if prop is None:
        return undefined
    desc = JSObject(ObjectClass.OBJECT, None)
    if prop.getter is None and prop.setter is None:
        _define(desc, "value", prop.value)
        _define(desc, "writable", not prop.atts & Attr.READONLY)
    else:
        _define(desc, "get", prop.getter if prop.getter is not None else undefined)
        _define(desc, "set", prop.setter if prop.setter is not None else undefined)
    _define(desc, "enumerable", not prop.atts & Attr.DONTENUM)
    _define(desc, "configurable", not prop.atts & Attr.DONTCONF)
    return desc


def get_own_property_names(value: Any) -> JSObject:
    """Object.getOwnPropertyNames, as a new array."""
    obj = _require_object(value)
    names = [prop.name for prop in obj.properties]
    if obj.cls is ObjectClass.ARRAY:
        names.append("length")
        if obj.simple:
            names.extend(str(k) for k in range(len(obj.array)))
    elif obj.cls is ObjectClass.STRING:
        names.append("length")
        names.extend(str(k) for k in range(obj.length))
    elif obj.cls is ObjectClass.REGEXP:
        names.extend(_REGEXP_NAMES)
    return new_array(names)


def _apply_descriptor(obj: JSObject, name: str, desc: JSObject) -> None:
    haswritable = has_property(desc, "writable")
    writable = haswritable and to_boolean(get_property(desc, "writable"))
    enumerable = has_property(desc, "enumerable") and to_boolean(get_property(desc, "enumerable"))
    configurable = has_property(desc, "configurable") and to_boolean(
        get_property(desc, "configurable")
    )
    hasvalue = has_property(desc, "value")
    if hasvalue:
        _define(obj, name, get_property(desc, "value"), raise_on_fail=True)

    atts = Attr.NONE
    if not writable:
        atts |= Attr.READONLY
    if not enumerable:
        atts |= Attr.DONTENUM
    if not configurable:
        atts |= Attr.DONTCONF

    accessors = []
    for field in ("get", "set"):
        if has_property(desc, field):
            if haswritable or hasvalue:
                raise JSTypeError("value/writable and get/set attributes are exclusive")
            accessors.append(get_property(desc, field))
        else:
            accessors.append(undefined)

    getter = _to_function(accessors[0])
    setter = _to_function(accessors[1])
    _define(obj, name, atts=atts, getter=getter, setter=setter, raise_on_fail=True)


def define_property(value: Any, name: Any, desc: Any) -> JSObject:
    """Object.defineProperty; returns the object."""
    obj = _require_object(value)
    descriptor = _require_object(desc)
    _apply_descriptor(obj, _name(name), descriptor)
    return obj


def define_properties(value: Any, props: Any) -> JSObject:
    """Object.defineProperties; returns the object."""
    obj = _require_object(value)
    table = _require_object(props)
    for prop in list(table.properties):
        if not prop.atts & Attr.DONTENUM:
            _apply_descriptor(obj, prop.name, to_object(prop.value))
    return obj


def create(proto: Any, props: Any = undefined) -> JSObject:
    """Object.create; ``proto`` may be None for a null prototype."""
    if proto is not None and not isinstance(proto, JSObject):
        raise JSTypeError("not an object or null")
    obj = JSObject(ObjectClass.OBJECT, proto)
    if props is not undefined:
        table = _require_object(props)
        for prop in list(table.properties):
            if prop.atts & Attr.DONTENUM:
                continue
            if not isinstance(prop.value, JSObject):
                raise JSTypeError("not an object")
            _apply_descriptor(obj, prop.name, prop.value)
    return obj


def keys(value: Any) -> JSObject:
    """Object.keys, as a new array."""
    obj = _require_object(value)
    names = [prop.name for prop in obj.properties if not prop.atts & Attr.DONTENUM]
    if obj.cls is ObjectClass.STRING:
        names.extend(str(k) for k in range(obj.length))
    if obj.cls is ObjectClass.ARRAY and obj.simple:
        names.extend(str(k) for k in range(len(obj.array)))
    return new_array(names)


def prevent_extensions(value: Any) -> JSObject:
    """Object.preventExtensions."""
    obj = _require_object(value)
    unflatten_array(obj)
    obj.extensible = False
    return obj


def is_extensible(value: Any) -> bool:
    """Object.isExtensible."""
    return _require_object(value).extensible


def seal(value: Any) -> JSObject:
    """Object.seal: no new properties, none can be deleted."""
    obj = prevent_extensions(value)
    for prop in obj.properties:
        prop.atts |= Attr.DONTCONF
    return obj


def is_sealed(value: Any) -> bool:
    """Object.isSealed."""
    obj = _require_object(value)
    if obj.extensible:
        return False
    return all(prop.atts & Attr.DONTCONF for prop in obj.properties)


def freeze(value: Any) -> JSObject:
    """Object.freeze: sealed, and every property read-only."""
    obj = prevent_extensions(value)
    for prop in obj.properties:
        prop.atts |= Attr.READONLY | Attr.DONTCONF
    return obj


def is_frozen(value: Any) -> bool:
    """Object.isFrozen."""
    obj = _require_object(value)
    for prop in obj.properties:
        if not prop.atts & Attr.READONLY or not prop.atts & Attr.DONTCONF:
            return False
    return not obj.extensible


__all__ = [
    "to_string_tag",
    "has_own_property",
    "is_prototype_of",
    "property_is_enumerable",
    "get_prototype_of",
    "get_own_property_descriptor",
    "get_own_property_names",
    "define_property",
    "define_properties",
    "create",
    "keys",
    "prevent_extensions",
    "is_extensible",
    "seal",
    "is_sealed",
    "freeze",
    "is_frozen",
    "set_property",
]