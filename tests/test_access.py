from types import SimpleNamespace

import pytest

from jsmini.access import (
    Environment,
    construct,
    define_property,
    delete_index,
    delete_property,
    get_index,
    get_property,
    has_index,
    has_property,
    set_index,
    set_property,
    unflatten_array,
)
from jsmini.properties import (
    Attr,
    JSObject,
    JSRangeError,
    JSReferenceError,
    JSTypeError,
    ObjectClass,
    undefined,
)
from jsmini.values import NativeFunction, new_array, new_string_object


def test_unflatten_moves_elements_to_properties():
    items = ["a", "b"]
    arr = new_array(items)
    unflatten_array(arr)
    assert arr.simple is False
    assert arr.array == []
    assert arr.get_own_property("1").value == "b"
    assert get_property(arr, "0") == "a"
    assert get_property(arr, "length") == len(items)


def test_simple_array_index_does_not_reach_prototype():
    proto = JSObject()
    proto.set_property("5").value = "x"
    arr = new_array([])
    arr.prototype = proto
    assert has_property(arr, "5") is False
    assert get_property(arr, "5") is undefined
    assert get_property(arr, "missing") is undefined


def test_string_object_slots():
    s = new_string_object("hey")
    assert get_property(s, "1") == "e"
    assert get_property(s, "length") == 3
    astral = new_string_object("a\U0001F600")
    assert get_property(astral, "1") == "\ud83d"
    assert has_property(s, "7") is False


def test_getter_runs_with_object_as_this():
    seen = []
    obj = JSObject()
    getter = NativeFunction("get", lambda this: seen.append(this) or "got")
    define_property(obj, "x", getter=getter)
    assert get_property(obj, "x") == "got"
    assert seen == [obj]


def test_readonly_assignment():
    obj = JSObject()
    define_property(obj, "k", "v", Attr.READONLY)
    set_property(obj, "k", "new")
    assert get_property(obj, "k") == "v"
    with pytest.raises(JSTypeError):
        set_property(obj, "k", "new", strict=True)


def test_inherited_setter_is_called():
    calls = []
    proto = JSObject()
    define_property(proto, "p", setter=NativeFunction("set", lambda this, v: calls.append((this, v)), 1))
    obj = JSObject(ObjectClass.OBJECT, proto)
    set_property(obj, "p", 42)
    assert calls == [(obj, 42)]
    assert obj.get_own_property("p") is None


def test_transient_object_gets_no_property():
    wrapper = JSObject(ObjectClass.NUMBER)
    set_property(wrapper, "x", 1, transient=True)
    assert wrapper.get_own_property("x") is None
    with pytest.raises(JSTypeError):
        set_property(wrapper, "x", 1, strict=True, transient=True)


def test_non_extensible_object():
    obj = JSObject()
    obj.extensible = False
    set_property(obj, "y", 1)
    assert has_property(obj, "y") is False
    with pytest.raises(JSTypeError):
        set_property(obj, "y", 1, strict=True)


def test_array_length_assignment():
    arr = new_array([1, 2, 3])
    set_property(arr, "length", 1)
    assert arr.length == 1
    assert get_index(arr, 1) is undefined
    assert arr.array == [1]
    with pytest.raises(JSRangeError):
        set_property(arr, "length", 1.5)
    with pytest.raises(JSRangeError):
        set_property(arr, "length", -1)


def test_non_simple_array_shrinks():
    arr = new_array(["a", "b", "c"])
    unflatten_array(arr)
    set_property(arr, "length", 1)
    assert arr.get_own_property("2") is None
    assert arr.get_own_property("0").value == "a"
    assert get_property(arr, "length") == 1


def test_set_index_append_and_sparse():
    arr = new_array([])
    set_index(arr, 0, "a")
    assert arr.simple is True
    assert arr.array == ["a"]
    set_index(arr, 5, "z")
    assert arr.simple is False
    assert arr.length == 6
    assert get_index(arr, 5) == "z"
    assert has_index(arr, 0) is True
    assert has_index(arr, 3) is False


def test_define_array_length_fails():
    arr = new_array([1])
    define_property(arr, "length", 9)
    assert get_property(arr, "length") == 1
    with pytest.raises(JSTypeError):
        define_property(arr, "length", 9, raise_on_fail=True)


def test_define_does_not_overwrite_readonly_or_fixed_accessors():
    obj = JSObject()
    define_property(obj, "r", "v", Attr.READONLY | Attr.DONTCONF)
    define_property(obj, "r", "w")
    assert get_property(obj, "r") == "v"
    with pytest.raises(JSTypeError):
        define_property(obj, "r", getter=NativeFunction("g", lambda this: 1), strict=True)


def test_delete_property_respects_dontconf():
    obj = JSObject()
    define_property(obj, "fixed", 1, Attr.DONTCONF)
    define_property(obj, "free", 2)
    assert delete_property(obj, "fixed") is False
    with pytest.raises(JSTypeError):
        delete_property(obj, "fixed", strict=True)
    assert delete_property(obj, "free") is True
    assert has_property(obj, "free") is False
    assert delete_property(obj, "never") is True


def test_delete_string_slots_fail():
    s = new_string_object("ab")
    assert delete_property(s, "length") is False
    assert delete_property(s, "0") is False


def test_delete_last_index_keeps_length():
    items = ["a", "b", "c"]
    arr = new_array(items)
    assert delete_index(arr, 2) is True
    assert arr.simple is True
    assert arr.array == items[:2]
    assert arr.length == len(items)


def test_regexp_slots():
    state = SimpleNamespace(source="a+", flags="gi", last=0)
    rx = JSObject(ObjectClass.REGEXP)
    rx.internal = state
    assert get_property(rx, "source") == "a+"
    assert get_property(rx, "global") is True
    assert get_property(rx, "multiline") is False
    set_property(rx, "lastIndex", 4)
    assert state.last == 4
    set_property(rx, "source", "b")
    assert state.source == "a+"
    with pytest.raises(JSTypeError):
        set_property(rx, "source", "b", strict=True)


def test_construct_native_constructor():
    ctor = NativeFunction("Thing", lambda this, *a: "call", 2, constructor=lambda this, a, b: [this, a, b])
    assert construct(ctor, [1]) == [None, 1, undefined]


def test_construct_script_function():
    proto = JSObject()
    fn = JSObject(ObjectClass.FUNCTION)
    fn.set_property("prototype").value = proto

    def body(this, value):
        set_property(this, "v", value)

    fn.internal = body
    made = construct(fn, ["x"])
    assert made.prototype is proto
    assert get_property(made, "v") == "x"

    other = JSObject()
    fn.internal = lambda this, *a: other
    assert construct(fn, []) is other


def test_construct_not_callable():
    with pytest.raises(JSTypeError):
        construct(JSObject(), [])


def test_environment_lookup_and_assignment():
    glob = Environment(JSObject())
    inner = Environment(JSObject(), glob)
    glob.init_var("a", 1)
    inner.init_var("a", 2)
    assert inner.get_var("a") == 2
    assert glob.get_var("a") == 1
    with pytest.raises(JSReferenceError):
        inner.get_var("nope")
    inner.set_var("z", "zed")
    assert glob.variables.get_own_property("z").value == "zed"
    assert inner.has_var("z") is True
    with pytest.raises(JSReferenceError):
        inner.set_var("w", 1, strict=True)


def test_environment_delete():
    glob = Environment(JSObject())
    glob.init_var("declared", 1)
    glob.set_var("implicit", 2)
    assert glob.delete_var("declared") is False
    with pytest.raises(JSTypeError):
        glob.delete_var("declared", strict=True)
    assert glob.delete_var("implicit") is True
    assert glob.has_var("implicit") is False


def test_environment_readonly_binding():
    glob = Environment(JSObject())
    define_property(glob.variables, "c", "const", Attr.READONLY)
    glob.set_var("c", "other")
    assert glob.get_var("c") == "const"
    with pytest.raises(JSTypeError):
        glob.set_var("c", "other", strict=True)