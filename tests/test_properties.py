import random

import pytest

from jsmini.properties import (
    Attr,
    JSError,
    JSObject,
    JSTypeError,
    ObjectClass,
    PropertyTree,
    UndefinedType,
    undefined,
)


def test_tree_insert_and_find():
    tree = PropertyTree()
    prop = tree.insert("alpha")
    assert prop.name == "alpha"
    assert tree.find("alpha") is prop
    assert tree.insert("alpha") is prop
    assert len(tree) == 1
    assert tree.find("beta") is None
    assert "alpha" in tree
    assert "beta" not in tree


def test_new_property_defaults():
    prop = PropertyTree().insert("x")
    assert prop.value is undefined
    assert prop.atts == Attr.NONE
    assert prop.getter is None and prop.setter is None


def test_tree_iterates_in_name_order():
    tree = PropertyTree()
    names = [f"k{i}" for i in range(200)]
    random.Random(1).shuffle(names)
    for name in names:
        tree.insert(name)
    assert [p.name for p in tree] == sorted(names)
    assert len(tree) == len(names)


def test_tree_random_inserts_and_removes_match_set():
    rng = random.Random(7)
    tree = PropertyTree()
    model: set[str] = set()
    for _ in range(2000):
        name = str(rng.randrange(300))
        if rng.random() < 0.6:
            tree.insert(name)
            model.add(name)
        else:
            removed = tree.remove(name)
            assert (removed is not None) == (name in model)
            if removed is not None:
                assert removed.name == name
            model.discard(name)
        assert len(tree) == len(model)
    assert [p.name for p in tree] == sorted(model)
    for name in model:
        assert tree.find(name).name == name


def test_tree_remove_everything():
    tree = PropertyTree()
    for i in range(64):
        tree.insert(str(i))
    for i in range(64):
        assert tree.remove(str(i)).name == str(i)
    assert len(tree) == 0
    assert list(tree) == []
    assert tree.remove("0") is None


def test_remove_keeps_values():
    tree = PropertyTree()
    for i in range(50):
        tree.insert(f"p{i:02d}").value = i
    tree.remove("p25")
    assert [p.value for p in tree] == [i for i in range(50) if i != 25]


def test_undefined_is_singleton_and_falsy():
    assert UndefinedType() is undefined
    assert not undefined


def test_prototype_chain_lookup():
    proto = JSObject(ObjectClass.OBJECT, None)
    proto.set_property("inherited").value = 1
    obj = JSObject(ObjectClass.OBJECT, proto)
    obj.set_property("own").value = 2
    assert obj.get_own_property("inherited") is None
    assert obj.get_property("inherited").value == 1
    prop, own = obj.find_property("inherited")
    assert prop.value == 1 and own is False
    prop, own = obj.find_property("own")
    assert prop.value == 2 and own is True
    assert obj.find_property("missing") == (None, False)


def test_non_extensible_object():
    obj = JSObject(ObjectClass.OBJECT, None)
    obj.set_property("a")
    obj.extensible = False
    assert obj.set_property("b") is None
    assert obj.set_property("a").name == "a"
    with pytest.raises(JSTypeError, match="object is non-extensible"):
        obj.set_property("b", strict=True)


def test_js_type_error_is_js_error():
    with pytest.raises(JSError):
        JSObject(ObjectClass.OBJECT, None)._get_enum_property  # noqa: B018
        obj = JSObject(ObjectClass.OBJECT, None)
        obj.extensible = False
        obj.set_property("z", strict=True)


def test_delete_property():
    obj = JSObject(ObjectClass.OBJECT, None)
    obj.set_property("a")
    obj.delete_property("a")
    assert obj.get_own_property("a") is None
    obj.delete_property("a")
    assert len(obj.properties) == 0


def test_iterate_own_skips_dontenum():
    obj = JSObject(ObjectClass.OBJECT, None)
    for name in ("c", "a", "b"):
        obj.set_property(name)
    obj.set_property("hidden").atts |= Attr.DONTENUM
    assert list(obj.iterate(own=True)) == ["a", "b", "c"]


def test_iterate_inherited_order_and_shadowing():
    proto = JSObject(ObjectClass.OBJECT, None)
    proto.set_property("p")
    proto.set_property("shared")
    obj = JSObject(ObjectClass.OBJECT, proto)
    obj.set_property("z")
    obj.set_property("shared")
    assert list(obj.iterate()) == ["z", "p", "shared"]
    assert list(obj.iterate(own=True)) == ["shared", "z"]


def test_iterate_skips_names_deleted_meanwhile():
    obj = JSObject(ObjectClass.OBJECT, None)
    for name in ("a", "b", "c"):
        obj.set_property(name)
    it = obj.iterate(own=True)
    assert next(it) == "a"
    obj.delete_property("b")
    obj.set_property("d")
    assert list(it) == ["c"]


def test_iterate_string_object_indices_first():
    obj = JSObject(ObjectClass.STRING, None)
    obj.primitive = "abc"
    obj.length = 3
    obj.set_property("extra")
    assert list(obj.iterate(own=True)) == ["0", "1", "2", "extra"]


def test_iterate_simple_array():
    arr = JSObject(ObjectClass.ARRAY, None)
    arr.array = ["x", "y"]
    arr.length = 2
    assert list(arr.iterate(own=True)) == ["0", "1"]


def _sparse_array(length, names):
    arr = JSObject(ObjectClass.ARRAY, None)
    arr.simple = False
    for name in names:
        arr.set_property(name).value = name
    arr.length = length
    return arr


def test_resize_array_dense():
    arr = _sparse_array(5, ["0", "1", "2", "3", "4", "foo"])
    arr.resize_array(2)
    assert arr.length == 2
    assert [p.name for p in arr.properties] == ["0", "1", "foo"]


def test_resize_array_sparse():
    arr = _sparse_array(1000, ["1", "500", "007", "foo", "999"])
    arr.resize_array(10)
    assert arr.length == 10
    assert sorted(p.name for p in arr.properties) == sorted(["1", "007", "foo"])


def test_resize_array_growing_keeps_properties():
    arr = _sparse_array(2, ["0", "1"])
    arr.resize_array(20)
    assert arr.length == 20
    assert len(arr.properties) == 2


def test_resize_simple_array_rejected():
    arr = JSObject(ObjectClass.ARRAY, None)
    with pytest.raises(ValueError):
        arr.resize_array(0)