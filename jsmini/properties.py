"""Objects, property attributes and the ordered property store behind them."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Iterator


class ObjectClass(enum.Enum):
    """The internal class of a script object."""

    OBJECT = "Object"
    ARRAY = "Array"
    FUNCTION = "Function"
    SCRIPT = "Script"
    CFUNCTION = "CFunction"
    ERROR = "Error"
    BOOLEAN = "Boolean"
    NUMBER = "Number"
    STRING = "String"
    REGEXP = "RegExp"
    DATE = "Date"
    XHR = "XMLHttpRequest"
    MATH = "Math"
    JSON = "JSON"
    ARGUMENTS = "Arguments"
    ITERATOR = "Iterator"
    USERDATA = "Userdata"


class Attr(enum.IntFlag):
    """Property attribute flags."""

    NONE = 0
    READONLY = 1
    DONTENUM = 2
    DONTCONF = 4


class UndefinedType:
    """The type of the single ``undefined`` value."""

    _instance: "UndefinedType | None" = None

    def __new__(cls) -> "UndefinedType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (UndefinedType, ())


undefined = UndefinedType()


class JSError(Exception):
    """A script-level error; ``value`` holds a thrown script value, if any."""

    name = "Error"

    def __init__(self, message: str = "", value: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.value = value

    def __str__(self) -> str:
        return f"{self.name}: {self.message}" if self.message else self.name


class JSTypeError(JSError):
    name = "TypeError"


class JSRangeError(JSError):
    name = "RangeError"


class JSSyntaxError(JSError):
    name = "SyntaxError"


class JSReferenceError(JSError):
    name = "ReferenceError"


@dataclass(eq=False)
class Property:
    """A named slot on an object, either a data value or a getter/setter pair."""

    name: str
    value: Any = undefined
    atts: Attr = Attr.NONE
    getter: Any = None
    setter: Any = None


class _Node:
    __slots__ = ("left", "right", "level", "prop")

    def __init__(self, prop: Property | None, nil: "_Node | None" = None) -> None:
        self.left = nil if nil is not None else self
        self.right = nil if nil is not None else self
        self.level = 1 if nil is not None else 0
        self.prop = prop


_NIL = _Node(None)


def _skew(node: _Node) -> _Node:
    if node is not _NIL and node.left.level == node.level:
        left = node.left
        node.left = left.right
        left.right = node
        return left
    return node


def _split(node: _Node) -> _Node:
    if node is not _NIL and node.right.right.level == node.level:
        right = node.right
        node.right = right.left
        right.left = node
        right.level += 1
        return right
    return node


def _insert(node: _Node, name: str) -> tuple[_Node, Property, bool]:
    if node is _NIL:
        prop = Property(name)
        return _Node(prop, _NIL), prop, True
    if name < node.prop.name:
        node.left, prop, created = _insert(node.left, name)
    elif name > node.prop.name:
        node.right, prop, created = _insert(node.right, name)
    else:
        return node, node.prop, False
    node = _split(_skew(node))
    return node, prop, created


def _unlink(node: _Node, name: str) -> tuple[_Node, _Node | None]:
    if node is _NIL:
        return node, None
    removed: _Node | None
    if name < node.prop.name:
        node.left, removed = _unlink(node.left, name)
    elif name > node.prop.name:
        node.right, removed = _unlink(node.right, name)
    else:
        removed = node
        if node.left is _NIL and node.right is _NIL:
            return _NIL, removed
        if node.left is _NIL:
            succ = node.right
            while succ.left is not _NIL:
                succ = succ.left
            rest, moved = _unlink(node.right, succ.prop.name)
            moved.level = node.level
            moved.left = node.left
            moved.right = rest
            node = moved
        else:
            pred = node.left
            while pred.right is not _NIL:
                pred = pred.right
            rest, moved = _unlink(node.left, pred.prop.name)
            moved.level = node.level
            moved.left = rest
            moved.right = node.right
            node = moved

    if node.left.level < node.level - 1 or node.right.level < node.level - 1:
        node.level -= 1
        if node.right.level > node.level:
            node.right.level = node.level
        node = _skew(node)
        node.right = _skew(node.right)
        if node.right is not _NIL:
            node.right.right = _skew(node.right.right)
        node = _split(node)
        node.right = _split(node.right)
    return node, removed


class PropertyTree:
    """A balanced (AA) tree of properties kept in name order."""

    def __init__(self) -> None:
        self._root = _NIL
        self._count = 0

    def find(self, name: str) -> Property | None:
        """Return the property called ``name`` or None."""
        node = self._root
        while node is not _NIL:
            if name == node.prop.name:
                return node.prop
            node = node.left if name < node.prop.name else node.right
        return None

    def insert(self, name: str) -> Property:
        """Return the property called ``name``, creating it if missing."""
        self._root, prop, created = _insert(self._root, name)
        if created:
            self._count += 1
        return prop

    def remove(self, name: str) -> Property | None:
        """Remove and return the property called ``name``, or None."""
        self._root, removed = _unlink(self._root, name)
        if removed is None:
            return None
        self._count -= 1
        return removed.prop

    def __iter__(self) -> Iterator[Property]:
        stack: list[_Node] = []
        node = self._root
        while stack or node is not _NIL:
            while node is not _NIL:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.prop
            node = node.right

    def __len__(self) -> int:
        return self._count

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None


_CANONICAL_INDEX = re.compile(r"0|[1-9][0-9]*")


class JSObject:
    """A script object: a class, a prototype link and a property tree.

    ``primitive`` holds the wrapped value of Boolean, Number, String and Date
    objects; ``array``, ``length`` and ``simple`` describe arrays (and
    ``length`` the UTF-16 length of String objects); ``internal`` holds any
    other class-specific payload.
    """

    def __init__(self, cls: ObjectClass = ObjectClass.OBJECT, prototype: "JSObject | None" = None) -> None:
        self.cls = cls
        self.prototype = prototype
        self.properties = PropertyTree()
        self.extensible = True
        self.primitive: Any = None
        self.internal: Any = None
        self.array: list[Any] = []
        self.length = 0
        self.simple = cls is ObjectClass.ARRAY

    def __repr__(self) -> str:
        return f"<JSObject {self.cls.value} with {len(self.properties)} properties>"

    def get_own_property(self, name: str) -> Property | None:
        return self.properties.find(name)

    def get_property(self, name: str) -> Property | None:
        """Look ``name`` up along the prototype chain."""
        obj: JSObject | None = self
        while obj is not None:
            prop = obj.properties.find(name)
            if prop is not None:
                return prop
            obj = obj.prototype
        return None

    def find_property(self, name: str) -> tuple[Property | None, bool]:
        """Look ``name`` up along the chain; also tell whether it is own."""
        obj: JSObject | None = self
        own = True
        while obj is not None:
            prop = obj.properties.find(name)
            if prop is not None:
                return prop, own
            obj = obj.prototype
            own = False
        return None, False

    def _get_enum_property(self, name: str) -> Property | None:
        obj: JSObject | None = self
        while obj is not None:
            prop = obj.properties.find(name)
            if prop is not None and not prop.atts & Attr.DONTENUM:
                return prop
            obj = obj.prototype
        return None

    def set_property(self, name: str, strict: bool = False) -> Property | None:
        """Return the own property ``name``, creating it if the object allows."""
        if not self.extensible:
            prop = self.properties.find(name)
            if strict and prop is None:
                raise JSTypeError("object is non-extensible")
            return prop
        return self.properties.insert(name)

    def delete_property(self, name: str) -> None:
        self.properties.remove(name)

    def _enumerable_names(self, seen: "JSObject | None") -> list[str]:
        return [
            prop.name
            for prop in self.properties
            if not prop.atts & Attr.DONTENUM
            and (seen is None or seen._get_enum_property(prop.name) is None)
        ]

    def _flatten(self) -> list[str]:
        inherited = self.prototype._flatten() if self.prototype is not None else []
        return self._enumerable_names(self.prototype) + inherited

    def iterate(self, own: bool = False) -> Iterator[str]:
        """Yield enumerable property names, index names first.

        The names are fixed when this is called; a name is skipped if it is
        no longer found on the object when its turn comes.
        """
        names = self._enumerable_names(None) if own else self._flatten()
        if self.cls is ObjectClass.STRING:
            count = self.length
        elif self.cls is ObjectClass.ARRAY and self.simple:
            count = len(self.array)
        else:
            count = 0
        return self._iterate(count, names)

    def _iterate(self, count: int, names: list[str]) -> Iterator[str]:
        for i in range(count):
            yield str(i)
        for name in names:
            if self.get_property(name) is not None:
                yield name

    def resize_array(self, newlen: int) -> None:
        """Set the length of a non-simple array, dropping indexed properties past it."""
        if self.simple:
            raise ValueError("resize_array needs an array stored as properties")
        if newlen < self.length:
            if self.length > len(self.properties) * 2:
                for name in list(self.iterate(own=True)):
                    if _CANONICAL_INDEX.fullmatch(name) and int(name) >= newlen:
                        self.delete_property(name)
            else:
                for k in range(newlen, self.length):
                    self.delete_property(str(k))
        self.length = newlen