"""JSON.parse and JSON.stringify over script values."""

from __future__ import annotations

import math
import re
from typing import Any, NamedTuple

from .access import define_property, delete_property, get_index, get_property
from .access import has_property, set_index, set_property
from .numbers import number_to_string, to_integer
from .properties import JSObject, JSSyntaxError, JSTypeError, ObjectClass, undefined
from .values import call, is_callable, new_array, to_number, to_string

_NUMBER = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_WORD = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")
_HEX4 = re.compile(r"[0-9a-fA-F]{4}")
_WHITESPACE = " \t\n\r"
_PUNCTUATORS = "{}[]:,"
_KEYWORDS = ("true", "false", "null")
_UNESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}
_MAX_GAP = 10


class _Token(NamedTuple):
    kind: str
    value: Any = None


def _token_name(kind: str) -> str:
    if kind in ("string", "number"):
        return kind
    if kind == "eof":
        return "end of input"
    return f"'{kind}'"


class _Lexer:
    """Splits JSON text into tokens, one at a time."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def lex(self) -> _Token:
        text = self.text
        while self.pos < len(text) and text[self.pos] in _WHITESPACE:
            self.pos += 1
        if self.pos >= len(text):
            return _Token("eof")
        c = text[self.pos]
        if c in _PUNCTUATORS:
            self.pos += 1
            return _Token(c)
        if c == '"':
            self.pos += 1
            return _Token("string", self._string())
        if c == "-" or "0" <= c <= "9":
            match = _NUMBER.match(text, self.pos)
            if match is None:
                raise JSSyntaxError("JSON: invalid number")
            self.pos = match.end()
            return _Token("number", float(match.group()))
        match = _WORD.match(text, self.pos)
        if match is not None:
            word = match.group()
            if word not in _KEYWORDS:
                raise JSSyntaxError(f"JSON: unexpected keyword: {word}")
            self.pos = match.end()
            return _Token(word)
        raise JSSyntaxError(f"JSON: unexpected character: '{c}'")

    def _string(self) -> str:
        text = self.text
        parts: list[str] = []
        while True:
            if self.pos >= len(text):
                raise JSSyntaxError("JSON: unterminated string")
            c = text[self.pos]
            self.pos += 1
            if c == '"':
                break
            if ord(c) < 0x20:
                raise JSSyntaxError("JSON: invalid character in string")
            if c != "\\":
                parts.append(c)
                continue
            if self.pos >= len(text):
                raise JSSyntaxError("JSON: unterminated string")
            esc = text[self.pos]
            self.pos += 1
            if esc == "u":
                digits = text[self.pos : self.pos + 4]
                if not _HEX4.fullmatch(digits):
                    raise JSSyntaxError("JSON: invalid escape sequence in string")
                parts.append(chr(int(digits, 16)))
                self.pos += 4
            elif esc in _UNESCAPES:
                parts.append(_UNESCAPES[esc])
            else:
                raise JSSyntaxError("JSON: invalid escape sequence in string")
        joined = "".join(parts)
        # Join surrogate pairs written as two escapes into one character.
        return joined.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


class _Parser:
    def __init__(self, text: str) -> None:
        self.lexer = _Lexer(text)
        self.tok = self.lexer.lex()

    def next(self) -> None:
        self.tok = self.lexer.lex()

    def accept(self, kind: str) -> bool:
        if self.tok.kind == kind:
            self.next()
            return True
        return False

    def expect(self, kind: str) -> None:
        if not self.accept(kind):
            raise JSSyntaxError(
                f"JSON: unexpected token: {_token_name(self.tok.kind)} "
                f"(expected {_token_name(kind)})"
            )

    def value(self) -> Any:
        kind = self.tok.kind
        if kind in ("string", "number"):
            value = self.tok.value
            self.next()
            return value
        if kind == "{":
            return self._object()
        if kind == "[":
            return self._array()
        if kind in _KEYWORDS:
            self.next()
            return {"true": True, "false": False, "null": None}[kind]
        raise JSSyntaxError(f"JSON: unexpected token: {_token_name(kind)}")

    def _object(self) -> JSObject:
        obj = JSObject(ObjectClass.OBJECT, None)
        self.next()
        if self.accept("}"):
            return obj
        while True:
            if self.tok.kind != "string":
                raise JSSyntaxError(
                    f"JSON: unexpected token: {_token_name(self.tok.kind)} (expected string)"
                )
            name = self.tok.value
            self.next()
            self.expect(":")
            set_property(obj, name, self.value())
            if not self.accept(","):
                break
        self.expect("}")
        return obj

    def _array(self) -> JSObject:
        arr = new_array()
        self.next()
        if self.accept("]"):
            return arr
        i = 0
        while True:
            set_index(arr, i, self.value())
            i += 1
            if not self.accept(","):
                break
        self.expect("]")
        return arr


def _revive(reviver: JSObject, holder: JSObject, name: str) -> Any:
    value = get_property(holder, name)
    if isinstance(value, JSObject):
        if value.cls is ObjectClass.ARRAY:
            count = to_integer(to_number(get_property(value, "length")))
            names: Any = (str(i) for i in range(count))
        else:
            names = value.iterate(own=True)
        for key in names:
            revived = _revive(reviver, value, key)
            if revived is undefined:
                delete_property(value, key)
            else:
                set_property(value, key, revived)
    return call(reviver, holder, [name, value])


def parse(text: Any, reviver: Any = undefined) -> Any:
    """JSON.parse; a callable ``reviver`` sees every value, innermost first.

    Only the first value in ``text`` is read; whatever follows it must still
    be made of valid tokens.
    """
    source = text if isinstance(text, str) else to_string(text)
    parser = _Parser(source)
    value = parser.value()
    if not is_callable(reviver):
        return value
    root = JSObject(ObjectClass.OBJECT, None)
    define_property(root, "", value)
    return _revive(reviver, root, "")


def _format_number(n: float) -> str:
    if math.isnan(n) or math.isinf(n):
        return "null"
    if n == 0:
        return "0"
    return number_to_string(n)


def _format_string(s: str) -> str:
    out = ['"']
    for c in s:
        code = ord(c)
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif code < 0x20 or 0xD800 <= code <= 0xDFFF:
            out.append(f"\\u{code:04x}")
        else:
            out.append(c)
    out.append('"')
    return "".join(out)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_wrapped(value: Any, cls: ObjectClass) -> bool:
    return isinstance(value, JSObject) and value.cls is cls


class _Formatter:
    def __init__(self, replacer: Any, gap: str | None, wrapper: JSObject) -> None:
        self.replacer = replacer
        self.gap = gap
        self.ancestors: list[JSObject] = [wrapper]

    def _indent(self, level: int) -> str:
        return "\n" + self.gap * level if self.gap else ""

    def _allowed(self, key: str) -> bool:
        replacer = self.replacer
        if not _is_wrapped(replacer, ObjectClass.ARRAY):
            return True
        count = to_integer(to_number(get_property(replacer, "length")))
        for i in range(count):
            item = get_index(replacer, i)
            if (
                isinstance(item, str)
                or _is_number(item)
                or _is_wrapped(item, ObjectClass.STRING)
                or _is_wrapped(item, ObjectClass.NUMBER)
            ) and to_string(item) == key:
                return True
        return False

    def _check_cycle(self, obj: JSObject) -> None:
        if any(a is obj for a in self.ancestors):
            raise JSTypeError("cyclic object value")

    def _object(self, obj: JSObject, level: int) -> str:
        self._check_cycle(obj)
        self.ancestors.append(obj)
        try:
            entries = []
            sep = ": " if self.gap else ":"
            for key in obj.iterate(own=True):
                if not self._allowed(key):
                    continue
                text = self.value(obj, key, level + 1)
                if text is not None:
                    entries.append(self._indent(level + 1) + _format_string(key) + sep + text)
        finally:
            self.ancestors.pop()
        close = self._indent(level) if entries else ""
        return "{" + ",".join(entries) + close + "}"

    def _array(self, arr: JSObject, level: int) -> str:
        self._check_cycle(arr)
        self.ancestors.append(arr)
        try:
            count = to_integer(to_number(get_property(arr, "length")))
            items = []
            for i in range(count):
                text = self.value(arr, str(i), level + 1)
                items.append(self._indent(level + 1) + (text if text is not None else "null"))
        finally:
            self.ancestors.pop()
        close = self._indent(level) if items else ""
        return "[" + ",".join(items) + close + "]"

    def value(self, holder: JSObject, key: str, level: int) -> str | None:
        value = get_property(holder, key)
        if isinstance(value, JSObject) and has_property(value, "toJSON"):
            to_json = get_property(value, "toJSON")
            if is_callable(to_json):
                value = call(to_json, value, [key])
        if is_callable(self.replacer):
            value = call(self.replacer, holder, [key, value])

        if isinstance(value, JSObject) and not is_callable(value):
            if value.cls is ObjectClass.NUMBER:
                return _format_number(value.primitive)
            if value.cls is ObjectClass.STRING:
                return _format_string(value.primitive)
            if value.cls is ObjectClass.BOOLEAN:
                return "true" if value.primitive else "false"
            if value.cls is ObjectClass.ARRAY:
                return self._array(value, level)
            return self._object(value, level)
        if isinstance(value, bool):
            return "true" if value else "false"
        if _is_number(value):
            return _format_number(float(value))
        if isinstance(value, str):
            return _format_string(value)
        if value is None:
            return "null"
        return None


def _gap(space: Any) -> str | None:
    if _is_number(space) or _is_wrapped(space, ObjectClass.NUMBER):
        n = max(0, min(_MAX_GAP, to_integer(to_number(space))))
        return " " * n if n > 0 else None
    if isinstance(space, str) or _is_wrapped(space, ObjectClass.STRING):
        text = to_string(space)[:_MAX_GAP]
        return text or None
    return None


def stringify(value: Any, replacer: Any = undefined, space: Any = undefined) -> Any:
    """JSON.stringify; undefined when ``value`` has no JSON form."""
    wrapper = JSObject(ObjectClass.OBJECT, None)
    define_property(wrapper, "", value)
    formatter = _Formatter(replacer, _gap(space), wrapper)
    text = formatter.value(wrapper, "", 0)
    return undefined if text is None else text