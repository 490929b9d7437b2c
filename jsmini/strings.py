"""String.prototype operations on Python strings with UTF-16 indexing."""

from __future__ import annotations

from typing import Any, Callable

from .numbers import to_uint32
from .properties import JSTypeError, undefined

EOF = -1
_SPLIT_LIMIT = 1 << 30
_MAX_RUNE = 0x10FFFF
_REPLACEMENT_CHAR = "\ufffd"
# Only the single-byte trim characters take effect on UTF-8 text.
_TRIM_CHARS = "\t\x0b\x0c \n\r"


def _check(s: Any) -> str:
    if s is None or s is undefined:
        raise JSTypeError("string function called on null or undefined")
    return s


def _to_units(s: str) -> bytes:
    return s.encode("utf-16-le", "surrogatepass")


def _from_units(data: bytes) -> str:
    return data.decode("utf-16-le", "surrogatepass")


def _utf8_len(s: str) -> int:
    return len(s.encode("utf-8", "surrogatepass"))


def utf16_length(s: str) -> int:
    """Length of ``s`` in UTF-16 code units."""
    return sum(2 if ord(c) >= 0x10000 else 1 for c in s)


def rune_at(s: str, i: int) -> int:
    """The UTF-16 code unit at index ``i``, or -1 if out of range."""
    if i < 0:
        return EOF
    units = _to_units(s)
    if 2 * i + 1 >= len(units):
        return EOF
    return units[2 * i] | (units[2 * i + 1] << 8)


def char_at(s: str, pos: int = 0) -> str:
    """String.prototype.charAt."""
    rune = rune_at(_check(s), pos)
    return chr(rune) if rune >= 0 else ""


def char_code_at(s: str, pos: int = 0) -> float:
    """String.prototype.charCodeAt; NaN when out of range."""
    rune = rune_at(_check(s), pos)
    return rune if rune >= 0 else float("nan")


def concat(s: str, *args: str) -> Any:
    """String.prototype.concat; with no arguments the result is undefined."""
    if not args:
        return undefined
    return _check(s) + "".join(args)


def index_of(s: str, needle: str, pos: int = 0) -> int:
    """String.prototype.indexOf, counting positions in characters."""
    s = _check(s)
    for k in range(max(pos, 0), len(s)):
        if s.startswith(needle, k):
            return k
    return -1


def last_index_of(s: str, needle: str, pos: int | None = None) -> int:
    """String.prototype.lastIndexOf, counting positions in characters."""
    s = _check(s)
    if pos is None:
        pos = _utf8_len(s)
    last = -1
    for k in range(min(len(s), pos + 1)):
        if s.startswith(needle, k):
            last = k
    return last


def locale_compare(a: str, b: str) -> int:
    """Compare two strings by their UTF-8 bytes; returns -1, 0 or 1."""
    x = _check(a).encode("utf-8", "surrogatepass")
    y = b.encode("utf-8", "surrogatepass")
    return (x > y) - (x < y)


def _substring(s: str, start: int, count: int) -> str:
    units = _to_units(s)
    return _from_units(units[2 * start : 2 * (start + count)])


def slice(s: str, start: int = 0, end: int | None = None) -> str:  # noqa: A001
    """String.prototype.slice; negative positions count from the end."""
    s = _check(s)
    length = utf16_length(s)
    e = length if end is None else end
    if start < 0:
        start += length
    if e < 0:
        e += length
    start = max(0, min(start, length))
    e = max(0, min(e, length))
    if start < e:
        return _substring(s, start, e - start)
    return _substring(s, e, start - e)


def substring(s: str, start: int = 0, end: int | None = None) -> str:
    """String.prototype.substring; the two positions may be given in any order."""
    s = _check(s)
    length = utf16_length(s)
    e = length if end is None else end
    start = max(0, min(start, length))
    e = max(0, min(e, length))
    if start < e:
        return _substring(s, start, e - start)
    return _substring(s, e, start - e)


def to_lower(s: str) -> str:
    """String.prototype.toLowerCase, mapping each character on its own."""
    return "".join(c.lower() for c in _check(s))


def to_upper(s: str) -> str:
    """String.prototype.toUpperCase, mapping each character on its own."""
    return "".join(c.upper() for c in _check(s))


def trim(s: str) -> str:
    """String.prototype.trim."""
    return _check(s).strip(_TRIM_CHARS)


def from_char_code(*args: float) -> str:
    """String.fromCharCode; the result ends at the first zero code."""
    out = []
    for arg in args:
        code = to_uint32(arg)
        if code == 0:
            break
        out.append(chr(code) if code <= _MAX_RUNE else _REPLACEMENT_CHAR)
    return "".join(out)


def _expand(template: str, source: str, start: int, matched: str) -> str:
    end = start + len(matched)
    out = []
    i = 0
    while i < len(template):
        c = template[i]
        if c != "$":
            out.append(c)
            i += 1
            continue
        nxt = template[i + 1] if i + 1 < len(template) else ""
        if nxt in ("", "$"):
            out.append("$")
        elif nxt == "&":
            out.append(matched)
        elif nxt == "`":
            out.append(source[:start])
        elif nxt == "'":
            out.append(source[end:])
        else:
            out.append("$" + nxt)
        i += 2
    return "".join(out)


def replace_string(s: str, needle: str, replacement: str | Callable[..., str]) -> str:
    """Replace the first occurrence of ``needle``.

    A callable replacement is called with the match, its byte offset in the
    UTF-8 form of ``s`` and ``s``, and must return a string. A string
    replacement understands ``$$``, ``$&``, ``$``` and ``$'``.
    """
    s = _check(s)
    start = s.find(needle)
    if start < 0:
        return s
    end = start + len(needle)
    if callable(replacement):
        text = replacement(needle, _utf8_len(s[:start]), s)
    else:
        text = _expand(replacement, s, start, needle)
    return s[:start] + text + s[end:]


def split_string(s: str, sep: str | None = None, limit: int | None = None) -> list[str]:
    """String.prototype.split with a string separator."""
    s = _check(s)
    if sep is None:
        return [s]
    if limit is None:
        limit = _SPLIT_LIMIT
    if limit <= 0:
        return []
    if not sep:
        return list(s[:limit])
    parts: list[str] = []
    rest: str | None = s
    while rest is not None and len(parts) < limit:
        head, found, tail = rest.partition(sep)
        parts.append(head)
        rest = tail if found else None
    return parts