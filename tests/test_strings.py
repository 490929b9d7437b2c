import math

import pytest

from jsmini import strings
from jsmini.properties import JSTypeError, undefined

EMOJI = "\U0001F600"


def _join_units(*units):
    return "".join(chr(u) for u in units).encode("utf-16-le", "surrogatepass").decode(
        "utf-16-le", "surrogatepass"
    )


def test_utf16_length_ascii_matches_len():
    assert strings.utf16_length("hello") == len("hello")


def test_utf16_length_counts_astral_as_pair():
    assert strings.utf16_length("a" + EMOJI) == strings.utf16_length("a") + 2


def test_rune_at_surrogate_pair_round_trip():
    high = strings.rune_at(EMOJI, 0)
    low = strings.rune_at(EMOJI, 1)
    assert 0xD800 <= high <= 0xDBFF
    assert 0xDC00 <= low <= 0xDFFF
    assert _join_units(high, low) == EMOJI


@pytest.mark.parametrize("index", [-1, 3, 100])
def test_rune_at_out_of_range(index):
    assert strings.rune_at("abc", index) == strings.EOF


def test_char_at():
    assert strings.char_at("abc", 1) == "abc"[1]
    assert strings.char_at("abc", 5) == ""


def test_char_code_at():
    assert strings.char_code_at("A", 0) == ord("A")
    assert math.isnan(strings.char_code_at("A", 1))


def test_concat():
    assert strings.concat("ab", "cd", "ef") == "ab" + "cd" + "ef"
    assert strings.concat("ab") is undefined


def test_index_of():
    s = "hello world"
    assert strings.index_of(s, "o") == s.find("o")
    assert strings.index_of(s, "o", 5) == s.find("o", 5)
    assert strings.index_of(s, "zz") == -1


def test_index_of_empty_haystack_never_matches():
    assert strings.index_of("", "") == -1


def test_last_index_of():
    s = "hello world"
    assert strings.last_index_of(s, "o") == s.rfind("o")
    assert strings.last_index_of(s, "o", 5) == s.find("o")
    assert strings.last_index_of(s, "q") == -1


def test_locale_compare_signs():
    assert strings.locale_compare("a", "b") < 0
    assert strings.locale_compare("b", "a") > 0
    assert strings.locale_compare("same", "same") == 0


def test_slice_matches_python_for_ascii():
    s = "abcdef"
    assert strings.slice(s, -3) == s[-3:]
    assert strings.slice(s, 1, 4) == s[1:4]
    assert strings.slice(s, 4, 1) == s[1:4]


def test_substring_clamps_and_swaps():
    s = "abcdef"
    assert strings.substring(s, -2, 3) == s[0:3]
    assert strings.substring(s, 5, 2) == s[2:5]
    assert strings.substring(s, 2) == s[2:]


def test_substring_splits_surrogate_pair():
    first = strings.substring(EMOJI, 0, 1)
    second = strings.substring(EMOJI, 1, 2)
    assert strings.utf16_length(first) == 1
    assert strings.utf16_length(second) == 1
    assert _join_units(ord(first), ord(second)) == EMOJI


def test_case_mapping_round_trip():
    s = "Hello World"
    assert strings.to_lower(strings.to_upper(s)) == s.lower()
    assert strings.to_upper(s) == s.upper()


def test_to_upper_full_mapping():
    assert strings.to_upper("straße") == "STRASSE"


def test_to_lower_has_no_final_sigma():
    result = strings.to_lower("\u039f\u03a3")
    assert result[-1] == "\u03a3".lower()


def test_trim():
    assert strings.trim(" \t abc \n\r") == "abc"
    assert strings.trim("\u00a0x") == "\u00a0x"


def test_from_char_code():
    assert strings.from_char_code(72, 105) == chr(72) + chr(105)
    assert strings.from_char_code(65, 0, 66) == chr(65)
    assert strings.from_char_code(65 + 2**32) == chr(65)
    assert strings.from_char_code(0x110000) == "\ufffd"


def test_replace_string_plain():
    s = "a-b-c"
    assert strings.replace_string(s, "-", "+") == s.replace("-", "+", 1)
    assert strings.replace_string(s, "z", "+") == s


def test_replace_string_patterns():
    assert strings.replace_string("xay", "a", "[$&]") == "x[a]y"
    assert strings.replace_string("xay", "a", "$`$'") == "x" + "x" + "y" + "y"
    assert strings.replace_string("xay", "a", "$$") == "x$y"
    assert strings.replace_string("xay", "a", "$") == "x$y"


def test_replace_string_callable():
    seen = []

    def repl(match, offset, source):
        seen.append((match, offset, source))
        return match.upper()

    assert strings.replace_string("xay", "a", repl) == "x" + "A" + "y"
    assert seen == [("a", 1, "xay")]


def test_split_string():
    s = "a,b,c"
    assert strings.split_string(s, ",") == s.split(",")
    assert strings.split_string(s, ",", 2) == s.split(",")[:2]
    assert strings.split_string(s, ",", 0) == []
    assert strings.split_string(s, "") == list(s)
    assert strings.split_string(s) == [s]
    assert strings.split_string("", ",") == "".split(",")


@pytest.mark.parametrize("bad", [None, undefined])
def test_null_or_undefined_raises(bad):
    with pytest.raises(JSTypeError, match="null or undefined"):
        strings.trim(bad)
    with pytest.raises(JSTypeError):
        strings.index_of(bad, "x")