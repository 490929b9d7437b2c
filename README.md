# jsmini

jsmini is the runtime core of a small ECMAScript 5 engine, written in plain
Python with no dependencies. Script values map onto Python values.
`undefined` is the `jsmini.properties.undefined` singleton and `null` is
`None`. Booleans, numbers and strings are `bool`, `float` and `str`. Objects
are `JSObject` instances.

## Modules

- `jsmini.properties`: the object model. It provides `JSObject`, whose
  properties sit in a balanced, name-ordered `PropertyTree` of `Property`
  entries. It also defines property attributes (`Attr`), object classes
  (`ObjectClass`), the `undefined` value and its `UndefinedType`, and the
  error types `JSError`, `JSTypeError`, `JSRangeError`, `JSSyntaxError` and
  `JSReferenceError`.
- `jsmini.numbers`: number conversions. These are `number_to_string`,
  `to_integer`, `to_int32`, `to_uint32`, `to_radix_string`, `to_fixed`,
  `to_exponential` and `to_precision`.
- `jsmini.strings`: the `String.prototype` operations with UTF-16 indexing.
  These are `char_at`, `char_code_at`, `concat`, `index_of`, `last_index_of`,
  `locale_compare`, `slice`, `substring`, `to_lower`, `to_upper`, `trim`,
  `from_char_code`, `replace_string` and `split_string`. Helper functions are
  `utf16_length` and `rune_at`.
- `jsmini.values`: type tests and conversions. These are `type_of`,
  `is_callable`, `to_boolean`, `to_number`, `to_string`, `to_object` and
  `is_array_index`. The module also provides `new_array`,
  `new_string_object`, `NativeFunction`, which wraps a Python callable as a
  script function, and `call`.
- `jsmini.access`: property access that honours getters, setters, attributes
  and the built-in slots of arrays, strings and regular expressions. It
  provides `get_property`, `set_property`, `define_property`,
  `delete_property`, the index variants of these, and `unflatten_array`. It
  also provides `construct`, which implements the `new` operator, and
  `Environment` for variable scopes.
- `jsmini.objects`: the `Object` builtins. These are `to_string_tag`,
  `has_own_property`, `is_prototype_of`, `property_is_enumerable`,
  `get_prototype_of`, `get_own_property_descriptor`,
  `get_own_property_names`, `define_property`, `define_properties`, `create`,
  `keys`, `prevent_extensions`, `is_extensible`, `seal`, `is_sealed`,
  `freeze` and `is_frozen`.
- `jsmini.reprs`: `repr_value`, which gives a source-like representation of
  any value. Cyclic references print as `{}` or `[]`.
- `jsmini.jsonfmt`: `parse`, which accepts an optional reviver, and
  `stringify`, which accepts an optional replacer (a function or a property
  list) and an indentation gap.

## Installation

```
pip install .
```

To install with the test dependencies:

```
pip install ".[test]"
```

## Example

```python
from jsmini import numbers, strings
from jsmini.jsonfmt import parse, stringify
from jsmini.values import NativeFunction, call

print(numbers.to_radix_string(255.0, 16))   # ff
print(strings.slice("hello", 1, -1))        # ell

value = parse('{"a": [1, 2, 3]}')
print(stringify(value, None, 2))

greet = NativeFunction("greet", lambda this, name: "hi " + name, 1)
print(call(greet, None, ["there"]))         # hi there
```

## Errors

Runtime failures raise subclasses of `JSError` from `jsmini.properties`.
For example, `to_fixed(1.0, 25)` raises `JSRangeError`, and passing a
non-object where an object is required raises `JSTypeError`.

## What is not included

jsmini does not read or run script source. It has no lexer, parser, compiler
or bytecode interpreter, and no command-line shell. It has no event loop,
timers or microtask queue. It implements no `RegExp`, `Date`, `Math` or
`Array.prototype` builtins. Regular expression objects are handled only as
far as their `source`, flag and `lastIndex` slots. Script functions are
represented by `NativeFunction`, or by objects whose `internal` attribute
holds a Python callable.

## Running the tests

```
pytest
```