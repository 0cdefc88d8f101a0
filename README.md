# validatron

Validatron lets you write rules as short text conditions, check them against
event types described as dataclasses, and compile them into plain Python
callables. An engine then runs every compiled rule that applies to an event
and reports which ones matched.

## Example

```python
from dataclasses import dataclass, field

from validatron.engine import Engine, UserRule
from validatron.schema import VariantSet


@dataclass
class Header:
    pid: int
    image: str


@dataclass
class FileOpened:
    header: Header
    filename: str
    internal_id: int = field(default=0, metadata={"validatron": "skip"})


@dataclass
class Exec:
    header: Header
    argc: int


variants = VariantSet(FileOpened, Exec)
engine = Engine.from_user_rules(
    variants,
    [
        UserRule("read_shadow", "FileOpened", 'filename == "/etc/shadow"'),
        UserRule("small_pid", "Exec", "header.pid in [1, 2, 3]"),
    ],
)

event = FileOpened(Header(42, "/usr/bin/cat"), "/etc/shadow")
print([rule.name for rule in engine.matches(event)])  # ['read_shadow']
```

## The rule language

A condition compares a field with a value:

```
header.pid == 3
image starts_with "systemd"
filename ends_with ".conf"
```

- Fields are plain names (`image`) or dotted paths into nested dataclasses
  (`header.image`, `struct.field.nested`).
- Relational operators: `==`, `!=`, `>`, `<`, `>=`, `<=`. Note that `<=` is
  evaluated the same way as `>=`.
- String operators: `starts_with`, `ends_with`.
- `contains` is accepted by the parser, but no field type allows it, so a rule
  using it fails validation with `OperatorNotAllowedOnType`.
- Values are integers or decimals (`3`, `-1`, `2.5`), bare words (`true`), or
  double-quoted strings (`"/etc/passwd"`, with backslash escapes). Anything
  else, such as socket addresses or exponents, must be quoted.
- `field in [a, b, c]` is shorthand for `field == a || field == b || field == c`.
  An empty list is an error.
- Conditions combine with `&&` (binding tighter) and `||`, negate with `!`, and
  may be grouped with parentheses.

```
header.image == "/usr/bin/sshd" || !(header.image == "/usr/bin/cat" && payload.filename == "/etc/passwd")
```

## Parsing — `validatron.parser`

- `parse_condition(text)` returns a tree of `And`, `Or`, `Not` and `Base`
  nodes (all subclasses of `Condition`) and raises `ParseError`, a
  `ValueError`, on bad input.
- `Field.from_str("a.b.c")` splits a dotted path into nested `Field` values;
  `str(field)` joins it back.
- `Rule` pairs a name and a variant name with a parsed condition.
- `Field`, `Condition` and `Rule` offer `to_dict()` / `from_dict()` for a
  tagged mapping form (`{"type": ..., "content": ...}`) suitable for JSON.

`validatron.operators` defines `RelationalOperator`, `StringOperator` and
`MultiOperator`, and `Operator`, which wraps one of them and also serialises
with `to_dict()` / `from_dict()`.

## Types and fields — `validatron.schema`

Event types are dataclasses. Their field annotations decide how a rule value
is parsed and which operators apply:

| Type            | Value syntax                                   | Operators            |
|-----------------|------------------------------------------------|----------------------|
| `int`           | optional sign and digits                       | relational           |
| `float`         | decimal, exponent, `inf`, `nan`                | relational           |
| `bool`          | `true` or `false`                              | relational           |
| `str`           | any text                                       | relational, string   |
| `SocketAddress` | `a.b.c.d:port` or `[v6-address]:port`          | relational           |
| a dataclass     | reach its fields with a dotted path            | those of the leaf    |

- A value that cannot be parsed raises `FieldValueParseError`; an operator the
  type does not allow raises `OperatorNotAllowedOnType`.
- A dotted path on a primitive field raises `FieldNotStruct`; comparing a
  dataclass field directly raises `FieldNotSimple`; an unknown name raises
  `FieldNotFound`. A referenced field whose type is not in the table raises
  `TypeError`.
- Fields with `metadata={"validatron": "skip"}` are invisible to rules.
- String annotations (as with `from __future__ import annotations`) are
  resolved by name among the primitives above and in the dataclass's module.
- A field holding `None` never matches.

`VariantSet(*dataclasses)` lists the alternatives of one event type. Each
variant is known by its class name; `var_num_of(name)` and `var_num(obj)` give
its position, raising `VariantNotFound` for unknown names or instance types.
`validate(variant, field, op, value)` returns that position and a predicate.
`validate_struct_field`, `process_field`, `field_type` and `Primitive` are the
building blocks it uses.

## Compiling and running — `validatron.compiler`, `validatron.engine`

- `validate_condition(condition, variants, variant)` checks a parsed tree and
  `compile_condition(validated)` turns it into a single predicate.
  `CompiledRule(name, predicate).is_match(event)` evaluates it.
- `Engine.from_user_rules(variants, user_rules)` parses `UserRule` entries
  (name, variant name, condition text); a condition that fails to parse raises
  `DslError`.
- `Engine.from_rules(variants, rules)` validates and compiles parsed `Rule`
  values, grouping them by variant.
- `engine.run(event, callback)` calls `callback` with each matching
  `CompiledRule`, in load order; `engine.matches(event)` returns them as a list.
  An event whose type is not in the variant set raises `VariantNotFound`.

All validation errors derive from `validatron.errors.ValidatronError`.

## What it does not do

- There is no support for collection fields (lists and the like), and no
  operator that tests membership in a field's value.
- It has no command-line tool and does not read rules from files; load your
  rules yourself (for example with `UserRule.from_dict` or `Rule.from_dict`)
  and hand them to the engine.

## Development

```
pip install -e ".[test]"
pytest
```