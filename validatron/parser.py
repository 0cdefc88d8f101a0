"""Condition syntax tree and the parser for the rule language."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterator, NamedTuple

from validatron.operators import (
    MultiOperator,
    Operator,
    RelationalOperator,
    StringOperator,
)


class ParseError(ValueError):
    """The condition text is not valid rule syntax."""

    @classmethod
    def empty_list(cls) -> "ParseError":
        return cls("Empty list is not allowed")

    @classmethod
    def bad_field(cls, field: str, cause: str) -> "ParseError":
        return cls(f"Error parsing field {field}: {cause}")


@dataclass(frozen=True)
class Field:
    """A field path such as ``header.pid``."""

    name: str
    inner: Field | None = None

    @classmethod
    def from_str(cls, text: str) -> "Field":
        """Build a field from a dotted path."""
        *parents, last = text.split(".")
        field = cls(last)
        for name in reversed(parents):
            field = cls(name, field)
        return field

    @property
    def is_simple(self) -> bool:
        return self.inner is None

    def __str__(self) -> str:
        return self.name if self.inner is None else f"{self.name}.{self.inner}"

    def to_dict(self) -> dict[str, Any]:
        if self.inner is None:
            return {"type": "Simple", "content": self.name}
        return {
            "type": "Struct",
            "content": {"name": self.name, "inner_field": self.inner.to_dict()},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Field":
        kind = data.get("type")
        content = data.get("content")
        if kind == "Simple" and isinstance(content, str):
            return cls(content)
        if kind == "Struct" and isinstance(content, dict):
            return cls(content["name"], cls.from_dict(content["inner_field"]))
        raise ValueError(f"invalid field description: {data!r}")


class Condition:
    """Base of the condition syntax tree."""

    def to_dict(self) -> dict[str, Any]:
        raise NotImplementedError

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Condition":
        kind = data.get("type")
        content = data.get("content")
        if not isinstance(content, dict):
            raise ValueError(f"invalid condition description: {data!r}")
        if kind == "And":
            return And(Condition.from_dict(content["l"]), Condition.from_dict(content["r"]))
        if kind == "Or":
            return Or(Condition.from_dict(content["l"]), Condition.from_dict(content["r"]))
        if kind == "Not":
            return Not(Condition.from_dict(content["inner"]))
        if kind == "Base":
            return Base(
                Field.from_dict(content["field"]),
                Operator.from_dict(content["op"]),
                content["value"],
            )
        raise ValueError(f"invalid condition description: {data!r}")


@dataclass(frozen=True)
class And(Condition):
    left: Condition
    right: Condition

    def to_dict(self) -> dict[str, Any]:
        return {"type": "And", "content": {"l": self.left.to_dict(), "r": self.right.to_dict()}}


@dataclass(frozen=True)
class Or(Condition):
    left: Condition
    right: Condition

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Or", "content": {"l": self.left.to_dict(), "r": self.right.to_dict()}}


@dataclass(frozen=True)
class Not(Condition):
    inner: Condition

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Not", "content": {"inner": self.inner.to_dict()}}


@dataclass(frozen=True)
class Base(Condition):
    field: Field
    op: Operator
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "Base",
            "content": {
                "field": self.field.to_dict(),
                "op": self.op.to_dict(),
                "value": self.value,
            },
        }


@dataclass(frozen=True)
class Rule:
    """A named condition that applies to one variant."""

    name: str
    type: str
    condition: Condition

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.type, "condition": self.condition.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Rule":
        try:
            return cls(data["name"], data["type"], Condition.from_dict(data["condition"]))
        except KeyError as exc:
            raise ValueError(f"invalid rule description: {data!r}") from exc


class _Lexeme(NamedTuple):
    kind: str
    text: str
    pos: int


_LEXEME_RE = re.compile(
    r"""
    (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<number>-?\d+(?:\.\d+)?)
  | (?P<word>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)
  | (?P<symbol>==|!=|>=|<=|&&|\|\||[<>!()\[\],])
    """,
    re.VERBOSE,
)

_RELATIONAL = {
    "==": RelationalOperator.EQUALS,
    "!=": RelationalOperator.NOT_EQUALS,
    ">": RelationalOperator.GREATER,
    "<": RelationalOperator.LESS,
    ">=": RelationalOperator.GREATER_EQUAL,
    "<=": RelationalOperator.LESS_EQUAL,
}

_WORD_OPERATORS = {
    "starts_with": Operator(StringOperator.STARTS_WITH),
    "ends_with": Operator(StringOperator.ENDS_WITH),
    "contains": Operator(MultiOperator.CONTAINS),
}

_EQUALS = Operator(RelationalOperator.EQUALS)


def _lex(text: str) -> Iterator[_Lexeme]:
    pos = 0
    while True:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        if pos >= len(text):
            return
        match = _LEXEME_RE.match(text, pos)
        if match is None:
            raise ParseError(f"Unexpected character {text[pos]!r} at position {pos}")
        kind = match.lastgroup or ""
        yield _Lexeme(kind, match.group(), pos)
        pos = match.end()


def _unquote(literal: str) -> str:
    return re.sub(r"\\(.)", r"\1", literal[1:-1])


class _Parser:
    def __init__(self, text: str) -> None:
        self._lexemes = list(_lex(text))
        self._pos = 0

    def _peek(self) -> _Lexeme | None:
        return self._lexemes[self._pos] if self._pos < len(self._lexemes) else None

    def _next(self, expected: str) -> _Lexeme:
        current = self._peek()
        if current is None:
            raise ParseError(f"Unexpected end of input, expected {expected}")
        self._pos += 1
        return current

    def _accept(self, symbol: str) -> bool:
        current = self._peek()
        if current is not None and current.kind == "symbol" and current.text == symbol:
            self._pos += 1
            return True
        return False

    def _expect(self, symbol: str) -> None:
        current = self._next(repr(symbol))
        if current.kind != "symbol" or current.text != symbol:
            raise ParseError(
                f"Unexpected {current.text!r} at position {current.pos}, expected {symbol!r}"
            )

    def parse(self) -> Condition:
        condition = self._or()
        current = self._peek()
        if current is not None:
            raise ParseError(f"Unexpected {current.text!r} at position {current.pos}")
        return condition

    def _or(self) -> Condition:
        condition = self._and()
        while self._accept("||"):
            condition = Or(condition, self._and())
        return condition

    def _and(self) -> Condition:
        condition = self._unary()
        while self._accept("&&"):
            condition = And(condition, self._unary())
        return condition

    def _unary(self) -> Condition:
        if self._accept("!"):
            return Not(self._unary())
        if self._accept("("):
            condition = self._or()
            self._expect(")")
            return condition
        return self._base()

    def _value(self) -> str:
        current = self._next("a value")
        if current.kind == "string":
            return _unquote(current.text)
        if current.kind in ("number", "word"):
            return current.text
        raise ParseError(
            f"Unexpected {current.text!r} at position {current.pos}, expected a value"
        )

    def _base(self) -> Condition:
        current = self._next("a field")
        if current.kind != "word":
            raise ParseError(
                f"Unexpected {current.text!r} at position {current.pos}, expected a field"
            )
        field = Field.from_str(current.text)

        op_lexeme = self._next("an operator")
        if op_lexeme.kind == "word" and op_lexeme.text == "in":
            return self._in_list(field)
        if op_lexeme.kind == "symbol" and op_lexeme.text in _RELATIONAL:
            op = Operator(_RELATIONAL[op_lexeme.text])
        elif op_lexeme.kind == "word" and op_lexeme.text in _WORD_OPERATORS:
            op = _WORD_OPERATORS[op_lexeme.text]
        else:
            raise ParseError(
                f"Unexpected {op_lexeme.text!r} at position {op_lexeme.pos}, expected an operator"
            )
        return Base(field, op, self._value())

    def _in_list(self, field: Field) -> Condition:
        self._expect("[")
        if self._accept("]"):
            raise ParseError.empty_list()
        values = [self._value()]
        while self._accept(","):
            values.append(self._value())
        self._expect("]")
        first, *rest = values
        condition: Condition = Base(field, _EQUALS, first)
        for value in rest:
            condition = Or(condition, Base(field, _EQUALS, value))
        return condition


def parse_condition(text: str) -> Condition:
    """Parse a condition written in the rule language."""
    return _Parser(text).parse()