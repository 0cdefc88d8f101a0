"""Field types and validation of conditions against dataclass schemas.

A *struct* is any dataclass; its annotated fields become the fields that
conditions may refer to. A *variant set* groups several dataclasses that
play the role of the alternatives of one event type. Fields whose
dataclass metadata holds ``{"validatron": "skip"}`` are hidden from rules.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
import ipaddress
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Union

from validatron.errors import (
    FieldNotFound,
    FieldNotSimple,
    FieldNotStruct,
    FieldValueParseError,
    OperatorNotAllowedOnType,
    VariantNotFound,
)
from validatron.operators import Operator, RelationalOperator, StringOperator
from validatron.parser import Field

Predicate = Callable[[Any], bool]
Extractor = Callable[[Any], Any]
StructValidator = Callable[[Field, Operator, str], Predicate]

_IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
_V6_RE = re.compile(r"\[(?P<host>[^\]]+)\]:(?P<port>[0-9]+)")
_PORT_RE = re.compile(r"[0-9]+")


@functools.total_ordering
@dataclass(frozen=True)
class SocketAddress:
    """An IP address together with a port."""

    ip: _IPAddress
    port: int

    @classmethod
    def parse(cls, text: str) -> "SocketAddress":
        """Parse ``a.b.c.d:port`` or ``[v6]:port``."""
        match = _V6_RE.fullmatch(text)
        if match is not None:
            host, port_text = match["host"], match["port"]
            ip_type: type = ipaddress.IPv6Address
        else:
            host, sep, port_text = text.rpartition(":")
            if not sep or ":" in host:
                raise ValueError(f"invalid socket address: {text!r}")
            ip_type = ipaddress.IPv4Address
        if not _PORT_RE.fullmatch(port_text) or int(port_text) > 0xFFFF:
            raise ValueError(f"invalid port in socket address: {text!r}")
        try:
            ip = ip_type(host)
        except ValueError as exc:
            raise ValueError(f"invalid address in socket address: {text!r}") from exc
        return cls(ip, int(port_text))

    def _key(self) -> tuple[int, int, int]:
        return (self.ip.version, int(self.ip), self.port)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SocketAddress):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True)
class Primitive:
    """A leaf type: how to parse a rule value and which operators apply."""

    type_name: str
    parse: Callable[[str], Any]
    operator_families: tuple[type, ...]

    def parse_value(self, value: str) -> Any:
        """Parse ``value`` for this type, raising :class:`FieldValueParseError`."""
        try:
            return self.parse(value)
        except (ValueError, TypeError) as exc:
            raise FieldValueParseError(value) from exc

    def comparison(self, op: Operator) -> Callable[[Any, Any], bool]:
        """Return the two-argument comparison for ``op`` on this type."""
        if not isinstance(op.inner, self.operator_families):
            raise OperatorNotAllowedOnType(op, self.type_name)
        return op.inner.apply

    def apply(self, extractor: Extractor, op: Operator, value: str) -> Predicate:
        """Build a predicate comparing the extracted field with ``value``."""
        other = self.parse_value(value)
        compare = self.comparison(op)

        def predicate(source: Any) -> bool:
            content = extractor(source)
            return content is not None and compare(content, other)

        return predicate


_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(text)
    return int(text)


def _parse_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(text)
    return float(text)


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(text)


_PRIMITIVES: dict[type, Primitive] = {
    int: Primitive("int", _parse_int, (RelationalOperator,)),
    float: Primitive("float", _parse_float, (RelationalOperator,)),
    bool: Primitive("bool", _parse_bool, (RelationalOperator,)),
    str: Primitive("str", str, (StringOperator, RelationalOperator)),
    SocketAddress: Primitive("SocketAddress", SocketAddress.parse, (RelationalOperator,)),
}

_PRIMITIVE_NAMES: dict[str, type] = {tp.__name__: tp for tp in _PRIMITIVES}


def field_type(tp: Any) -> Union[Primitive, StructValidator]:
    """Describe how fields of type ``tp`` are validated.

    Returns a :class:`Primitive` for leaf types, or a validator callable
    ``(field, op, value) -> predicate`` for dataclass types.
    """
    primitive = _PRIMITIVES.get(tp) if isinstance(tp, type) else None
    if primitive is not None:
        return primitive
    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        return functools.partial(validate_struct_field, tp)
    raise TypeError(f"unsupported field type: {tp!r}")


def process_field(
    field_name: str,
    tp: Any,
    field: Field,
    extractor: Extractor,
    op: Operator,
    value: str,
) -> Optional[Predicate]:
    """Validate ``field`` against one named field of type ``tp``.

    Returns ``None`` when ``field`` refers to another field name.
    """
    if field.name != field_name:
        return None
    kind = field_type(tp)
    if isinstance(kind, Primitive):
        if not field.is_simple:
            raise FieldNotStruct(field_name)
        return kind.apply(extractor, op, value)
    if field.inner is None:
        raise FieldNotSimple(field_name)
    inner = kind(field.inner, op, value)

    def predicate(source: Any) -> bool:
        content = extractor(source)
        return content is not None and inner(content)

    return predicate


def _is_skipped(f: dataclasses.Field) -> bool:
    return f.metadata.get("validatron") == "skip"


def _resolve_annotation(cls: type, annotation: Any) -> Any:
    """Turn a string annotation naming a type into that type."""
    if not isinstance(annotation, str):
        return annotation
    name = annotation.strip()
    if name in _PRIMITIVE_NAMES:
        return _PRIMITIVE_NAMES[name]
    module = inspect.getmodule(cls)
    namespace = vars(module) if module is not None else {}
    if name in namespace:
        return namespace[name]
    raise TypeError(f"cannot resolve field type {annotation!r} of {cls.__name__}")


def _schema_fields(cls: type) -> Iterable[tuple[str, Any]]:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"not a dataclass: {cls!r}")
    return (
        (f.name, _resolve_annotation(cls, f.type))
        for f in dataclasses.fields(cls)
        if not _is_skipped(f)
    )


def _validate_fields(
    cls: type,
    field: Field,
    op: Operator,
    value: str,
    make_extractor: Callable[[str], Extractor],
) -> Predicate:
    for name, tp in _schema_fields(cls):
        predicate = process_field(name, tp, field, make_extractor(name), op, value)
        if predicate is not None:
            return predicate
    raise FieldNotFound(str(field))


def _attribute(name: str) -> Extractor:
    return lambda source: getattr(source, name)


def validate_struct_field(cls: type, field: Field, op: Operator, value: str) -> Predicate:
    """Build a predicate on instances of dataclass ``cls``."""
    return _validate_fields(cls, field, op, value, _attribute)


class VariantSet:
    """The alternatives of one event type, each a dataclass."""

    def __init__(self, *args: type) -> None:
        for cls in args:
            if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
                raise TypeError(f"not a dataclass: {cls!r}")
        self._variants: tuple[type, ...] = args
        self._by_name: dict[str, int] = {}
        for num, cls in enumerate(args):
            if cls.__name__ in self._by_name:
                raise ValueError(f"duplicate variant name: {cls.__name__}")
            self._by_name[cls.__name__] = num
        self._by_type = {cls: num for num, cls in enumerate(args)}

    @property
    def variants(self) -> tuple[type, ...]:
        return self._variants

    def var_num(self, obj: Any) -> int:
        """Position of the variant that ``obj`` is an instance of."""
        try:
            return self._by_type[type(obj)]
        except KeyError:
            raise VariantNotFound(type(obj).__name__) from None

    def var_num_of(self, name: str) -> int:
        """Position of the variant called ``name``."""
        try:
            return self._by_name[name]
        except KeyError:
            raise VariantNotFound(name) from None

    def validate(
        self, variant: str, field: Field, op: Operator, value: str
    ) -> tuple[int, Predicate]:
        """Build a predicate for a field of the named variant."""
        num = self.var_num_of(variant)
        cls = self._variants[num]

        def make_extractor(name: str) -> Extractor:
            return lambda source: getattr(source, name) if type(source) is cls else None

        return num, _validate_fields(cls, field, op, value, make_extractor)