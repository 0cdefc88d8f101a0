"""Errors raised while building or validating rules."""

from __future__ import annotations

from typing import Any


class ValidatronError(Exception):
    """Base class of every rule error."""


class DslError(ValidatronError):
    """A condition could not be parsed."""

    def __init__(self, condition: str, message: str) -> None:
        self.condition = condition
        self.message = message
        super().__init__(f"Error validating dsl '{condition}': {message}")


class VariantNotFound(ValidatronError):
    """The rule refers to an unknown variant."""

    def __init__(self, variant: str) -> None:
        self.variant = variant
        super().__init__(f"Variant not found: {variant}")


class FieldNotFound(ValidatronError):
    """The rule refers to an unknown field."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Field not found: {field}")


class FieldNotStruct(ValidatronError):
    """A nested path was used on a primitive field."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Field {field} not struct")


class FieldNotSimple(ValidatronError):
    """A structured field was compared directly."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Field {field} not simple")


class FieldValueParseError(ValidatronError):
    """The value of a condition could not be parsed for the field's type."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Error parsing value {value}")


class OperatorNotAllowedOnType(ValidatronError):
    """The operator cannot be applied to the field's type."""

    def __init__(self, op: Any, type_name: str) -> None:
        self.op = op
        self.type_name = type_name
        super().__init__(f"Operator {op} not allowed on type {type_name}")