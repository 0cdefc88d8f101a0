"""Validation of parsed conditions and their compilation into predicates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from validatron.parser import And, Base, Condition, Not, Or
from validatron.schema import VariantSet

Predicate = Callable[[Any], bool]


class ValidatedCondition:
    """Base of a condition tree whose leaves have been checked against a schema."""


@dataclass(frozen=True)
class ValidatedAnd(ValidatedCondition):
    left: ValidatedCondition
    right: ValidatedCondition


@dataclass(frozen=True)
class ValidatedOr(ValidatedCondition):
    left: ValidatedCondition
    right: ValidatedCondition


@dataclass(frozen=True)
class ValidatedNot(ValidatedCondition):
    inner: ValidatedCondition


@dataclass(frozen=True)
class ValidatedBase(ValidatedCondition):
    predicate: Predicate


@dataclass(frozen=True)
class CompiledRule:
    """A named rule ready to be evaluated against events."""

    name: str
    condition: Predicate

    def is_match(self, event: Any) -> bool:
        """Whether ``event`` satisfies the rule's condition."""
        return bool(self.condition(event))


def _validate_pair(
    left: Condition, right: Condition, variants: VariantSet, variant: str
) -> tuple[int, ValidatedCondition, ValidatedCondition]:
    num_left, valid_left = validate_condition(left, variants, variant)
    num_right, valid_right = validate_condition(right, variants, variant)
    if num_left != num_right:
        raise AssertionError(f"variant mismatch: {num_left} != {num_right}")
    return num_left, valid_left, valid_right


def validate_condition(
    condition: Condition, variants: VariantSet, variant: str
) -> tuple[int, ValidatedCondition]:
    """Check ``condition`` against the named variant of ``variants``.

    Returns the variant's position and the validated tree.
    """
    match condition:
        case And(left=left, right=right):
            num, vl, vr = _validate_pair(left, right, variants, variant)
            return num, ValidatedAnd(vl, vr)
        case Or(left=left, right=right):
            num, vl, vr = _validate_pair(left, right, variants, variant)
            return num, ValidatedOr(vl, vr)
        case Not(inner=inner):
            num, validated = validate_condition(inner, variants, variant)
            return num, ValidatedNot(validated)
        case Base(field=field, op=op, value=value):
            num, predicate = variants.validate(variant, field, op, value)
            return num, ValidatedBase(predicate)
    raise TypeError(f"not a condition: {condition!r}")


def compile_condition(validated: ValidatedCondition) -> Predicate:
    """Turn a validated condition tree into a single predicate."""
    match validated:
        case ValidatedAnd(left=left, right=right):
            lp, rp = compile_condition(left), compile_condition(right)
            return lambda event: lp(event) and rp(event)
        case ValidatedOr(left=left, right=right):
            lp, rp = compile_condition(left), compile_condition(right)
            return lambda event: lp(event) or rp(event)
        case ValidatedNot(inner=inner):
            ip = compile_condition(inner)
            return lambda event: not ip(event)
        case ValidatedBase(predicate=predicate):
            return predicate
    raise TypeError(f"not a validated condition: {validated!r}")