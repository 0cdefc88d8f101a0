import pytest

from validatron.errors import (
    DslError,
    FieldNotFound,
    FieldNotSimple,
    FieldNotStruct,
    FieldValueParseError,
    OperatorNotAllowedOnType,
    ValidatronError,
    VariantNotFound,
)
from validatron.operators import MultiOperator, Operator, RelationalOperator


def test_dsl_error_message():
    err = DslError("a ==", "unexpected end")
    assert str(err) == "Error validating dsl 'a ==': unexpected end"
    assert err.condition == "a =="


def test_variant_not_found_message():
    err = VariantNotFound("Exec")
    assert str(err) == "Variant not found: Exec"
    assert err.variant == "Exec"


@pytest.mark.parametrize(
    "cls, expected",
    [
        (FieldNotFound, "Field not found: pid"),
        (FieldNotStruct, "Field pid not struct"),
        (FieldNotSimple, "Field pid not simple"),
    ],
)
def test_field_error_messages(cls, expected):
    err = cls("pid")
    assert str(err) == expected
    assert err.field == "pid"


def test_value_parse_error_message():
    assert str(FieldValueParseError("abc")) == "Error parsing value abc"


def test_operator_not_allowed_message():
    err = OperatorNotAllowedOnType(Operator(RelationalOperator.EQUALS), "bool")
    assert str(err) == "Operator Relational(Equals) not allowed on type bool"
    assert err.type_name == "bool"


def test_errors_catchable_as_base():
    err = OperatorNotAllowedOnType(Operator(MultiOperator.CONTAINS), "String")
    assert isinstance(err, ValidatronError)
    assert err.type_name == "String"
    assert str(err).endswith("not allowed on type String")