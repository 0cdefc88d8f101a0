import pytest

from validatron.operators import (
    MultiOperator,
    Operator,
    RelationalOperator,
    StringOperator,
)


@pytest.mark.parametrize(
    "op, first, second, expected",
    [
        (RelationalOperator.EQUALS, 3, 3, True),
        (RelationalOperator.EQUALS, 3, 4, False),
        (RelationalOperator.NOT_EQUALS, 3, 4, True),
        (RelationalOperator.NOT_EQUALS, 3, 3, False),
        (RelationalOperator.GREATER, 4, 3, True),
        (RelationalOperator.GREATER, 3, 3, False),
        (RelationalOperator.LESS, 2, 3, True),
        (RelationalOperator.LESS, 3, 3, False),
        (RelationalOperator.GREATER_EQUAL, 3, 3, True),
        (RelationalOperator.GREATER_EQUAL, 2, 3, False),
    ],
)
def test_relational_apply(op, first, second, expected):
    assert op.apply(first, second) is expected


def test_less_equal_matches_greater_equal():
    for a, b in [(1, 2), (2, 2), (3, 2)]:
        assert RelationalOperator.LESS_EQUAL.apply(a, b) == RelationalOperator.GREATER_EQUAL.apply(a, b)


def test_relational_on_strings():
    assert RelationalOperator.EQUALS.apply("systemd", "systemd") is True
    assert RelationalOperator.LESS.apply("a", "b") is True


def test_string_operators():
    assert StringOperator.STARTS_WITH.apply("/usr/bin/sshd", "/usr") is True
    assert StringOperator.STARTS_WITH.apply("/usr/bin/sshd", "sshd") is False
    assert StringOperator.ENDS_WITH.apply("/usr/bin/sshd", "sshd") is True
    assert StringOperator.ENDS_WITH.apply("/usr/bin/sshd", "/usr") is False


def test_operator_display():
    assert str(Operator(RelationalOperator.EQUALS)) == "Relational(Equals)"
    assert str(MultiOperator.CONTAINS) == "contains"


def test_operator_kind():
    assert Operator(StringOperator.ENDS_WITH).kind == "String"
    assert Operator(MultiOperator.CONTAINS).kind == "Multi"


def test_operator_rejects_non_operator():
    with pytest.raises(TypeError):
        Operator("Equals")


@pytest.mark.parametrize(
    "inner",
    list(RelationalOperator) + list(StringOperator) + list(MultiOperator),
)
def test_operator_dict_round_trip(inner):
    op = Operator(inner)
    assert Operator.from_dict(op.to_dict()) == op


def test_operator_from_bad_dict():
    with pytest.raises(ValueError):
        Operator.from_dict({"type": "Relational", "content": "Bogus"})