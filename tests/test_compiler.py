from dataclasses import dataclass

import pytest

from validatron.compiler import (
    CompiledRule,
    ValidatedAnd,
    ValidatedBase,
    ValidatedNot,
    ValidatedOr,
    compile_condition,
    validate_condition,
)
from validatron.errors import (
    FieldNotFound,
    FieldNotSimple,
    FieldNotStruct,
    FieldValueParseError,
    OperatorNotAllowedOnType,
    VariantNotFound,
)
from validatron.parser import parse_condition
from validatron.schema import VariantSet


@dataclass
class Header:
    pid: int
    image: str


@dataclass
class FileOpened:
    header: Header
    filename: str


@dataclass
class Exec:
    header: Header
    argc: int


VARIANTS = VariantSet(FileOpened, Exec)


def _compiled(text, variant="FileOpened"):
    _, validated = validate_condition(parse_condition(text), VARIANTS, variant)
    return compile_condition(validated)


def test_variant_numbers_follow_declaration_order():
    num_file, _ = validate_condition(parse_condition('filename == "x"'), VARIANTS, "FileOpened")
    num_exec, _ = validate_condition(parse_condition("argc == 1"), VARIANTS, "Exec")
    assert num_file == VARIANTS.var_num_of("FileOpened")
    assert num_exec == VARIANTS.var_num_of("Exec")


def test_validated_tree_shape():
    _, validated = validate_condition(
        parse_condition('!(filename == "a" && header.pid == 1) || filename == "b"'),
        VARIANTS,
        "FileOpened",
    )
    assert isinstance(validated, ValidatedOr)
    assert isinstance(validated.left, ValidatedNot)
    assert isinstance(validated.left.inner, ValidatedAnd)
    assert isinstance(validated.right, ValidatedBase)
    predicate = compile_condition(validated)
    assert predicate(FileOpened(Header(1, "x"), "a")) is False
    assert predicate(FileOpened(Header(2, "x"), "a")) is True
    assert predicate(FileOpened(Header(1, "x"), "b")) is True


@pytest.mark.parametrize(
    "left,right", [(True, True), (True, False), (False, True), (False, False)]
)
def test_compiled_logic(left, right):
    lb = ValidatedBase(lambda _: left)
    rb = ValidatedBase(lambda _: right)
    assert compile_condition(ValidatedAnd(lb, rb))(None) == (left and right)
    assert compile_condition(ValidatedOr(lb, rb))(None) == (left or right)
    assert compile_condition(ValidatedNot(lb))(None) == (not left)


def test_nested_field_comparison():
    event = FileOpened(Header(42, "/usr/bin/cat"), "/etc/passwd")
    assert _compiled("header.pid == 42")(event) is True
    assert _compiled("header.pid == 43")(event) is False
    assert _compiled('header.image starts_with "/usr"')(event) is True
    assert _compiled('filename ends_with "shadow"')(event) is False


def test_in_list_condition():
    predicate = _compiled("header.pid in [4, 2]")
    assert predicate(FileOpened(Header(2, "a"), "f"))
    assert not predicate(FileOpened(Header(3, "a"), "f"))


def test_predicate_is_false_for_other_variant():
    predicate = _compiled("header.pid == 1")
    assert predicate(Exec(Header(1, "a"), 0)) is False


def test_compiled_rule_is_match():
    rule = CompiledRule("cat", _compiled('header.image == "/usr/bin/cat"'))
    assert rule.is_match(FileOpened(Header(1, "/usr/bin/cat"), "f"))
    assert not rule.is_match(FileOpened(Header(1, "/usr/bin/ls"), "f"))
    assert rule.name == "cat"


def test_unknown_variant():
    with pytest.raises(VariantNotFound):
        validate_condition(parse_condition("argc == 1"), VARIANTS, "Missing")


def test_unknown_field():
    with pytest.raises(FieldNotFound):
        validate_condition(parse_condition("nope == 1"), VARIANTS, "Exec")


def test_bad_value():
    with pytest.raises(FieldValueParseError):
        validate_condition(parse_condition('argc == "abc"'), VARIANTS, "Exec")


def test_operator_not_allowed():
    with pytest.raises(OperatorNotAllowedOnType):
        validate_condition(parse_condition('argc starts_with "1"'), VARIANTS, "Exec")


def test_struct_and_simple_misuse():
    with pytest.raises(FieldNotSimple):
        validate_condition(parse_condition("header == 1"), VARIANTS, "Exec")
    with pytest.raises(FieldNotStruct):
        validate_condition(parse_condition("argc.x == 1"), VARIANTS, "Exec")


def test_error_in_right_branch_is_raised():
    with pytest.raises(FieldNotFound):
        validate_condition(parse_condition("argc == 1 && missing == 2"), VARIANTS, "Exec")