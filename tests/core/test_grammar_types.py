import uuid
from typing import Any

import pytest

from resact.core.grammar import (
    RECORD_ARGUMENT,
    ActionKind,
    CallOption,
    TypeName,
    assert_lower_snake,
    is_lower_snake,
    python_type,
    type_name_from_value,
)


def test_enum_values_are_lower_snake() -> None:
    for enum_cls in (ActionKind, TypeName, CallOption):
        for member in enum_cls:
            assert is_lower_snake(member.value), member


def test_is_lower_snake() -> None:
    assert is_lower_snake("get_user")
    assert is_lower_snake("i64")
    assert not is_lower_snake("GetUser")
    assert not is_lower_snake("get__user")
    assert not is_lower_snake("_record")
    assert not is_lower_snake("")


def test_assert_lower_snake_raises_value_error() -> None:
    with pytest.raises(ValueError):
        assert_lower_snake("Bad-Name", "action name")


def test_python_types() -> None:
    assert python_type("uuid") is uuid.UUID
    assert python_type(TypeName.F64) is float
    assert python_type("any") is Any
    assert type_name_from_value(TypeName.BOOL) is TypeName.BOOL


def test_record_sentinel_and_call_options() -> None:
    assert RECORD_ARGUMENT == "_record"
    assert {o.value for o in CallOption} == {
        "actor",
        "not_found_error",
        "tenant",
        "authorize",
        "context",
        "params",
    }
