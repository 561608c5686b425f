from __future__ import annotations

import uuid

import polars as pl
import pytest

from resact import Domain, Ok, Resource, define, define_calculation, optional
from resact.core.schema import (
    ActionSpec,
    ArgumentSpec,
    CalculationSpec,
    FieldSpec,
    ResourceSchema,
)
from resact.data import arg, ref


def _hello(action_input, context):
    return Ok(f"Hello {action_input.arguments['name']}")


def _by_id(arguments):
    return ref("id") == arguments["id"]


def build_user_schema(**overrides) -> ResourceSchema:
    parts = dict(
        name="user",
        fields=[
            FieldSpec(name="id", type="uuid", primary_key=True, default_factory=uuid.uuid4),
            FieldSpec(name="first_name", default="fred"),
            FieldSpec(name="last_name"),
        ],
        actions=[
            ActionSpec(name="read", kind="read", primary=True),
            ActionSpec(name="create", kind="create"),
            ActionSpec(name="update", kind="update"),
            ActionSpec(
                name="by_id",
                kind="read",
                arguments=[ArgumentSpec(name="id", type="uuid", allow_nil=False)],
                filter=_by_id,
            ),
            ActionSpec(
                name="hello",
                kind="generic",
                arguments=[ArgumentSpec(name="name", type="str", allow_nil=False)],
                returns="str",
                run=_hello,
            ),
        ],
        calculations=[
            CalculationSpec(
                name="full_name",
                type="str",
                expression=pl.concat_str([ref("first_name"), arg("separator"), ref("last_name")]),
                arguments=[ArgumentSpec(name="separator", type="str", default=" ", allow_nil=False)],
                refs=["first_name", "last_name"],
            ),
        ],
        interfaces=[
            define("get_user", action="read", get=True),
            define("get_user_safely", action="read", get=True, not_found_error=False),
            define("read_users", action="read"),
            define("get_by_id", action="by_id", get_by=["id"]),
            define("create", args=[optional("first_name")]),
            define("hello", args=["name"]),
            define("update", action="update"),
            define_calculation("full_name", args=["first_name", "last_name"]),
            define_calculation(
                "full_name_opt",
                calculation="full_name",
                args=["first_name", "last_name", optional("separator")],
            ),
            define_calculation("full_name_record", calculation="full_name", args=["_record"]),
        ],
    )
    parts.update(overrides)
    return ResourceSchema(**parts)


@pytest.fixture
def user_schema() -> ResourceSchema:
    return build_user_schema()


@pytest.fixture
def users(user_schema: ResourceSchema) -> Resource:
    return Resource(user_schema)


@pytest.fixture
def domain(users: Resource) -> Domain:
    return Domain(
        "accounts",
        [users],
        interfaces={
            "user": [
                define("get_user", action="read", get=True),
                define_calculation("full_name", args=["first_name", "last_name"]),
            ]
        },
    )


@pytest.fixture
def make_user_schema():
    return build_user_schema
