import pytest

from resact import Domain, Resource, define, define_calculation
from resact.core.errors import SchemaError


def test_domain_exposes_its_own_definitions_only(domain, users) -> None:
    assert sorted(domain.entry_points()) == sorted(
        [
            "get_user",
            "get_user_or_error",
            "to_get_user",
            "can_get_user",
            "can_get_user_bool",
            "full_name",
            "full_name_or_error",
            "can_full_name",
            "can_full_name_bool",
        ]
    )
    with pytest.raises(AttributeError):
        domain.read_users
    assert domain.resource("user") is users
    assert list(domain) == [users]


def test_domain_calls_dispatch_against_the_resource(domain, users) -> None:
    created = users.create("kim")
    assert domain.get_user(created.id) == created
    assert domain.can_get_user_bool(None, created.id) is True


def test_domain_rejects_unknown_resource(users) -> None:
    with pytest.raises(SchemaError):
        Domain("accounts", [users], interfaces={"post": [define("read_posts", action="read")]})


def test_domain_rejects_definitions_that_do_not_resolve(users) -> None:
    with pytest.raises(SchemaError):
        Domain("accounts", [users], interfaces={"user": [define("missing", action="nope")]})
    with pytest.raises(SchemaError):
        Domain(
            "accounts",
            [users],
            interfaces={"user": [define_calculation("full_name", args=["nickname"])]},
        )


def test_domain_rejects_duplicate_resources(user_schema) -> None:
    with pytest.raises(SchemaError):
        Domain("accounts", [Resource(user_schema), Resource(user_schema)])


def test_domain_name_must_be_lower_snake(users) -> None:
    with pytest.raises(SchemaError):
        Domain("Accounts", [users])
