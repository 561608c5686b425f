import pytest

from resact.core.errors import InvalidArgument, MissingArgument, TooManyArguments
from resact.interface.binder import bind
from resact.interface.options import CallOptions


def _bind(resource, name, *values, **kwargs):
    definition = resource.schema.interface(name)
    options = CallOptions.from_kwargs(kwargs)
    return bind(resource.schema, definition, values, options, resource.record_model)


def test_positional_values_bind_in_declared_order(users) -> None:
    bound = _bind(users, "full_name_opt", "Zach", "Daniel", "-")
    assert bound.arguments == {"first_name": "Zach", "last_name": "Daniel", "separator": "-"}


def test_optional_argument_without_value_is_absent(users) -> None:
    assert _bind(users, "create").arguments == {}
    assert "separator" not in _bind(users, "full_name_opt", "Zach", "Daniel").arguments


def test_missing_required_argument(users) -> None:
    with pytest.raises(MissingArgument) as info:
        _bind(users, "hello")
    assert info.value.name == "name"
    with pytest.raises(MissingArgument):
        _bind(users, "full_name", "Zach")


def test_surplus_positionals(users) -> None:
    with pytest.raises(TooManyArguments):
        _bind(users, "hello", "fred", "extra")
    with pytest.raises(TooManyArguments):
        _bind(users, "read_users", 1)


def test_get_interfaces_bind_their_key(users) -> None:
    assert _bind(users, "get_user", "abc").arguments == {"id": "abc"}
    assert _bind(users, "get_by_id", "abc").arguments == {"id": "abc"}


def test_record_argument_consumes_one_slot(users) -> None:
    user = users.create("Zach", params={"last_name": "Daniel"})
    bound = _bind(users, "full_name_record", user)
    assert bound.arguments == {"first_name": "Zach", "last_name": "Daniel"}
    with pytest.raises(TooManyArguments):
        _bind(users, "full_name_record", user, "-")


def test_record_argument_rejects_non_records(users) -> None:
    with pytest.raises(InvalidArgument):
        _bind(users, "full_name_record", {"first_name": "Zach"})


def test_update_requires_a_leading_record(users) -> None:
    with pytest.raises(MissingArgument) as info:
        _bind(users, "update")
    assert info.value.name == "record"
    with pytest.raises(InvalidArgument):
        _bind(users, "update", "not a record")
    user = users.create()
    assert _bind(users, "update", user).record is user


def test_params_lose_to_positionals(users) -> None:
    bound = _bind(users, "create", "joe", params={"first_name": "ignored", "last_name": "Smith"})
    assert bound.arguments == {"first_name": "joe", "last_name": "Smith"}


def test_unrecognized_keywords_become_action_options(users) -> None:
    bound = _bind(users, "hello", "fred", actor="admin", tenant="acme", upsert=True)
    assert bound.options.actor == "admin"
    assert bound.options.tenant == "acme"
    assert bound.options.action_options == {"upsert": True}
