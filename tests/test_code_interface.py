import uuid

import pytest

import resact
from resact import Err, Ok
from resact.core.errors import NotFoundError, ValidationFailure
from resact.interface.engine import OutcomeKind, execute, run
from resact.interface.requests import ActionInput, Changeset, Query

# ---------------------------------------------------------------------------
# Generic actions
# ---------------------------------------------------------------------------


def test_generic_action_can_be_invoked(users) -> None:
    assert users.hello("fred") == "Hello fred"
    assert users.hello_or_error("george") == Ok("Hello george")


def test_generic_action_builder_produces_input(users) -> None:
    action_input = users.to_hello("bob")
    assert isinstance(action_input, ActionInput)
    assert action_input.action == "hello"
    assert action_input.arguments == {"name": "bob"}


def test_generic_action_authorization_helpers(users) -> None:
    assert users.can_hello(None, "fred") == Ok(True)
    assert users.can_hello_bool(None, "fred") is True


# ---------------------------------------------------------------------------
# Read actions
# ---------------------------------------------------------------------------


def test_read_builders_produce_queries(users) -> None:
    listing = users.to_read_users()
    assert isinstance(listing, Query)
    assert listing.action == "read"
    assert listing.get is False

    by_id = users.to_get_by_id("some uuid")
    assert isinstance(by_id, Query)
    assert by_id.action == "by_id"
    assert by_id.get is True


def test_read_authorization_helpers(users) -> None:
    assert users.can_read_users(None) == Ok(True)
    assert users.can_get_by_id(None, "some uuid") == Ok(True)
    assert users.can_read_users_bool(None)
    assert users.can_get_by_id_bool(None, "some uuid")


def test_read_list_is_success_even_when_empty(users) -> None:
    assert users.read_users() == []
    users.create("ann")
    users.create("bo")
    assert sorted(u.first_name for u in users.read_users()) == ["ann", "bo"]


# ---------------------------------------------------------------------------
# Get-style reads and not_found_error precedence
# ---------------------------------------------------------------------------


def test_get_raises_not_found_by_default(users, domain) -> None:
    with pytest.raises(NotFoundError):
        users.get_user(uuid.uuid4())
    with pytest.raises(NotFoundError):
        domain.get_user(uuid.uuid4())


def test_get_or_error_returns_err_not_found(users) -> None:
    result = users.get_user_or_error(uuid.uuid4())
    assert isinstance(result, Err)
    assert isinstance(result.error, NotFoundError)


def test_definition_level_not_found_error_false_returns_none(users) -> None:
    assert users.get_user_safely(uuid.uuid4()) is None
    assert users.get_user_safely_or_error(uuid.uuid4()) == Ok(None)


def test_call_option_false_overrides_definition_default(users, domain) -> None:
    assert users.get_user(uuid.uuid4(), not_found_error=False) is None
    assert domain.get_user(uuid.uuid4(), not_found_error=False) is None
    assert users.get_user_safely(uuid.uuid4(), not_found_error=False) is None


def test_call_option_true_overrides_definition_false(users) -> None:
    with pytest.raises(NotFoundError):
        users.get_user_safely(uuid.uuid4(), not_found_error=True)


def test_get_returns_the_single_match(users) -> None:
    created = users.create("ted")
    assert users.get_user(created.id) == created
    assert users.get_user(str(created.id)).first_name == "ted"


# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------


def test_create_builder_materializes_defaults(users) -> None:
    changeset = users.to_create()
    assert isinstance(changeset, Changeset)
    assert changeset.action == "create"
    assert changeset.attributes["first_name"] == "fred"

    assert users.to_create("bob").attributes["first_name"] == "bob"


def test_create_authorization_helpers(users) -> None:
    assert users.can_create(None) == Ok(True)
    assert users.can_create(None, "bob") == Ok(True)
    assert users.can_create_bool(None)
    assert users.can_create_bool(None, "bob")


def test_optional_arguments_are_optional(users) -> None:
    assert users.create().first_name == "fred"
    assert users.create("joe").first_name == "joe"


def test_omitted_optional_matches_explicit_default(users) -> None:
    omitted = users.to_create()
    explicit = users.to_create("fred")
    assert omitted.attributes == explicit.attributes


def test_field_without_default_is_left_unset(users) -> None:
    assert "last_name" not in users.to_create().attributes
    assert users.create().last_name is None


def test_create_with_params_and_action_options(users) -> None:
    changeset = users.to_create(params={"last_name": "Daniel"}, upsert=True)
    assert changeset.attributes["last_name"] == "Daniel"
    assert changeset.options == {"upsert": True}


def test_update_takes_record_first(users) -> None:
    user = users.create("zach")
    updated = users.update(user, params={"last_name": "Daniel"})
    assert updated.id == user.id
    assert updated.first_name == "zach"
    assert users.get_user(user.id).last_name == "Daniel"


def test_invalid_create_input_is_not_stored(users) -> None:
    result = users.create_or_error(123)
    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationFailure)
    assert users.read_users() == []


def test_unrecognized_keywords_named_like_dispatch_parameters_pass_through(users) -> None:
    changeset = users.to_create("joe", form="signup", resource="web", definition="v2")
    assert changeset.options == {"form": "signup", "resource": "web", "definition": "v2"}
    assert changeset.attributes["first_name"] == "joe"
    assert users.hello("fred", form="signup") == "Hello fred"


# ---------------------------------------------------------------------------
# Calculations
# ---------------------------------------------------------------------------


def test_calculation_can_be_fetched_dynamically(users) -> None:
    assert resact.calculate(
        users, "full_name", refs={"first_name": "Zach", "last_name": "Daniel"}
    ) == Ok("Zach Daniel")


def test_dynamic_calculation_passes_name_keyword_through(users) -> None:
    result = resact.calculate(
        users, "full_name", refs={"first_name": "Zach", "last_name": "Daniel"}, name="x"
    )
    assert result == Ok("Zach Daniel")


def test_calculation_interface(users, domain) -> None:
    assert users.full_name("Zach", "Daniel") == "Zach Daniel"
    assert domain.full_name("Zach", "Daniel") == "Zach Daniel"


def test_calculation_interface_with_optional_separator(users) -> None:
    assert users.full_name_opt("Zach", "Daniel") == "Zach Daniel"
    assert users.full_name_opt("Zach", "Daniel", "-") == "Zach-Daniel"


def test_calculation_accepts_a_record(users) -> None:
    user = users.create("Zach", params={"last_name": "Daniel"})
    assert users.full_name_record(user) == "Zach Daniel"
    assert users.full_name_record(user) == users.full_name(user.first_name, user.last_name)


def test_calculation_interfaces_have_no_builder(users) -> None:
    assert "to_full_name" not in users.interface
    with pytest.raises(AttributeError):
        users.to_full_name


# ---------------------------------------------------------------------------
# get_by
# ---------------------------------------------------------------------------


def test_get_by_adds_arguments_and_filter(users) -> None:
    user = users.create("ted", params={"last_name": "Danson"})
    assert users.get_by_id(user.id).id == user.id

    query = users.to_get_by_id(user.id)
    assert query.filter == {"id": user.id}
    assert query.arguments == {"id": user.id}


def test_get_by_with_malformed_key_is_a_validation_failure(users) -> None:
    result = users.get_by_id_or_error("some uuid")
    assert isinstance(result, Err)
    assert isinstance(result.error, ValidationFailure)


# ---------------------------------------------------------------------------
# Builder round trip
# ---------------------------------------------------------------------------


def test_builder_then_run_matches_direct_call(users) -> None:
    user = users.create("amy")

    query = users.to_get_user(user.id)
    outcome = run(query)
    assert outcome.kind is OutcomeKind.SUCCESS
    assert outcome.value == users.get_user(user.id)

    assert execute(users.to_hello("bob")).value == users.hello("bob")
    assert resact.execute(users.to_get_user(user.id)) == users.get_user(user.id)


def test_builder_then_execute_honors_not_found_error(users) -> None:
    query = users.to_get_user(uuid.uuid4())
    with pytest.raises(NotFoundError):
        resact.execute(query)
    assert resact.execute(query, not_found_error=False) is None
    assert resact.execute_or_error(query, not_found_error=False) == Ok(None)


def test_builder_then_execute_honors_definition_not_found_error(users) -> None:
    missing = uuid.uuid4()
    query = users.to_get_user_safely(missing)
    assert query.not_found_error is False
    assert resact.execute(query) is users.get_user_safely(missing) is None
    assert resact.execute_or_error(query) == users.get_user_safely_or_error(missing)
    with pytest.raises(NotFoundError):
        resact.execute(query, not_found_error=True)

    strict = users.to_get_user_safely(missing, not_found_error=True)
    with pytest.raises(NotFoundError):
        resact.execute(strict)


def test_composed_query_filters_further(users) -> None:
    users.create("ann", params={"last_name": "Lee"})
    users.create("ann", params={"last_name": "Kim"})
    query = users.to_read_users().filter_by(last_name="Kim")
    (only,) = resact.execute(query)
    assert only.last_name == "Kim"
