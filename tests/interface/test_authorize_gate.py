import pytest

from resact import Err, Ok, Resource
from resact.core.errors import AuthorizationCheckError, AuthorizationDenied, MissingArgument
from resact.interface.authorize import (
    Allow,
    AllowAll,
    AuthError,
    Authorizer,
    Deny,
    RuleAuthorizer,
    as_bool,
    as_result,
    check,
)


class _Exploding:
    def authorize(self, request, actor):
        raise RuntimeError("policy store offline")


class _Recording:
    def __init__(self):
        self.calls = []

    def authorize(self, request, actor):
        self.calls.append((request, actor))
        return Allow()


def _admins_only() -> RuleAuthorizer:
    return RuleAuthorizer(
        {"create": lambda request, actor: actor == "admin"},
        default="allow",
    )


def test_decision_forms() -> None:
    assert as_result(Allow()) == Ok(True)
    assert as_result(Deny("no")) == Ok(False)
    err = as_result(AuthError("boom"))
    assert isinstance(err, Err) and isinstance(err.error, AuthorizationCheckError)
    assert as_bool(Allow()) is True
    assert as_bool(Deny()) is False
    assert as_bool(AuthError()) is False


def test_authorizers_satisfy_protocol() -> None:
    assert isinstance(AllowAll(), Authorizer)
    assert isinstance(_admins_only(), Authorizer)


def test_check_turns_exceptions_into_auth_error(users) -> None:
    decision = check(users.to_read_users(), None, _Exploding())
    assert isinstance(decision, AuthError)
    assert isinstance(decision.detail, RuntimeError)


def test_check_rejects_unexpected_return_values(users) -> None:
    class _Sloppy:
        def authorize(self, request, actor):
            return True

    assert isinstance(check(users.to_read_users(), None, _Sloppy()), AuthError)


def test_rule_authorizer_default_deny(users) -> None:
    strict = RuleAuthorizer({})
    decision = strict.authorize(users.to_read_users(), "anyone")
    assert isinstance(decision, Deny)
    assert "read" in decision.reason


def test_can_forms_distinguish_deny_and_error(user_schema) -> None:
    guarded = Resource(user_schema, authorizer=_admins_only())
    assert guarded.can_create(None) == Ok(False)
    assert guarded.can_create("admin") == Ok(True)
    assert guarded.can_create_bool(None) is False
    assert guarded.can_hello_bool(None, "fred") is True

    broken = Resource(user_schema, authorizer=_Exploding())
    result = broken.can_create(None)
    assert isinstance(result, Err)
    assert isinstance(result.error, AuthorizationCheckError)
    assert isinstance(result.error.__cause__, RuntimeError)
    assert broken.can_create_bool(None) is False


def test_can_bool_never_raises_for_downstream_failures(user_schema) -> None:
    broken = Resource(user_schema, authorizer=_Exploding())
    # invalid uuid: the read itself would fail validation
    assert broken.can_get_by_id_bool(None, "some uuid") is False
    users = Resource(user_schema)
    assert users.can_get_by_id_bool(None, "some uuid") is True


def test_can_forms_do_not_execute(user_schema) -> None:
    users = Resource(user_schema)
    assert users.can_create_bool(None, "bob")
    assert users.read_users() == []


def test_executing_forms_are_gated(user_schema) -> None:
    guarded = Resource(user_schema, authorizer=_admins_only())
    with pytest.raises(AuthorizationDenied):
        guarded.create("bob")
    result = guarded.create_or_error("bob", actor="guest")
    assert isinstance(result, Err) and isinstance(result.error, AuthorizationDenied)
    assert guarded.read_users() == []
    assert guarded.create("bob", actor="admin").first_name == "bob"

    broken = Resource(user_schema, authorizer=_Exploding())
    with pytest.raises(AuthorizationCheckError):
        broken.read_users()


def test_authorizer_receives_request_and_actor(user_schema) -> None:
    recorder = _Recording()
    users = Resource(user_schema, authorizer=recorder)
    users.hello("fred", actor="ann")
    ((request, actor),) = recorder.calls
    assert request.action == "hello"
    assert actor == "ann"


def test_can_requires_an_actor_slot(users) -> None:
    with pytest.raises(MissingArgument) as info:
        users.can_read_users()
    assert info.value.name == "actor"


def test_built_request_keeps_its_authorize_keyword(user_schema) -> None:
    guarded = Resource(user_schema, authorizer=_admins_only())
    changeset = guarded.to_create("bob", actor="guest", authorize=False)
    assert changeset.authorize is False
    assert guarded.execute(changeset).first_name == "bob"
    with pytest.raises(AuthorizationDenied):
        guarded.execute(changeset, authorize=True)
