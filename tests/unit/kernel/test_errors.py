"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import pytest

from authz_core.kernel.errors import (
    ApplicationError,
    AuthenticationError,
    BaseError,
    ChannelDisconnectedError,
    ConflictError,
    DirectoryUnavailableError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    PolicyViolationError,
    SerializationError,
    ValidationError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"
        assert str(err) == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "authz_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_context_drops_none(self) -> None:
        err = BaseError("m", role="agent", branch=None)
        assert err.context == {"role": "agent"}

    def test_to_dict(self) -> None:
        err = BaseError("m", code="my_code", role="agent")
        assert err.to_dict() == {
            "code": "my_code",
            "message": "m",
            "retryable": False,
            "context": {"role": "agent"},
        }

    def test_to_dict_includes_cause_repr(self) -> None:
        err = BaseError("wrapper", cause=ValueError("original"))
        assert "original" in err.to_dict()["cause"]

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        assert BaseError("wrap", cause=cause).__cause__ is cause

    def test_repr(self) -> None:
        assert repr(BaseError("m")) == "BaseError('m', code='authz_error')"
        assert repr(BaseError("m", role="agent")) == "BaseError('m', code='authz_error', role='agent')"


class TestRetryable:
    @pytest.mark.parametrize(
        ("err", "retryable"),
        [
            (DirectoryUnavailableError("authz-api"), True),
            (ChannelDisconnectedError("t"), True),
            (SerializationError("bad"), False),
            (AuthenticationError("no"), False),
            (PolicyViolationError("no"), False),
            (ValidationError("no"), False),
        ],
    )
    def test_flag(self, err: BaseError, retryable: bool) -> None:
        assert err.retryable is retryable
        assert err.to_dict()["retryable"] is retryable


class TestHierarchy:
    @pytest.mark.parametrize(
        ("cls", "parent"),
        [
            (AuthenticationError, ApplicationError),
            (ForbiddenError, ApplicationError),
            (PolicyViolationError, ApplicationError),
            (ValidationError, DomainError),
            (NotFoundError, DomainError),
            (ConflictError, DomainError),
            (DirectoryUnavailableError, InfrastructureError),
            (ChannelDisconnectedError, InfrastructureError),
            (SerializationError, InfrastructureError),
        ],
    )
    def test_parent(self, cls: type, parent: type) -> None:
        assert issubclass(cls, parent)
        assert issubclass(cls, BaseError)

    def test_authentication_code(self) -> None:
        assert AuthenticationError("Invalid credentials").code == "authentication_failed"


class TestSpecificErrors:
    def test_forbidden_carries_permission(self) -> None:
        err = ForbiddenError(permission="clients:edit")
        assert err.permission == "clients:edit"
        assert err.message == "Access denied"

    def test_policy_violation_carries_role(self) -> None:
        err = PolicyViolationError("nope", role="super_admin")
        assert err.role == "super_admin"
        assert err.code == "policy_violation"

    def test_validation_errors_in_dict(self) -> None:
        err = ValidationError("bad", errors=[{"module": "x"}])
        assert err.errors == [{"module": "x"}]
        assert err.to_dict()["context"]["errors"] == [{"module": "x"}]

    def test_validation_errors_default_empty(self) -> None:
        assert ValidationError("bad").errors == []

    def test_not_found_message(self) -> None:
        assert NotFoundError("Role", "r1").message == "Role 'r1' not found"
        assert NotFoundError("Role").message == "Role not found"

    def test_directory_unavailable_default_message(self) -> None:
        err = DirectoryUnavailableError("authz-api", status_code=503)
        assert err.message == "Service 'authz-api' is unavailable"
        assert err.status_code == 503
        assert err.service == "authz-api"

    def test_channel_disconnected_topic(self) -> None:
        err = ChannelDisconnectedError("permissions-updated:u1")
        assert err.topic == "permissions-updated:u1"
        assert "disconnected" in err.message

    def test_serialization_payload_type(self) -> None:
        assert SerializationError("x", payload_type="Role").payload_type == "Role"

    def test_not_found_fields(self) -> None:
        err = NotFoundError("Role", "r1")
        assert err.resource == "Role"
        assert err.context == {"resource": "Role", "identifier": "r1"}

    def test_conflict_state(self) -> None:
        err = ConflictError("busy", state="saving")
        assert err.state == "saving"
        assert err.to_dict()["context"] == {"state": "saving"}
