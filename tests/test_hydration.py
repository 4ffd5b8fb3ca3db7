"""Pure conversion tests: no database involved."""
import uuid

import pytest

from users_service.hydration import (
    InvalidIdentifierError,
    hydrate_for_create,
    parse_uuid,
    user_to_wire,
)
from users_service.schemas import CreateUserRequest


def _request() -> CreateUserRequest:
    return CreateUserRequest(username="hydrated", email="hydrated@example.com", password="pw")


# ---------------------------------------------------------------------------
# parse_uuid
# ---------------------------------------------------------------------------

def test_parse_uuid_accepts_string_bytes_and_uuid():
    value = uuid.uuid4()
    assert parse_uuid(str(value)) == value
    assert parse_uuid(value.hex) == value
    assert parse_uuid(value.bytes) == value
    assert parse_uuid(value) is value


@pytest.mark.parametrize("bad", [b"\x01\x02\x03", b"\x00" * 17, "not-a-uuid", "", 42, None])
def test_parse_uuid_rejects_malformed_values(bad):
    with pytest.raises(InvalidIdentifierError):
        parse_uuid(bad)


def test_invalid_identifier_is_a_value_error():
    assert issubclass(InvalidIdentifierError, ValueError)


# ---------------------------------------------------------------------------
# hydrate_for_create
# ---------------------------------------------------------------------------

def test_hydrate_fills_identity_and_audit_fields():
    user = hydrate_for_create(_request(), "hashed-value", now=1_700_000_123)

    assert uuid.UUID(user.uuid).version == 4
    assert user.username == "hydrated"
    assert user.email == "hydrated@example.com"
    assert user.hashed_password == "hashed-value"
    assert user.created_by_uuid == user.uuid
    assert user.updated_by_uuid == user.uuid
    assert user.created_at == 1_700_000_123
    assert user.updated_at == 1_700_000_123


def test_hydrate_generates_a_new_identifier_each_time():
    first = hydrate_for_create(_request(), "h")
    second = hydrate_for_create(_request(), "h")
    assert first.uuid != second.uuid
    assert first.created_at > 0


# ---------------------------------------------------------------------------
# user_to_wire
# ---------------------------------------------------------------------------

def test_user_to_wire_shape():
    user = hydrate_for_create(_request(), "secret-hash", now=1_700_000_000)
    wire = user_to_wire(user)

    assert wire == {
        "uuid": user.uuid,
        "username": "hydrated",
        "email": "hydrated@example.com",
        "audit_fields": {
            "created_by": user.uuid,
            "created_at": 1_700_000_000,
            "updated_by": user.uuid,
            "updated_at": 1_700_000_000,
        },
    }
    assert "secret-hash" not in str(wire)


def test_user_to_wire_allows_missing_update_audit():
    user = hydrate_for_create(_request(), "h", now=1)
    user.updated_by_uuid = None
    user.updated_at = None

    audit = user_to_wire(user)["audit_fields"]
    assert audit["updated_by"] is None
    assert audit["updated_at"] is None


def test_user_to_wire_rejects_corrupt_identifier():
    user = hydrate_for_create(_request(), "h")
    user.created_by_uuid = "corrupt"
    with pytest.raises(InvalidIdentifierError):
        user_to_wire(user)
