"""
Conversions between inbound requests, persisted ``User`` rows and the
outbound wire record.

Everything here is free of I/O.  Identifier problems are reported with
``InvalidIdentifierError`` so callers can decide whether a bad id is the
caller's fault (request input) or ours (stored data).
"""
import time
import uuid

from users_service.models import User
from users_service.schemas import CreateUserRequest


class InvalidIdentifierError(ValueError):
    """Raised when a value cannot be interpreted as a UUID."""


def parse_uuid(value) -> uuid.UUID:
    """
    Interpret *value* as a UUID.

    Accepts a ``uuid.UUID``, its canonical (or hex) string form, or exactly
    16 raw bytes.  Anything else raises ``InvalidIdentifierError``.
    """
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 16:
            raise InvalidIdentifierError(f"expected 16 bytes for a uuid, got {len(value)}")
        return uuid.UUID(bytes=bytes(value))
    if isinstance(value, str):
        try:
            return uuid.UUID(value)
        except ValueError as exc:
            raise InvalidIdentifierError(f"malformed uuid: {value!r}") from exc
    raise InvalidIdentifierError(f"unsupported uuid type: {type(value).__name__}")


def hydrate_for_create(request: CreateUserRequest, hashed_password: str, now: int | None = None) -> User:
    """
    Build a persistable ``User`` from a creation request.

    No acting identity is known at this layer, so the new user is recorded
    as both its own creator and last updater.
    """
    new_uuid = str(uuid.uuid4())
    stamp = int(time.time()) if now is None else now
    return User(
        uuid=new_uuid,
        username=request.username,
        email=request.email,
        hashed_password=hashed_password,
        created_by_uuid=new_uuid,
        created_at=stamp,
        updated_by_uuid=new_uuid,
        updated_at=stamp,
    )


def _audit_fields_to_wire(user: User) -> dict:
    return {
        "created_by": str(parse_uuid(user.created_by_uuid)),
        "created_at": user.created_at,
        "updated_by": str(parse_uuid(user.updated_by_uuid)) if user.updated_by_uuid else None,
        "updated_at": user.updated_at,
    }


def user_to_wire(user: User) -> dict:
    """Serialise a stored ``User`` to its outbound dict (hash excluded)."""
    return {
        "uuid": str(parse_uuid(user.uuid)),
        "username": user.username,
        "email": user.email,
        "audit_fields": _audit_fields_to_wire(user),
    }
