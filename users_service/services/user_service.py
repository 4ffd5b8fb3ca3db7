"""
User service: one coroutine per use case of the users API.

The service owns no state besides the repository it is constructed with.
It validates input, calls the repository, and translates every outcome into
either a wire-shaped dict or a ``ServiceError`` from ``users_service.errors``.
Repository exceptions never escape this module unwrapped.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import NamedTuple

from users_service.errors import (
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    RepositoryError,
    UnimplementedError,
    UserNotFoundError,
)
from users_service.hydration import (
    InvalidIdentifierError,
    hydrate_for_create,
    parse_uuid,
    user_to_wire,
)
from users_service.models import User
from users_service.passwords import (
    MAX_PASSWORD_BYTES,
    hash_password,
    password_too_long,
    verify_password,
)
from users_service.repository import UserRepository
from users_service.schemas import (
    CreateUserRequest,
    DeleteUserRequest,
    FollowRequest,
    UpdateUserRequest,
    ValidateCredentialsRequest,
)

logger = logging.getLogger(__name__)


class FollowType(str, Enum):
    USER = "user"
    SOURCE = "source"


EdgeOperation = Callable[[str, str], Awaitable[None]]


class EdgeOperations(NamedTuple):
    add: EdgeOperation
    remove: EdgeOperation


def _parse_identifier(value, field: str) -> str:
    try:
        return str(parse_uuid(value))
    except InvalidIdentifierError as exc:
        raise InvalidArgumentError(f"invalid {field}: {exc}") from exc


def _to_wire(user: User) -> dict:
    try:
        return user_to_wire(user)
    except InvalidIdentifierError as exc:
        logger.error("Stored user %r has a malformed identifier: %s", user.uuid, exc)
        raise InternalError("failed to transform stored user") from exc


class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository
        # Single dispatch point for follow kinds; each kind is bound to its
        # own add/remove pair.
        self._edges: dict[FollowType, EdgeOperations] = {
            FollowType.USER: EdgeOperations(repository.add_user_follower, repository.remove_user_follower),
            FollowType.SOURCE: EdgeOperations(repository.add_source_follower, repository.remove_source_follower),
        }

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_user(self, user_uuid) -> dict:
        """
        Return the wire record for *user_uuid*.

        A malformed identifier is rejected before the store is touched.
        """
        key = _parse_identifier(user_uuid, "uuid")
        try:
            user = await self.repository.get_user_by_id(key)
        except UserNotFoundError as exc:
            raise NotFoundError(f"user {key} not found") from exc
        except RepositoryError as exc:
            logger.error("get_user failed for %s: %s", key, exc)
            raise InternalError(f"failed to get user {key}") from exc
        return _to_wire(user)

    async def create_user(self, request: CreateUserRequest) -> dict:
        """
        Hydrate, validate and persist a new user; return its wire record.

        The duplicate-user error does not say whether the email or the
        username collided.  The repository logs which one it was.
        """
        password = request.password.get_secret_value()
        if password_too_long(password):
            raise InvalidArgumentError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        hashed = await asyncio.to_thread(hash_password, password)
        candidate = hydrate_for_create(request, hashed)

        try:
            is_valid = await self.repository.validate_for_create(candidate)
        except RepositoryError as exc:
            logger.error("Uniqueness check failed for %s: %s", candidate.uuid, exc)
            raise InternalError("failed to validate user for create") from exc
        if not is_valid:
            raise InvalidArgumentError("user already exists by email or username")

        try:
            await self.repository.create_user(candidate)
        except RepositoryError as exc:
            logger.error("create_user failed for %s: %s", candidate.uuid, exc)
            raise InternalError("failed to create user") from exc

        logger.info("Created user %s", candidate.uuid)
        return _to_wire(candidate)

    async def update_user(self, request: UpdateUserRequest) -> dict:
        raise UnimplementedError("UpdateUser is not implemented")

    async def delete_user(self, request: DeleteUserRequest) -> None:
        raise UnimplementedError("DeleteUser is not implemented")

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    async def validate_credentials(self, request: ValidateCredentialsRequest) -> dict:
        """
        Check a plaintext password against the stored hash.

        A wrong password is a normal outcome: the looked-up user is returned
        with ``is_valid`` False instead of raising.  An unknown user is a
        lookup miss and raises ``NotFoundError``.
        """
        if bool(request.email) == bool(request.username):
            raise InvalidArgumentError("exactly one of email or username must be provided")

        if request.email:
            lookup, key = self.repository.get_user_by_email, request.email
        else:
            lookup, key = self.repository.get_user_by_username, request.username

        try:
            user = await lookup(key)
        except UserNotFoundError as exc:
            raise NotFoundError("user not found") from exc
        except RepositoryError as exc:
            logger.error("Credential lookup failed: %s", exc.operation)
            raise InternalError("failed to look up user") from exc

        matches = await asyncio.to_thread(
            verify_password, request.password.get_secret_value(), user.hashed_password
        )
        if not matches:
            logger.info("Credential check failed for user %s", user.uuid)
        return {"user": _to_wire(user), "is_valid": matches}

    # ------------------------------------------------------------------
    # Follow edges
    # ------------------------------------------------------------------

    def _resolve_edge(self, request: FollowRequest) -> tuple[str, str, EdgeOperations]:
        follower = _parse_identifier(request.follower, "follower")
        followed = _parse_identifier(request.followed, "followed")
        try:
            kind = FollowType(request.type)
        except ValueError as exc:
            raise InvalidArgumentError(f"unknown follow type: {request.type!r}") from exc
        return follower, followed, self._edges[kind]

    async def follow(self, request: FollowRequest) -> None:
        follower, followed, edge = self._resolve_edge(request)
        try:
            await edge.add(follower, followed)
        except RepositoryError as exc:
            logger.error("follow %s -> %s failed: %s", follower, followed, exc)
            raise InternalError(f"failed to follow {followed}") from exc

    async def unfollow(self, request: FollowRequest) -> None:
        follower, followed, edge = self._resolve_edge(request)
        try:
            await edge.remove(follower, followed)
        except RepositoryError as exc:
            logger.error("unfollow %s -> %s failed: %s", follower, followed, exc)
            raise InternalError(f"failed to unfollow {followed}") from exc

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def health_check(self) -> None:
        try:
            await self.repository.ping()
        except RepositoryError as exc:
            raise InternalError("database unavailable") from exc
