"""
User repository: every read and write the service performs against the
relational store.

Design notes
------------
- Reads share one lookup routine parameterised by the predicate column.
  A miss is reported as ``UserNotFoundError``; a lookup never returns None.
- Every write runs in its own session and transaction:
  begin -> execute -> commit.  Any failure rolls the transaction back and
  raises ``TransactionError``; if the rollback fails too, ``RollbackError``
  is raised instead so the two situations can be told apart.
- The four follow-edge statements are fixed at import time.  Each public
  follow method names its own statement explicitly.
- Each operation is bounded by ``timeout`` seconds.  Cancellation of the
  calling task propagates into the session, which releases its connection
  (and rolls back) on exit.
"""
import asyncio
import logging

from sqlalchemy import bindparam, delete, insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from users_service.errors import (
    RepositoryError,
    RollbackError,
    TransactionError,
    UserLookupError,
    UserNotFoundError,
)
from users_service.models import User, user_source_follows, user_user_follows

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Follow-edge statements
# ---------------------------------------------------------------------------

ADD_USER_FOLLOWER = insert(user_user_follows).values(
    follower=bindparam("follower_id"),
    followed=bindparam("followed_id"),
)

REMOVE_USER_FOLLOWER = delete(user_user_follows).where(
    user_user_follows.c.follower == bindparam("follower_id"),
    user_user_follows.c.followed == bindparam("followed_id"),
)

ADD_SOURCE_FOLLOWER = insert(user_source_follows).values(
    follower=bindparam("follower_id"),
    followed=bindparam("followed_id"),
)

REMOVE_SOURCE_FOLLOWER = delete(user_source_follows).where(
    user_source_follows.c.follower == bindparam("follower_id"),
    user_source_follows.c.followed == bindparam("followed_id"),
)


class UserRepository:
    """Data access for users and follow edges.

    Holds only the session factory and a timeout, so one instance can be
    shared by any number of concurrent requests.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], timeout: float | None = None) -> None:
        self._session_factory = session_factory
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_user_by_id(self, user_uuid: str) -> User:
        return await self._get_user(User.uuid, user_uuid, "get_user_by_id")

    async def get_user_by_username(self, username: str) -> User:
        return await self._get_user(User.username, username, "get_user_by_username")

    async def get_user_by_email(self, email: str) -> User:
        return await self._get_user(User.email, email, "get_user_by_email")

    async def _get_user(self, column, value: str, operation: str) -> User:
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session_factory() as session:
                    result = await session.execute(select(User).where(column == value))
                    user = result.scalar_one_or_none()
        except TimeoutError as exc:
            raise UserLookupError(
                f"{operation} timed out for {value}", operation=operation, key=value
            ) from exc
        except SQLAlchemyError as exc:
            raise UserLookupError(
                f"{operation} failed for {value}", operation=operation, key=value
            ) from exc

        if user is None:
            raise UserNotFoundError(
                f"no user found for {value}", operation=operation, key=value
            )
        return user

    async def _exists(self, lookup, value: str) -> bool:
        try:
            await lookup(value)
        except UserNotFoundError:
            return False
        return True

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def validate_for_create(self, candidate: User) -> bool:
        """
        Return False when *candidate*'s email or username is already taken.

        Email is checked first, then username.  Lookup failures other than
        a miss propagate as ``UserLookupError``: an ambiguous answer must
        not admit a possible duplicate.
        """
        if await self._exists(self.get_user_by_email, candidate.email):
            logger.info("Create rejected for %s: email already registered", candidate.uuid)
            return False
        if await self._exists(self.get_user_by_username, candidate.username):
            logger.info("Create rejected for %s: username already registered", candidate.uuid)
            return False
        return True

    async def create_user(self, candidate: User) -> None:
        statement = insert(User).values(
            uuid=candidate.uuid,
            username=candidate.username,
            email=candidate.email,
            hashed_password=candidate.hashed_password,
            created_by_uuid=candidate.created_by_uuid,
            created_at=candidate.created_at,
            updated_by_uuid=candidate.updated_by_uuid,
            updated_at=candidate.updated_at,
        )
        await self._execute_in_transaction("create_user", candidate.uuid, statement)

    # ------------------------------------------------------------------
    # Follow edges
    # ------------------------------------------------------------------

    async def add_user_follower(self, follower: str, followed: str) -> None:
        await self._perform_follow("add_user_follower", ADD_USER_FOLLOWER, follower, followed)

    async def remove_user_follower(self, follower: str, followed: str) -> None:
        await self._perform_follow("remove_user_follower", REMOVE_USER_FOLLOWER, follower, followed)

    async def add_source_follower(self, follower: str, followed: str) -> None:
        await self._perform_follow("add_source_follower", ADD_SOURCE_FOLLOWER, follower, followed)

    async def remove_source_follower(self, follower: str, followed: str) -> None:
        await self._perform_follow("remove_source_follower", REMOVE_SOURCE_FOLLOWER, follower, followed)

    async def _perform_follow(self, operation: str, statement, follower: str, followed: str) -> None:
        await self._execute_in_transaction(
            operation,
            f"{follower}-{followed}",
            statement,
            {"follower_id": follower, "followed_id": followed},
        )

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    async def ping(self) -> None:
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session_factory() as session:
                    await session.execute(text("SELECT 1"))
        except (TimeoutError, SQLAlchemyError) as exc:
            raise RepositoryError("database ping failed", operation="ping", key="") from exc

    # ------------------------------------------------------------------
    # Transaction routine
    # ------------------------------------------------------------------

    async def _execute_in_transaction(self, operation: str, key: str, statement, params: dict | None = None) -> None:
        try:
            async with asyncio.timeout(self._timeout):
                async with self._session_factory() as session:
                    try:
                        await session.execute(statement, params)
                        await session.commit()
                    except SQLAlchemyError as exc:
                        await self._rollback(session, operation, key, exc)
                        logger.warning("%s failed for %s: %s", operation, key, exc.__class__.__name__)
                        raise TransactionError(
                            f"{operation} failed for {key}", operation=operation, key=key
                        ) from exc
        except TimeoutError as exc:
            logger.warning("%s timed out for %s", operation, key)
            raise TransactionError(
                f"{operation} timed out for {key}", operation=operation, key=key
            ) from exc

    async def _rollback(self, session: AsyncSession, operation: str, key: str, original: BaseException) -> None:
        try:
            await session.rollback()
        except SQLAlchemyError as roll_exc:
            logger.error(
                "Rollback failed after %s for %s; store state needs inspection", operation, key
            )
            raise RollbackError(
                f"failed to roll back after {operation} for {key}",
                operation=operation,
                key=key,
                original=original,
            ) from roll_exc
