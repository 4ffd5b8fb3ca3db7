"""
Regression tests for issues found during code review.

1. Follow/unfollow must execute the statement for the requested kind and
   operation, never a fixed "add user follower" statement.
2. A uniqueness check that cannot reach the store must reject the create,
   not admit a possible duplicate.
3. Plaintext passwords and hashes must never reach the logs.
"""
import logging
import uuid
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from users_service.errors import InternalError
from users_service.models import User, user_source_follows, user_user_follows
from users_service.repository import UserRepository
from users_service.schemas import CreateUserRequest, FollowRequest, ValidateCredentialsRequest
from users_service.services.user_service import UserService


# ---------------------------------------------------------------------------
# 1. Statement selection
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_each_follow_operation_hits_its_own_edge(service: UserService, count_rows):
    a = await service.create_user(CreateUserRequest(username="a", email="a@example.com", password="pw"))
    b = await service.create_user(CreateUserRequest(username="b", email="b@example.com", password="pw"))
    source = str(uuid.uuid4())

    user_edge = FollowRequest(follower=a["uuid"], followed=b["uuid"], type="user")
    source_edge = FollowRequest(follower=a["uuid"], followed=source, type="source")

    await service.follow(user_edge)
    await service.follow(source_edge)
    assert (await count_rows(user_user_follows), await count_rows(user_source_follows)) == (1, 1)

    # Removing the source edge must leave the user edge in place, and vice versa.
    await service.unfollow(source_edge)
    assert (await count_rows(user_user_follows), await count_rows(user_source_follows)) == (1, 0)

    await service.unfollow(user_edge)
    assert (await count_rows(user_user_follows), await count_rows(user_source_follows)) == (0, 0)


# ---------------------------------------------------------------------------
# 2. Fail closed on ambiguous uniqueness checks
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_unreachable_uniqueness_check_rejects_create(repository: UserRepository, count_rows):
    service = UserService(repository)
    fault = OperationalError("SELECT", {}, Exception("connection reset"))

    with patch.object(AsyncSession, "execute", side_effect=fault):
        with pytest.raises(InternalError):
            await service.create_user(
                CreateUserRequest(username="maybe", email="maybe@example.com", password="pw")
            )

    assert await count_rows(User) == 0


# ---------------------------------------------------------------------------
# 3. No secrets in logs
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_secrets_are_not_logged(service: UserService, repository: UserRepository, caplog):
    caplog.set_level(logging.DEBUG, logger="users_service")
    created = await service.create_user(
        CreateUserRequest(username="quiet", email="quiet@example.com", password="sup3r-secret")
    )
    await service.validate_credentials(ValidateCredentialsRequest(username="quiet", password="wrong-guess"))
    await service.validate_credentials(ValidateCredentialsRequest(username="quiet", password="sup3r-secret"))

    stored = await repository.get_user_by_id(created["uuid"])
    assert "sup3r-secret" not in caplog.text
    assert "wrong-guess" not in caplog.text
    assert stored.hashed_password not in caplog.text
