"""Database seeder for local development of the users service."""
import asyncio
import argparse
import random
import time
import uuid
from users_service.config import settings
from users_service.database import engine, Base
from users_service.dependencies import get_user_service
from users_service.errors import ServiceError
from users_service.schemas import CreateUserRequest, FollowRequest

DEFAULT_PASSWORD = "password123"

async def seed(small: bool = False, reset: bool = False):
    num_users = 10 if small else 200
    num_sources = 5 if small else 50
    follows_per_user = 3 if small else 15

    print(f"Seeding: {num_users} users, {num_sources} sources, ~{num_users * follows_per_user} follows of each kind")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # Hashing dominates seeding time; the work factor is irrelevant for fixtures.
    settings.BCRYPT_ROUNDS = 4
    service = get_user_service()

    users = []
    for i in range(num_users):
        try:
            user = await service.create_user(CreateUserRequest(
                username=f"user_{i:04d}",
                email=f"user_{i:04d}@example.com",
                password=DEFAULT_PASSWORD,
            ))
        except ServiceError as exc:
            print(f"  Skipping user_{i:04d}: {exc.detail}")
            continue
        users.append(user["uuid"])
    print(f"  Created {len(users)} users (password: {DEFAULT_PASSWORD})")

    sources = [str(uuid.uuid4()) for _ in range(num_sources)]

    user_follows = source_follows = 0
    for follower in users:
        others = [u for u in users if u != follower]
        for followed in random.sample(others, k=min(follows_per_user, len(others))):
            await service.follow(FollowRequest(follower=follower, followed=followed, type="user"))
            user_follows += 1
        for followed in random.sample(sources, k=min(follows_per_user, len(sources))):
            await service.follow(FollowRequest(follower=follower, followed=followed, type="source"))
            source_follows += 1

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Users: {len(users)}")
    print(f"  User follows: {user_follows}")
    print(f"  Source follows: {source_follows}")

    await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Seed the users database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (10 users)")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, reset=args.reset))


if __name__ == "__main__":
    main()
