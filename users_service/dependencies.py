from users_service.config import settings
from users_service.database import async_session
from users_service.repository import UserRepository
from users_service.services.user_service import UserService


def get_user_service() -> UserService:
    """
    FastAPI dependency returning a ``UserService`` wired to the production
    session factory.

    Usage in a router::

        @router.get("/users/{user_uuid}")
        async def get_user(user_uuid: str, service: UserService = Depends(get_user_service)):
            ...

    Tests override this dependency to inject a repository bound to the
    test engine.  Both objects are cheap; nothing is cached between requests.
    """
    repository = UserRepository(async_session, timeout=settings.DB_OPERATION_TIMEOUT)
    return UserService(repository)
