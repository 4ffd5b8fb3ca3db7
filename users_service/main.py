import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from users_service import __version__, database
from users_service.config import settings
from users_service.dependencies import get_user_service
from users_service.lifecycle import Lifecycle
from users_service.middleware import RequestLogMiddleware
from users_service.routers import follows, users
from users_service.routers.users import to_http_error
from users_service.errors import ServiceError
from users_service.schemas import HealthResponse
from users_service.services.user_service import UserService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
# Statement parameters include password hashes; only echo=True (DEBUG) shows SQL.
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    lifecycle = Lifecycle()
    lifecycle.register("database connection", database.connect)
    # Startup
    await lifecycle.start()
    yield
    # Shutdown
    for err in await lifecycle.shutdown():
        logger.error("Error on shutdown: %s", err)

app = FastAPI(
    title="Users Service",
    description="User accounts, credential validation and the follow graph",
    version=__version__,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLogMiddleware)

# Routers
app.include_router(users.router)
app.include_router(follows.router)

@app.get("/health", response_model=HealthResponse)
async def health(service: UserService = Depends(get_user_service)):
    try:
        await service.health_check()
    except ServiceError as exc:
        raise to_http_error(exc) from exc
    return {"status": "healthy", "version": __version__}
