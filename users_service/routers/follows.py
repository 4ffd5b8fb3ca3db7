from fastapi import APIRouter, Depends
from users_service.dependencies import get_user_service
from users_service.errors import ServiceError
from users_service.routers.users import to_http_error
from users_service.schemas import FollowRequest
from users_service.services.user_service import UserService

router = APIRouter(prefix="/api/v1/follows", tags=["follows"])

@router.post("", status_code=204)
async def follow(data: FollowRequest, service: UserService = Depends(get_user_service)):
    try:
        await service.follow(data)
    except ServiceError as exc:
        raise to_http_error(exc) from exc

@router.delete("", status_code=204)
async def unfollow(data: FollowRequest, service: UserService = Depends(get_user_service)):
    try:
        await service.unfollow(data)
    except ServiceError as exc:
        raise to_http_error(exc) from exc
