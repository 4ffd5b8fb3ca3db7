from fastapi import APIRouter, Depends, HTTPException
from users_service.dependencies import get_user_service
from users_service.errors import ServiceError
from users_service.schemas import (
    CreateUserRequest,
    DeleteUserRequest,
    UpdateUserRequest,
    UserResponse,
    UserUpdate,
    ValidateCredentialsRequest,
    ValidateCredentialsResponse,
)
from users_service.services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["users"])

_STATUS_BY_CODE = {
    "InvalidArgument": 400,
    "NotFound": 404,
    "Internal": 500,
}


def to_http_error(exc: ServiceError) -> HTTPException:
    return HTTPException(
        status_code=_STATUS_BY_CODE.get(exc.code, 500),
        detail=exc.detail,
        headers={"X-Error-Code": exc.code},
    )

@router.post("", status_code=201, response_model=UserResponse)
async def create_user(data: CreateUserRequest, service: UserService = Depends(get_user_service)):
    try:
        return await service.create_user(data)
    except ServiceError as exc:
        raise to_http_error(exc) from exc

@router.post("/credentials/validate", response_model=ValidateCredentialsResponse)
async def validate_credentials(data: ValidateCredentialsRequest, service: UserService = Depends(get_user_service)):
    try:
        return await service.validate_credentials(data)
    except ServiceError as exc:
        raise to_http_error(exc) from exc

@router.get("/{user_uuid}", response_model=UserResponse)
async def get_user(user_uuid: str, service: UserService = Depends(get_user_service)):
    try:
        return await service.get_user(user_uuid)
    except ServiceError as exc:
        raise to_http_error(exc) from exc

@router.put("/{user_uuid}", response_model=UserResponse)
async def update_user(user_uuid: str, data: UserUpdate, service: UserService = Depends(get_user_service)):
    try:
        return await service.update_user(UpdateUserRequest(uuid=user_uuid, **data.model_dump()))
    except ServiceError as exc:
        raise to_http_error(exc) from exc

@router.delete("/{user_uuid}", status_code=204)
async def delete_user(user_uuid: str, service: UserService = Depends(get_user_service)):
    try:
        await service.delete_user(DeleteUserRequest(uuid=user_uuid))
    except ServiceError as exc:
        raise to_http_error(exc) from exc
