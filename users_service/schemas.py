from pydantic import BaseModel, Field, SecretStr


# Identifiers are accepted as plain strings on purpose: the service layer
# owns identifier validation so that malformed ids map to InvalidArgument
# rather than a transport-level 422.


# --- User ---

class AuditFields(BaseModel):
    created_by: str
    created_at: int
    updated_by: str | None = None
    updated_at: int | None = None


class UserResponse(BaseModel):
    uuid: str
    username: str
    email: str
    audit_fields: AuditFields


class CreateUserRequest(BaseModel):
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: SecretStr


class UserUpdate(BaseModel):
    username: str | None = Field(None, max_length=100)
    email: str | None = Field(None, max_length=255)


class UpdateUserRequest(UserUpdate):
    uuid: str


class DeleteUserRequest(BaseModel):
    uuid: str


# --- Credentials ---

class ValidateCredentialsRequest(BaseModel):
    """Exactly one of ``email`` / ``username`` selects the lookup mode."""
    email: str | None = None
    username: str | None = None
    password: SecretStr


class ValidateCredentialsResponse(BaseModel):
    user: UserResponse
    is_valid: bool


# --- Follows ---

class FollowRequest(BaseModel):
    follower: str
    followed: str
    type: str | None = None


# --- Misc ---

class HealthResponse(BaseModel):
    status: str
    version: str
