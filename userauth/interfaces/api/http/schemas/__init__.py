from .users import (
    CreateUserRequest,
    CreationResponse,
    LoginRequest,
    LoginResponse,
    UpdateUserRequest,
    UserResponse,
)

__all__ = [
    "CreateUserRequest",
    "CreationResponse",
    "LoginRequest",
    "LoginResponse",
    "UpdateUserRequest",
    "UserResponse",
]
