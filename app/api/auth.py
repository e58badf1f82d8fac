"""Authentication API endpoints."""

from fastapi import APIRouter, Depends
from fastapi import status as http_status

from app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    RegisterRequest,
    UserResponse,
)
from app.services.user_service import UserService
from app.utils.dependencies import dependencies, get_current_user_id

router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


@router.post("/register", status_code=http_status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    service: UserService = Depends(dependencies.user),
) -> AuthResponse:
    """Create an account and return it with a bearer token.

    Raises:
        InvalidInputError: If a field is missing.
        DuplicateRecordError: If the e-mail is already registered.
    """
    result = await service.register(data.email, data.password, data.full_name)
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


@router.post("/login")
async def login(
    data: LoginRequest,
    service: UserService = Depends(dependencies.user),
) -> AuthResponse:
    """Exchange credentials for a bearer token."""
    result = await service.login(data.email, data.password)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


@router.get("/me")
async def me(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(dependencies.user),
) -> MeResponse:
    """Return the authenticated user."""
    user = await service.get_me(user_id)
    return MeResponse(user=UserResponse.model_validate(user))
