"""Authentication routes for registration, login and the caller's profile."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from app.decorators import timed
from app.dependencies import AuthServiceDep, CurrentUserDep
from app.managers import limiter
from app.managers.rate_limiter import AUTH_LIMIT, READ_LIMIT, WRITE_LIMIT
from app.schemas.auth import AuthResponse, ProfileResponse
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.user import UserCreate, UserLogin, UserUpdate

router = APIRouter(prefix="/auth", tags=["🔐 Auth"])

_USER_EXAMPLE = {
    "id": 1,
    "username": "johndoe",
    "email": "johndoe@example.com",
    "avatar": None,
    "created_at": "2025-01-01T10:00:00Z",
    "updated_at": "2025-01-01T10:00:00Z",
}

_UNAUTHORIZED = {
    "model": ErrorResponse,
    "description": "Missing, invalid or expired token",
    "content": {"application/json": {"example": {"error": "Access denied. No token provided."}}},
}
_RATE_LIMITED = {
    "description": "Rate limit exceeded",
    "content": {
        "application/json": {"example": {"error": "Too many requests, please try again later."}},
    },
}


@router.post(
    "/register",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account and receive an access token for it.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "User registered successfully",
                        "user": _USER_EXAMPLE,
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                    },
                },
            },
        },
        400: {"model": ErrorResponse, "description": "Validation failed"},
        409: {
            "model": ErrorResponse,
            "description": "Email or username already taken",
            "content": {
                "application/json": {"example": {"error": "User with this email already exists"}},
            },
        },
        429: _RATE_LIMITED,
    },
    operation_id="auth_register",
)
@timed("/auth/register")
@limiter.limit(AUTH_LIMIT)
async def register(
    request: Request,
    user_create: UserCreate,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context.
    user_create : UserCreate
        Username, email, password and optional avatar.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    AuthResponse
        The public user and a fresh access token.

    Raises
    ------
    DuplicateEntryError
        If the email or username is already taken.
    """
    user, token = await auth_service.register_user(user_create)
    return AuthResponse(
        message="User registered successfully",
        user=auth_service.user_repo.to_public(user),
        token=token,
    )


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    summary="Login for access token",
    description="Authenticate with email and password to obtain an access token.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Login successful",
                        "user": _USER_EXAMPLE,
                        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                    },
                },
            },
        },
        401: {
            "model": ErrorResponse,
            "description": "Unauthorized",
            "content": {"application/json": {"example": {"error": "Invalid credentials"}}},
        },
        429: _RATE_LIMITED,
    },
    operation_id="auth_login",
)
@timed("/auth/login")
@limiter.limit(AUTH_LIMIT)
async def login(
    request: Request,
    credentials: UserLogin,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Login with email and password.

    Raises
    ------
    InvalidCredentialsError
        If the email is unknown or the password is wrong.
    """
    user = await auth_service.authenticate_user(
        credentials.email,
        credentials.password.get_secret_value(),
    )
    return AuthResponse(
        message="Login successful",
        user=auth_service.user_repo.to_public(user),
        token=auth_service.create_token_for_user(user),
    )


@router.post(
    "/logout",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Logout",
    description="Tokens are stateless; the client discards its token.",
    operation_id="auth_logout",
)
@timed("/auth/logout")
async def logout(request: Request) -> MessageResponse:
    return MessageResponse(message="Logout successful")


@router.get(
    "/profile",
    response_class=ORJSONResponse,
    response_model=ProfileResponse,
    summary="Get current user profile",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Profile retrieved successfully", "user": _USER_EXAMPLE},
                },
            },
        },
        401: _UNAUTHORIZED,
    },
    operation_id="auth_get_profile",
)
@timed("/auth/profile")
@limiter.limit(READ_LIMIT)
async def get_profile(request: Request, current_user: CurrentUserDep) -> ProfileResponse:
    """
    Return the authenticated caller.

    Parameters
    ----------
    request : Request
        Current request context.
    current_user : UserResponse
        Caller resolved by the auth gate.

    Returns
    -------
    ProfileResponse
        Envelope with the public user.
    """
    return ProfileResponse(message="Profile retrieved successfully", user=current_user)


@router.put(
    "/profile",
    response_class=ORJSONResponse,
    response_model=ProfileResponse,
    summary="Update current user profile",
    description="Fields that are not sent keep their current value.",
    responses={
        400: {"model": ErrorResponse, "description": "Validation failed"},
        401: _UNAUTHORIZED,
        409: {
            "model": ErrorResponse,
            "description": "Username or email held by another user",
            "content": {
                "application/json": {"example": {"error": "Username or email already exists"}},
            },
        },
    },
    operation_id="auth_update_profile",
)
@timed("/auth/profile/update")
@limiter.limit(WRITE_LIMIT)
async def update_profile(
    request: Request,
    changes: UserUpdate,
    current_user: CurrentUserDep,
    auth_service: AuthServiceDep,
) -> ProfileResponse:
    """
    Update username, email or avatar of the caller.

    Raises
    ------
    DuplicateEntryError
        If another user holds the requested username or email.
    RecordNotFoundError
        If the caller was deleted concurrently.
    """
    updated = await auth_service.update_profile(current_user, changes)
    return ProfileResponse(
        message="Profile updated successfully",
        user=auth_service.user_repo.to_public(updated),
    )
