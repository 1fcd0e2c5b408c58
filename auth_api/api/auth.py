"""
Authentication API endpoints.

This module provides endpoints for:
- User registration
- Login (JWT access token + opaque refresh token)
- Token refresh (with rotation)
- Logout (revoke all refresh tokens)
- Current user profile
- Password change (revokes all sessions)
"""

from fastapi import APIRouter, Response, status

from auth_api.core.auth import AuthServiceDep, CurrentClaims, CurrentUser
from auth_api.schemas.auth import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    PasswordChangeRequest,
    RefreshRequest,
    RegisterRequest,
    UserResponse,
)
from auth_api.services.auth import AuthResult

router = APIRouter(prefix="/auth", tags=["Authentication"])

_UNAUTHORIZED = {status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse}}


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        expires_in=result.expires_in,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    },
)
async def register(request_data: RegisterRequest, service: AuthServiceDep) -> AuthResponse:
    """Create an account (role USER) and return a fresh token pair."""
    result = await service.register(
        email=request_data.email,
        password=request_data.password,
        first_name=request_data.first_name,
        last_name=request_data.last_name,
    )
    return _to_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={**_UNAUTHORIZED, status.HTTP_403_FORBIDDEN: {"model": ErrorResponse}},
)
async def login(credentials: LoginRequest, service: AuthServiceDep) -> AuthResponse:
    """
    Authenticate with email and password.

    Unknown email and wrong password produce the same 401 INVALID_CREDENTIALS.
    A disabled account gets 403 ACCOUNT_DISABLED.
    """
    result = await service.login(credentials.email, credentials.password)
    return _to_response(result)


@router.post("/refresh", response_model=AuthResponse, responses=_UNAUTHORIZED)
async def refresh_token(request_data: RefreshRequest, service: AuthServiceDep) -> AuthResponse:
    """
    Exchange a refresh token for a new token pair.

    The presented refresh token is consumed (rotation); reusing it fails with
    401 INVALID_OR_EXPIRED and the client must log in again.
    """
    result = await service.refresh(request_data.refresh_token)
    return _to_response(result)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, responses=_UNAUTHORIZED)
async def logout(claims: CurrentClaims, service: AuthServiceDep) -> Response:
    """
    Revoke every refresh token of the current user.

    The presented access token is not revoked; it expires naturally.
    """
    await service.logout(claims.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/me",
    response_model=UserResponse,
    responses={**_UNAUTHORIZED, status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """Profile of the user the access token was issued to."""
    return UserResponse(
        id=current_user.id,
        email=current_user.email,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        role=current_user.role,
    )


@router.post(
    "/change-password",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_UNAUTHORIZED, status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def change_password(
    request_data: PasswordChangeRequest,
    claims: CurrentClaims,
    service: AuthServiceDep,
) -> Response:
    """Change the password and revoke all refresh tokens (force re-login everywhere)."""
    await service.change_password(
        claims.user_id, request_data.current_password, request_data.new_password
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
