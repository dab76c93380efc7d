from __future__ import annotations

from fastapi import APIRouter, Request, status

from app.api.openapi_responses import ErrorExample, error_responses, rate_limited_response
from app.api.schemas.admin_request_models import AdminLoginRequest
from app.api.schemas.admin_response_models import AdminTokenResponse
from app.core.auth import create_admin_token
from app.core.errors import build_http_error
from app.core.rate_limit import ADMIN_LOGIN_RATE_LIMIT, limit, rate_limit_ip_key
from app.services.auth_service import (
    AuthenticationError,
    InvalidCredentialsError,
    PasswordTooLongError,
    authenticate_admin,
)

router = APIRouter()


@router.post(
    "/login",
    summary="Admin login",
    description="Exchange the dashboard admin credentials for a bearer token.",
    response_model=AdminTokenResponse,
    responses={
        **error_responses(
            ErrorExample(
                status_code=status.HTTP_401_UNAUTHORIZED,
                error="invalid_credentials",
                message="Invalid credentials",
                description="Invalid credentials",
            )
        ),
        **rate_limited_response(),
    },
)
@limit(ADMIN_LOGIN_RATE_LIMIT, key_func=rate_limit_ip_key)
async def login(request: Request, credentials: AdminLoginRequest) -> AdminTokenResponse:
    """Authenticate the admin and return a JWT token."""
    try:
        username = authenticate_admin(credentials.username, credentials.password)
    except AuthenticationError as e:
        if isinstance(e, InvalidCredentialsError):
            status_code = status.HTTP_401_UNAUTHORIZED
        elif isinstance(e, PasswordTooLongError):
            status_code = status.HTTP_422_UNPROCESSABLE_CONTENT
        else:
            status_code = status.HTTP_400_BAD_REQUEST
        headers = (
            {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
        )
        raise build_http_error(
            status_code=status_code,
            error=e.error_code,
            message=str(e),
            headers=headers,
        ) from e

    return AdminTokenResponse(access_token=create_admin_token(username), username=username)
