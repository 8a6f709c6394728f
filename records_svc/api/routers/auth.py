"""
Auth router - exchanges credentials for a bearer token.

This is the only /api/v1 router that does not require authentication.
"""
import logging

from fastapi import APIRouter, Depends

from core.dependencies import get_auth_service
from schemas import LoginRequest, TokenResponse
from services import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["Auth"],
)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    description="Validate username and password and return a signed access token. Returns 401 on bad credentials."
)
def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Log in with username and password.

    - **username**: Account name
    - **password**: Account password

    Returns `{"token": ...}`; send it as `Authorization: Bearer <token>`.
    Raises 401 with "Invalid credentials." for an unknown user or wrong password.
    """
    return auth_service.authenticate(credentials.username, credentials.password)
