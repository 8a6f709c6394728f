"""
Authentication module for the Patient Records API.

Provides bearer token authentication for securing endpoints. Tokens are
issued by POST /api/v1/auth/login and verified by AuthService.
"""
import logging
from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.dependencies import get_auth_service
from core.exceptions import AuthenticationError
from schemas import TokenClaims
from services import AuthService

logger = logging.getLogger(__name__)

# Create the bearer token security scheme
bearer_scheme = HTTPBearer(
    auto_error=False,  # Missing credentials are reported as AuthenticationError
    description="Access token from /api/v1/auth/login. Send as 'Authorization: Bearer <token>'.",
)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenClaims:
    """
    Verify the bearer token from the Authorization header.

    This dependency should be used on all protected endpoints.

    Returns:
        TokenClaims: Identity of the caller.

    Raises:
        AuthenticationError: 401 if the token is missing, malformed,
            expired or signed for another issuer/audience.
    """
    if credentials is None:
        logger.warning("API request without bearer token")
        raise AuthenticationError("Missing bearer token.")

    return auth_service.decode_token(credentials.credentials)
