"""
Service layer for user accounts and access tokens.

Passwords are stored as bcrypt hashes. Access tokens are HMAC-signed JWTs
carrying the username (`sub`), a random token id (`jti`) and the user's
role, bound to the configured issuer and audience.

Architecture:
    API Layer (routers/auth) → AuthService → UnitOfWork.users → Database
"""
import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, Optional

import bcrypt
import jwt

from core.config import Settings, settings as default_settings
from core.datetime_utils import utc_now
from core.exceptions import AuthenticationError
from models import User
from repositories import Field, UnitOfWork
from schemas import TokenClaims, TokenResponse
from services.integrity import IntegrityGuard

logger = logging.getLogger(__name__)

# bcrypt only consumes the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with a fresh bcrypt salt."""
    return bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], bcrypt.gensalt()).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:BCRYPT_MAX_BYTES],
            password_hash.encode("ascii"),
        )
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


class AuthService:
    """
    Account creation, credential checks and token issuing/verification.
    """

    def __init__(self, unit_of_work: UnitOfWork, config: Optional[Settings] = None):
        """
        Initialize the auth service.

        Args:
            unit_of_work: Request-scoped UnitOfWork.
                          Injected via core.dependencies.get_auth_service().
            config: Settings carrying the JWT configuration. Defaults to the
                    global settings instance.
        """
        self._uow = unit_of_work
        self._guard = IntegrityGuard(unit_of_work)
        self._config = config or default_settings

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def get_user(self, username: str) -> Optional[User]:
        return self._uow.users.query().where(Field("username") == username).first()

    def create_user(self, username: str, password: str, role: str = "user") -> User:
        """
        Register a user with a hashed password.

        Raises:
            ConflictError: If the username is taken.
        """
        self._guard.ensure_unique(self._uow.users, "username", username, "Username")

        user = User(username=username, password_hash=hash_password(password), role=role)
        self._uow.users.add(user)
        self._uow.commit()

        logger.info(f"User created: {username} (role={role})")
        return user

    def ensure_user(self, username: str, password: str, role: str = "admin") -> bool:
        """
        Create the user unless one with this username exists.

        Returns:
            bool: True if a user was created.
        """
        if self.get_user(username) is not None:
            logger.debug(f"User already present: {username}")
            return False
        self.create_user(username, password, role=role)
        return True

    # -------------------------------------------------------------------------
    # Tokens
    # -------------------------------------------------------------------------

    def authenticate(self, username: str, password: str) -> TokenResponse:
        """
        Exchange credentials for an access token.

        Unknown users and wrong passwords fail identically.

        Raises:
            AuthenticationError: "Invalid credentials."
        """
        user = self.get_user(username)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"username": username})
            raise AuthenticationError()

        logger.info(f"User logged in: {username}")
        return TokenResponse(
            token=self.create_token(user),
            expires_in=self._config.records_svc_jwt_expire_minutes * 60,
        )

    def create_token(self, user: User) -> str:
        now = utc_now()
        claims: Dict[str, Any] = {
            "sub": user.username,
            "jti": str(uuid.uuid4()),
            "role": user.role,
            "iss": self._config.records_svc_jwt_issuer,
            "aud": self._config.records_svc_jwt_audience,
            "iat": now,
            "exp": now + timedelta(minutes=self._config.records_svc_jwt_expire_minutes),
        }
        return jwt.encode(
            claims,
            self._config.records_svc_jwt_secret,
            algorithm=self._config.records_svc_jwt_algorithm,
        )

    def decode_token(self, token: str) -> TokenClaims:
        """
        Verify a token's signature, expiry, issuer and audience.

        Raises:
            AuthenticationError: If the token is invalid or expired.
        """
        try:
            payload = jwt.decode(
                token,
                self._config.records_svc_jwt_secret,
                algorithms=[self._config.records_svc_jwt_algorithm],
                audience=self._config.records_svc_jwt_audience,
                issuer=self._config.records_svc_jwt_issuer,
                options={"require": ["exp", "sub", "jti"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired access token")
            raise AuthenticationError("Token has expired.") from None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected invalid access token: {e}")
            raise AuthenticationError("Invalid token.") from None

        return TokenClaims(
            username=payload["sub"],
            role=payload.get("role", "user"),
            jti=payload["jti"],
        )
