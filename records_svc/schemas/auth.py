"""
Pydantic schemas for authentication.
"""
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials exchanged for an access token."""
    username: str = Field(..., min_length=1, max_length=100, examples=["admin"])
    password: str = Field(..., min_length=1, max_length=128)


class TokenResponse(BaseModel):
    """Bearer token returned by a successful login."""
    token: str = Field(..., description="JWT to send as 'Authorization: Bearer <token>'")
    token_type: str = Field("bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds", examples=[3600])


class TokenClaims(BaseModel):
    """Identity carried by a verified access token."""
    username: str
    role: str
    jti: str
