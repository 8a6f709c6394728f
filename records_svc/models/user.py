"""
Domain model for API users.
"""
from dataclasses import dataclass, field
from typing import Optional

from models.base import Entity


@dataclass
class User(Entity):
    """An account allowed to obtain access tokens."""

    __tablename__ = "users"
    __unique__ = {"username": "Username"}

    username: str
    password_hash: str = field(repr=False)
    role: str = "user"
    id: Optional[int] = None
