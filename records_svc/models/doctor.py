"""
Domain model for doctors.
"""
from dataclasses import dataclass
from typing import Optional

from models.base import Entity


@dataclass
class Doctor(Entity):
    """A doctor. `license_number` is unique across doctors."""

    __tablename__ = "doctors"
    __unique__ = {"license_number": "LicenseNumber"}

    name: str
    license_number: str
    specialty: str
    email: str
    id: Optional[int] = None
