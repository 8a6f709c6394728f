"""
Domain model for patients.
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.datetime_utils import parse_date
from models.base import Entity


@dataclass
class Patient(Entity):
    """A patient. `id_number` is the external identification and is unique."""

    __tablename__ = "patients"
    __parsers__ = {"birth_date": parse_date}
    __unique__ = {"id_number": "IdNumber"}

    name: str
    id_number: str
    email: str
    birth_date: date
    id: Optional[int] = None
