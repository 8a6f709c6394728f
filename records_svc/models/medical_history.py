"""
Domain model for medical history entries.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.datetime_utils import parse_datetime
from models.base import Entity


@dataclass
class MedicalHistory(Entity):
    """
    One diagnosis/treatment entry linking a patient and a doctor.

    Both foreign ids must resolve to existing rows when the entry is written.
    """

    __tablename__ = "medical_histories"
    __label__ = "Medical history"
    __parsers__ = {"date": parse_datetime}

    patient_id: int
    doctor_id: int
    date: datetime
    diagnosis: str
    treatment: str
    id: Optional[int] = None
