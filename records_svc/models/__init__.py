"""
Domain models for the records service.

Plain dataclasses mapped one-to-one onto SQLite tables.
"""
from models.base import Entity
from models.doctor import Doctor
from models.medical_history import MedicalHistory
from models.patient import Patient
from models.user import User

__all__ = ["Entity", "Doctor", "MedicalHistory", "Patient", "User"]
