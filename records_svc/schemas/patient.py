"""
Pydantic schemas for patient-related API operations.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from schemas.pagination import ListParams, PageResponse
from schemas.sanitize import clean_email, clean_identifier, clean_name, require


class PatientBase(BaseModel):
    """Fields shared by patient create and update payloads.

    Values are sanitized on validation: markup is removed, names keep only
    letters and spaces, the identification number keeps only letters and
    digits, and the email is lower-cased.
    """
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Patient full name",
        examples=["John Doe"]
    )
    id_number: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="External identification number (must be unique)",
        examples=["AB123456"]
    )
    email: EmailStr = Field(
        ...,
        description="Contact email",
        examples=["john.doe@example.com"]
    )
    birth_date: date = Field(..., description="Date of birth", examples=["1985-04-12"])

    @field_validator("name")
    @classmethod
    def _sanitize_name(cls, value: str) -> str:
        return require(clean_name(value), "Name is required.")

    @field_validator("id_number")
    @classmethod
    def _sanitize_id_number(cls, value: str) -> str:
        return require(clean_identifier(value), "Identification is required.")

    @field_validator("email")
    @classmethod
    def _sanitize_email(cls, value: str) -> str:
        return clean_email(value)


class PatientCreate(PatientBase):
    """Schema for creating a new patient."""


class PatientUpdate(PatientBase):
    """Schema for replacing a patient. `id` must match the id in the path."""
    id: int = Field(..., description="Patient identifier (must match the path)", examples=[1])


class PatientResponse(BaseModel):
    """Schema for patient responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique patient identifier", examples=[1])
    name: str = Field(..., examples=["John Doe"])
    id_number: str = Field(..., examples=["AB123456"])
    email: str = Field(..., examples=["john.doe@example.com"])
    birth_date: date = Field(..., examples=["1985-04-12"])


class PatientFilter(ListParams):
    """Query parameters for listing patients."""
    name: Optional[str] = Field(None, description="Case-insensitive substring of the name")
    id_number: Optional[str] = Field(None, description="Case-sensitive substring of the identification number")
    sort_by: Optional[str] = Field("name", description="One of: name, birthdate")


PatientPage = PageResponse[PatientResponse]
