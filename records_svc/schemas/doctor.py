"""
Pydantic schemas for doctor-related API operations.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from schemas.pagination import ListParams, PageResponse
from schemas.sanitize import (
    clean_email,
    clean_identifier,
    clean_name,
    require,
    strip_markup,
)


class DoctorBase(BaseModel):
    """Fields shared by doctor create and update payloads (sanitized on validation)."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Gregory House"])
    license_number: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Medical license number (must be unique)",
        examples=["LIC12345"]
    )
    specialty: str = Field(..., min_length=1, max_length=100, examples=["Cardiology"])
    email: EmailStr = Field(..., examples=["house@example.com"])

    @field_validator("name")
    @classmethod
    def _sanitize_name(cls, value: str) -> str:
        return require(clean_name(value), "Name is required.")

    @field_validator("license_number")
    @classmethod
    def _sanitize_license_number(cls, value: str) -> str:
        return require(clean_identifier(value), "License Number is required.")

    @field_validator("specialty")
    @classmethod
    def _sanitize_specialty(cls, value: str) -> str:
        return require(strip_markup(value), "Specialty is required.")

    @field_validator("email")
    @classmethod
    def _sanitize_email(cls, value: str) -> str:
        return clean_email(value)


class DoctorCreate(DoctorBase):
    """Schema for creating a new doctor."""


class DoctorUpdate(DoctorBase):
    """Schema for replacing a doctor. `id` must match the id in the path."""
    id: int = Field(..., examples=[1])


class DoctorResponse(BaseModel):
    """Schema for doctor responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1])
    name: str
    license_number: str
    specialty: str
    email: str


class DoctorFilter(ListParams):
    """Query parameters for listing doctors."""
    name: Optional[str] = Field(None, description="Case-insensitive substring of the name")
    license_number: Optional[str] = Field(None, description="Case-sensitive substring of the license number")
    specialty: Optional[str] = Field(None, description="Case-insensitive substring of the specialty")
    sort_by: Optional[str] = Field("name", description="One of: name, specialty")


DoctorPage = PageResponse[DoctorResponse]
