"""
Pydantic schemas for medical history API operations.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.pagination import ListParams, PageResponse
from schemas.sanitize import require, strip_markup


class MedicalHistoryBase(BaseModel):
    """Fields shared by medical history create and update payloads.

    `patient_id` and `doctor_id` must reference existing rows; that is
    checked by the service, not here.
    """
    patient_id: int = Field(..., ge=1, examples=[1])
    doctor_id: int = Field(..., ge=1, examples=[1])
    date: datetime = Field(..., description="When the consultation took place", examples=["2025-01-01T10:00:00Z"])
    diagnosis: str = Field(..., min_length=1, max_length=500, examples=["Hypertension"])
    treatment: str = Field(..., min_length=1, max_length=1000, examples=["Lisinopril 10mg daily"])

    @field_validator("diagnosis", "treatment")
    @classmethod
    def _sanitize_text(cls, value: str) -> str:
        return require(strip_markup(value), "Value is required.")


class MedicalHistoryCreate(MedicalHistoryBase):
    """Schema for creating a medical history entry."""


class MedicalHistoryUpdate(MedicalHistoryBase):
    """Schema for replacing a medical history entry. `id` must match the path."""
    id: int = Field(..., examples=[1])


class MedicalHistoryResponse(BaseModel):
    """Schema for medical history responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    patient_id: int
    doctor_id: int
    date: datetime
    diagnosis: str
    treatment: str


class MedicalHistoryFilter(ListParams):
    """Query parameters for listing medical histories."""
    patient_id: Optional[int] = Field(None, description="Exact patient id")
    doctor_id: Optional[int] = Field(None, description="Exact doctor id")
    start_date: Optional[datetime] = Field(None, description="Inclusive lower bound on date")
    end_date: Optional[datetime] = Field(None, description="Inclusive upper bound on date")
    diagnosis: Optional[str] = Field(None, description="Case-insensitive substring of the diagnosis")
    sort_by: Optional[str] = Field("date", description="One of: date, diagnosis")


MedicalHistoryPage = PageResponse[MedicalHistoryResponse]
