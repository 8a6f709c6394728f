"""
Pydantic schemas shared by paginated list endpoints.
"""
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from core.config import DEFAULT_PAGE_SIZE

T = TypeVar("T")


class ListParams(BaseModel):
    """Paging and sorting query parameters common to every list endpoint."""

    page_number: int = Field(1, ge=1, description="1-based page index")
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, description="Rows per page")
    sort_by: Optional[str] = Field(None, description="Sort key; unknown keys fall back to the default")
    sort_descending: bool = Field(False, description="Sort in descending order")


class PageResponse(BaseModel, Generic[T]):
    """One page of results with pagination metadata."""

    total_records: int = Field(..., description="Rows matching the filters, before paging", examples=[12])
    total_pages: int = Field(..., description="ceil(total_records / page_size)", examples=[3])
    page_number: int = Field(..., examples=[1])
    page_size: int = Field(..., examples=[5])
    data: List[T] = Field(default_factory=list)
