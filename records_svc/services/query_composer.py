"""
Filter -> sort -> count -> paginate pipeline for list endpoints.

Every step is applied to a lazy Query, so filtering, ordering, counting
and paging all run inside SQLite; only the requested page is materialized.

Usage:
    page = compose_page(
        uow.patients.query().select("id", "name"),
        conditions=[Field("name").icontains("ali")],
        sort=PATIENT_SORT.resolve("birthdate", descending=True),
        page_number=1,
        page_size=5,
    )
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Generic, Iterable, List, Mapping, Optional, TypeVar

from repositories.query import Condition, Query

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Appended to every sort so rows with equal keys keep a stable order across pages
TIE_BREAKER = "id"


@dataclass(frozen=True)
class Sort:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class SortOptions:
    """
    Allow-list of sort keys for one entity.

    Attributes:
        allowed: Lower-case request key -> column name.
        default: Request key used when the requested key is missing or unknown.
    """

    allowed: Mapping[str, str]
    default: str

    def resolve(self, sort_by: Optional[str], descending: bool = False) -> Sort:
        key = (sort_by or "").strip().lower()
        if key not in self.allowed:
            if key:
                logger.debug(
                    "Unknown sort key, using default",
                    extra={"sort_by": sort_by, "default": self.default}
                )
            key = self.default
        return Sort(self.allowed[key], descending)


@dataclass
class Page(Generic[R]):
    """One page of results plus pagination metadata."""

    total_records: int
    total_pages: int
    page_number: int
    page_size: int
    data: List[R] = field(default_factory=list)


def total_pages(total_records: int, page_size: int) -> int:
    return math.ceil(total_records / page_size)


def apply_sort(query: Query, sort: Sort) -> Query:
    query = query.order_by(sort.column, descending=sort.descending)
    if sort.column != TIE_BREAKER:
        query = query.order_by(TIE_BREAKER)
    return query


def compose_page(
    query: Query,
    conditions: Iterable[Condition],
    sort: Sort,
    page_number: int,
    page_size: int,
) -> Page:
    """
    Run the list pipeline against a (possibly projected) query.

    Args:
        query: Starting query, usually narrowed with select().
        conditions: Filters to AND together; callers omit absent filters.
        sort: Resolved sort key and direction.
        page_number: 1-based page index.
        page_size: Rows per page.

    Raises:
        ValueError: If page_number or page_size is below 1.
    """
    if page_number < 1:
        raise ValueError(f"page_number must be >= 1, got {page_number}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    filtered = query.where(*conditions)
    total_records = filtered.count()

    page_query = (
        apply_sort(filtered, sort)
        .skip((page_number - 1) * page_size)
        .take(page_size)
    )
    data = page_query.all()

    logger.debug(
        "Composed page",
        extra={
            "entity": query.entity.__name__,
            "filters": len(filtered.conditions),
            "sort": sort.column,
            "descending": sort.descending,
            "page_number": page_number,
            "page_size": page_size,
            "total_records": total_records,
        }
    )
    return Page(
        total_records=total_records,
        total_pages=total_pages(total_records, page_size),
        page_number=page_number,
        page_size=page_size,
        data=data,
    )

