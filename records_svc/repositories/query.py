"""
Composable, lazy queries over a single entity table.

A Query is an immutable description (projection, predicates, ordering,
offset, limit). Every builder method returns a new Query and never touches
the database; SQL is only executed by the terminal methods all(), first(),
count() and exists(). All filtering, ordering and paging happen inside
SQLite.

Predicates are built from Field objects:

    from repositories.query import Field

    condition = Field("name").icontains("ali") & (Field("id") != 3)
    patients = uow.patients.query().where(condition).order_by("name").all()

Column names are validated against the entity's columns when a Query is
built; values are always bound as parameters.
"""
from dataclasses import dataclass, field, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    FrozenSet,
    Generic,
    Iterable,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from core.datetime_utils import to_db_value
from models.base import Entity

if TYPE_CHECKING:
    from repositories.unit_of_work import UnitOfWork

T = TypeVar("T", bound=Entity)


# =============================================================================
# PREDICATES
# =============================================================================

@dataclass(frozen=True)
class Condition:
    """A boolean SQL fragment with its bound parameters and referenced columns."""

    sql: str
    params: Tuple[Any, ...] = ()
    fields: FrozenSet[str] = frozenset()

    def __and__(self, other: "Condition") -> "Condition":
        return Condition(
            f"({self.sql}) AND ({other.sql})",
            self.params + other.params,
            self.fields | other.fields,
        )

    def __or__(self, other: "Condition") -> "Condition":
        return Condition(
            f"({self.sql}) OR ({other.sql})",
            self.params + other.params,
            self.fields | other.fields,
        )

    def __invert__(self) -> "Condition":
        return Condition(f"NOT ({self.sql})", self.params, self.fields)


class Field:
    """
    Reference to an entity column, used to build Conditions.

    Comparison operators return Conditions instead of booleans, so Field
    instances are not hashable.
    """

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"Field({self.name!r})"

    def _compare(self, operator: str, value: Any) -> Condition:
        return Condition(
            f"{self.name} {operator} ?",
            (to_db_value(value),),
            frozenset({self.name}),
        )

    def __eq__(self, value: Any) -> Condition:  # type: ignore[override]
        if value is None:
            return Condition(f"{self.name} IS NULL", (), frozenset({self.name}))
        return self._compare("=", value)

    def __ne__(self, value: Any) -> Condition:  # type: ignore[override]
        if value is None:
            return Condition(f"{self.name} IS NOT NULL", (), frozenset({self.name}))
        return self._compare("<>", value)

    def __lt__(self, value: Any) -> Condition:
        return self._compare("<", value)

    def __le__(self, value: Any) -> Condition:
        return self._compare("<=", value)

    def __gt__(self, value: Any) -> Condition:
        return self._compare(">", value)

    def __ge__(self, value: Any) -> Condition:
        return self._compare(">=", value)

    __hash__ = None  # type: ignore[assignment]

    def contains(self, text: str) -> Condition:
        """Case-sensitive literal substring match."""
        return Condition(
            f"instr({self.name}, ?) > 0",
            (text,),
            frozenset({self.name}),
        )

    def icontains(self, text: str) -> Condition:
        """Case-insensitive substring match (Unicode casefolding)."""
        return Condition(
            f"instr(casefold({self.name}), casefold(?)) > 0",
            (text,),
            frozenset({self.name}),
        )

    def in_(self, values: Iterable[Any]) -> Condition:
        values = tuple(to_db_value(v) for v in values)
        if not values:
            return Condition("0 = 1")
        placeholders = ", ".join("?" for _ in values)
        return Condition(
            f"{self.name} IN ({placeholders})",
            values,
            frozenset({self.name}),
        )


def conjunction(conditions: Iterable[Condition]) -> Optional[Condition]:
    """AND together any number of conditions; None when there are none."""
    combined: Optional[Condition] = None
    for condition in conditions:
        combined = condition if combined is None else combined & condition
    return combined


# =============================================================================
# QUERY
# =============================================================================

@dataclass(frozen=True)
class Ordering:
    field: str
    descending: bool = False

    def to_sql(self) -> str:
        return f"{self.field} {'DESC' if self.descending else 'ASC'}"


@dataclass(frozen=True)
class Query(Generic[T]):
    """
    Immutable, unexecuted query over all rows of one entity type.

    Unprojected queries materialize entities; queries narrowed with
    select() materialize dicts holding only the selected columns.
    """

    entity: Type[T]
    session: "UnitOfWork" = field(compare=False, repr=False)
    projection: Tuple[str, ...] = ()
    conditions: Tuple[Condition, ...] = ()
    ordering: Tuple[Ordering, ...] = ()
    offset: int = 0
    limit: Optional[int] = None

    # -------------------------------------------------------------------------
    # Builders (pure)
    # -------------------------------------------------------------------------

    def _check_columns(self, names: Iterable[str]) -> None:
        unknown = set(names) - set(self.entity.columns())
        if unknown:
            raise ValueError(
                f"Unknown column(s) for {self.entity.__name__}: {', '.join(sorted(unknown))}"
            )

    def select(self, *fields: str) -> "Query[T]":
        self._check_columns(fields)
        return replace(self, projection=tuple(fields))

    def where(self, *conditions: Condition) -> "Query[T]":
        for condition in conditions:
            self._check_columns(condition.fields)
        return replace(self, conditions=self.conditions + tuple(conditions))

    def order_by(self, field: str, descending: bool = False) -> "Query[T]":
        """Append a sort key; earlier keys take precedence."""
        self._check_columns([field])
        return replace(self, ordering=self.ordering + (Ordering(field, descending),))

    def skip(self, count: int) -> "Query[T]":
        if count < 0:
            raise ValueError(f"skip() requires a non-negative count, got {count}")
        return replace(self, offset=count)

    def take(self, count: int) -> "Query[T]":
        if count < 0:
            raise ValueError(f"take() requires a non-negative count, got {count}")
        return replace(self, limit=count)

    # -------------------------------------------------------------------------
    # SQL compilation
    # -------------------------------------------------------------------------

    @property
    def selected_columns(self) -> Tuple[str, ...]:
        return self.projection or self.entity.columns()

    def _where_clause(self) -> Tuple[str, Tuple[Any, ...]]:
        combined = conjunction(self.conditions)
        if combined is None:
            return "", ()
        return f" WHERE {combined.sql}", combined.params

    def to_sql(self) -> Tuple[str, Tuple[Any, ...]]:
        """Compile to a parameterized SELECT statement."""
        where, params = self._where_clause()
        sql = (
            f"SELECT {', '.join(self.selected_columns)} "
            f"FROM {self.entity.__tablename__}{where}"
        )
        if self.ordering:
            sql += " ORDER BY " + ", ".join(o.to_sql() for o in self.ordering)
        if self.limit is not None:
            sql += " LIMIT ?"
            params += (self.limit,)
        elif self.offset:
            # SQLite only accepts OFFSET after a LIMIT
            sql += " LIMIT -1"
        if self.offset:
            sql += " OFFSET ?"
            params += (self.offset,)
        return sql, params

    def to_count_sql(self) -> Tuple[str, Tuple[Any, ...]]:
        """Compile a COUNT(*) over the filtered rows; ordering and paging are ignored."""
        where, params = self._where_clause()
        return f"SELECT COUNT(*) FROM {self.entity.__tablename__}{where}", params

    # -------------------------------------------------------------------------
    # Terminal operations
    # -------------------------------------------------------------------------

    def _materialize(self, row: Tuple[Any, ...]) -> Union[T, Dict[str, Any]]:
        if not self.projection:
            return self.entity.from_row(row)
        return {
            name: self.entity.parse_column(name, value)
            for name, value in zip(self.projection, row)
        }

    def all(self) -> List[Union[T, Dict[str, Any]]]:
        sql, params = self.to_sql()
        return [self._materialize(row) for row in self.session.fetch_all(sql, params)]

    def first(self) -> Optional[Union[T, Dict[str, Any]]]:
        results = self.take(1).all()
        return results[0] if results else None

    def count(self) -> int:
        sql, params = self.to_count_sql()
        row = self.session.fetch_one(sql, params)
        return row[0] if row else 0

    def exists(self) -> bool:
        where, params = self._where_clause()
        sql = f"SELECT 1 FROM {self.entity.__tablename__}{where} LIMIT 1"
        return self.session.fetch_one(sql, params) is not None
