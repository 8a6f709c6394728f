"""
Shared behaviour for domain entities.

Entities are plain dataclasses. Each concrete entity declares the table it
lives in and, where a column needs converting on the way out of SQLite, a
parser for that column. The generic repository relies only on what is
defined here, so adding an entity never touches the data-access layer.
"""
from dataclasses import asdict, fields
from typing import Any, Callable, ClassVar, Dict, Tuple, Type, TypeVar

from core.datetime_utils import to_db_value

E = TypeVar("E", bound="Entity")


class Entity:
    """
    Base class for persisted records with a store-assigned integer identity.

    Subclasses are dataclasses declaring `id: Optional[int] = None` as their
    last field; the id stays None until the owning unit of work commits.
    """

    __tablename__: ClassVar[str] = ""
    # Human-readable name used in error messages; defaults to the class name
    __label__: ClassVar[str] = ""
    # column name -> callable converting the raw SQLite value
    __parsers__: ClassVar[Dict[str, Callable[[Any], Any]]] = {}
    # column name -> label for columns carrying a UNIQUE constraint
    __unique__: ClassVar[Dict[str, str]] = {}

    @classmethod
    def label(cls) -> str:
        return cls.__label__ or cls.__name__

    @classmethod
    def columns(cls) -> Tuple[str, ...]:
        """All column names, identity first."""
        names = [f.name for f in fields(cls)]
        names.remove("id")
        return ("id", *names)

    @classmethod
    def data_columns(cls) -> Tuple[str, ...]:
        """Column names excluding the identity."""
        return cls.columns()[1:]

    def to_row(self) -> Tuple[Any, ...]:
        """Values for data_columns(), converted for storage."""
        return tuple(to_db_value(getattr(self, name)) for name in self.data_columns())

    @classmethod
    def parse_column(cls, name: str, value: Any) -> Any:
        parser = cls.__parsers__.get(name)
        if parser is None or value is None:
            return value
        return parser(value)

    @classmethod
    def from_row(cls: Type[E], row: Tuple[Any, ...]) -> E:
        """
        Create an entity from a database row.

        Args:
            row: Tuple of column values in columns() order.
        """
        values = {
            name: cls.parse_column(name, value)
            for name, value in zip(cls.columns(), row)
        }
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entity to a plain dictionary."""
        return asdict(self)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None
