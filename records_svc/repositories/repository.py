"""
Generic repository for one entity type.

Architecture:
    Repository[T] is the data access object for a single table. Instances
    are created by, and belong to, a UnitOfWork; they read through the unit
    of work's connection and stage writes in it. Nothing reaches the
    durable store until UnitOfWork.commit().

All SQL is encapsulated in the repository layer - no SQL in service or API layers.
"""
import logging
from typing import TYPE_CHECKING, Generic, List, Optional, Type, TypeVar

from models.base import Entity
from repositories.query import Condition, Field, Query

if TYPE_CHECKING:
    from repositories.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Entity)


class Repository(Generic[T]):
    """
    Repository for CRUD operations on a single entity type.

    Reads:
        get_by_id, get_all, find_where, query
    Staged writes (applied on UnitOfWork.commit()):
        add, update, delete
    """

    def __init__(self, entity: Type[T], session: "UnitOfWork"):
        """
        Initialize the repository.

        Args:
            entity: Entity class this repository serves.
            session: Owning unit of work. Injected by UnitOfWork itself.
        """
        self.entity = entity
        self._session = session

    def __repr__(self) -> str:
        return f"Repository({self.entity.__name__})"

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_by_id(self, entity_id: int) -> Optional[T]:
        """
        Point lookup by surrogate identity.

        Returns:
            The entity, or None if no row has this id. Callers decide
            whether absence is an error.
        """
        return self.query().where(Field("id") == entity_id).first()

    def get_all(self) -> List[T]:
        """Materialize every row. Intended for small or administrative reads."""
        return self.query().all()

    def find_where(self, condition: Condition) -> List[T]:
        """
        Return all entities matching a predicate.

        The predicate is compiled into the WHERE clause, so filtering
        happens in the store.
        """
        return self.query().where(condition).all()

    def query(self) -> Query[T]:
        """Return an unexecuted query over all rows of this entity type."""
        return Query(self.entity, self._session)

    # -------------------------------------------------------------------------
    # Staged writes
    # -------------------------------------------------------------------------

    def _check_type(self, entity: T) -> None:
        if not isinstance(entity, self.entity):
            raise TypeError(
                f"{self!r} cannot stage a {type(entity).__name__}"
            )

    def add(self, entity: T) -> None:
        """
        Stage an insert. The store assigns the id on commit.

        Raises:
            ValueError: If the entity already has an identity.
        """
        self._check_type(entity)
        if entity.is_persisted:
            raise ValueError(
                f"{self.entity.__name__} already has id {entity.id}; use update() instead"
            )
        self._session.stage_add(entity)

    def update(self, entity: T) -> None:
        """
        Stage a full-row update keyed by the entity's id.

        A missing row surfaces as NotFoundError from UnitOfWork.commit().
        """
        self._check_type(entity)
        if not entity.is_persisted:
            raise ValueError(f"Cannot update an unpersisted {self.entity.__name__}")
        self._session.stage_update(entity)

    def delete(self, entity: T) -> None:
        """
        Stage a delete keyed by the entity's id.

        A missing row surfaces as NotFoundError from UnitOfWork.commit().
        """
        self._check_type(entity)
        if not entity.is_persisted:
            raise ValueError(f"Cannot delete an unpersisted {self.entity.__name__}")
        self._session.stage_delete(entity)
