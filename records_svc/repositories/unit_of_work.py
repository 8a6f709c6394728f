"""
Unit of work: one connection, one repository per entity, one atomic commit.

Architecture:
    UnitOfWork owns a single SQLite connection for its whole lifetime and
    builds a Repository for every entity type over it. Repositories read
    through the connection immediately and stage their writes here; commit()
    applies every staged change in a single transaction.

Lifecycle:
    with UnitOfWork(db) as uow:
        uow.patients.add(patient)
        uow.commit()            # patient.id is assigned here
    # connection released, further use raises StoreError

A UnitOfWork is scoped to one request and must not be shared between
concurrent callers. It never retries; every store failure is raised once.
"""
import enum
import logging
import re
import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from core.exceptions import (
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
    RecordsServiceError,
    StoreError,
)
from models import Doctor, Entity, MedicalHistory, Patient, User
from repositories.base import Database
from repositories.repository import Repository

logger = logging.getLogger(__name__)

ENTITIES: Tuple[Type[Entity], ...] = (Patient, Doctor, MedicalHistory, User)

_UNIQUE_FAILURE = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w.]+)")

# "patients.id_number" -> "IdNumber"
UNIQUE_LABELS: Dict[str, str] = {
    f"{entity.__tablename__}.{column}": label
    for entity in ENTITIES
    for column, label in entity.__unique__.items()
}


class ChangeKind(str, enum.Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingChange:
    """A staged write awaiting commit."""

    kind: ChangeKind
    entity: Entity


def translate_integrity_error(exc: sqlite3.IntegrityError) -> RecordsServiceError:
    """
    Map a SQLite constraint violation onto the domain error taxonomy.

    Unique violations on known columns become the same ConflictError the
    integrity guard raises; foreign key violations become
    InvalidReferenceError; anything else is a StoreError.
    """
    message = str(exc)
    match = _UNIQUE_FAILURE.search(message)
    if match and match.group("columns") in UNIQUE_LABELS:
        label = UNIQUE_LABELS[match.group("columns")]
        return ConflictError(f"{label} already exists.")
    if "FOREIGN KEY constraint failed" in message:
        return InvalidReferenceError("Referenced record does not exist.")
    return StoreError(operation="commit", constraint=message)


class UnitOfWork:
    """
    Transactional session over the records database.

    Attributes:
        patients: Repository[Patient]
        doctors: Repository[Doctor]
        medical_histories: Repository[MedicalHistory]
        users: Repository[User]
    """

    def __init__(self, db: Database):
        """
        Open the session.

        Args:
            db: Database instance providing connections.
                Injected via core.dependencies.get_unit_of_work().
        """
        self._db = db
        self._conn: Optional[sqlite3.Connection] = db.get_connection()
        self._pending: List[PendingChange] = []

        self.patients: Repository[Patient] = Repository(Patient, self)
        self.doctors: Repository[Doctor] = Repository(Doctor, self)
        self.medical_histories: Repository[MedicalHistory] = Repository(MedicalHistory, self)
        self.users: Repository[User] = Repository(User, self)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._conn is None

    @property
    def pending(self) -> Tuple[PendingChange, ...]:
        return tuple(self._pending)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError(operation="access after the unit of work was closed")
        return self._conn

    def close(self) -> None:
        """Release the connection. Uncommitted changes are discarded."""
        if self._conn is None:
            return
        if self._pending:
            logger.warning(
                "Closing unit of work with uncommitted changes",
                extra={"discarded": len(self._pending)}
            )
            self._pending.clear()
        self._conn.close()
        self._conn = None

    # -------------------------------------------------------------------------
    # Reads (used by Repository and Query)
    # -------------------------------------------------------------------------

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Tuple[Any, ...]]:
        conn = self._connection()
        try:
            return conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Query failed: {e}", extra={"sql": sql})
            raise StoreError(operation="query") from e

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Tuple[Any, ...]]:
        conn = self._connection()
        try:
            return conn.execute(sql, tuple(params)).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Query failed: {e}", extra={"sql": sql})
            raise StoreError(operation="query") from e

    # -------------------------------------------------------------------------
    # Staging (used by Repository)
    # -------------------------------------------------------------------------

    def _stage(self, kind: ChangeKind, entity: Entity) -> None:
        self._connection()
        self._pending.append(PendingChange(kind, entity))

    def stage_add(self, entity: Entity) -> None:
        self._stage(ChangeKind.ADD, entity)

    def stage_update(self, entity: Entity) -> None:
        self._stage(ChangeKind.UPDATE, entity)

    def stage_delete(self, entity: Entity) -> None:
        self._stage(ChangeKind.DELETE, entity)

    # -------------------------------------------------------------------------
    # Commit
    # -------------------------------------------------------------------------

    def _apply(self, cursor: sqlite3.Cursor, change: PendingChange) -> int:
        entity = change.entity
        table = entity.__tablename__
        columns = entity.data_columns()

        if change.kind is ChangeKind.ADD:
            placeholders = ", ".join("?" for _ in columns)
            cursor.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                entity.to_row(),
            )
            return cursor.rowcount

        if change.kind is ChangeKind.UPDATE:
            assignments = ", ".join(f"{column} = ?" for column in columns)
            cursor.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                entity.to_row() + (entity.id,),
            )
        else:
            cursor.execute(f"DELETE FROM {table} WHERE id = ?", (entity.id,))

        if cursor.rowcount == 0:
            raise NotFoundError(f"{entity.label()} not found.", id=entity.id)
        return cursor.rowcount

    def commit(self) -> int:
        """
        Apply all staged changes atomically.

        Returns:
            int: Number of rows inserted, updated or deleted.

        Raises:
            ConflictError: A unique constraint was violated.
            InvalidReferenceError: A foreign key did not resolve.
            NotFoundError: An updated or deleted row does not exist.
            StoreError: Any other store failure.

        On failure the transaction is rolled back, nothing persists and the
        staged changes are discarded.
        """
        conn = self._connection()
        changes, self._pending = self._pending, []
        if not changes:
            return 0

        assigned: List[Tuple[Entity, int]] = []
        affected = 0
        cursor = conn.cursor()
        try:
            cursor.execute("BEGIN")
            for change in changes:
                affected += self._apply(cursor, change)
                if change.kind is ChangeKind.ADD:
                    assigned.append((change.entity, cursor.lastrowid))
            conn.commit()
        except sqlite3.IntegrityError as e:
            conn.rollback()
            error = translate_integrity_error(e)
            logger.warning(
                f"Commit rejected by constraint: {e}. Transaction rolled back.",
                extra={"kind": error.kind.value}
            )
            raise error from e
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Commit failed: {e}. Transaction rolled back.")
            raise StoreError(operation="commit") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()

        # Identities become visible only once the rows are durable
        for entity, new_id in assigned:
            entity.id = new_id

        logger.info(
            f"Committed {len(changes)} staged change(s)",
            extra={"affected_rows": affected}
        )
        return affected
