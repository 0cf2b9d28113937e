# python
"""State blob storage backends.

The stores persist their whole state as one JSON-compatible blob per storage
key. Any object with ``load(key)`` and ``save(key, blob)`` can serve as the
backend; this module ships an in-memory one and a SQLAlchemy one.
"""
import copy
import logging
from typing import Any, Optional, Protocol

from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings, StorageBackendEnum
from app.exceptions.project import PersistenceError
from models import Base, StateBlob, utcnow

logger = logging.getLogger(__name__)

Blob = dict[str, Any]


class StateStorage(Protocol):
    """
    Durable key/value load and save of whole state blobs.

    Backends should raise ``PersistenceError``; the stores wrap anything else
    with ``as_persistence_error`` so a failing backend never aborts a mutation.
    """

    def load(self, key: str) -> Optional[Blob]: ...

    def save(self, key: str, blob: Blob) -> None: ...


def as_persistence_error(error: Exception, key: str, action: str = "save") -> PersistenceError:
    """Return ``error`` as a ``PersistenceError``, wrapping other exception types."""
    if isinstance(error, PersistenceError):
        return error
    wrapped = PersistenceError(f"Failed to {action} state: {error}", {"key": key})
    wrapped.__cause__ = error
    return wrapped


class InMemoryStorage:
    """Dict-backed storage. Blobs are deep-copied in both directions."""

    def __init__(self, initial: Optional[dict[str, Blob]] = None):
        self._blobs: dict[str, Blob] = copy.deepcopy(initial) if initial else {}
        self.save_count = 0

    def load(self, key: str) -> Optional[Blob]:
        blob = self._blobs.get(key)
        return copy.deepcopy(blob) if blob is not None else None

    def save(self, key: str, blob: Blob) -> None:
        self._blobs[key] = copy.deepcopy(blob)
        self.save_count += 1


class SqlStateStorage:
    """Stores blobs in the ``state_blobs`` table through SQLAlchemy."""

    def __init__(self, engine: Engine, create_tables: bool = True):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
        if create_tables:
            Base.metadata.create_all(engine)

    @classmethod
    def from_url(cls, url: str, echo: bool = False) -> "SqlStateStorage":
        return cls(create_engine(url, echo=echo))

    def load(self, key: str) -> Optional[Blob]:
        try:
            with self.SessionLocal() as session:
                row = session.execute(
                    select(StateBlob).where(StateBlob.key == key)
                ).scalar_one_or_none()
                return copy.deepcopy(row.payload) if row else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load state: {str(e)}", {"key": key}) from e

    def save(self, key: str, blob: Blob) -> None:
        with self.SessionLocal() as session:
            try:
                row = session.get(StateBlob, key)
                if row is None:
                    session.add(StateBlob(key=key, payload=blob))
                else:
                    row.payload = blob
                    row.updated_at = utcnow()
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise PersistenceError(f"Failed to save state: {str(e)}", {"key": key}) from e

    def dispose(self) -> None:
        self.engine.dispose()


def create_storage(settings: Settings) -> StateStorage:
    """Build the storage backend selected in settings."""
    if settings.storage_backend == StorageBackendEnum.memory:
        logger.info("Using in-memory state storage")
        return InMemoryStorage()

    logger.info("Using SQL state storage")
    return SqlStateStorage.from_url(settings.database_url, echo=settings.debug)
