"""
Shared bases for persisted entities.

Entities are pydantic models serialized to camelCase JSON inside the state blobs.
The SQLAlchemy declarative ``Base`` backs the tables the SQL storage backend
writes those blobs to.
"""

import time
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import declarative_base

Base = declarative_base()

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Opaque identifier: base-36 millisecond timestamp plus a random suffix."""
    return _to_base36(int(time.time() * 1000)) + uuid.uuid4().hex[:9]


class EntityModel(BaseModel):
    """
    Base class for stored entities.

    :ivar id: Opaque identifier assigned at creation.
    :type id: str
    :ivar created_at: Creation timestamp (UTC).
    :type created_at: datetime
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
        extra="ignore",
    )

    id: str
    created_at: datetime = Field(default_factory=utcnow)

    def to_storage(self) -> dict:
        """Serialize to the camelCase JSON layout used in state blobs."""
        return self.model_dump(mode="json", by_alias=True)
