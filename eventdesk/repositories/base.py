"""Record Store contract shared by the JSON and SQL backends."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Union

from eventdesk.domain.records import EntityType, Feedback, Registration

Entity = Union[Registration, Feedback]


class StorageError(Exception):
    """A durable write failed; the record was not persisted."""


class StorageUnavailable(StorageError):
    """The backend could not be read."""


class RecordStore(ABC):
    """Owns the canonical registration and feedback collections.

    ``append`` assigns ``id`` and ``timestamp`` and only returns once the
    record is durable. Read methods always hand out fresh copies.
    """

    backend_name = "unknown"

    @abstractmethod
    def append(self, entity: Entity) -> int:
        ...

    @abstractmethod
    def find_all(self, entity_type: EntityType) -> list[Entity]:
        ...

    @abstractmethod
    def find_by_field(self, entity_type: EntityType, field: str, value: Any) -> list[Entity]:
        ...

    @abstractmethod
    def count(self, entity_type: EntityType) -> int:
        ...

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        return None
