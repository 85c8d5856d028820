"""
JSON snapshot persistence adapter.

Each entity type lives in memory as a list of documents and is written in
full to ``<data_dir>/<entity>.json`` after every append. All mutations go
through one lock so concurrent submissions cannot overwrite each other.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Any

from eventdesk.domain.records import ENTITY_CLASSES, EntityType, document_field, entity_type_of, utc_now
from eventdesk.repositories.base import Entity, RecordStore, StorageError

logger = logging.getLogger(__name__)


def load(path: Path) -> list[dict]:
    if not path.exists():
        logger.info("No existing %s found, starting fresh", path.name)
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        raise StorageError(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, list):
        raise StorageError(f"{path} must contain a JSON array")
    bad = [index for index, doc in enumerate(data) if not isinstance(doc, dict)]
    if bad:
        raise StorageError(f"{path} has non-object entries at positions {bad}")
    return data


def save(path: Path, documents: list[dict]) -> None:
    """Overwrite ``path`` atomically with the full document list."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(documents, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


class JsonRecordStore(RecordStore):
    backend_name = "json"

    def __init__(self, data_dir: str | os.PathLike) -> None:
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()
        self._documents: dict[EntityType, list[dict]] = {}
        self._last_id: dict[EntityType, int] = {}
        for entity_type in EntityType:
            docs = load(self._path(entity_type))
            self._documents[entity_type] = docs
            self._last_id[entity_type] = max((_int_id(d.get("id")) for d in docs), default=0)
        logger.info(
            "Loaded %d registrations and %d feedbacks from %s",
            len(self._documents[EntityType.REGISTRATIONS]),
            len(self._documents[EntityType.FEEDBACKS]),
            self.data_dir,
        )

    def _path(self, entity_type: EntityType) -> Path:
        return self.data_dir / f"{EntityType(entity_type).value}.json"

    def _next_id(self, entity_type: EntityType) -> int:
        candidate = max(int(time.time() * 1000), self._last_id[entity_type] + 1)
        self._last_id[entity_type] = candidate
        return candidate

    def append(self, entity: Entity) -> int:
        entity_type = entity_type_of(entity)
        with self._lock:
            previous_id = self._last_id[entity_type]
            entity.id = self._next_id(entity_type)
            entity.timestamp = utc_now()
            documents = self._documents[entity_type]
            documents.append(entity.to_document())
            try:
                save(self._path(entity_type), documents)
            except (OSError, TypeError, ValueError) as exc:
                documents.pop()
                self._last_id[entity_type] = previous_id
                entity.id, entity.timestamp = None, None
                logger.error("Error saving to %s: %s", self._path(entity_type), exc)
                raise StorageError(f"Could not write {entity_type.value}") from exc
            logger.debug("Data saved to %s", self._path(entity_type))
            return entity.id

    def _snapshot(self, entity_type: EntityType) -> list[dict]:
        with self._lock:
            return copy.deepcopy(self._documents[EntityType(entity_type)])

    def find_all(self, entity_type: EntityType) -> list[Entity]:
        cls = ENTITY_CLASSES[EntityType(entity_type)]
        return [cls.from_document(doc) for doc in self._snapshot(entity_type)]

    def find_by_field(self, entity_type: EntityType, field: str, value: Any) -> list[Entity]:
        attr = document_field(entity_type, field)
        return [entity for entity in self.find_all(entity_type) if getattr(entity, attr) == value]

    def count(self, entity_type: EntityType) -> int:
        with self._lock:
            return len(self._documents[EntityType(entity_type)])


def _int_id(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
