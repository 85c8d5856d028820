"""
Persistence adapters.

Services depend on the ``RecordStore`` contract; ``build_store`` picks the
JSON snapshot or SQL backend from Settings at startup.
"""

from __future__ import annotations

import logging

from eventdesk.core.config import Settings
from eventdesk.repositories.base import RecordStore, StorageError, StorageUnavailable

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> RecordStore:
    if settings.storage_backend == "sql":
        from eventdesk.repositories.sql_repository import SQLRecordStore

        store = SQLRecordStore(settings.database_url)
        try:
            store.init_schema()
        except StorageUnavailable:
            logger.warning("Running without database connection")
        return store
    from eventdesk.repositories.json_storage import JsonRecordStore

    return JsonRecordStore(settings.data_dir)


__all__ = ["RecordStore", "StorageError", "StorageUnavailable", "build_store"]
