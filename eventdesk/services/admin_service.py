"""
Read-side use cases for the admin dashboard: search, feedback views, counts.

Storage outages degrade to empty results so the dashboard stays usable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from eventdesk.domain.records import EntityType, FeedbackView, Registration
from eventdesk.repositories.base import RecordStore, StorageUnavailable

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class AdminStats:
    registration_count: int
    feedback_count: int


@dataclass
class HealthReport:
    backend: str
    connected: bool
    registration_count: int
    feedback_count: int


def _newest_first(records: list) -> list:
    return sorted(records, key=lambda r: (r.timestamp or _EPOCH, r.id or 0), reverse=True)


@dataclass
class AdminQueryService:
    store: RecordStore
    registration_limit: int = 200
    feedback_limit: int = 100

    def list_registrations(self, search: Optional[str] = None) -> list[Registration]:
        try:
            records = self.store.find_all(EntityType.REGISTRATIONS)
        except StorageUnavailable as exc:
            logger.error("Get registrations error: %s", exc)
            return []
        term = (search or "").strip()
        if term:
            records = [record for record in records if record.matches(term)]
        results = _newest_first(records)[: self.registration_limit]
        logger.info("Returning %d registrations (search: %r)", len(results), term or None)
        return results

    def list_feedbacks(self) -> list[FeedbackView]:
        try:
            records = self.store.find_all(EntityType.FEEDBACKS)
        except StorageUnavailable as exc:
            logger.error("Get feedbacks error: %s", exc)
            return []
        views = [FeedbackView(record) for record in _newest_first(records)[: self.feedback_limit]]
        logger.info("Returning %d feedbacks", len(views))
        return views

    def _count(self, entity_type: EntityType) -> int:
        try:
            return self.store.count(entity_type)
        except StorageUnavailable as exc:
            logger.error("Count %s error: %s", entity_type.value, exc)
            return 0

    def get_stats(self) -> AdminStats:
        return AdminStats(
            registration_count=self._count(EntityType.REGISTRATIONS),
            feedback_count=self._count(EntityType.FEEDBACKS),
        )

    def health(self) -> HealthReport:
        connected = self.store.ping()
        stats = self.get_stats() if connected else AdminStats(0, 0)
        return HealthReport(
            backend=self.store.backend_name,
            connected=connected,
            registration_count=stats.registration_count,
            feedback_count=stats.feedback_count,
        )
