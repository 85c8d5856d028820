"""Record Store backed by SQLAlchemy: one committed insert per record."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from eventdesk.db.models import FeedbackRow, RegistrationRow
from eventdesk.db.create_tables import create_all
from eventdesk.db.session import get_engine, get_session
from eventdesk.domain.records import (
    EntityType,
    Feedback,
    Registration,
    as_utc,
    document_field,
    entity_type_of,
    utc_now,
)
from eventdesk.repositories.base import Entity, RecordStore, StorageError, StorageUnavailable

logger = logging.getLogger(__name__)

ROW_CLASSES = {
    EntityType.REGISTRATIONS: RegistrationRow,
    EntityType.FEEDBACKS: FeedbackRow,
}


def _registration_row(entity: Registration) -> RegistrationRow:
    return RegistrationRow(
        first_name=entity.first_name,
        last_name=entity.last_name,
        email=entity.email,
        phone=entity.phone,
        location=entity.location,
        gender=entity.gender,
        channel=entity.channel,
        interests=list(entity.interests),
        other_interest=entity.other_interest,
        consent=bool(entity.consent),
        timestamp=entity.timestamp,
    )


def _feedback_row(entity: Feedback) -> FeedbackRow:
    return FeedbackRow(
        feedback1=entity.feedback1,
        feedback2=entity.feedback2,
        rating=entity.rating,
        timestamp=entity.timestamp,
    )


def _row_to_entity(row: RegistrationRow | FeedbackRow) -> Entity:
    if isinstance(row, RegistrationRow):
        return Registration(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            email=row.email,
            phone=row.phone,
            location=row.location,
            gender=row.gender,
            channel=row.channel,
            interests=list(row.interests or []),
            other_interest=row.other_interest or "",
            consent=bool(row.consent),
            timestamp=as_utc(row.timestamp) if row.timestamp else None,
        )
    return Feedback(
        id=row.id,
        feedback1=row.feedback1 or "",
        feedback2=row.feedback2 or "",
        rating=row.rating,
        timestamp=as_utc(row.timestamp) if row.timestamp else None,
    )


class SQLRecordStore(RecordStore):
    """CRUD helpers wrapping the SQLAlchemy session."""

    backend_name = "sql"

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url
        self.engine = get_engine(database_url)
        self._schema_ready = False

    def init_schema(self) -> None:
        if self._schema_ready:
            return
        try:
            create_all(self.database_url)
        except SQLAlchemyError as exc:
            logger.error("Could not create tables: %s", exc)
            raise StorageUnavailable("Database unavailable") from exc
        self._schema_ready = True

    def append(self, entity: Entity) -> int:
        entity_type = entity_type_of(entity)
        try:
            self.init_schema()
        except StorageUnavailable as exc:
            raise StorageError(f"Could not write {entity_type.value}") from exc
        timestamp = utc_now()
        entity.timestamp = timestamp
        row = _registration_row(entity) if entity_type is EntityType.REGISTRATIONS else _feedback_row(entity)
        try:
            with get_session(self.database_url) as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                entity.id = row.id
        except SQLAlchemyError as exc:
            entity.timestamp = None
            logger.error("Insert into %s failed: %s", entity_type.value, exc)
            raise StorageError(f"Could not write {entity_type.value}") from exc
        return entity.id

    def _select(self, entity_type: EntityType, *criteria) -> list[Entity]:
        model = ROW_CLASSES[EntityType(entity_type)]
        stmt = select(model)
        if criteria:
            stmt = stmt.where(*criteria)
        stmt = stmt.order_by(model.timestamp.desc(), model.id.desc())
        self.init_schema()
        try:
            with get_session(self.database_url) as session:
                rows = session.execute(stmt).scalars().all()
                return [_row_to_entity(row) for row in rows]
        except SQLAlchemyError as exc:
            logger.error("Query on %s failed: %s", EntityType(entity_type).value, exc)
            raise StorageUnavailable("Database unavailable") from exc

    def find_all(self, entity_type: EntityType) -> list[Entity]:
        return self._select(entity_type)

    def find_by_field(self, entity_type: EntityType, field: str, value: Any) -> list[Entity]:
        attr = document_field(entity_type, field)
        model = ROW_CLASSES[EntityType(entity_type)]
        return self._select(entity_type, getattr(model, attr) == value)

    def count(self, entity_type: EntityType) -> int:
        model = ROW_CLASSES[EntityType(entity_type)]
        self.init_schema()
        try:
            with get_session(self.database_url) as session:
                return int(session.execute(select(func.count()).select_from(model)).scalar_one())
        except SQLAlchemyError as exc:
            logger.error("Count on %s failed: %s", EntityType(entity_type).value, exc)
            raise StorageUnavailable("Database unavailable") from exc

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

    def close(self) -> None:
        self.engine.dispose()
