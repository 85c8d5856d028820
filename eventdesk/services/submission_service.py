"""
Registration and feedback submission use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from eventdesk.domain.records import EntityType, Feedback, Registration
from eventdesk.domain.validation import DuplicateEmailError, validate_feedback, validate_registration
from eventdesk.repositories.base import RecordStore, StorageUnavailable

logger = logging.getLogger(__name__)

ALLOW_DUPLICATES = "allow"
REJECT_DUPLICATES = "reject"


@dataclass
class SubmissionService:
    """Validates inbound payloads and hands new records to the store.

    Validation errors and StorageError propagate to the caller unchanged.
    """

    store: RecordStore
    duplicate_email_policy: str = ALLOW_DUPLICATES

    def _email_taken(self, email: str) -> bool:
        try:
            return bool(self.store.find_by_field(EntityType.REGISTRATIONS, "email", email))
        except StorageUnavailable as exc:
            logger.warning("Duplicate check skipped for %s: %s", email, exc)
            return False

    def submit_registration(self, payload: Mapping[str, Any] | None) -> int:
        data = validate_registration(payload)
        if self._email_taken(data.email):
            if self.duplicate_email_policy == REJECT_DUPLICATES:
                logger.info("Rejected duplicate registration for %s", data.email)
                raise DuplicateEmailError(data.email)
            logger.warning("Email already registered: %s", data.email)
        registration = Registration(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            location=data.location,
            gender=data.gender,
            channel=data.channel,
            interests=list(data.interests),
            other_interest=data.other_interest,
            consent=data.consent,
        )
        record_id = self.store.append(registration)
        logger.info("New registration %s: %s %s", record_id, data.first_name, data.last_name)
        return record_id

    def submit_feedback(self, payload: Mapping[str, Any] | None) -> int:
        data = validate_feedback(payload)
        record_id = self.store.append(
            Feedback(feedback1=data.feedback1, feedback2=data.feedback2, rating=data.rating)
        )
        logger.info("New feedback %s saved with rating: %s", record_id, data.rating or "No rating")
        return record_id
