"""Registration and feedback records plus their JSON document mapping."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from eventdesk.domain.validation import normalize_email, parse_consent

ANONYMOUS_NAME = "Anonymous User"
NO_FEEDBACK_TEXT = "No feedback text"


class EntityType(str, Enum):
    REGISTRATIONS = "registrations"
    FEEDBACKS = "feedbacks"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite drops tzinfo) as UTC."""
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return as_utc(value)
    if not value:
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


@dataclass
class Registration:
    first_name: str
    last_name: str
    email: str
    phone: str
    location: str
    gender: str
    channel: str
    interests: list[str] = field(default_factory=list)
    other_interest: str = ""
    consent: bool = False
    id: Optional[int] = None
    timestamp: Optional[datetime] = None

    # camelCase document key -> attribute
    FIELDS = {
        "id": "id",
        "firstName": "first_name",
        "lastName": "last_name",
        "email": "email",
        "phone": "phone",
        "location": "location",
        "gender": "gender",
        "channel": "channel",
        "interests": "interests",
        "otherInterest": "other_interest",
        "consent": "consent",
        "timestamp": "timestamp",
    }

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "location": self.location,
            "gender": self.gender,
            "channel": self.channel,
            "interests": list(self.interests),
            "otherInterest": self.other_interest,
            "consent": self.consent,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_document(cls, doc: dict) -> "Registration":
        return cls(
            id=optional_int(doc.get("id")),
            first_name=str(doc.get("firstName") or ""),
            last_name=str(doc.get("lastName") or ""),
            email=normalize_email(doc.get("email")),
            phone=str(doc.get("phone") or ""),
            location=str(doc.get("location") or ""),
            gender=str(doc.get("gender") or ""),
            channel=str(doc.get("channel") or ""),
            interests=[str(i) for i in (doc.get("interests") or [])],
            other_interest=str(doc.get("otherInterest") or ""),
            consent=parse_consent(doc.get("consent")),
            timestamp=parse_timestamp(doc.get("timestamp")),
        )

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name, email and location."""
        needle = term.lower()
        return any(
            needle in (value or "").lower()
            for value in (self.first_name, self.last_name, self.email, self.location)
        )


@dataclass
class Feedback:
    feedback1: str = ""
    feedback2: str = ""
    rating: Optional[int] = None
    id: Optional[int] = None
    timestamp: Optional[datetime] = None

    FIELDS = {
        "id": "id",
        "feedback1": "feedback1",
        "feedback2": "feedback2",
        "rating": "rating",
        "timestamp": "timestamp",
    }

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "feedback1": self.feedback1,
            "feedback2": self.feedback2,
            "rating": self.rating,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_document(cls, doc: dict) -> "Feedback":
        return cls(
            id=optional_int(doc.get("id")),
            feedback1=str(doc.get("feedback1") or ""),
            feedback2=str(doc.get("feedback2") or ""),
            rating=optional_int(doc.get("rating")),
            timestamp=parse_timestamp(doc.get("timestamp")),
        )

    @property
    def display_text(self) -> str:
        parts = [text.strip() for text in (self.feedback1, self.feedback2) if text and text.strip()]
        return " | ".join(parts) if parts else NO_FEEDBACK_TEXT


@dataclass
class FeedbackView:
    """Display projection of a Feedback with the submitter redacted."""

    feedback: Feedback
    name: str = ANONYMOUS_NAME

    @property
    def text(self) -> str:
        return self.feedback.display_text

    def to_document(self) -> dict:
        doc = self.feedback.to_document()
        doc["name"] = self.name
        doc["text"] = self.text
        return doc


ENTITY_CLASSES = {
    EntityType.REGISTRATIONS: Registration,
    EntityType.FEEDBACKS: Feedback,
}


def entity_type_of(entity: Registration | Feedback) -> EntityType:
    if isinstance(entity, Registration):
        return EntityType.REGISTRATIONS
    if isinstance(entity, Feedback):
        return EntityType.FEEDBACKS
    raise TypeError(f"Unsupported entity: {type(entity).__name__}")


def document_field(entity_type: EntityType, name: str) -> str:
    """Map a camelCase document field to the record attribute, or raise ValueError."""
    attr = ENTITY_CLASSES[EntityType(entity_type)].FIELDS.get(name)
    if attr is None:
        raise ValueError(f"Unknown field {name!r} for {EntityType(entity_type).value}")
    return attr
