"""Validation and normalization rules for inbound submissions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

REQUIRED_REGISTRATION_FIELDS = (
    "firstName",
    "lastName",
    "email",
    "phone",
    "location",
    "gender",
    "channel",
)
MAX_INTERESTS = 2
MIN_RATING = 1
MAX_RATING = 5
TRUTHY = {"true", "1", "yes", "on"}


class ValidationError(Exception):
    """Base class for rejected submissions. ``message`` is safe to show callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFieldsError(ValidationError):
    def __init__(self, missing: list[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = list(missing)


class TooManyInterestsError(ValidationError):
    def __init__(self, count: int):
        super().__init__(f"Maximum {MAX_INTERESTS} areas of interest allowed")
        self.count = count


class EmptyFeedbackError(ValidationError):
    def __init__(self):
        super().__init__("At least one feedback field is required")


class RatingOutOfRangeError(ValidationError):
    def __init__(self, rating: int):
        super().__init__(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        self.rating = rating


class InvalidRatingError(ValidationError):
    def __init__(self, value: Any):
        super().__init__(f"Rating must be a whole number between {MIN_RATING} and {MAX_RATING}")
        self.value = value


class DuplicateEmailError(ValidationError):
    def __init__(self, email: str):
        super().__init__("Email already registered")
        self.email = email


@dataclass(frozen=True)
class ValidatedRegistration:
    first_name: str
    last_name: str
    email: str
    phone: str
    location: str
    gender: str
    channel: str
    interests: tuple[str, ...] = ()
    other_interest: str = ""
    consent: bool = False


@dataclass(frozen=True)
class ValidatedFeedback:
    feedback1: str = ""
    feedback2: str = ""
    rating: Optional[int] = None


def _text(value: Any) -> str:
    if value is None or isinstance(value, (bool, list, tuple, dict, set)):
        return ""
    return str(value).strip()


def normalize_email(value: Any) -> str:
    return _text(value).lower()


def _interests(value: Any) -> list[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [value.strip()]
    if isinstance(value, (list, tuple)):
        return [_text(item) for item in value]
    return [_text(value)]


def parse_consent(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return False


def coerce_rating(value: Any) -> Optional[int]:
    """Return the rating as int, None when absent, or raise InvalidRatingError."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidRatingError(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise InvalidRatingError(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise InvalidRatingError(value) from None
            if number.is_integer():
                return int(number)
            raise InvalidRatingError(value) from None
    raise InvalidRatingError(value)


def validate_registration(payload: Mapping[str, Any] | None) -> ValidatedRegistration:
    data = payload if isinstance(payload, Mapping) else {}
    values = {name: _text(data.get(name)) for name in REQUIRED_REGISTRATION_FIELDS}
    missing = [name for name in REQUIRED_REGISTRATION_FIELDS if not values[name]]
    if missing:
        raise MissingFieldsError(missing)
    interests = _interests(data.get("interests"))
    if len(interests) > MAX_INTERESTS:
        raise TooManyInterestsError(len(interests))
    return ValidatedRegistration(
        first_name=values["firstName"],
        last_name=values["lastName"],
        email=normalize_email(values["email"]),
        phone=values["phone"],
        location=values["location"],
        gender=values["gender"],
        channel=values["channel"],
        interests=tuple(interests),
        other_interest=_text(data.get("otherInterest")),
        consent=parse_consent(data.get("consent")),
    )


def validate_feedback(payload: Mapping[str, Any] | None) -> ValidatedFeedback:
    data = payload if isinstance(payload, Mapping) else {}
    feedback1 = _text(data.get("feedback1"))
    feedback2 = _text(data.get("feedback2"))
    if not feedback1 and not feedback2:
        raise EmptyFeedbackError()
    rating = coerce_rating(data.get("rating"))
    if rating is not None and not (MIN_RATING <= rating <= MAX_RATING):
        raise RatingOutOfRangeError(rating)
    return ValidatedFeedback(feedback1=feedback1, feedback2=feedback2, rating=rating)
