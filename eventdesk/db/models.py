"""SQLAlchemy models mirroring the JSON snapshot documents."""
from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Integer, JSON, String, Text

from .session import Base


class RegistrationRow(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(64), nullable=False)
    location = Column(String(255), nullable=False)
    gender = Column(String(32), nullable=False)
    channel = Column(String(255), nullable=False)
    interests = Column(JSON, nullable=False, default=list)
    other_interest = Column(Text, nullable=False, default="")
    consent = Column(Boolean, nullable=False, default=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)


class FeedbackRow(Base):
    __tablename__ = "feedbacks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    feedback1 = Column(Text, nullable=False, default="")
    feedback2 = Column(Text, nullable=False, default="")
    rating = Column(Integer, nullable=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
