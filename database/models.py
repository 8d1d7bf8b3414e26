"""
SQLAlchemy ORM models for Lead Concierge.

Completed leads are stored flat: one row per finished conversation.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, String, Integer, Float, DateTime, Text, Index
from sqlalchemy.orm import DeclarativeBase

from lead_scoring.lead_profile import LeadProfile


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class CapturedLead(Base):
    __tablename__ = "captured_leads"

    # Insertion order; newest has the highest seq
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, default=_uuid)

    company_name = Column(String(255), nullable=True)
    industry = Column(String(255), nullable=True)
    company_size = Column(String(20), nullable=True)
    primary_goal = Column(Text, nullable=True)
    pain_points = Column(Text, nullable=True)
    budget_range = Column(String(255), nullable=True)
    budget_value = Column(Float, nullable=True)
    timeline = Column(String(255), nullable=True)
    timeline_weeks = Column(Integer, nullable=True)
    tech_stack = Column(Text, nullable=True)
    contact_name = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    score = Column(Integer, nullable=False, default=0)
    stored_at = Column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_captured_leads_stored_at", "stored_at"),
    )

    @classmethod
    def from_profile(cls, profile: LeadProfile, score: int) -> "CapturedLead":
        return cls(score=score, **profile.to_dict(include_empty=True))

    def to_profile(self) -> LeadProfile:
        return LeadProfile(**{name: getattr(self, name) for name in LeadProfile.field_names()})

    def to_dict(self) -> Dict[str, Any]:
        """Stored payload: lead fields that are set, plus score and storage time."""
        data = self.to_profile().to_dict()
        data["id"] = self.id
        data["score"] = self.score
        data["stored_at"] = self._stored_at_utc().isoformat() if self.stored_at else None
        return data

    def _stored_at_utc(self) -> datetime:
        # SQLite hands back naive datetimes; they were written as UTC
        if self.stored_at.tzinfo is None:
            return self.stored_at.replace(tzinfo=timezone.utc)
        return self.stored_at
