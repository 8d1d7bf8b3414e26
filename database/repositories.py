"""
Repository classes for Lead Concierge data access layer.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session

from lead_scoring.lead_profile import LeadProfile

from .models import CapturedLead

logger = logging.getLogger(__name__)


class LeadRepository:
    """Data access for captured leads."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, profile: LeadProfile, score: int) -> CapturedLead:
        lead = CapturedLead.from_profile(profile, score)
        self.session.add(lead)
        self.session.flush()
        return lead

    def get_by_id(self, lead_id: str) -> Optional[CapturedLead]:
        result = self.session.execute(
            select(CapturedLead).where(CapturedLead.id == lead_id)
        )
        return result.scalar_one_or_none()

    def list_recent(self, limit: Optional[int] = None) -> List[CapturedLead]:
        q = select(CapturedLead).order_by(CapturedLead.seq.desc())
        if limit is not None:
            q = q.limit(limit)
        result = self.session.execute(q)
        return list(result.scalars().all())

    def latest(self) -> Optional[CapturedLead]:
        recent = self.list_recent(limit=1)
        return recent[0] if recent else None

    def count(self) -> int:
        result = self.session.execute(select(func.count(CapturedLead.seq)))
        return result.scalar() or 0

    def prune(self, keep: int) -> int:
        """Delete everything but the newest `keep` leads. Returns rows deleted."""
        keep_seqs = select(CapturedLead.seq).order_by(CapturedLead.seq.desc()).limit(keep)
        result = self.session.execute(
            delete(CapturedLead)
            .where(CapturedLead.seq.not_in(keep_seqs))
            .execution_options(synchronize_session=False)
        )
        self.session.flush()
        return result.rowcount or 0

    def clear(self) -> int:
        result = self.session.execute(delete(CapturedLead))
        self.session.flush()
        return result.rowcount or 0
