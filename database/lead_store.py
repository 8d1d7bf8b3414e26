"""
Database-backed LeadSink for Lead Concierge.

Stores completed leads, keeps only the most recent N, and notifies
listeners after each save.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from lead_scoring.lead_profile import LeadProfile

from .repositories import LeadRepository
from .session import init_db, session_scope

logger = logging.getLogger(__name__)

LeadListener = Callable[[Dict[str, Any]], None]


class LeadStore:
    """
    Persists completed leads with their final score.

    History is capped at history_limit rows, newest first.
    """

    def __init__(self, database_url: str, history_limit: int = 25):
        if history_limit < 1:
            raise ValueError(f"history_limit must be at least 1, got {history_limit}")
        self.history_limit = history_limit
        self._engine, self._session_factory = init_db(database_url)
        self._listeners: List[LeadListener] = []

    def save(self, profile: LeadProfile, score: int) -> Dict[str, Any]:
        """
        Store a completed lead, prune old history, then notify listeners.

        Returns:
            The stored payload (lead fields, id, score, stored_at)
        """
        with session_scope(self._session_factory) as session:
            repo = LeadRepository(session)
            lead = repo.add(profile, score)
            pruned = repo.prune(keep=self.history_limit)
            payload = lead.to_dict()

        logger.info(f"Lead stored: {payload['id']}, score: {score}, pruned: {pruned}")
        self._notify(payload)
        return payload

    def recent(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Stored leads, newest first."""
        with session_scope(self._session_factory) as session:
            return [lead.to_dict() for lead in LeadRepository(session).list_recent(limit)]

    def latest(self) -> Optional[Dict[str, Any]]:
        with session_scope(self._session_factory) as session:
            lead = LeadRepository(session).latest()
            return lead.to_dict() if lead else None

    def get(self, lead_id: str) -> Optional[Dict[str, Any]]:
        with session_scope(self._session_factory) as session:
            lead = LeadRepository(session).get_by_id(lead_id)
            return lead.to_dict() if lead else None

    def count(self) -> int:
        with session_scope(self._session_factory) as session:
            return LeadRepository(session).count()

    def clear(self) -> int:
        with session_scope(self._session_factory) as session:
            deleted = LeadRepository(session).clear()
        logger.info(f"Cleared {deleted} stored leads")
        return deleted

    def subscribe(self, listener: LeadListener):
        """Register a callback invoked with each newly stored payload."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: LeadListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, payload: Dict[str, Any]):
        for listener in list(self._listeners):
            try:
                listener(dict(payload))
            except Exception as e:
                logger.warning(f"Lead listener failed: {e}")

    def close(self):
        """Close the database engine."""
        self._engine.dispose()
        logger.info("Database connection closed")
