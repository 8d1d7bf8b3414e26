"""
LeadSink protocol for Lead Concierge.

Abstracts where completed leads go so the conversation engine can work
with the database store, an in-memory list, or nothing at all.
"""

from typing import Protocol, runtime_checkable

from lead_scoring.lead_profile import LeadProfile


@runtime_checkable
class LeadSink(Protocol):
    """Protocol for completed-lead persistence."""

    def save(self, profile: LeadProfile, score: int) -> None:
        """Store a completed lead with its final score."""
        ...
