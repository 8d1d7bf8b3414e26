"""
Lead Scoring Module for Lead Concierge.

This module provides lead qualification and scoring capabilities:
- Lead profile record (fields collected by the conversation)
- Entity extraction (budget, timeline, company size, email)
- Lead scoring (0-100 scale, label, urgency, playbook, risks, next steps)
"""

from .lead_profile import LeadProfile
from .entity_extractor import EntityExtractor, COMPANY_SIZE_BANDS
from .scoring_model import LeadScorer, LeadInsights, ScoreLabel, Urgency, evaluate_lead

__all__ = [
    "LeadProfile",
    "EntityExtractor",
    "COMPANY_SIZE_BANDS",
    "LeadScorer",
    "LeadInsights",
    "ScoreLabel",
    "Urgency",
    "evaluate_lead",
]
