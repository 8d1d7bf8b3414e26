"""
Lead Management API Routes for Lead Concierge.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field

from api.services import Services, get_services
from database.export import lead_json_filename
from lead_scoring.lead_profile import LeadProfile

logger = logging.getLogger(__name__)

router = APIRouter()


# Models
class LeadFields(BaseModel):
    """Lead fields for a scoring preview. Everything is optional."""
    company_name: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    primary_goal: Optional[str] = None
    pain_points: Optional[str] = None
    budget_range: Optional[str] = None
    budget_value: Optional[float] = Field(None, ge=0)
    timeline: Optional[str] = None
    timeline_weeks: Optional[int] = Field(None, ge=1)
    tech_stack: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    notes: Optional[str] = None


class LeadInsightsOut(BaseModel):
    score: int
    score_label: str
    urgency: str
    urgency_label: str
    recommended_playbook: str
    playbook_key: str
    risks: List[str]
    next_steps: List[str]
    score_breakdown: Dict[str, int]


class StoredLeadList(BaseModel):
    leads: List[Dict[str, Any]]
    total: int


@router.post("/leads/evaluate", response_model=LeadInsightsOut)
async def evaluate_lead_preview(fields: LeadFields, services: Services = Depends(get_services)):
    """Score a lead snapshot without touching the conversation."""
    profile = LeadProfile.from_dict(fields.model_dump(exclude_none=True))
    insights = services.lead_scorer.score(profile)
    return LeadInsightsOut(**insights.to_dict())


@router.get("/leads", response_model=StoredLeadList)
async def list_leads(
    limit: Optional[int] = Query(None, ge=1, le=100),
    services: Services = Depends(get_services),
):
    """Recently captured leads, newest first."""
    if services.lead_store is None:
        return StoredLeadList(leads=[], total=0)
    leads = services.lead_store.recent(limit)
    return StoredLeadList(leads=leads, total=len(leads))


@router.get("/leads/{lead_id}")
async def get_lead(lead_id: str, services: Services = Depends(get_services)):
    """One captured lead by id."""
    lead = services.lead_store.get(lead_id) if services.lead_store else None
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


@router.get("/leads/latest/export")
async def export_latest_lead(services: Services = Depends(get_services)):
    """Download the most recent lead as JSON."""
    latest = services.lead_store.latest() if services.lead_store else None
    if latest is None:
        raise HTTPException(status_code=404, detail="No captured leads yet")

    filename = lead_json_filename(latest)
    logger.info(f"Exporting lead {latest['id']} as {filename}")
    return Response(
        content=json.dumps(latest, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
