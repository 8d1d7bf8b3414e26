"""
Conversation API Routes for Lead Concierge.

Thin wrapper over the single ConversationEngine instance.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.flows.engine import ConversationEngine
from api.services import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


# Models
class MessageRequest(BaseModel):
    """User answer."""
    message: str = Field(..., max_length=2000)


class MessageOut(BaseModel):
    id: str
    sender: str
    content: str
    suggestions: List[str] = []
    type: Optional[str] = None


class ConversationResponse(BaseModel):
    """Full conversation snapshot."""
    step_index: int
    total_steps: int
    status: str
    lead: Dict[str, Any]
    messages: List[MessageOut]
    suggestions: List[str]
    insights: Dict[str, Any]


def get_engine(services: Services = Depends(get_services)) -> ConversationEngine:
    return services.engine


def _respond(engine: ConversationEngine) -> ConversationResponse:
    state = engine.state
    data = state.to_dict()
    return ConversationResponse(
        step_index=data["step_index"],
        total_steps=len(engine.steps),
        status=data["status"],
        lead=data["lead"],
        messages=[MessageOut(**m) for m in data["messages"]],
        suggestions=engine.current_suggestions(state),
        insights=engine.insights.to_dict(),
    )


@router.get("/conversation", response_model=ConversationResponse)
async def get_conversation(engine: ConversationEngine = Depends(get_engine)):
    """Current conversation state."""
    return _respond(engine)


@router.post("/conversation/messages", response_model=ConversationResponse)
async def post_message(request: MessageRequest, engine: ConversationEngine = Depends(get_engine)):
    """Submit one answer to the active step."""
    engine.submit(request.message)
    return _respond(engine)


@router.post("/conversation/reset", response_model=ConversationResponse)
async def reset_conversation(engine: ConversationEngine = Depends(get_engine)):
    """Restart the flow."""
    engine.reset()
    logger.info("Conversation restarted via API")
    return _respond(engine)
