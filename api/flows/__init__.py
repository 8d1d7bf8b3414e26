"""
Conversation flows for Lead Concierge.
"""

from .definitions import LeadStep, StepResult, get_lead_steps
from .engine import (
    AgentMessage,
    ConversationEngine,
    ConversationState,
    ConversationStatus,
    MessageType,
    Sender,
    render_summary,
)
from .lead_sink import LeadSink

__all__ = [
    "LeadStep",
    "StepResult",
    "get_lead_steps",
    "AgentMessage",
    "ConversationEngine",
    "ConversationState",
    "ConversationStatus",
    "MessageType",
    "Sender",
    "render_summary",
    "LeadSink",
]
