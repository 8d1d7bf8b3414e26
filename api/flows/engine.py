"""
Conversation Flow Engine for Lead Concierge.

Walks a cursor through the discovery steps, accumulating a LeadProfile,
and keeps an append-only message log for the UI. States are
collecting (cursor 0..N) and complete.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from lead_scoring.lead_profile import LeadProfile
from lead_scoring.scoring_model import LeadInsights, LeadScorer

from .definitions import LeadStep, get_lead_steps
from .lead_sink import LeadSink

logger = logging.getLogger(__name__)


GREETING = "Hey there, I'm your lead concierge. I'll capture the essentials in a few quick questions."
GREETING_SUGGESTIONS = ["Sounds good!", "Let's do it", "Can we skip ahead?"]
COMPLETION_FOLLOW_UP = "That's everything I need. Here's a quick snapshot of the opportunity."
CLOSING_PROMPT = "Need anything else captured? Just type it in."
ACKNOWLEDGEMENT = "Appreciate the extra context. Noted for the handoff."


class Sender(str, Enum):
    AGENT = "agent"
    USER = "user"


class MessageType(str, Enum):
    QUESTION = "question"
    INFO = "info"
    SUMMARY = "summary"


class ConversationStatus(str, Enum):
    COLLECTING = "collecting"
    COMPLETE = "complete"


def _message_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class AgentMessage:
    """One entry in the conversation log."""
    sender: Sender
    content: str
    suggestions: Tuple[str, ...] = ()
    message_type: Optional[MessageType] = None
    id: str = field(default_factory=_message_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "sender": self.sender.value,
            "content": self.content,
            "suggestions": list(self.suggestions),
            "type": self.message_type.value if self.message_type else None,
        }


@dataclass
class ConversationState:
    """Current state of the discovery conversation."""
    step_index: int = 0
    lead: LeadProfile = field(default_factory=LeadProfile)
    messages: List[AgentMessage] = field(default_factory=list)
    status: ConversationStatus = ConversationStatus.COLLECTING

    @property
    def is_complete(self) -> bool:
        return self.status is ConversationStatus.COMPLETE

    def snapshot(self) -> "ConversationState":
        """Independent copy; only the log list needs copying, its entries are immutable."""
        return ConversationState(
            step_index=self.step_index,
            lead=self.lead,
            messages=list(self.messages),
            status=self.status,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step_index": self.step_index,
            "status": self.status.value,
            "lead": self.lead.to_dict(),
            "messages": [m.to_dict() for m in self.messages],
        }


@dataclass(frozen=True)
class SubmitAction:
    text: str


@dataclass(frozen=True)
class ResetAction:
    pass


ConversationAction = Union[SubmitAction, ResetAction]


def agent_message(
    content: str,
    suggestions: Optional[Sequence[str]] = None,
    message_type: Optional[MessageType] = None,
) -> AgentMessage:
    return AgentMessage(
        sender=Sender.AGENT,
        content=content,
        suggestions=tuple(suggestions or ()),
        message_type=message_type,
    )


def user_message(content: str) -> AgentMessage:
    return AgentMessage(sender=Sender.USER, content=content)


def question_for_step(step: LeadStep, index: int = 0) -> AgentMessage:
    """The first question is shown verbatim; later ones add their helper on a new line."""
    content = step.question
    if index > 0 and step.helper:
        content = f"{step.question}\n{step.helper}"
    return agent_message(content, step.suggestions, MessageType.QUESTION)


def render_summary(lead: LeadProfile) -> str:
    """
    Render the closing recap, one line per populated high-value field.

    Order: company/industry, goal, pain points, budget, timeline, contact.
    Absent fields are left out.
    """
    lines: List[str] = []

    if lead.company_name and lead.industry:
        lines.append(f"• {lead.company_name} in {lead.industry}")
    elif lead.company_name:
        lines.append(f"• {lead.company_name}")
    elif lead.industry:
        lines.append(f"• Industry: {lead.industry}")

    if lead.primary_goal:
        lines.append(f"• Goal: {lead.primary_goal}")

    if lead.pain_points:
        lines.append(f"• Challenge: {lead.pain_points}")

    if lead.budget_range:
        lines.append(f"• Budget comfort zone: {lead.budget_range}")
    elif lead.budget_value is not None:
        lines.append(f"• Budget comfort zone: ~${lead.budget_value:,.0f}")

    if lead.timeline:
        lines.append(f"• Timeline: {lead.timeline}")

    if lead.contact_name and lead.contact_email:
        lines.append(f"• Contact: {lead.contact_name} ({lead.contact_email})")
    elif lead.contact_name:
        lines.append(f"• Contact: {lead.contact_name}")
    elif lead.contact_email:
        lines.append(f"• Contact: {lead.contact_email}")

    return "\n".join(["Quick recap:"] + lines)


class ConversationEngine:
    """
    Runs one discovery conversation for one lead.

    submit() and reset() are the only transitions; both go through
    dispatch(). Insights are recomputed on every accepted answer and
    handed to the lead sink once, when the conversation completes.
    """

    def __init__(
        self,
        steps: Optional[Sequence[LeadStep]] = None,
        scorer: Optional[LeadScorer] = None,
        lead_sink: Optional[LeadSink] = None,
    ):
        self.steps: List[LeadStep] = list(steps) if steps is not None else get_lead_steps()
        if not self.steps:
            raise ValueError("ConversationEngine needs at least one step")
        self.scorer = scorer or LeadScorer()
        self.lead_sink = lead_sink
        self._state = self._initial_state()
        self._insights = self.scorer.score(self._state.lead)

    def _initial_state(self) -> ConversationState:
        return ConversationState(
            step_index=0,
            lead=LeadProfile(),
            messages=[
                agent_message(GREETING, GREETING_SUGGESTIONS, MessageType.INFO),
                question_for_step(self.steps[0], 0),
            ],
            status=ConversationStatus.COLLECTING,
        )

    @property
    def state(self) -> ConversationState:
        return self._state.snapshot()

    @property
    def insights(self) -> LeadInsights:
        return self._insights

    @property
    def active_step(self) -> Optional[LeadStep]:
        """The step awaiting an answer, or None once the cursor passes the last step."""
        if self._state.step_index < len(self.steps):
            return self.steps[self._state.step_index]
        return None

    def init(self) -> ConversationState:
        """Start a fresh conversation."""
        return self.dispatch(ResetAction())

    def submit(self, text: str) -> ConversationState:
        """Handle one user answer."""
        return self.dispatch(SubmitAction(text=text))

    def reset(self) -> ConversationState:
        """Discard the conversation and start over."""
        return self.dispatch(ResetAction())

    def dispatch(self, action: ConversationAction) -> ConversationState:
        if isinstance(action, SubmitAction):
            self._handle_submit(action.text)
        elif isinstance(action, ResetAction):
            self._state = self._initial_state()
            self._insights = self.scorer.score(self._state.lead)
            logger.debug("Conversation reset")
        else:
            raise TypeError(f"Unsupported conversation action: {action!r}")
        return self.state

    def current_suggestions(self, state: Optional[ConversationState] = None) -> List[str]:
        """Quick replies of the most recent agent message."""
        messages = (state or self._state).messages
        for message in reversed(messages):
            if message.sender is Sender.AGENT:
                return list(message.suggestions)
        return []

    def _handle_submit(self, text: str):
        state = self._state
        answer = (text or "").strip()
        state.messages.append(user_message(answer))

        if state.is_complete:
            state.messages.append(agent_message(ACKNOWLEDGEMENT, message_type=MessageType.INFO))
            return

        step = self.active_step
        if step is None:
            self._complete()
            return

        result = step.parse(answer, state.lead)
        if not result.success:
            logger.debug(f"Step '{step.id}' rejected answer, re-asking")
            state.messages.append(agent_message(result.retry_message, message_type=MessageType.INFO))
            state.messages.append(question_for_step(step, state.step_index))
            return

        state.lead = state.lead.merge(result.updates)
        if result.follow_up:
            state.messages.append(agent_message(result.follow_up, message_type=MessageType.INFO))
        state.step_index += 1
        self._insights = self.scorer.score(state.lead)

        next_step = self.active_step
        if next_step is not None:
            state.messages.append(question_for_step(next_step, state.step_index))
            return

        self._complete()

    def _complete(self):
        state = self._state
        state.status = ConversationStatus.COMPLETE
        state.messages.append(agent_message(COMPLETION_FOLLOW_UP))
        state.messages.append(agent_message(render_summary(state.lead), message_type=MessageType.SUMMARY))
        state.messages.append(agent_message(CLOSING_PROMPT))

        logger.info(
            f"Conversation complete: {state.lead.company_name or 'unnamed lead'}, "
            f"score: {self._insights.score}, label: {self._insights.score_label.value}"
        )
        self._persist(state.lead, self._insights.score)

    def _persist(self, lead: LeadProfile, score: int):
        """Best effort; a failing sink never affects the conversation."""
        if self.lead_sink is None:
            return
        try:
            self.lead_sink.save(lead, score)
        except Exception as e:
            logger.warning(f"Unable to persist lead snapshot: {e}")
