"""
Lead Scoring Model for Lead Concierge.

Implements a deterministic weighted rubric over a LeadProfile snapshot.
Each signal is scored independently, summed and clamped to 0-100, then
projected into a score label, urgency, playbook, risks and next steps.
"""

import logging
from enum import Enum
from typing import Dict, Any, Optional, List, Tuple
from dataclasses import dataclass, field

from .entity_extractor import EntityExtractor
from .lead_profile import LeadProfile

logger = logging.getLogger(__name__)


class ScoreLabel(Enum):
    """Qualification buckets, lowest first."""
    LOW = "low"            # Score < 40 - Nurture
    MEDIUM = "medium"      # Score 40-59 - Qualify further
    HIGH = "high"          # Score 60-79 - Active opportunity
    PRIORITY = "priority"  # Score >= 80 - Immediate follow-up


class Urgency(Enum):
    """Buying urgency derived from the timeline alone."""
    URGENT = "urgent"              # Within a month
    ACTIVE = "active"              # Within a quarter
    PLANNED = "planned"            # Within six months
    LONG_HORIZON = "long_horizon"  # Beyond six months
    UNKNOWN = "unknown"


URGENCY_LABELS = {
    Urgency.URGENT: "Urgent: decision expected within a month",
    Urgency.ACTIVE: "Active: buying this quarter",
    Urgency.PLANNED: "Planned: decision within six months",
    Urgency.LONG_HORIZON: "Long horizon: no decision for six months or more",
    Urgency.UNKNOWN: "Timeline unknown",
}

PLAYBOOKS = {
    "enterprise": "Enterprise pursuit: multi-thread stakeholders and line up an executive sponsor",
    "fast_track": "Fast-track: AE-led demo and proposal within the week",
    "rapid_response": "Rapid response: same-day call with a solutions engineer",
    "mid_market": "Mid-market consultative: discovery call followed by an ROI workshop",
    "value_first": "Value-first nurture: share ROI proof points before talking price",
    "nurture": "Nurture sequence: educational drip with a quarterly check-in",
}

RISK_NO_BUDGET = "No budget figure confirmed yet"
RISK_NO_TIMELINE = "Timeline not locked in"
RISK_NO_EMAIL = "No contact email captured"
RISK_INVALID_EMAIL = "Contact email looks invalid"
RISK_NO_PAIN_POINTS = "Pain points not captured"
RISK_NO_CONTACT = "No named point of contact"
RISK_MICRO_TEAM = "Very small team; budget authority may be limited"
RISK_LONG_HORIZON = "Buying horizon beyond six months"

GENERIC_NEXT_STEP = "Log the opportunity in the CRM and schedule a check-in"

ENTERPRISE_SIZES = ("201-1000", "1000+")


@dataclass
class LeadInsights:
    """Scoring result for a lead profile."""
    score: int  # 0-100
    score_label: ScoreLabel
    urgency: Urgency
    recommended_playbook: str
    playbook_key: str
    risks: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)
    score_breakdown: Dict[str, int] = field(default_factory=dict)

    @property
    def urgency_label(self) -> str:
        return URGENCY_LABELS[self.urgency]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "score_label": self.score_label.value,
            "urgency": self.urgency.value,
            "urgency_label": self.urgency_label,
            "recommended_playbook": self.recommended_playbook,
            "playbook_key": self.playbook_key,
            "risks": list(self.risks),
            "next_steps": list(self.next_steps),
            "score_breakdown": dict(self.score_breakdown),
        }


class LeadScorer:
    """
    Scores lead profiles collected by the concierge conversation.

    Scoring Rules (0-100):
    - Completeness: +5 each for industry, goal, pain points, tech stack
    - Budget >= $150k: +30, >= $50k: +22, >= $10k: +14, any: +6
    - Timeline <= 4 weeks: +20, <= 12: +14, <= 26: +8, longer: +3
    - Company size 1-10: +3, 11-50: +8, 51-200: +12, 201+: +15
    - Contact name + valid email: +15

    Missing budget or timeline figures contribute nothing.

    Thresholds:
    - Score >= 80: Priority
    - Score 60-79: High
    - Score 40-59: Medium
    - Score < 40: Low
    """

    SCORING_RULES = {
        # Completeness
        "completeness_per_field": 5,

        # Budget tiers
        "budget_150k": 30,
        "budget_50k": 22,
        "budget_10k": 14,
        "budget_any": 6,

        # Timeline tiers
        "timeline_4w": 20,
        "timeline_12w": 14,
        "timeline_26w": 8,
        "timeline_long": 3,

        # Company size bands
        "size_1-10": 3,
        "size_11-50": 8,
        "size_51-200": 12,
        "size_201-1000": 15,
        "size_1000+": 15,

        # Contact
        "contact_complete": 15,
    }

    COMPLETENESS_FIELDS = ("industry", "primary_goal", "pain_points", "tech_stack")

    # (minimum dollars, rule)
    BUDGET_TIERS: List[Tuple[float, str]] = [
        (150_000, "budget_150k"),
        (50_000, "budget_50k"),
        (10_000, "budget_10k"),
    ]

    # (maximum weeks, rule, urgency)
    TIMELINE_TIERS: List[Tuple[int, str, Urgency]] = [
        (4, "timeline_4w", Urgency.URGENT),
        (12, "timeline_12w", Urgency.ACTIVE),
        (26, "timeline_26w", Urgency.PLANNED),
    ]

    HIGH_BUDGET = 50_000
    SHORT_TIMELINE_WEEKS = 4
    QUARTER_WEEKS = 12

    # Label thresholds
    PRIORITY_THRESHOLD = 80
    HIGH_THRESHOLD = 60
    MEDIUM_THRESHOLD = 40

    def __init__(
        self,
        custom_rules: Optional[Dict[str, int]] = None,
        extractor: Optional[EntityExtractor] = None,
    ):
        """
        Initialize the lead scorer.

        Args:
            custom_rules: Optional custom scoring rules to override defaults
            extractor: Entity extractor used for email validation
        """
        self.rules = self.SCORING_RULES.copy()
        if custom_rules:
            self.rules.update(custom_rules)
        self.extractor = extractor or EntityExtractor()
        self.priority_threshold = self.PRIORITY_THRESHOLD
        self.high_threshold = self.HIGH_THRESHOLD
        self.medium_threshold = self.MEDIUM_THRESHOLD

    def score(self, profile: LeadProfile) -> LeadInsights:
        """
        Calculate insights for a lead profile.

        Safe to call on partially filled or empty profiles.

        Args:
            profile: Lead profile snapshot

        Returns:
            LeadInsights with score and recommendations
        """
        breakdown: Dict[str, int] = {
            "completeness": self._score_completeness(profile),
            "budget": self._score_budget(profile.budget_value),
            "timeline": self._score_timeline(profile.timeline_weeks),
            "company_size": self._score_company_size(profile.company_size),
            "contact": self._score_contact(profile),
        }
        breakdown = {k: v for k, v in breakdown.items() if v != 0}

        score = max(0, min(100, sum(breakdown.values())))
        playbook_key = self._select_playbook(profile)

        return LeadInsights(
            score=score,
            score_label=self._label_for(score),
            urgency=self.urgency_for(profile.timeline_weeks),
            recommended_playbook=PLAYBOOKS[playbook_key],
            playbook_key=playbook_key,
            risks=self._identify_risks(profile),
            next_steps=self._get_next_steps(profile),
            score_breakdown=breakdown,
        )

    def _score_completeness(self, profile: LeadProfile) -> int:
        filled = sum(1 for name in self.COMPLETENESS_FIELDS if getattr(profile, name))
        return filled * self.rules["completeness_per_field"]

    def _score_budget(self, budget_value: Optional[float]) -> int:
        """Budget signal; unknown budget scores zero."""
        if budget_value is None or budget_value <= 0:
            return 0
        for minimum, rule in self.BUDGET_TIERS:
            if budget_value >= minimum:
                return self.rules[rule]
        return self.rules["budget_any"]

    def _score_timeline(self, weeks: Optional[int]) -> int:
        """Timeline signal; shorter timelines score higher, unknown scores zero."""
        if weeks is None:
            return 0
        for maximum, rule, _ in self.TIMELINE_TIERS:
            if weeks <= maximum:
                return self.rules[rule]
        return self.rules["timeline_long"]

    def _score_company_size(self, company_size: Optional[str]) -> int:
        if not company_size:
            return 0
        return self.rules.get(f"size_{company_size}", 0)

    def _score_contact(self, profile: LeadProfile) -> int:
        if profile.contact_name and self.extractor.is_valid_email(profile.contact_email):
            return self.rules["contact_complete"]
        return 0

    def urgency_for(self, weeks: Optional[int]) -> Urgency:
        """Get urgency for a timeline in weeks."""
        if weeks is None:
            return Urgency.UNKNOWN
        for maximum, _, urgency in self.TIMELINE_TIERS:
            if weeks <= maximum:
                return urgency
        return Urgency.LONG_HORIZON

    def _label_for(self, score: int) -> ScoreLabel:
        if score >= self.priority_threshold:
            return ScoreLabel.PRIORITY
        elif score >= self.high_threshold:
            return ScoreLabel.HIGH
        elif score >= self.medium_threshold:
            return ScoreLabel.MEDIUM
        return ScoreLabel.LOW

    def _identify_risks(self, profile: LeadProfile) -> List[str]:
        """Evaluate each risk predicate; every true predicate adds one entry."""
        risks: List[str] = []

        if profile.budget_value is None:
            risks.append(RISK_NO_BUDGET)

        if profile.timeline_weeks is None:
            risks.append(RISK_NO_TIMELINE)

        if not profile.contact_email:
            risks.append(RISK_NO_EMAIL)
        elif not self.extractor.is_valid_email(profile.contact_email):
            risks.append(RISK_INVALID_EMAIL)

        if not profile.pain_points:
            risks.append(RISK_NO_PAIN_POINTS)

        if not profile.contact_name:
            risks.append(RISK_NO_CONTACT)

        if profile.company_size == "1-10":
            risks.append(RISK_MICRO_TEAM)

        if profile.timeline_weeks is not None and profile.timeline_weeks > 26:
            risks.append(RISK_LONG_HORIZON)

        return risks

    def _get_next_steps(self, profile: LeadProfile) -> List[str]:
        """
        Build follow-up actions, most field-specific first.

        The generic CRM step is always last, so the list is never empty.
        """
        steps: List[str] = []

        if profile.pain_points:
            steps.append(f"Prepare a discovery brief that addresses: {profile.pain_points}")

        if profile.primary_goal and profile.industry:
            steps.append(
                f"Share a {profile.industry} case study tied to the goal: {profile.primary_goal}"
            )
        elif profile.primary_goal:
            steps.append(f"Frame the first call around the goal: {profile.primary_goal}")

        if profile.tech_stack:
            steps.append(f"Map integration points with {profile.tech_stack}")

        if profile.budget_value is not None and profile.budget_value >= self.HIGH_BUDGET:
            steps.append("Loop in an account executive to scope a tailored proposal")
        elif profile.budget_value is None:
            steps.append("Qualify the budget range on the first call")

        if profile.timeline_weeks is not None and profile.timeline_weeks <= self.SHORT_TIMELINE_WEEKS:
            steps.append("Book a discovery call within 48 hours")
        elif profile.timeline_weeks is None:
            steps.append("Confirm the decision timeline and key milestones")

        if self.extractor.is_valid_email(profile.contact_email):
            steps.append(f"Send a recap email to {profile.contact_email.strip()}")
        else:
            steps.append("Collect a direct email for follow-up")

        steps.append(GENERIC_NEXT_STEP)

        # Preserve order, drop duplicates
        return list(dict.fromkeys(steps))

    def _select_playbook(self, profile: LeadProfile) -> str:
        """Pick the first matching playbook in priority order."""
        budget = profile.budget_value
        weeks = profile.timeline_weeks
        high_budget = budget is not None and budget >= self.HIGH_BUDGET

        rules = [
            ("enterprise", profile.company_size in ENTERPRISE_SIZES and high_budget),
            ("fast_track", high_budget and weeks is not None and weeks <= self.QUARTER_WEEKS),
            ("rapid_response", weeks is not None and weeks <= self.SHORT_TIMELINE_WEEKS),
            ("mid_market", profile.company_size == "51-200"),
            ("value_first", bool(profile.pain_points) and budget is None),
        ]
        for key, matched in rules:
            if matched:
                return key
        return "nurture"

    def adjust_thresholds(self, priority: int = 80, high: int = 60, medium: int = 40):
        """
        Adjust label thresholds.

        Args:
            priority: Threshold for priority leads (default 80)
            high: Threshold for high leads (default 60)
            medium: Threshold for medium leads (default 40)

        Raises:
            ValueError: If thresholds are not strictly descending within 0-100
        """
        if not (100 >= priority > high > medium >= 0):
            raise ValueError(
                f"Thresholds must satisfy 100 >= priority > high > medium >= 0, "
                f"got {priority}/{high}/{medium}"
            )
        self.priority_threshold = priority
        self.high_threshold = high
        self.medium_threshold = medium
        logger.info(f"Score thresholds set to priority={priority} high={high} medium={medium}")


_default_scorer = LeadScorer()


def evaluate_lead(profile: LeadProfile) -> LeadInsights:
    """Score a profile with the default rubric."""
    return _default_scorer.score(profile)
