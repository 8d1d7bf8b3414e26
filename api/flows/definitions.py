"""
Lead discovery step definitions for Lead Concierge.

Each step is plain data plus one parse function:
parse(text, profile) -> StepResult. Parse functions are pure; they
never touch storage and never raise on bad input.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from lead_scoring.entity_extractor import EntityExtractor
from lead_scoring.lead_profile import LeadProfile

_extractor = EntityExtractor()

SKIP_WORDS = {"skip", "skip for now", "later", "pass", "n/a", "prefer not to say"}
NOTHING_WORDS = {"no", "nope", "nothing", "nothing else", "none", "that's all", "thats all", "all good", "no thanks"}


@dataclass(frozen=True)
class StepResult:
    """Outcome of parsing one answer."""
    success: bool
    updates: Dict[str, Any] = field(default_factory=dict)
    follow_up: Optional[str] = None
    retry_message: Optional[str] = None

    @classmethod
    def ok(cls, updates: Optional[Dict[str, Any]] = None, follow_up: Optional[str] = None) -> "StepResult":
        return cls(success=True, updates=dict(updates or {}), follow_up=follow_up)

    @classmethod
    def retry(cls, message: str) -> "StepResult":
        return cls(success=False, retry_message=message)


ParseFn = Callable[[str, LeadProfile], StepResult]


@dataclass(frozen=True)
class LeadStep:
    """A single question in the discovery conversation."""
    id: str
    question: str
    parse: ParseFn
    helper: Optional[str] = None
    suggestions: List[str] = field(default_factory=list)


def _blank(text: str) -> bool:
    return not text or not text.strip()


def _clean(text: str) -> str:
    return " ".join(text.split())


def _has_alnum(text: str) -> bool:
    return any(ch.isalnum() for ch in text)


def _has_alpha(text: str) -> bool:
    return any(ch.isalpha() for ch in text)


def parse_company_name(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("I didn't catch a company name. What's the company called?")
    name = _clean(text)
    if len(name) < 2 or not _has_alnum(name):
        return StepResult.retry("That looks a little short. Could you share the full company name?")
    return StepResult.ok({"company_name": name}, follow_up=f"Great, thanks! Let's learn a bit about {name}.")


def parse_industry(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text) or not _has_alpha(text):
        return StepResult.retry(
            "Which industry or vertical are you in? Something like SaaS, healthcare or manufacturing works."
        )
    return StepResult.ok({"industry": _extractor.normalize_industry(text)})


def parse_company_size(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("How many people work there? A rough number is fine.")
    band = _extractor.parse_company_size(text)
    if band is None:
        return StepResult.retry(
            "I couldn't map that to a team size. A ballpark number like 25 or a range like 51-200 works."
        )
    return StepResult.ok({"company_size": band})


def parse_primary_goal(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("What's the main outcome you're hoping for? A sentence is plenty.")
    goal = _clean(text)
    if len(goal) < 3 or not _has_alpha(goal):
        return StepResult.retry("Could you say a little more about the goal you have in mind?")
    return StepResult.ok({"primary_goal": goal})


PAIN_FOLLOW_UPS = {
    "manual_work": "Manual busywork is a great place to start. We see quick wins there.",
    "pipeline": "Pipeline problems are right in our wheelhouse.",
    "retention": "Keeping customers around is worth a lot. Noted.",
    "cost": "Got it, we'll keep cost front and center.",
}


def parse_pain_points(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("What's getting in the way today? Even one pain point helps.")
    pains = _clean(text)
    if len(pains) < 3 or not _has_alpha(pains):
        return StepResult.retry("Could you describe the challenge in a few more words?")
    theme = _extractor.detect_pain_theme(pains)
    follow_up = PAIN_FOLLOW_UPS.get(theme, "Thanks, that context helps a lot.")
    return StepResult.ok({"pain_points": pains}, follow_up=follow_up)


def parse_budget(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("Is there a rough budget range in mind? \"Not sure yet\" is a fine answer too.")
    label = _clean(text)
    value = _extractor.parse_budget(label)
    updates: Dict[str, Any] = {"budget_range": label}
    if value is None:
        return StepResult.ok(updates, follow_up="No problem, we can size it together later.")
    updates["budget_value"] = value
    return StepResult.ok(updates)


def parse_timeline(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("When would you like to have something in place? Even \"just exploring\" helps.")
    label = _clean(text)
    weeks = _extractor.parse_timeline_weeks(label)
    updates: Dict[str, Any] = {"timeline": label}
    if weeks is not None:
        updates["timeline_weeks"] = weeks
        if weeks <= 4:
            return StepResult.ok(updates, follow_up="Understood, we'll move quickly.")
    return StepResult.ok(updates)


def parse_tech_stack(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("Which tools do you rely on today? \"None yet\" is fine too.")
    stack = _clean(text)
    if len(stack) < 2:
        return StepResult.retry("Could you list a tool or two you use today?")
    return StepResult.ok({"tech_stack": stack})


def parse_contact_name(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text) or not _has_alpha(text):
        return StepResult.retry("Who should we follow up with? A first name is enough.")
    name = _clean(text)
    return StepResult.ok({"contact_name": name}, follow_up=f"Nice to meet you, {name.split()[0]}.")


def parse_contact_email(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("What's the best email to reach you? You can also type \"skip\".")
    answer = text.strip()
    if answer.lower() in SKIP_WORDS:
        return StepResult.ok(follow_up="No worries, we can grab it later.")
    if not _extractor.is_valid_email(answer):
        return StepResult.retry("That email doesn't look quite right. Mind double-checking it?")
    return StepResult.ok({"contact_email": answer.lower()})


def parse_notes(text: str, profile: LeadProfile) -> StepResult:
    if _blank(text):
        return StepResult.retry("Anything else to add? Type \"nothing\" if we're all set.")
    notes = text.strip()
    if notes.lower().rstrip(".!") in NOTHING_WORDS:
        return StepResult.ok()
    return StepResult.ok({"notes": notes})


def get_lead_steps() -> List[LeadStep]:
    """Discovery flow: company, need, budget, timeline, tools, contact, notes."""
    return [
        LeadStep(
            id="company_name",
            question="First up, what's the name of your company?",
            helper="Just the name you go by is perfect.",
            parse=parse_company_name,
        ),
        LeadStep(
            id="industry",
            question="Which industry are you in?",
            helper="Pick one below or describe it in your own words.",
            suggestions=["SaaS", "E-commerce", "Healthcare", "Financial services", "Manufacturing"],
            parse=parse_industry,
        ),
        LeadStep(
            id="company_size",
            question="Roughly how big is the team?",
            helper="A headcount or range works.",
            suggestions=["1-10", "11-50", "51-200", "201-1000", "1000+"],
            parse=parse_company_size,
        ),
        LeadStep(
            id="primary_goal",
            question="What's the main goal you want to hit with us?",
            helper="For example: double qualified demos, cut onboarding time in half.",
            suggestions=["Generate more qualified leads", "Automate manual workflows", "Improve customer retention"],
            parse=parse_primary_goal,
        ),
        LeadStep(
            id="pain_points",
            question="What's getting in the way today?",
            helper="Tell me about the biggest pain points.",
            parse=parse_pain_points,
        ),
        LeadStep(
            id="budget",
            question="Do you have a budget range in mind?",
            helper="A ballpark is fine, we won't hold you to it.",
            suggestions=["Under $10k", "$10k-$50k", "$50k-$150k", "$150k+", "Not sure yet"],
            parse=parse_budget,
        ),
        LeadStep(
            id="timeline",
            question="When would you like to have a solution in place?",
            helper="This helps us plan the right next step.",
            suggestions=["ASAP", "Within 1 month", "This quarter", "6+ months", "Just exploring"],
            parse=parse_timeline,
        ),
        LeadStep(
            id="tech_stack",
            question="Which tools are you using today?",
            helper="CRM, marketing automation, data warehouse, anything relevant.",
            suggestions=["HubSpot", "Salesforce", "Spreadsheets", "None yet"],
            parse=parse_tech_stack,
        ),
        LeadStep(
            id="contact_name",
            question="Who should we follow up with?",
            helper="Your name is perfect if it's you.",
            parse=parse_contact_name,
        ),
        LeadStep(
            id="contact_email",
            question="What's the best email to reach you?",
            helper="We'll only use it to share next steps.",
            suggestions=["Skip for now"],
            parse=parse_contact_email,
        ),
        LeadStep(
            id="notes",
            question="Anything else I should pass along to the team?",
            helper="Context, constraints, names to loop in.",
            suggestions=["Nothing else", "Please reach out by phone"],
            parse=parse_notes,
        ),
    ]
