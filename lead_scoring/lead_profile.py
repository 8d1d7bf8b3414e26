"""
Lead profile record for Lead Concierge.

The profile is the structured result of the discovery conversation.
Every field starts as None and is filled by the step that owns it.
"""

from dataclasses import dataclass, fields, replace, asdict
from typing import Any, Dict, Optional


# Original camelCase keys accepted by from_dict()
CAMEL_CASE_ALIASES = {
    "companyName": "company_name",
    "companySize": "company_size",
    "primaryGoal": "primary_goal",
    "painPoints": "pain_points",
    "budgetRange": "budget_range",
    "budgetValue": "budget_value",
    "timelineWeeks": "timeline_weeks",
    "techStack": "tech_stack",
    "contactName": "contact_name",
    "contactEmail": "contact_email",
}


@dataclass(frozen=True)
class LeadProfile:
    """Immutable snapshot of everything collected about a lead."""

    # Company
    company_name: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None  # 1-10, 11-50, 51-200, 201-1000, 1000+

    # Need
    primary_goal: Optional[str] = None
    pain_points: Optional[str] = None

    # Budget (label shown to the user + normalized dollars)
    budget_range: Optional[str] = None
    budget_value: Optional[float] = None

    # Timeline (label shown to the user + normalized weeks)
    timeline: Optional[str] = None
    timeline_weeks: Optional[int] = None

    tech_stack: Optional[str] = None

    # Contact
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None

    notes: Optional[str] = None

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in fields(cls))

    def merge(self, updates: Dict[str, Any]) -> "LeadProfile":
        """
        Return a new profile with updates applied.

        None values are ignored so a merge can never clear a field.

        Raises:
            ValueError: If updates contain an unknown field
        """
        known = set(self.field_names())
        unknown = [key for key in updates if key not in known]
        if unknown:
            raise ValueError(f"Unknown lead fields: {sorted(unknown)}")

        changes = {k: v for k, v in updates.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.field_names())

    def to_dict(self, include_empty: bool = False) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        if include_empty:
            return data
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LeadProfile":
        """Build a profile from a dict, ignoring keys that aren't lead fields."""
        known = set(cls.field_names())
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = CAMEL_CASE_ALIASES.get(key, key)
            if name in known and value is not None:
                values[name] = value
        return cls(**values)
