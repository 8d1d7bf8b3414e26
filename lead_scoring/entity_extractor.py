"""
Entity Extraction for Lead Concierge.

Turns single free-text answers into normalized lead values:
- Budget amounts ($50k, 50,000, $1.2M, ranges)
- Timelines in weeks (3 months, asap, next quarter)
- Company size bands
- Email addresses
- Industry names and pain-point themes

Everything here is deterministic pattern matching; unrecognized text
yields None rather than an error.
"""

import re
import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


# Headcount bands, smallest first: (label, inclusive upper bound)
COMPANY_SIZE_BANDS: List[Tuple[str, Optional[int]]] = [
    ("1-10", 10),
    ("11-50", 50),
    ("51-200", 200),
    ("201-1000", 1000),
    ("1000+", None),
]


class EntityExtractor:
    """
    Extracts normalized lead values from customer answers.

    Uses regex patterns and keyword tables only.
    """

    # Phrases meaning "no figure yet"
    UNKNOWN_PHRASES = [
        "not sure", "unsure", "don't know", "dont know", "no idea",
        "tbd", "to be determined", "unknown", "no budget", "n/a",
    ]

    BUDGET_MULTIPLIERS = {
        "k": 1_000,
        "thousand": 1_000,
        "m": 1_000_000,
        "mm": 1_000_000,
        "million": 1_000_000,
        "b": 1_000_000_000,
        "bn": 1_000_000_000,
        "billion": 1_000_000_000,
    }

    # Timeline keywords, checked in order after numeric patterns
    TIMELINE_KEYWORDS: List[Tuple[str, Optional[int]]] = [
        ("asap", 2),
        ("as soon as possible", 2),
        ("immediately", 2),
        ("right away", 2),
        ("urgent", 2),
        ("this week", 1),
        ("next week", 2),
        ("this month", 4),
        ("end of the month", 4),
        ("end of month", 4),
        ("next month", 8),
        ("this quarter", 12),
        ("next quarter", 24),
        ("this year", 36),
        ("end of the year", 36),
        ("end of year", 36),
        ("next year", 52),
    ]

    WEEKS_PER_UNIT = {
        "day": 1 / 7,
        "week": 1,
        "wk": 1,
        "month": 4,
        "mo": 4,
        "quarter": 12,
        "year": 52,
        "yr": 52,
    }

    WORD_NUMBERS = {
        "a": 1, "an": 1, "one": 1, "two": 2, "three": 3, "four": 4,
        "five": 5, "six": 6, "seven": 7, "eight": 8, "nine": 9,
        "ten": 10, "eleven": 11, "twelve": 12,
        "couple of": 2, "a couple of": 2, "few": 3, "a few": 3,
    }

    COMPANY_SIZE_KEYWORDS: List[Tuple[str, str]] = [
        ("just me", "1-10"),
        ("solo", "1-10"),
        ("freelance", "1-10"),
        ("tiny", "1-10"),
        ("startup", "11-50"),
        ("start-up", "11-50"),
        ("smb", "11-50"),
        ("small", "11-50"),
        ("mid-market", "51-200"),
        ("midmarket", "51-200"),
        ("mid-size", "51-200"),
        ("midsize", "51-200"),
        ("medium", "51-200"),
        ("large", "201-1000"),
        ("enterprise", "1000+"),
        ("fortune", "1000+"),
        ("global", "1000+"),
    ]

    INDUSTRY_ALIASES = {
        "saas": "SaaS",
        "b2b saas": "SaaS",
        "software": "Software",
        "fintech": "Financial services",
        "finance": "Financial services",
        "financial services": "Financial services",
        "banking": "Financial services",
        "ecommerce": "E-commerce",
        "e-commerce": "E-commerce",
        "retail": "Retail",
        "health": "Healthcare",
        "healthcare": "Healthcare",
        "healthtech": "Healthcare",
        "medical": "Healthcare",
        "edtech": "Education",
        "education": "Education",
        "manufacturing": "Manufacturing",
        "logistics": "Logistics",
        "real estate": "Real estate",
        "agency": "Agency",
    }

    # Pain-point themes, checked in order
    PAIN_THEMES = {
        "manual_work": [
            "manual", "spreadsheet", "excel", "copy paste", "copy-paste",
            "data entry", "repetitive", "by hand",
        ],
        "pipeline": [
            "lead", "pipeline", "conversion", "prospect", "outbound",
            "inbound", "demand", "follow-up", "follow up",
        ],
        "retention": [
            "churn", "retention", "renewal", "onboarding", "support",
        ],
        "cost": [
            "cost", "expensive", "budget", "overspend", "spend",
        ],
    }

    def __init__(self):
        """Initialize the entity extractor."""
        self._build_patterns()

    def _build_patterns(self):
        """Build regex patterns for entity extraction."""
        # Email pattern (whole answer)
        self.email_pattern = re.compile(
            r'^[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$'
        )

        # Amount with optional currency and magnitude: $50k, 1.2M, 50,000
        self.amount_pattern = re.compile(
            r'(?:\$|usd\s*)?(\d[\d,]*(?:\.\d+)?)\s*'
            r'(thousand|million|billion|mm|bn|k|m|b)?\b',
            re.IGNORECASE
        )

        # Range of durations sharing one unit: 2-3 months, 4 to 6 weeks
        self.duration_range_pattern = re.compile(
            r'(\d+(?:\.\d+)?)\s*(?:-|to|–)\s*(\d+(?:\.\d+)?)\s*'
            r'(day|week|wk|month|mo|quarter|year|yr)s?\b',
            re.IGNORECASE
        )

        # Single duration: 6 weeks, 6+ months, 1 yr
        self.duration_pattern = re.compile(
            r'(\d+(?:\.\d+)?)\s*\+?\s*(day|week|wk|month|mo|quarter|year|yr)s?\b',
            re.IGNORECASE
        )

        # Spelled-out duration: a month, two weeks, a couple of months
        word_numbers = "|".join(
            sorted((re.escape(w) for w in self.WORD_NUMBERS), key=len, reverse=True)
        )
        self.word_duration_pattern = re.compile(
            rf'\b({word_numbers})\s+(day|week|month|quarter|year)s?\b',
            re.IGNORECASE
        )

        # Headcount numbers, optional k suffix and trailing plus
        self.headcount_pattern = re.compile(
            r'(\d[\d,]*(?:\.\d+)?)\s*(k\b)?\s*(\+)?',
            re.IGNORECASE
        )

        # Whole-word timeline keywords; "not urgent" must not read as urgent
        self.timeline_keyword_patterns = [
            (re.compile(rf'\b{re.escape(keyword)}\b'), weeks)
            for keyword, weeks in self.TIMELINE_KEYWORDS
        ]
        self.negation_pattern = re.compile(r"\b(?:not|no|isn't|isnt)\s+$")

    def _is_unknown(self, text_lower: str) -> bool:
        return any(phrase in text_lower for phrase in self.UNKNOWN_PHRASES)

    def parse_budget(self, text: str) -> Optional[float]:
        """
        Parse a budget answer into dollars.

        Ranges resolve to their upper bound ("$10k-$50k" -> 50000).

        Returns:
            Budget in dollars, or None if no figure was given
        """
        text_lower = text.strip().lower()
        if not text_lower or self._is_unknown(text_lower):
            return None

        values = []
        for match in self.amount_pattern.finditer(text_lower):
            number = match.group(1).replace(",", "")
            try:
                value = float(number)
            except ValueError:
                continue
            unit = (match.group(2) or "").lower()
            value *= self.BUDGET_MULTIPLIERS.get(unit, 1)
            if value > 0:
                values.append(value)

        if not values:
            return None
        return max(values)

    def parse_timeline_weeks(self, text: str) -> Optional[int]:
        """
        Parse a timeline answer into weeks.

        Returns:
            Whole number of weeks (at least 1), or None if unrecognized
        """
        text_lower = text.strip().lower()
        if not text_lower:
            return None

        range_match = self.duration_range_pattern.search(text_lower)
        if range_match:
            upper = float(range_match.group(2))
            return self._to_weeks(upper, range_match.group(3))

        match = self.duration_pattern.search(text_lower)
        if match:
            return self._to_weeks(float(match.group(1)), match.group(2))

        word_match = self.word_duration_pattern.search(text_lower)
        if word_match:
            amount = self.WORD_NUMBERS[word_match.group(1).lower()]
            return self._to_weeks(amount, word_match.group(2))

        for pattern, weeks in self.timeline_keyword_patterns:
            for keyword_match in pattern.finditer(text_lower):
                if not self.negation_pattern.search(text_lower[:keyword_match.start()]):
                    return weeks

        return None

    def _to_weeks(self, amount: float, unit: str) -> Optional[int]:
        weeks = amount * self.WEEKS_PER_UNIT[unit.lower()]
        if weeks <= 0:
            return None
        return max(1, int(round(weeks)))

    def parse_company_size(self, text: str) -> Optional[str]:
        """
        Map a headcount answer onto a company size band.

        Ranges resolve to their upper bound ("51-200" -> "51-200");
        a trailing plus means "more than" ("1000+" -> "1000+").

        Returns:
            Band label from COMPANY_SIZE_BANDS, or None
        """
        text_lower = text.strip().lower()
        if not text_lower:
            return None

        headcounts = []
        for match in self.headcount_pattern.finditer(text_lower):
            try:
                value = float(match.group(1).replace(",", ""))
            except ValueError:
                continue
            if match.group(2):
                value *= 1_000
            if match.group(3):
                value += 1
            if value >= 1:
                headcounts.append(value)

        if headcounts:
            return self.size_band(max(headcounts))

        for keyword, band in self.COMPANY_SIZE_KEYWORDS:
            if keyword in text_lower:
                return band

        return None

    @staticmethod
    def size_band(headcount: float) -> str:
        """Get the band label for a headcount."""
        for label, upper in COMPANY_SIZE_BANDS:
            if upper is None or headcount <= upper:
                return label
        return COMPANY_SIZE_BANDS[-1][0]

    def is_valid_email(self, text: Optional[str]) -> bool:
        """Check that text is a single syntactically valid email address."""
        if not text:
            return False
        return bool(self.email_pattern.match(text.strip()))

    def normalize_industry(self, text: str) -> str:
        """Normalize well-known industry aliases; keep anything else as typed."""
        cleaned = " ".join(text.split())
        return self.INDUSTRY_ALIASES.get(cleaned.lower(), cleaned)

    def detect_pain_theme(self, text: str) -> Optional[str]:
        """Detect the dominant pain-point theme of an answer."""
        text_lower = text.lower()
        for theme, keywords in self.PAIN_THEMES.items():
            if any(keyword in text_lower for keyword in keywords):
                return theme
        return None
