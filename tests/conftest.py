"""Shared fixtures for Lead Concierge tests."""

import os
import pytest
from fastapi.testclient import TestClient

# Ensure tests never touch the on-disk lead history
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from api.flows.definitions import get_lead_steps
from api.flows.engine import ConversationEngine
from database.lead_store import LeadStore
from lead_scoring.entity_extractor import EntityExtractor
from lead_scoring.lead_profile import LeadProfile
from lead_scoring.scoring_model import LeadScorer


# One valid answer per step, in step order
VALID_ANSWERS = [
    "Acme Robotics",
    "SaaS",
    "51-200",
    "Generate more qualified leads",
    "Too much manual data entry in spreadsheets",
    "$50k-$150k",
    "Within 1 month",
    "HubSpot and Snowflake",
    "Jane Doe",
    "jane@acme.io",
    "Nothing else",
]


class RecordingSink:
    """LeadSink that remembers every save."""

    def __init__(self):
        self.saved = []

    def save(self, profile, score):
        self.saved.append((profile, score))


class FailingSink:
    def __init__(self):
        self.calls = 0

    def save(self, profile, score):
        self.calls += 1
        raise RuntimeError("disk full")


@pytest.fixture
def valid_answers():
    assert len(VALID_ANSWERS) == len(get_lead_steps())
    return list(VALID_ANSWERS)


@pytest.fixture
def extractor():
    return EntityExtractor()


@pytest.fixture
def scorer():
    return LeadScorer()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def failing_sink():
    return FailingSink()


@pytest.fixture
def engine(sink):
    return ConversationEngine(lead_sink=sink)


@pytest.fixture
def store(tmp_path):
    lead_store = LeadStore(f"sqlite:///{tmp_path / 'leads.db'}", history_limit=3)
    yield lead_store
    lead_store.close()


@pytest.fixture
def full_profile():
    return LeadProfile(
        company_name="Acme Robotics",
        industry="SaaS",
        company_size="1000+",
        primary_goal="Generate more qualified leads",
        pain_points="Manual data entry",
        budget_range="$150k+",
        budget_value=150_000,
        timeline="ASAP",
        timeline_weeks=2,
        tech_stack="HubSpot",
        contact_name="Jane Doe",
        contact_email="jane@acme.io",
    )


@pytest.fixture
def client():
    """Create a FastAPI test client with fresh services."""
    from api.main import app
    with TestClient(app) as test_client:
        yield test_client
