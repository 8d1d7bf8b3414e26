"""
Service initialization and dependency injection for Lead Concierge API.

Creates and manages all service instances used by the API. The API
hosts a single conversation engine: one conversation, one lead.
"""

import logging
from typing import Optional

from config.settings import get_settings, Settings
from lead_scoring.entity_extractor import EntityExtractor
from lead_scoring.scoring_model import LeadScorer
from database.lead_store import LeadStore
from api.flows.engine import ConversationEngine

logger = logging.getLogger(__name__)


class Services:
    """Container for all application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.entity_extractor: Optional[EntityExtractor] = None
        self.lead_scorer: Optional[LeadScorer] = None
        self.lead_store: Optional[LeadStore] = None
        self.engine: Optional[ConversationEngine] = None
        self._initialized = False

    def initialize(self):
        """Initialize all services."""
        if self._initialized:
            return

        self.settings = get_settings()
        logger.info(f"Initializing services for {self.settings.brand_name}")

        self._init_lead_scoring()
        self._init_lead_store()
        self._init_engine()
        self._initialized = True
        logger.info("All services initialized successfully")

    def _init_lead_scoring(self):
        """Initialize lead scoring components."""
        self.entity_extractor = EntityExtractor()
        self.lead_scorer = LeadScorer(extractor=self.entity_extractor)
        self.lead_scorer.adjust_thresholds(
            priority=self.settings.lead_score_threshold_priority,
            high=self.settings.lead_score_threshold_high,
            medium=self.settings.lead_score_threshold_medium,
        )
        logger.info("Lead scoring services ready")

    def _init_lead_store(self):
        """Initialize the lead store; the API keeps working without it."""
        try:
            self.lead_store = LeadStore(
                self.settings.database_url,
                history_limit=self.settings.lead_history_limit,
            )
        except Exception as e:
            logger.error(f"Lead store initialization failed: {e}")
            logger.warning("API starting in degraded mode: completed leads won't be stored")
            self.lead_store = None

    def _init_engine(self):
        """Initialize the conversation engine."""
        self.engine = ConversationEngine(
            scorer=self.lead_scorer,
            lead_sink=self.lead_store,
        )
        logger.info(f"Conversation engine ready ({len(self.engine.steps)} steps)")

    def shutdown(self):
        """Close the lead store; the next initialize() starts from scratch."""
        if self.lead_store:
            self.lead_store.close()
        self.lead_store = None
        self.engine = None
        self._initialized = False

    @property
    def is_ready(self) -> bool:
        return self._initialized and self.engine is not None

    def health(self) -> dict:
        """Return health status of all services."""
        return {
            "initialized": self._initialized,
            "lead_scoring": self.lead_scorer is not None,
            "lead_store": self.lead_store is not None,
            "engine": self.engine is not None,
        }


# Singleton
_services = Services()


def get_services() -> Services:
    """Get the global services instance, initializing it on first use."""
    if not _services._initialized:
        _services.initialize()
    return _services


def initialize_services():
    """Initialize all services (called at startup)."""
    _services.initialize()
