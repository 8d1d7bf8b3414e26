"""
API Routes for Lead Concierge.
"""

from . import conversation, leads

__all__ = ["conversation", "leads"]
