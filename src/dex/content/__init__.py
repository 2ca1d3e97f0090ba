"""
DEX Content - the Daily 3 feed.

Selection picks the cards, moderation hides what readers flagged,
explainers say why a card is there, and generation wraps it all behind
the async boundary the UI talks to.
"""

from .catalog import ContentCatalog, default_catalog
from .explainer import ExplainerContext, explain
from .generation import BriefingService, DailyBriefing
from .moderation import ModerationEngine, ModerationState
from .selection import get_weekday_bucket, select_daily_cards

__all__ = [
    "BriefingService",
    "ContentCatalog",
    "DailyBriefing",
    "ExplainerContext",
    "ModerationEngine",
    "ModerationState",
    "default_catalog",
    "explain",
    "get_weekday_bucket",
    "select_daily_cards",
]
