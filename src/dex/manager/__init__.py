"""
DEX Manager - team-level views for people managers.
"""

from .action_queue import (
    AcknowledgementSet,
    ActionQueueItem,
    apply_staffing_plan,
    generate_action_queue,
    merge_acknowledgements,
)

__all__ = [
    "AcknowledgementSet",
    "ActionQueueItem",
    "apply_staffing_plan",
    "generate_action_queue",
    "merge_acknowledgements",
]
