"""
DEX - Observability Package.

Provides the per-session JSONL journal.
"""

from dex.observability.session_logger import (
    SessionLogger,
    close_session_logger,
    get_session_logger,
    init_session_logger,
)

__all__ = [
    "SessionLogger",
    "get_session_logger",
    "init_session_logger",
    "close_session_logger",
]
