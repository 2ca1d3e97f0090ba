"""
DEX - Session Journal.

Lightweight JSONL journal of what happened in one session: day completions,
phase moves, flags, briefing generations, queue reads. Meant for debugging
a session after the fact, not for metrics.

Usage:
    from dex.observability.session_logger import init_session_logger

    journal = init_session_logger()
    journal.state_change("user-1", "profile", "day_2", "day_3", reason="complete_day")
    journal.close()

Log format (JSONL):
    {"ts": "2026-01-05T09:30:00", "event": "state_change", "entity_id": "user-1", ...}
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, TextIO


# Where to write journals
LOG_DIR = Path("session_logs")

# Max string length before truncation
MAX_STRING_LEN = 200

# Max list items to show
MAX_LIST_ITEMS = 5


def _truncate_value(value: Any, depth: int = 0) -> Any:
    """
    Truncate values for logging.

    - Strings > MAX_STRING_LEN get cut with a char count
    - Lists > MAX_LIST_ITEMS show first N + count
    - Enums and dataclasses are flattened to plain values
    """
    if depth > 3:
        return "<nested>"

    if value is None or isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, str):
        if len(value) > MAX_STRING_LEN:
            return value[:MAX_STRING_LEN] + f"... ({len(value)} chars)"
        return value

    if isinstance(value, (list, tuple)):
        items = [_truncate_value(v, depth + 1) for v in value[:MAX_LIST_ITEMS]]
        if len(value) > MAX_LIST_ITEMS:
            items.append(f"... +{len(value) - MAX_LIST_ITEMS} more")
        return items

    if isinstance(value, dict):
        return {str(k): _truncate_value(v, depth + 1) for k, v in value.items()}

    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "model_dump"):
        return _truncate_value(value.model_dump(), depth)
    if hasattr(value, "__dict__"):
        return _truncate_value(vars(value), depth)

    return str(value)[:MAX_STRING_LEN]


class SessionLogger:
    """
    Per-session journal that appends JSONL to a file.

    When disabled every method is a no-op, so callers never need to check.
    """

    def __init__(self, session_id: str | None = None, enabled: bool = True, log_dir: Path | None = None):
        self.enabled = enabled
        self.log_file: TextIO | None = None
        self.log_path: Path | None = None
        self._event_count = 0

        if not enabled:
            return

        directory = log_dir or LOG_DIR
        directory.mkdir(parents=True, exist_ok=True)

        if session_id is None:
            session_id = datetime.now().strftime("%Y%m%d_%H%M%S")

        self.session_id = session_id
        self.log_path = directory / f"session_{session_id}.jsonl"
        self.log_file = open(self.log_path, "a", encoding="utf-8")

        self._write({"event": "session_start", "session_id": session_id})

    def _write(self, data: dict) -> None:
        if not self.enabled or self.log_file is None:
            return
        self._event_count += 1
        entry = {"ts": datetime.now().isoformat(), **data}
        self.log_file.write(json.dumps(entry, default=str) + "\n")
        self.log_file.flush()

    # =========================================================================
    # Domain events
    # =========================================================================

    def state_change(
        self,
        entity_id: str,
        entity_type: str,
        old_state: str | None,
        new_state: str,
        reason: str | None = None,
    ) -> None:
        """Profile day advance, Day-5 phase move, preboarding status change."""
        self._write({
            "event": "state_change",
            "entity_id": entity_id,
            "entity_type": entity_type,
            "old_state": old_state,
            "new_state": new_state,
            "reason": reason,
        })

    def rejected(self, operation: str, error: str) -> None:
        """A StateError or ModerationError turned into a blocked affordance."""
        self._write({"event": "rejected", "operation": operation, "error": error})

    def generation(
        self,
        user_id: str,
        token: int,
        card_ids: list[str],
        generated: bool,
        fallback_reason: str | None = None,
        stale: bool = False,
    ) -> None:
        """Outcome of one daily briefing request."""
        self._write({
            "event": "generation",
            "user_id": user_id,
            "token": token,
            "card_ids": _truncate_value(card_ids),
            "generated": generated,
            "fallback_reason": fallback_reason,
            "stale": stale,
        })

    def log(self, event_type: str, **kwargs) -> None:
        """Log custom event."""
        self._write({"event": event_type, **_truncate_value(kwargs)})

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> str | None:
        """Close the journal. Returns its path."""
        if self.log_file:
            self._write({"event": "session_end", "total_events": self._event_count})
            self.log_file.close()
            self.log_file = None
            return str(self.log_path)
        return None


# =============================================================================
# Global Instance
# =============================================================================

_global_logger: SessionLogger | None = None


def get_session_logger() -> SessionLogger:
    """Get or create the global journal (disabled unless initialized)."""
    global _global_logger
    if _global_logger is None:
        _global_logger = SessionLogger(enabled=False)
    return _global_logger


def init_session_logger(session_id: str | None = None, log_dir: Path | None = None) -> SessionLogger:
    """Start a new global journal, closing any previous one."""
    global _global_logger
    if _global_logger is not None:
        _global_logger.close()
    _global_logger = SessionLogger(session_id=session_id, enabled=True, log_dir=log_dir)
    return _global_logger


def close_session_logger() -> str | None:
    """Close the global journal."""
    global _global_logger
    if _global_logger is not None:
        path = _global_logger.close()
        _global_logger = None
        return path
    return None
