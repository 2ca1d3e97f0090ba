"""
Request tokens for the async boundaries.

Briefing generation and preboarding refresh can overlap: a user changes
context, a second request goes out, and the first one resolves late. Each
request takes a token; a result is applied only if its token is still the
latest one issued, so a slow stale response can never overwrite a newer one.
"""

import itertools


class RequestTokens:
    """Monotonic token issuer for one async boundary."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._latest = 0

    def issue(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def is_latest(self, token: int) -> bool:
        return token == self._latest

    @property
    def latest(self) -> int:
        return self._latest
