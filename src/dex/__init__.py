"""
DEX - Onboarding journey and daily engagement core.

Areas:
- Onboarding: five-day journey, preboarding readiness, graduation (see `onboarding`)
- Daily 3: role-targeted card feed with weekday rhythm and moderation
- Manager: action queue derived from team burnout, load and skill signals
"""

__version__ = "1.0.0"
