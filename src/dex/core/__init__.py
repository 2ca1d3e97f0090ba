"""
DEX Core - domain model, errors, notifications, persistence.
"""
