"""Shared utility helpers used across services."""


def contains(items, value) -> bool:
    """Membership test that tolerates a missing (None) list."""
    return bool(items) and value in items
