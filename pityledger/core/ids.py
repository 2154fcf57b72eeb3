"""
Stable identifier generation.
"""

import hashlib


def stable_id(*parts: str) -> str:
    """
    Generate stable ID derived from inputs (no randomness).

    Used to assign PullEvent.id from the importer's external_id, so that
    re-importing the same pull yields the same id.

    Example:
        stable_id("pull", "1704110400000000001") -> "9c1e..."
    """
    raw = "|".join(parts).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()[:32]
