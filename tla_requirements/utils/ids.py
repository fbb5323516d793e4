"""
Identifier helpers for requirement records.
"""

from __future__ import annotations

import uuid


def new_requirement_id() -> str:
    """Return an opaque 8-character identifier for a new requirement."""
    return uuid.uuid4().hex[:8]
