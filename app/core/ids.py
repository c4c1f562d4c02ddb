"""Identifier generation.

Every record id and sharing token is minted through an ``IdGenerator`` so
tests can swap in a deterministic one.
"""

import uuid

from app.core.security import generate_sharing_token


class IdGenerator:
    """Random ids of the form ``<prefix>-<12 hex chars>``."""

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:12]}"

    def new_token(self) -> str:
        return generate_sharing_token()
