# Family Hub Feature - Models

from typing import Optional
from pydantic import BaseModel


class FamilyMember(BaseModel):
    """A person whose records the owning account manages."""

    id: Optional[str] = None
    user_id: str
    name: str
    relationship: str
    photo_url: str = ""
