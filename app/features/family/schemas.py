# Family Hub Feature - Schemas

from typing import List
from pydantic import BaseModel, Field

from app.features.family.models import FamilyMember


class CreateFamilyMemberRequest(BaseModel):
    """Request schema for adding a family member."""
    name: str = Field(..., min_length=1, max_length=100)
    relationship: str = Field(..., min_length=1, max_length=50)


class FamilyMemberListResponse(BaseModel):
    family_members: List[FamilyMember]
    total: int
