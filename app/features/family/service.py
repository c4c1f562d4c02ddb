# Family Hub Feature - Service

import re
from typing import List

from app.core.logging import logger
from app.features.family.models import FamilyMember
from app.shared.exceptions import NotFoundException
from app.store.base import RecordKind, RecordStore


class FamilyService:
    """Service class for the family members an account manages."""

    def __init__(self, store: RecordStore, avatar_base_url: str = "https://i.pravatar.cc/150"):
        self.store = store
        self.avatar_base_url = avatar_base_url

    async def list_family_members(self, owner_id: str) -> List[FamilyMember]:
        return await self.store.list(RecordKind.FAMILY_MEMBERS, {"user_id": owner_id})

    async def add_family_member(self, owner_id: str, name: str, relationship: str) -> FamilyMember:
        """Create a family member; the avatar URL is derived from the name."""
        avatar_key = re.sub(r"\s", "", name)
        member = FamilyMember(
            user_id=owner_id,
            name=name,
            relationship=relationship,
            photo_url=f"{self.avatar_base_url}?u={avatar_key}",
        )
        member = await self.store.insert(RecordKind.FAMILY_MEMBERS, member)
        logger.info(f"Added family member {member.id} ({relationship}) for user {owner_id}")
        return member

    async def get_family_member(self, owner_id: str, family_member_id: str) -> FamilyMember:
        member = await self.store.get(RecordKind.FAMILY_MEMBERS, family_member_id)
        if member is None or member.user_id not in self.store.owner_ids(owner_id):
            raise NotFoundException("Family member not found")
        return member
