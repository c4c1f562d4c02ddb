# Family Hub Feature - Router

from fastapi import APIRouter, Depends, status

from app.dependencies import get_family_service
from app.features.auth.dependencies import get_current_user
from app.features.auth.models import AuthenticatedUser
from app.features.family.models import FamilyMember
from app.features.family.schemas import CreateFamilyMemberRequest, FamilyMemberListResponse
from app.features.family.service import FamilyService


router = APIRouter(prefix="/family-members", tags=["Family"])


@router.get("", response_model=FamilyMemberListResponse)
async def list_family_members(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    members = await service.list_family_members(current_user.id)
    return FamilyMemberListResponse(family_members=members, total=len(members))


@router.post("", response_model=FamilyMember, status_code=status.HTTP_201_CREATED)
async def add_family_member(
    request: CreateFamilyMemberRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: FamilyService = Depends(get_family_service),
):
    """
    Add a family member whose records this account manages.

    - **name**: Display name
    - **relationship**: e.g. Self, Father, Child
    """
    return await service.add_family_member(current_user.id, request.name, request.relationship)
