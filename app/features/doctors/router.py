# Doctor Sharing Feature - Router

from fastapi import APIRouter, Depends, status

from app.dependencies import get_doctor_access_service
from app.features.auth.dependencies import get_current_user
from app.features.auth.models import AuthenticatedUser
from app.features.doctors.models import Doctor
from app.features.doctors.schemas import (
    DirectorySearchResponse,
    DoctorListResponse,
    DoctorViewResponse,
    GrantAccessRequest,
    MessageResponse,
)
from app.features.doctors.service import DoctorAccessService


router = APIRouter(prefix="/doctors", tags=["Doctors"])

doctor_view_router = APIRouter(prefix="/doctor-view", tags=["Doctor View"])


# ============== Owner Endpoints (Require User Auth) ==============

@router.get("", response_model=DoctorListResponse)
async def list_doctors(
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: DoctorAccessService = Depends(get_doctor_access_service),
):
    """List doctors the current user has shared records with."""
    doctors = await service.list_doctors(current_user.id)
    return DoctorListResponse(doctors=doctors, total=len(doctors))


@router.get("/directory", response_model=DirectorySearchResponse)
async def search_directory(
    q: str = "",
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: DoctorAccessService = Depends(get_doctor_access_service),
):
    """
    Search the doctor directory.

    - **q**: Case-insensitive match on doctor name or hospital
    """
    return DirectorySearchResponse(results=service.search_directory(q))


@router.post("", response_model=Doctor, status_code=status.HTTP_201_CREATED)
async def grant_access(
    request: GrantAccessRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: DoctorAccessService = Depends(get_doctor_access_service),
):
    """
    Share family members' records with a doctor.

    Sharing again with the same doctor adds the new family members and keeps
    the existing link.
    """
    return await service.grant(current_user.id, request.doctor, request.family_member_ids)


@router.delete("/{doctor_id}", response_model=MessageResponse)
async def revoke_access(
    doctor_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    service: DoctorAccessService = Depends(get_doctor_access_service),
):
    """Revoke a doctor's access. The link stops working immediately."""
    await service.revoke(current_user.id, doctor_id)
    return MessageResponse(message="Access revoked")


# ============== Public Endpoint (Sharing Token) ==============

@doctor_view_router.get("/{token}", response_model=DoctorViewResponse)
async def doctor_view(
    token: str,
    service: DoctorAccessService = Depends(get_doctor_access_service),
):
    """Read-only records for the doctor holding this link."""
    return await service.resolve(token)
