# Doctor Sharing Feature - Schemas

from typing import List
from pydantic import BaseModel, Field

from app.features.doctors.models import Doctor, DoctorProfile
from app.features.documents.models import HealthDocument


class GrantAccessRequest(BaseModel):
    """Request schema for sharing family members with a doctor."""
    doctor: DoctorProfile
    family_member_ids: List[str] = Field(default_factory=list)


class DoctorListResponse(BaseModel):
    doctors: List[Doctor]
    total: int


class DirectorySearchResponse(BaseModel):
    results: List[DoctorProfile]


class DoctorViewResponse(BaseModel):
    """Read-only view a doctor sees through a sharing link."""
    doctor_name: str
    patient_label: str
    documents: List[HealthDocument]


class MessageResponse(BaseModel):
    """Generic message response."""
    message: str
