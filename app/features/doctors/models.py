# Doctor Sharing Feature - Models

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class DoctorProfile(BaseModel):
    """Directory entry for a doctor that records can be shared with."""

    id: str
    name: str
    hospital: str
    specialty: Optional[str] = None


class Doctor(DoctorProfile):
    """A doctor holding a read-only sharing link from one account.

    ``id`` is the record id and ``directory_id`` the directory entry it was
    granted from. ``access_token`` is the raw token, matched exactly on resolve;
    ``access_link`` is the URL handed to the doctor.
    """

    id: Optional[str] = None
    directory_id: str
    user_id: str  # Account that granted access
    access_token: str
    access_link: str
    created_at: datetime
    family_member_ids: List[str] = Field(default_factory=list)
