"""
Directory of doctors that records can be shared with.

Static until a provider-directory integration exists.
"""

from typing import List, Optional

from app.features.doctors.models import DoctorProfile


DOCTOR_DIRECTORY: List[DoctorProfile] = [
    DoctorProfile(id="dir-dr-101", name="Dr. Arun Kumar", hospital="Apollo Hospital", specialty="Cardiology"),
    DoctorProfile(id="dir-dr-102", name="Dr. Priya Sharma", hospital="Fortis Hospital", specialty="Neurology"),
    DoctorProfile(id="dir-dr-103", name="Dr. Raj Singh", hospital="Max Healthcare", specialty="Orthopedics"),
    DoctorProfile(id="dir-dr-104", name="Dr. Anjali Mehta", hospital="Apollo Hospital", specialty="Pediatrics"),
    DoctorProfile(id="dir-dr-105", name="Dr. Sameer Verma", hospital="Manipal Hospital", specialty="Oncology"),
    DoctorProfile(id="dir-dr-106", name="Dr. Emily Carter", hospital="Unity General Hospital", specialty="General Medicine"),
]


def search_directory(query: str) -> List[DoctorProfile]:
    """Case-insensitive substring match on name or hospital. Empty query matches nothing."""
    if not query or not query.strip():
        return []

    needle = query.strip().lower()
    return [
        profile
        for profile in DOCTOR_DIRECTORY
        if needle in profile.name.lower() or needle in profile.hospital.lower()
    ]


def get_directory_profile(doctor_id: str) -> Optional[DoctorProfile]:
    for profile in DOCTOR_DIRECTORY:
        if profile.id == doctor_id:
            return profile
    return None
