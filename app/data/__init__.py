"""Static data: the doctor directory and the demo household."""

from app.data.doctor_directory import DOCTOR_DIRECTORY, get_directory_profile, search_directory

__all__ = ["DOCTOR_DIRECTORY", "get_directory_profile", "search_directory"]
