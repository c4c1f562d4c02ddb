from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr


class UserAccount(BaseModel):
    """Stored account of the built-in identity provider."""

    id: Optional[str] = None
    email: EmailStr
    display_name: str
    password_hash: str
    is_active: bool = True
    created_at: datetime


class AuthenticatedUser(BaseModel):
    """Opaque handle for the signed-in user, as seen by the rest of the app."""

    id: str
    email: str
    display_name: Optional[str] = None
