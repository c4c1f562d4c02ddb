from pydantic import BaseModel, EmailStr, Field, field_validator

from app.features.auth.models import AuthenticatedUser


# Request Schemas
class SignupRequest(BaseModel):
    """Signup request schema."""

    display_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    confirm_password: str

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not any(c.isupper() for c in v):
            raise ValueError('Password must contain at least one uppercase letter')
        if not any(c.islower() for c in v):
            raise ValueError('Password must contain at least one lowercase letter')
        if not any(c.isdigit() for c in v):
            raise ValueError('Password must contain at least one digit')
        return v


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


# Response Schemas
class TokenResponse(BaseModel):
    """Access token issued on signup or login."""

    access_token: str
    token_type: str = "bearer"
    user: AuthenticatedUser
