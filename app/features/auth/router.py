from fastapi import APIRouter, Depends, status

from app.features.auth.dependencies import get_auth_service, get_current_user
from app.features.auth.models import AuthenticatedUser
from app.features.auth.schemas import LoginRequest, SignupRequest, TokenResponse
from app.features.auth.service import AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(signup_data: SignupRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Register a new account.

    - **display_name**: Name shown in the app
    - **email**: User's email address
    - **password**: Strong password (min 8 chars, 1 uppercase, 1 lowercase, 1 digit)
    - **confirm_password**: Must match password
    """
    user, access_token = await auth_service.signup(signup_data)
    return TokenResponse(access_token=access_token, user=user)


@router.post("/login", response_model=TokenResponse)
async def login(login_data: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """
    Authenticate user and return access token.

    - **email**: User's email address
    - **password**: User's password
    """
    user, access_token = await auth_service.login(login_data)
    return TokenResponse(access_token=access_token, user=user)


@router.get("/me", response_model=AuthenticatedUser)
async def get_current_user_info(current_user: AuthenticatedUser = Depends(get_current_user)):
    """Get current authenticated user's information."""
    return current_user
