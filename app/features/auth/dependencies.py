from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.security import decode_access_token
from app.features.auth.models import AuthenticatedUser
from app.features.auth.service import AuthService
from app.shared.exceptions import CredentialsException


# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return AuthService(request.app.state.store, clock=request.app.state.clock)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthenticatedUser:
    """
    Dependency to get current authenticated user.

    Args:
        credentials: HTTP Bearer credentials

    Returns:
        AuthenticatedUser: Current authenticated user

    Raises:
        CredentialsException: If credentials are missing or invalid
    """
    if credentials is None:
        raise CredentialsException("Not authenticated")

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise CredentialsException("Invalid authentication credentials")

    account = await auth_service.get_user_by_id(user_id)
    if account is None:
        raise CredentialsException("User not found")

    if not account.is_active:
        raise CredentialsException("Inactive user")

    return AuthService.to_authenticated_user(account)
