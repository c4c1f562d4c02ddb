from typing import Optional, Tuple

from app.core.logging import logger
from app.core.security import create_access_token, get_password_hash, verify_password
from app.core.time_utils import Clock, utc_now
from app.features.auth.models import AuthenticatedUser, UserAccount
from app.features.auth.schemas import LoginRequest, SignupRequest
from app.shared.exceptions import ConflictException, CredentialsException, ValidationFailedException
from app.store.base import RecordKind, RecordStore


class AuthService:
    """Email/password identity provider issuing JWT bearer tokens."""

    def __init__(self, store: RecordStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    @staticmethod
    def to_authenticated_user(account: UserAccount) -> AuthenticatedUser:
        return AuthenticatedUser(id=account.id, email=account.email, display_name=account.display_name)

    @staticmethod
    def issue_token(account: UserAccount) -> str:
        return create_access_token(account.id, account.email)

    async def get_user_by_email(self, email: str) -> Optional[UserAccount]:
        accounts = await self.store.list(RecordKind.USERS, {"email": email.lower()})
        return accounts[0] if accounts else None

    async def get_user_by_id(self, user_id: str) -> Optional[UserAccount]:
        return await self.store.get(RecordKind.USERS, user_id)

    async def signup(self, signup_data: SignupRequest) -> Tuple[AuthenticatedUser, str]:
        """
        Register a new account.

        Returns:
            tuple: (user, access_token)

        Raises:
            ValidationFailedException: passwords do not match
            ConflictException: email already registered
        """
        if signup_data.password != signup_data.confirm_password:
            raise ValidationFailedException("Passwords do not match")

        if await self.get_user_by_email(signup_data.email):
            raise ConflictException("Email already registered")

        account = UserAccount(
            email=signup_data.email.lower(),
            display_name=signup_data.display_name,
            password_hash=get_password_hash(signup_data.password),
            created_at=self.clock(),
        )
        account = await self.store.insert(RecordKind.USERS, account)
        logger.info(f"Registered user {account.id}")

        return self.to_authenticated_user(account), self.issue_token(account)

    async def login(self, login_data: LoginRequest) -> Tuple[AuthenticatedUser, str]:
        """
        Authenticate user and return access token.

        Returns:
            tuple: (user, access_token)
        """
        account = await self.get_user_by_email(login_data.email)
        if not account:
            raise CredentialsException("Invalid email or password")

        if not verify_password(login_data.password, account.password_hash):
            raise CredentialsException("Invalid email or password")

        if not account.is_active:
            raise CredentialsException("Account is inactive")

        return self.to_authenticated_user(account), self.issue_token(account)
