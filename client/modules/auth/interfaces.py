"""
Authentication module interface.

Session holders depend on IAuthService, not the concrete httpx implementation.
This enables testing with fakes and swapping the transport.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import ApiResponse, UserRecord


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for backend authentication calls.

    Implementations must never raise for backend or transport failures;
    every outcome is reported through the returned ApiResponse.
    """

    async def login(self, email: str, password: str) -> ApiResponse[UserRecord]:
        """
        Sign in with email and password.

        Args:
            email: Account email
            password: Account password

        Returns:
            ApiResponse carrying the UserRecord on success
        """
        ...

    async def signup(
        self,
        username: str,
        email: str,
        password: str,
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> ApiResponse[UserRecord]:
        """
        Create an account.

        Args:
            username: Display name
            email: Account email
            password: Account password
            phone_number: Optional phone number, omitted from the request if None
            address: Optional address, omitted from the request if None

        Returns:
            ApiResponse carrying the new UserRecord on success
        """
        ...

    async def logout(self, token: str) -> ApiResponse[None]:
        """
        Invalidate a session token on the backend.

        Args:
            token: Bearer token to revoke

        Returns:
            ApiResponse with no payload
        """
        ...
