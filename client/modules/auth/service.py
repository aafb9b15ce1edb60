"""
Authentication service implementation.

Talks to the BillPoint backend over HTTP and normalizes every outcome
(success, rejected credentials, validation errors, transport failures)
into an ApiResponse. Nothing is raised past this layer.
"""

import logging
from typing import Any, Optional

import httpx

from shared.config import Settings, get_settings

from .interfaces import IAuthService
from .models import ApiResponse, LoginResponse, UserRecord

logger = logging.getLogger(__name__)


JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

# User-facing error texts
INVALID_CREDENTIALS = "Invalid email or password"
INVALID_REQUEST = "Invalid request"
EMAIL_EXISTS = "Email already exists"
LOGIN_FAILED = "Login failed. Please try again."
SIGNUP_FAILED = "Signup failed. Please try again."
LOGOUT_FAILED = "Logout failed"
CONNECTION_ERROR = "An error occurred. Please check your internet connection."
LOGOUT_CONNECTION_ERROR = "An error occurred during logout"


def _decode_body(response: httpx.Response) -> Any:
    """Decode a JSON body. Raises ValueError on malformed content."""
    return response.json()


def _validation_message(response: httpx.Response) -> str:
    body = _decode_body(response)
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return INVALID_REQUEST


def _parse_user(response: httpx.Response, default_message: str) -> ApiResponse[UserRecord]:
    body = _decode_body(response)
    if not isinstance(body, dict):
        raise ValueError("Response body is not a JSON object")

    login_response = LoginResponse.from_json(body)
    if not login_response.user:
        raise ValueError("Response body has no user object")

    user = UserRecord.from_json(login_response.user)
    if user.is_empty:
        raise ValueError("Response user object has no id")
    return ApiResponse[UserRecord].ok(
        user,
        message=login_response.message or default_message,
    )


def map_login_response(response: httpx.Response) -> ApiResponse[UserRecord]:
    """
    Map a login HTTP response to an envelope.

    Raises ValueError if a body that must be decoded is malformed;
    the service turns that into a connectivity failure.
    """
    status = response.status_code

    if status in (200, 201):
        return _parse_user(response, "Login successful")
    if status == 401:
        logger.warning("Login failed: invalid credentials")
        return ApiResponse[UserRecord].fail(INVALID_CREDENTIALS)
    if status == 400:
        message = _validation_message(response)
        logger.warning(f"Login failed: {message}")
        return ApiResponse[UserRecord].fail(message)

    logger.error(f"Login failed with status: {status}")
    return ApiResponse[UserRecord].fail(LOGIN_FAILED)


def map_signup_response(response: httpx.Response) -> ApiResponse[UserRecord]:
    """Map a signup HTTP response to an envelope. 409 means the email is taken."""
    status = response.status_code

    if status in (200, 201):
        return _parse_user(response, "Account created successfully")
    if status == 409:
        logger.warning("Signup failed: email already exists")
        return ApiResponse[UserRecord].fail(EMAIL_EXISTS)
    if status == 400:
        message = _validation_message(response)
        logger.warning(f"Signup failed: {message}")
        return ApiResponse[UserRecord].fail(message)

    logger.error(f"Signup failed with status: {status}")
    return ApiResponse[UserRecord].fail(SIGNUP_FAILED)


def map_logout_response(response: httpx.Response) -> ApiResponse[None]:
    if response.status_code == 200:
        return ApiResponse[None].ok(None, message="Logged out successfully")
    logger.error(f"Logout failed with status: {response.status_code}")
    return ApiResponse[None].fail(LOGOUT_FAILED)


class AuthService(IAuthService):
    """
    HTTP implementation of the authentication service.

    Makes exactly one request per call; there are no retries. The
    httpx client can be injected (tests, shared connection pools);
    otherwise one is created and owned by the service.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=self._settings.request_timeout,
        )

    async def __aenter__(self) -> "AuthService":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying httpx client if this service created it."""
        if self._owns_client:
            await self._http.aclose()

    async def login(self, email: str, password: str) -> ApiResponse[UserRecord]:
        """Sign in with email and password."""
        logger.info(f"Attempting login for email: {email}")

        try:
            response = await self._http.post(
                self._settings.login_url,
                headers=JSON_HEADERS,
                json={"email": email, "password": password},
            )
            logger.debug(f"Login response status: {response.status_code}")
            logger.debug(f"Login response body: {response.text}")

            result = map_login_response(response)
            if result.success:
                logger.info(f"Login successful for user: {result.data.username}")
            return result
        except Exception as e:
            logger.error(f"Login error: {e}")
            return ApiResponse[UserRecord].fail(CONNECTION_ERROR)

    async def signup(
        self,
        username: str,
        email: str,
        password: str,
        phone_number: Optional[str] = None,
        address: Optional[str] = None,
    ) -> ApiResponse[UserRecord]:
        """Create an account. Optional fields are left out of the body when None."""
        logger.info(f"Attempting signup for email: {email}")

        body: dict[str, Any] = {
            "username": username,
            "email": email,
            "password": password,
        }
        if phone_number is not None:
            body["phoneNumber"] = phone_number
        if address is not None:
            body["address"] = address

        try:
            response = await self._http.post(
                self._settings.signup_url,
                headers=JSON_HEADERS,
                json=body,
            )
            logger.debug(f"Signup response status: {response.status_code}")

            result = map_signup_response(response)
            if result.success:
                logger.info(f"Signup successful for user: {result.data.username}")
            return result
        except Exception as e:
            logger.error(f"Signup error: {e}")
            return ApiResponse[UserRecord].fail(CONNECTION_ERROR)

    async def logout(self, token: str) -> ApiResponse[None]:
        """Revoke a bearer token on the backend."""
        logger.info("Attempting logout")

        try:
            response = await self._http.post(
                self._settings.logout_url,
                headers={**JSON_HEADERS, "Authorization": f"Bearer {token}"},
            )
            result = map_logout_response(response)
            if result.success:
                logger.info("Logout successful")
            return result
        except Exception as e:
            logger.error(f"Logout error: {e}")
            return ApiResponse[None].fail(LOGOUT_CONNECTION_ERROR)


# Module-level instance getter
_service_instance: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the auth service singleton."""
    global _service_instance
    if _service_instance is None:
        _service_instance = AuthService()
    return _service_instance


def reset_auth_service() -> None:
    """Reset the auth service singleton (for testing)."""
    global _service_instance
    _service_instance = None
