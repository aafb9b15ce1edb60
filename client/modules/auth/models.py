"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to the rest of the client through the module's public API.
"""

from typing import Any, Callable, Generic, Optional, TypeVar
from pydantic import BaseModel, Field, model_validator

T = TypeVar("T")


def _pick(payload: dict[str, Any], *keys: str) -> Any:
    """Return the first non-null value among keys, else None."""
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _as_str(value: Any) -> Optional[str]:
    """Coerce scalars to str; anything else (dicts, lists) reads as absent."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


class UserRecord(BaseModel):
    """
    Identity data returned by the backend for the signed-in account.

    Constructed from the backend's user payload, persisted locally as
    the map produced by to_json(), and replaced (never mutated) on logout.
    """

    id: str = Field(default="", description="Account identifier")
    username: str = Field(default="", description="Display name")
    email: str = Field(default="", description="Login email")
    phone_number: Optional[str] = Field(None, description="Phone number")
    address: Optional[str] = Field(None, description="Postal address")
    profile_image: Optional[str] = Field(None, description="Profile image URL")

    model_config = {"frozen": True}

    @classmethod
    def from_json(cls, payload: Optional[dict[str, Any]]) -> "UserRecord":
        """
        Build a record from a backend or storage payload.

        Parsing is lenient: alternate key spellings are accepted
        (_id, userName, phone, avatar), missing strings fall back to ""
        and missing or malformed optionals fall back to None.
        """
        if not isinstance(payload, dict):
            return cls.empty()

        return cls(
            id=_as_str(_pick(payload, "id", "_id")) or "",
            username=_as_str(_pick(payload, "username", "userName")) or "",
            email=_as_str(payload.get("email")) or "",
            phone_number=_as_str(_pick(payload, "phoneNumber", "phone")),
            address=_as_str(payload.get("address")),
            profile_image=_as_str(_pick(payload, "profileImage", "avatar")),
        )

    def to_json(self) -> dict[str, Optional[str]]:
        """Serialize to the storage map (camelCase keys, nulls kept)."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "phoneNumber": self.phone_number,
            "address": self.address,
            "profileImage": self.profile_image,
        }

    @classmethod
    def empty(cls) -> "UserRecord":
        """Placeholder record used when nobody is signed in."""
        return cls(id="", username="", email="")

    @property
    def is_empty(self) -> bool:
        return not self.id

    def copy_with(self, **changes: Any) -> "UserRecord":
        """Return a new record with the given fields replaced."""
        return self.model_copy(update=changes)


class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope normalizing the outcome of every backend call.

    Exactly one of data/error is meaningful, selected by success.
    A successful ApiResponse[None] (logout) carries no data at all.
    """

    success: bool = Field(..., description="Whether the call succeeded")
    message: str = Field(default="", description="Human-readable summary")
    data: Optional[T] = Field(None, description="Payload, only on success")
    error: Optional[str] = Field(None, description="Error text, only on failure")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_shape(self) -> "ApiResponse[T]":
        if self.success and self.error is not None:
            raise ValueError("successful response cannot carry an error")
        if not self.success:
            if self.data is not None:
                raise ValueError("failed response cannot carry data")
            if not self.error:
                raise ValueError("failed response requires an error")
        return self

    @classmethod
    def ok(cls, data: Optional[T], message: str = "Success") -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str, message: str = "Failed") -> "ApiResponse[T]":
        return cls(success=False, message=message, error=error)

    @classmethod
    def from_json(
        cls,
        payload: dict[str, Any],
        parse_data: Optional[Callable[[Any], T]] = None,
    ) -> "ApiResponse[T]":
        """
        Decode a generic {success, message, data, error} backend envelope.

        Data is only parsed when the envelope reports success.
        """
        success = bool(payload.get("success", False))
        message = _as_str(payload.get("message")) or ""
        if success:
            raw = payload.get("data")
            data = parse_data(raw) if raw is not None and parse_data else None
            return cls(success=True, message=message, data=data)
        error = _as_str(payload.get("error")) or message or "Unknown error"
        return cls(success=False, message=message, error=error)


class LoginResponse(BaseModel):
    """Body of a successful login or signup call."""

    token: str = Field(default="", description="Access token, if issued")
    user: dict[str, Any] = Field(default_factory=dict, description="Raw user object")
    message: Optional[str] = Field(None, description="Backend message")

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> "LoginResponse":
        """Accept token/accessToken and user/data spellings."""
        user = _pick(payload, "user", "data")
        return cls(
            token=_as_str(_pick(payload, "token", "accessToken")) or "",
            user=user if isinstance(user, dict) else {},
            message=_as_str(payload.get("message")),
        )
