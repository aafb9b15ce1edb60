"""
Error types shared by the client packages.

Feature modules subclass these, so callers see every failure in one
code/message/details shape.
"""

from typing import Optional, Any


class BillPointError(Exception):
    """
    Root of the client error tree.

    code defaults to the class name; details carries structured context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a plain code/message/details mapping."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class AuthenticationError(BillPointError):
    """A sign-in, sign-up or session rule was violated."""

    pass


class StorageError(BillPointError):
    """Reading or writing local storage failed."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.key = key
        if key is not None:
            self.details["key"] = key
