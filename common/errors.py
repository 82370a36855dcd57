# common/errors.py
from __future__ import annotations

from typing import Optional


class ProfileValidationError(ValueError):
    """Raised by the save-time validator. `message` is user-facing."""

    kind = "invalid"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingFieldError(ProfileValidationError):
    kind = "missing_field"

    def __init__(self, field: str) -> None:
        # "business_name" -> "business name" (first underscore only)
        super().__init__(f"Please fill {field.replace('_', ' ', 1)}")
        self.field = field


class InvalidPhoneError(ProfileValidationError):
    kind = "invalid_phone"

    def __init__(self) -> None:
        super().__init__("Please enter a valid 10-digit US phone number")


class InvalidZipError(ProfileValidationError):
    kind = "invalid_zip"

    def __init__(self) -> None:
        super().__init__("Please enter a valid 5-digit ZIP code")


class StoreError(RuntimeError):
    """Profile/reference store failure (fetch or upsert)."""

    def __init__(self, message: str, *, user_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_id = user_id


class UploadError(RuntimeError):
    """Image store failure."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


def error_message(exc: BaseException, default: str) -> str:
    """User-facing text for an exception, falling back to `default`."""
    msg = getattr(exc, "message", None) or str(exc)
    return msg.strip() or default


__all__ = [
    "ProfileValidationError",
    "MissingFieldError",
    "InvalidPhoneError",
    "InvalidZipError",
    "StoreError",
    "UploadError",
    "error_message",
]
