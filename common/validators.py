# common/validators.py
from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Union

from common.errors import (
    InvalidPhoneError,
    InvalidZipError,
    MissingFieldError,
    ProfileValidationError,
)
from common.models import ContractorProfile
from common.normalizers import to_canonical_phone

REQUIRED_FIELDS = ("business_name", "trade", "city", "state")

PHONE_RE = re.compile(r"[0-9]{10}")
ZIP_RE = re.compile(r"[0-9]{5}")

FormLike = Union[ContractorProfile, Mapping[str, Any]]


def _get(form: FormLike, key: str) -> Any:
    if isinstance(form, Mapping):
        return form.get(key)
    return getattr(form, key, None)


def validate_profile(form: FormLike) -> None:
    """
    Save-time checks, in order, stopping at the first failure:
    required fields, then phone, then ZIP. Raises a ProfileValidationError.
    """
    for key in REQUIRED_FIELDS:
        if not _get(form, key):
            raise MissingFieldError(key)

    if not PHONE_RE.fullmatch(to_canonical_phone(_get(form, "phone"))):
        raise InvalidPhoneError()

    # zip is checked as typed; no normalization step
    if not ZIP_RE.fullmatch(str(_get(form, "zip") or "")):
        raise InvalidZipError()


def first_validation_error(form: FormLike) -> Optional[ProfileValidationError]:
    try:
        validate_profile(form)
    except ProfileValidationError as e:
        return e
    return None


__all__ = ["REQUIRED_FIELDS", "validate_profile", "first_validation_error"]
