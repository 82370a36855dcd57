# tests/test_validators.py
import pytest

from common.errors import InvalidPhoneError, InvalidZipError, MissingFieldError
from common.models import ContractorProfile
from common.validators import REQUIRED_FIELDS, first_validation_error, validate_profile


def _valid(**overrides) -> ContractorProfile:
    base = ContractorProfile(
        business_name="Lone Star Plumbing",
        trade="Plumbing",
        city="Austin",
        state="TX",
        phone="5125551234",
        zip="78701",
    )
    return base.copy(**overrides)


def test_valid_form_passes():
    validate_profile(_valid())
    assert first_validation_error(_valid()) is None


def test_display_phone_is_accepted():
    assert first_validation_error(_valid(phone="(512) 555-1234")) is None


def test_missing_business_name_reported_first():
    err = first_validation_error(_valid(business_name=""))
    assert isinstance(err, MissingFieldError)
    assert err.field == "business_name"
    assert err.kind == "missing_field"
    assert err.message == "Please fill business name"


def test_required_fields_checked_in_order():
    form = _valid(business_name="", trade="", city="", state="")
    seen = []
    for field in REQUIRED_FIELDS:
        err = first_validation_error(form)
        assert isinstance(err, MissingFieldError)
        seen.append(err.field)
        setattr(form, field, "x")
    assert seen == ["business_name", "trade", "city", "state"]


def test_missing_field_beats_bad_phone_and_zip():
    err = first_validation_error(_valid(city="", phone="12", zip="1"))
    assert isinstance(err, MissingFieldError) and err.field == "city"


@pytest.mark.parametrize("phone", ["", "512555123", "15125551234", "(512) 555-123"])
def test_invalid_phone(phone):
    err = first_validation_error(_valid(phone=phone))
    assert isinstance(err, InvalidPhoneError)
    assert err.message == "Please enter a valid 10-digit US phone number"


def test_phone_checked_before_zip():
    assert isinstance(first_validation_error(_valid(phone="1", zip="1")), InvalidPhoneError)


@pytest.mark.parametrize("zip_code", ["", "7870", "787011", "78701-1234", "7870a", " 78701", "78701\n"])
def test_invalid_zip(zip_code):
    err = first_validation_error(_valid(zip=zip_code))
    assert isinstance(err, InvalidZipError)
    assert err.message == "Please enter a valid 5-digit ZIP code"


def test_optional_fields_unchecked():
    assert first_validation_error(_valid(country="", license_number="", display_name="", last_name="")) is None


def test_accepts_plain_mappings():
    assert first_validation_error(_valid().to_dict()) is None
    with pytest.raises(InvalidZipError):
        validate_profile({**_valid().to_dict(), "zip": "7870"})
