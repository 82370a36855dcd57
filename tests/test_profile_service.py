# tests/test_profile_service.py
from __future__ import annotations

import importlib

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from common.errors import StoreError
from db.models import ContractorProfileRow

_svc = importlib.import_module("services.profile_service")

pytestmark = pytest.mark.asyncio


@pytest.fixture(autouse=True)
def _bind(bind_session):
    bind_session(_svc)


FORM = {
    "business_name": " Lone Star Plumbing ",
    "first_name": "Ana",
    "last_name": "Diaz",
    "display_name": "",
    "trade": "Plumbing",
    "city": "Austin",
    "state": "TX",
    "country": "US",
    "license_number": "M-4411",
    "profile_image_url": "",
    "phone": "5125551234",
    "zip": "78701",
}


async def test_get_missing_profile_returns_none():
    assert await _svc.get_profile("nobody") is None
    assert await _svc.get_profile("") is None


async def test_upsert_inserts_then_updates(db_session):
    created = await _svc.upsert_profile("u1", FORM)
    assert created["user_id"] == "u1"
    assert created["business_name"] == "Lone Star Plumbing"  # stripped
    assert created["phone"] == "5125551234"
    assert created["created_at"] is not None

    updated = await _svc.upsert_profile("u1", {**FORM, "city": "Round Rock", "zip": "78664"})
    assert updated["city"] == "Round Rock"
    assert updated["zip"] == "78664"

    rows = (await db_session.execute(select(ContractorProfileRow))).scalars().all()
    assert len(rows) == 1

    fetched = await _svc.get_profile("u1")
    assert fetched["city"] == "Round Rock"
    assert fetched["license_number"] == "M-4411"


async def test_upsert_ignores_unknown_keys_and_none():
    out = await _svc.upsert_profile("u2", {**FORM, "email": "x@example.com", "user_id": "hijack", "country": None})
    assert "email" not in out
    assert out["user_id"] == "u2"
    assert out["country"] == ""


async def test_upsert_requires_user_id():
    with pytest.raises(StoreError):
        await _svc.upsert_profile("", FORM)


async def test_database_errors_become_store_errors(monkeypatch):
    class _Broken:
        async def __aenter__(self):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        async def __aexit__(self, *exc):
            return False

    monkeypatch.setattr(_svc, "Session", lambda: _Broken())
    with pytest.raises(StoreError) as ei:
        await _svc.get_profile("u1")
    assert ei.value.user_id == "u1"
    with pytest.raises(StoreError):
        await _svc.upsert_profile("u1", FORM)
