# tests/test_review_service.py
from __future__ import annotations

import importlib

import pytest

from db.models import Review, Service, StateRow, UserBadge, seed_reference_data
from constants.reference_data import DEFAULT_TRADES, US_STATES

_svc = importlib.import_module("services.review_service")

pytestmark = pytest.mark.asyncio


@pytest.fixture(autouse=True)
def _bind(bind_session):
    bind_session(_svc)


async def test_lists_are_ordered(db_session):
    db_session.add_all([
        Service(name="Roofing", sort_order=2),
        Service(name="Electrical", sort_order=1),
        StateRow(code="TX", name="Texas"),
        StateRow(code="AL", name="Alabama"),
    ])
    await db_session.commit()

    assert [s["name"] for s in await _svc.list_services()] == ["Electrical", "Roofing"]
    assert await _svc.list_states() == [
        {"code": "AL", "name": "Alabama"},
        {"code": "TX", "name": "Texas"},
    ]


async def test_badge_and_review_count(db_session):
    db_session.add(UserBadge(user_id="u1", badge_key="top_rated", label="Top Rated"))
    db_session.add_all([
        Review(contractor_id="u1", rating=5),
        Review(contractor_id="u1", rating=4, comment="Fast"),
        Review(contractor_id="u2", rating=3),
    ])
    await db_session.commit()

    badge = await _svc.fetch_user_badge("u1")
    assert badge["badge_key"] == "top_rated"
    assert badge["label"] == "Top Rated"
    assert await _svc.fetch_user_badge("u2") is None
    assert await _svc.fetch_user_badge("") is None

    assert await _svc.get_user_review_count("u1") == 2
    assert await _svc.get_user_review_count("u3") == 0
    assert await _svc.get_user_review_count("") == 0


async def test_seed_reference_data_is_idempotent(db_session):
    class _Ctx:
        async def __aenter__(self):
            return db_session

        async def __aexit__(self, *exc):
            return False

    first = await seed_reference_data(lambda: _Ctx())
    second = await seed_reference_data(lambda: _Ctx())

    assert first == {"services": len(DEFAULT_TRADES), "states": len(US_STATES)}
    assert second == {"services": 0, "states": 0}
    assert len(await _svc.list_states()) == 51
    assert (await _svc.list_services())[0]["name"] == DEFAULT_TRADES[0]
