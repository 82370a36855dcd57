"""
Reference lists and review-derived data (async, read-only)
----------------------------------------------------------
Functions:
  - list_services()               -> [{"id", "name"}]  ordered by sort_order, name
  - list_states()                 -> [{"code", "name"}] ordered by name
  - fetch_user_badge(user_id)     -> {"badge_key", "label", "awarded_at"} | None
  - get_user_review_count(user_id) -> int

Badge and review computation happens elsewhere; this module only reads.
Each call is all-or-nothing: a failure raises StoreError, never a partial list.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError

from common.errors import StoreError
from constants.types import BadgeDescriptor, ServiceEntry, StateEntry
from db.models import Session, Service, StateRow, Review, UserBadge


async def list_services() -> List[ServiceEntry]:
    try:
        async with Session() as db:
            rows = (
                await db.execute(select(Service).order_by(Service.sort_order, Service.name))
            ).scalars().all()
            return [{"id": s.id, "name": s.name} for s in rows]
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to load services: {e.__class__.__name__}") from e


async def list_states() -> List[StateEntry]:
    try:
        async with Session() as db:
            rows = (await db.execute(select(StateRow).order_by(StateRow.name))).scalars().all()
            return [{"code": s.code, "name": s.name} for s in rows]
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to load states: {e.__class__.__name__}") from e


async def fetch_user_badge(user_id: str) -> Optional[BadgeDescriptor]:
    if not user_id:
        return None
    try:
        async with Session() as db:
            b = await db.get(UserBadge, user_id)
            if not b:
                return None
            return {
                "badge_key": b.badge_key,
                "label": b.label,
                "awarded_at": b.awarded_at.isoformat() if b.awarded_at else None,
            }
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to fetch badge: {e.__class__.__name__}", user_id=user_id) from e


async def get_user_review_count(user_id: str) -> int:
    if not user_id:
        return 0
    try:
        async with Session() as db:
            n = (
                await db.execute(select(func.count()).select_from(Review).where(Review.contractor_id == user_id))
            ).scalar_one()
            return int(n or 0)
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to count reviews: {e.__class__.__name__}", user_id=user_id) from e
