"""
Contractor profile data access layer (async)
--------------------------------------------
Functions:
  - get_profile(user_id)
  - upsert_profile(user_id, data)

Notes:
  - The module itself satisfies the ProfileStore protocol (services.ports).
  - upsert writes every profile field it is given; unknown keys are ignored.
  - phone / zip are stored as given; callers hand in canonical values.
  - Failures surface as StoreError so the controller can report them.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from common.errors import StoreError
from db.models import Session, ContractorProfileRow, PROFILE_TEXT_FIELDS, utcnow


# ---------- helpers ----------
def _iso(dt: Optional[datetime]) -> Optional[str]:
    return dt.isoformat() if isinstance(dt, datetime) else None


def _profile_dict(p: ContractorProfileRow) -> Dict[str, Any]:
    out: Dict[str, Any] = {"user_id": p.user_id}
    for name in PROFILE_TEXT_FIELDS:
        out[name] = getattr(p, name) or ""
    out["created_at"] = _iso(p.created_at)
    out["updated_at"] = _iso(p.updated_at)
    return out


def _clean(data: Mapping[str, Any]) -> Dict[str, str]:
    return {
        k: ("" if v is None else str(v).strip())
        for k, v in data.items()
        if k in PROFILE_TEXT_FIELDS
    }


# ---------- public API ----------
async def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    if not user_id:
        return None
    try:
        async with Session() as db:
            row = await db.get(ContractorProfileRow, user_id)
            return _profile_dict(row) if row else None
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to load profile: {e.__class__.__name__}", user_id=user_id) from e


async def upsert_profile(user_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    if not user_id:
        raise StoreError("user_id is required")
    values = _clean(data)

    try:
        async with Session() as db:
            row = await db.get(ContractorProfileRow, user_id)
            if row is None:
                row = ContractorProfileRow(user_id=user_id, **values)
                db.add(row)
            else:
                for k, v in values.items():
                    setattr(row, k, v)
                row.updated_at = utcnow()
            try:
                await db.commit()
            except SQLAlchemyError:
                await db.rollback()
                raise
            await db.refresh(row)
            return _profile_dict(row)
    except SQLAlchemyError as e:
        raise StoreError(f"Failed to save profile: {e.__class__.__name__}", user_id=user_id) from e
