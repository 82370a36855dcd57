from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Text,
    Integer,
    SmallInteger,
    Index,
    UniqueConstraint,
    select,
)
from sqlalchemy import DateTime as SADateTime
from sqlalchemy import Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.ext.asyncio import AsyncEngine

from db.session import engine, Session
from constants.reference_data import DEFAULT_TRADES, US_STATES


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


PROFILE_TEXT_FIELDS = (
    "business_name",
    "first_name",
    "last_name",
    "display_name",
    "trade",
    "city",
    "state",
    "country",
    "license_number",
    "profile_image_url",
    "phone",
    "zip",
)


# ---------- Models ----------
class ContractorProfileRow(Base):
    __tablename__ = "contractor_profiles"
    # external identity (auth provider id); not generated here
    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    business_name: Mapped[str] = mapped_column(Text, default="")
    first_name: Mapped[str] = mapped_column(Text, default="")
    last_name: Mapped[str] = mapped_column(Text, default="")
    display_name: Mapped[str] = mapped_column(Text, default="")
    trade: Mapped[str] = mapped_column(Text, default="")
    city: Mapped[str] = mapped_column(Text, default="")
    state: Mapped[str] = mapped_column(Text, default="")
    country: Mapped[str] = mapped_column(Text, default="")
    license_number: Mapped[str] = mapped_column(Text, default="")
    profile_image_url: Mapped[str] = mapped_column(Text, default="")
    phone: Mapped[str] = mapped_column(Text, default="")   # 10 digits
    zip: Mapped[str] = mapped_column(Text, default="")     # 5 digits
    created_at: Mapped[datetime] = mapped_column(SADateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(SADateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Service(Base):
    __tablename__ = "services"
    __table_args__ = (UniqueConstraint("name", name="uq_services_name"),)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)


class StateRow(Base):
    __tablename__ = "states"
    code: Mapped[str] = mapped_column(Text, primary_key=True)
    name: Mapped[str] = mapped_column(Text)


class Review(Base):
    __tablename__ = "reviews"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    contractor_id: Mapped[str] = mapped_column(Text)
    rating: Mapped[int] = mapped_column(SmallInteger)
    comment: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(SADateTime(timezone=True), default=utcnow)


Index("ix_reviews_contractor_id", Review.contractor_id)


class UserBadge(Base):
    __tablename__ = "user_badges"
    user_id: Mapped[str] = mapped_column(Text, primary_key=True)
    badge_key: Mapped[str] = mapped_column(Text)
    label: Mapped[str] = mapped_column(Text)
    awarded_at: Mapped[datetime] = mapped_column(SADateTime(timezone=True), default=utcnow)


# ---------- Setup ----------
async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_reference_data(session_factory=None) -> dict:
    """Insert default trades and US states that are not there yet. Idempotent."""
    factory = session_factory or Session
    added = {"services": 0, "states": 0}
    async with factory() as db:
        have_services = set((await db.execute(select(Service.name))).scalars().all())
        for i, name in enumerate(DEFAULT_TRADES):
            if name not in have_services:
                db.add(Service(name=name, sort_order=i))
                added["services"] += 1

        have_states = set((await db.execute(select(StateRow.code))).scalars().all())
        for code, name in US_STATES:
            if code not in have_states:
                db.add(StateRow(code=code, name=name))
                added["states"] += 1

        await db.commit()
    return added
