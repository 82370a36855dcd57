from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from common.models import ContractorProfile, ProfilePageState
from common.presenter import RecordingPresenter


class ProfileIn(BaseModel):
    """Partial edit: only fields present in the body are applied."""
    business_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    trade: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    license_number: Optional[str] = None
    profile_image_url: Optional[str] = None
    phone: Optional[str] = None
    zip: Optional[str] = None

    @field_validator("*")
    @classmethod
    def _strip(cls, v: Optional[str]):
        return v.strip() if isinstance(v, str) else v


class ProfileOut(BaseModel):
    business_name: str = ""
    first_name: str = ""
    last_name: str = ""
    display_name: str = ""
    trade: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    license_number: str = ""
    profile_image_url: str = ""
    phone: str = ""
    zip: str = ""

    @classmethod
    def from_profile(cls, p: ContractorProfile) -> "ProfileOut":
        return cls(**p.to_dict())


class NotificationOut(BaseModel):
    message: str
    color: str


class ActionOut(BaseModel):
    ok: bool
    notifications: List[NotificationOut] = Field(default_factory=list)
    navigate_to: Optional[str] = None
    profile: Optional[ProfileOut] = None


class ProfilePageOut(BaseModel):
    user_id: Optional[str] = None
    profile: ProfileOut
    services: List[Dict[str, Any]] = Field(default_factory=list)
    states: List[Dict[str, Any]] = Field(default_factory=list)
    user_badge: Optional[Dict[str, Any]] = None
    review_count: int = 0
    notifications: List[NotificationOut] = Field(default_factory=list)


class DeleteRequestIn(BaseModel):
    confirm: bool = False


def _notifications(presenter: RecordingPresenter) -> List[NotificationOut]:
    return [NotificationOut(message=n.message, color=n.color) for n in presenter.notifications]


def action_out(ok: bool, presenter: RecordingPresenter, profile: Optional[ContractorProfile] = None) -> ActionOut:
    return ActionOut(
        ok=ok,
        notifications=_notifications(presenter),
        navigate_to=presenter.navigated_to,
        profile=ProfileOut.from_profile(profile) if profile is not None else None,
    )


def page_out(state: ProfilePageState, presenter: RecordingPresenter) -> ProfilePageOut:
    return ProfilePageOut(
        user_id=state.user_id or None,
        profile=ProfileOut.from_profile(state.form),
        services=state.services,
        states=state.states,
        user_badge=state.user_badge,
        review_count=state.review_count,
        notifications=_notifications(presenter),
    )
