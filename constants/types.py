from __future__ import annotations
from typing import TypedDict, Literal, Optional

Severity = Literal["primary", "success", "warning", "danger"]

ConfirmRole = Literal["cancel", "confirm"]


class NavParams(TypedDict, total=False):
    userId: Optional[str]


class ServiceEntry(TypedDict):
    id: int
    name: str


class StateEntry(TypedDict):
    code: str
    name: str


class BadgeDescriptor(TypedDict, total=False):
    badge_key: str
    label: str
    awarded_at: Optional[str]
