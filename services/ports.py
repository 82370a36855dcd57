# services/ports.py
"""Collaborator interfaces the profile controller depends on."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from common.models import AlertButton
from constants.types import BadgeDescriptor, Severity, ServiceEntry, StateEntry


class ProfileStore(Protocol):
    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]: ...

    async def upsert_profile(self, user_id: str, data: Mapping[str, Any]) -> Dict[str, Any]: ...


class ReferenceDataProvider(Protocol):
    async def list_services(self) -> List[ServiceEntry]: ...

    async def list_states(self) -> List[StateEntry]: ...


class ReviewProvider(Protocol):
    async def fetch_user_badge(self, user_id: str) -> Optional[BadgeDescriptor]: ...

    async def get_user_review_count(self, user_id: str) -> int: ...


class ImageStore(Protocol):
    async def upload(
        self, path: str, data: bytes, *, content_type: Optional[str] = None, upsert: bool = True
    ) -> None: ...

    def public_url(self, path: str) -> str: ...


class SessionProvider(Protocol):
    async def current_user(self) -> Optional[Dict[str, Any]]: ...


class Presenter(Protocol):
    async def toast(self, message: str, color: Severity = "primary") -> None: ...

    async def confirm(self, header: str, message: str, buttons: Sequence[AlertButton]) -> Optional[str]: ...

    def navigate(self, route: str) -> None: ...
