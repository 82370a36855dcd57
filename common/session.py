# common/session.py
from __future__ import annotations

from typing import Any, Dict, Optional


class StaticSessionProvider:
    """
    Session capability with a fixed (or absent) current user.
    Auth lives elsewhere; hosts build one of these from whatever identity
    they already resolved (a header, a token claim, a test fixture).
    """

    def __init__(self, user_id: Optional[str] = None) -> None:
        self._user_id = (user_id or "").strip() or None

    async def current_user(self) -> Optional[Dict[str, Any]]:
        if not self._user_id:
            return None
        return {"id": self._user_id}
