# common/presenter.py
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from common.models import AlertButton, Notification
from constants.types import ConfirmRole, Severity

logger = logging.getLogger("contractor-profile")


class RecordingPresenter:
    """
    Headless notification surface.
      - toast(): collected in `notifications` (and logged)
      - confirm(): answered with the preset `confirm_role`
      - navigate(): last route kept in `navigated_to`
    Used by the HTTP layer to turn controller outcomes into a response body.
    """

    def __init__(self, *, confirm_role: Optional[ConfirmRole] = None) -> None:
        self.confirm_role = confirm_role
        self.notifications: List[Notification] = []
        self.confirmations: List[str] = []
        self.navigated_to: Optional[str] = None

    async def toast(self, message: str, color: Severity = "primary") -> None:
        logger.info("toast [%s] %s", color, message)
        self.notifications.append(Notification(message=message, color=color))

    async def confirm(self, header: str, message: str, buttons: Sequence[AlertButton]) -> Optional[str]:
        self.confirmations.append(message)
        roles = {b.role for b in buttons}
        if self.confirm_role in roles:
            return self.confirm_role
        # dismissed without choosing
        return None

    def navigate(self, route: str) -> None:
        logger.info("navigate -> %s", route)
        self.navigated_to = route
