"""
Profile edit controller
-----------------------
Owns the in-memory contractor profile form for one edit session and the
async flows around it:

  - activate()          load reference lists, resolve the user, load the
                        profile, badge and review count (concurrently)
  - set_field()/on_phone_input()
                        user edits; phone is live-formatted per keystroke
  - save()              validate -> canonicalise phone -> upsert -> navigate
  - upload_image()      upload (overwrite) -> cache-busted URL -> upsert
  - confirm_delete()    two-choice confirmation, routes to the delete flow

Every collaborator failure is caught here and turned into a toast (or a log
line for background loads); nothing is re-raised to the host.

A profile load result is applied only if no user edit happened after the
load started (edit generation), so a slow load never clobbers typing.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from common.config_loader import ProfileSettings
from common.errors import error_message
from common.models import AlertButton, ContractorProfile, ProfilePageState
from common.normalizers import live_format_phone, to_canonical_phone, to_display_phone
from common.validators import first_validation_error
from constants import messages as msg
from constants.types import NavParams
from services.ports import (
    ImageStore,
    Presenter,
    ProfileStore,
    ReferenceDataProvider,
    ReviewProvider,
    SessionProvider,
)
from services.profile_image import cache_busted, image_path, now_ms

logger = logging.getLogger("contractor-profile")

_FIELD_NAMES = frozenset(ContractorProfile.field_names())


class ProfileController:
    def __init__(
        self,
        *,
        store: ProfileStore,
        reference: ReferenceDataProvider,
        reviews: ReviewProvider,
        images: Optional[ImageStore],
        session: SessionProvider,
        presenter: Presenter,
        nav_params: Optional[NavParams] = None,
        settings: Optional[ProfileSettings] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.reference = reference
        self.reviews = reviews
        self.images = images
        self.session = session
        self.presenter = presenter
        self.settings = settings or ProfileSettings()
        self._nav_params = dict(nav_params or {})
        self._clock = clock

        self.user_id = ""
        self.form = ContractorProfile()
        self.services: List[Dict[str, Any]] = []
        self.states: List[Dict[str, Any]] = []
        self.user_badge: Optional[Dict[str, Any]] = None
        self.review_count = 0

        self.is_loading = False
        self.is_saving = False
        self.is_uploading = False

        self._edit_generation = 0
        # stored profile unreadable; save and upload are refused until a load succeeds
        self.profile_load_failed = False

    # -------- lifecycle --------
    async def activate(self) -> None:
        self.is_loading = True
        try:
            await asyncio.gather(
                self._load_services(),
                self._load_states(),
                self._load_user_data(),
            )
        finally:
            self.is_loading = False

    async def resolve_user_id(self) -> str:
        """Navigation param first, then the current session. Read once."""
        if self.user_id:
            return self.user_id
        uid = str(self._nav_params.get("userId") or "").strip()
        if not uid:
            try:
                user = await self.session.current_user()
            except Exception:
                logger.exception("Failed to read current session user")
                user = None
            if user:
                uid = str(user.get("id") or "").strip()
        self.user_id = uid
        return uid

    async def load_profile(self) -> None:
        """Profile only (no reference lists / badge / reviews), e.g. before a headless save."""
        user_id = await self.resolve_user_id()
        if user_id:
            await self._load_profile(user_id)

    def snapshot(self) -> ProfilePageState:
        return ProfilePageState(
            user_id=self.user_id,
            form=self.form.copy(),
            services=list(self.services),
            states=list(self.states),
            user_badge=self.user_badge,
            review_count=self.review_count,
            is_loading=self.is_loading,
        )

    # -------- background loads --------
    async def _load_services(self) -> None:
        try:
            self.services = list(await self.reference.list_services())
        except Exception as e:
            logger.error("Failed to load services: %s", e)
            self.services = []
            if self.settings.notify_services_failure:
                await self.presenter.toast(msg.SERVICES_LOAD_FAILED, "danger")

    async def _load_states(self) -> None:
        try:
            self.states = list(await self.reference.list_states())
        except Exception as e:
            logger.error("Failed to load states: %s", e)
            self.states = []
            await self.presenter.toast(msg.STATES_LOAD_FAILED, "danger")

    async def _load_user_data(self) -> None:
        user_id = await self.resolve_user_id()
        if not user_id:
            self.is_loading = False
            return
        await asyncio.gather(
            self._load_profile(user_id),
            self._load_badge(user_id),
            self._load_review_count(user_id),
        )

    async def _load_profile(self, user_id: str) -> None:
        generation = self._edit_generation
        try:
            existing = await self.store.get_profile(user_id)
        except Exception as e:
            self.profile_load_failed = True
            logger.exception("Failed to load profile for %s", user_id)
            await self.presenter.toast(error_message(e, msg.PROFILE_LOAD_FAILED), "danger")
            return
        finally:
            self.is_loading = False

        self.profile_load_failed = False
        if not existing:
            return
        if generation != self._edit_generation:
            logger.info("Dropping stale profile load for %s (edited during load)", user_id)
            return

        form = ContractorProfile.from_dict(existing)
        if form.phone:
            form.phone = to_display_phone(form.phone)
        self.form = form
        logger.debug("Loaded profile %s:\n%s", user_id, form.summarize())

    async def _load_badge(self, user_id: str) -> None:
        try:
            self.user_badge = await self.reviews.fetch_user_badge(user_id)
        except Exception as e:
            logger.error("Failed to fetch user badge: %s", e)

    async def _load_review_count(self, user_id: str) -> None:
        try:
            self.review_count = int(await self.reviews.get_user_review_count(user_id) or 0)
        except Exception as e:
            logger.error("Failed to fetch review count: %s", e)

    # -------- edits --------
    def set_field(self, name: str, value: Any) -> None:
        if name not in _FIELD_NAMES:
            raise KeyError(f"Unknown profile field: {name}")
        setattr(self.form, name, "" if value is None else str(value))
        self._edit_generation += 1

    def update_fields(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def on_phone_input(self, current_input: Any) -> str:
        """Returns the text the phone input should now show."""
        formatted = live_format_phone(current_input)
        self.form.phone = formatted
        self._edit_generation += 1
        return formatted

    def _persistable_form(self) -> Dict[str, str]:
        return self.form.copy(phone=to_canonical_phone(self.form.phone)).to_dict()

    # -------- actions --------
    async def save(self) -> bool:
        if not self.user_id:
            await self.presenter.toast(msg.NO_USER, "danger")
            return False
        if self.profile_load_failed:
            await self.presenter.toast(msg.PROFILE_NOT_LOADED, "danger")
            return False

        err = first_validation_error(self.form)
        if err is not None:
            await self.presenter.toast(err.message, "warning")
            return False

        self.is_saving = True
        try:
            await self.store.upsert_profile(self.user_id, self._persistable_form())
        except Exception as e:
            logger.warning("Profile save failed for %s: %s", self.user_id, e)
            await self.presenter.toast(error_message(e, msg.SAVE_FAILED), "danger")
            return False
        finally:
            self.is_saving = False

        logger.info("Profile saved for %s", self.user_id)
        await self.presenter.toast(msg.SAVE_OK, "success")
        self.presenter.navigate(self.settings.after_save_route)
        return True

    async def upload_image(self, filename: str, data: bytes, content_type: Optional[str] = None) -> bool:
        if not filename or not data or not self.user_id:
            return False
        if self.profile_load_failed:
            await self.presenter.toast(msg.PROFILE_NOT_LOADED, "danger")
            return False
        if self.images is None:
            await self.presenter.toast(msg.IMAGE_FAILED, "danger")
            return False

        path = image_path(self.settings.image_prefix, self.user_id, filename, content_type)
        self.is_uploading = True
        try:
            await self.images.upload(path, data, content_type=content_type, upsert=True)
            self.form.profile_image_url = cache_busted(self.images.public_url(path), self._clock())
            self._edit_generation += 1
            # no rollback of the blob if this fails; the path is reused next time
            await self.store.upsert_profile(self.user_id, self._persistable_form())
        except Exception as e:
            logger.warning("Profile image update failed for %s (%s): %s", self.user_id, path, e)
            await self.presenter.toast(error_message(e, msg.IMAGE_FAILED), "danger")
            return False
        finally:
            self.is_uploading = False

        await self.presenter.toast(msg.IMAGE_OK, "success")
        return True

    async def confirm_delete(self) -> bool:
        buttons = [
            AlertButton(text=msg.DELETE_CONFIRM_NO, role="cancel"),
            AlertButton(text=msg.DELETE_CONFIRM_YES, role="confirm"),
        ]
        role = await self.presenter.confirm(msg.DELETE_CONFIRM_HEADER, msg.DELETE_CONFIRM_MESSAGE, buttons)
        if role != "confirm":
            return False
        self.presenter.navigate(self.settings.delete_request_route)
        return True
