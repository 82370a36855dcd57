from __future__ import annotations

import os
import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Depends, File, Header, Response, UploadFile
from dotenv import load_dotenv

# --- Load env before importing models/engine ---
for name in (".env.local", "env.local", ".env"):
    if os.path.exists(name):
        load_dotenv(name, override=False)

# --- Project imports ---
from api.utils import (
    ActionOut,
    DeleteRequestIn,
    ProfileIn,
    ProfilePageOut,
    action_out,
    page_out,
)
from common.config_loader import ProfileSettings
from common.errors import StoreError, UploadError
from common.logging_config import configure_logging
from common.presenter import RecordingPresenter
from common.session import StaticSessionProvider
from controllers.profile import ProfileController
from db.models import init_db, seed_reference_data, engine
from db.session import ping
from services import profile_service, review_service
from services.image_store import S3ImageStore
from services.ports import ImageStore, ProfileStore, ReferenceDataProvider, ReviewProvider

logger = logging.getLogger("contractor-profile")


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await init_db()
    if os.getenv("SEED_REFERENCE_DATA", "1") == "1":
        added = await seed_reference_data()
        logger.info("Reference data seeded: %s", added)
    yield
    await engine.dispose()


app = FastAPI(
    lifespan=lifespan,
    title="Contractor Profile API",
    version="0.1.0",
)


# ---------------------------
# Dependencies
# ---------------------------
@lru_cache(maxsize=1)
def get_settings() -> ProfileSettings:
    return ProfileSettings.from_config()


def get_store() -> ProfileStore:
    return profile_service


def get_reference() -> ReferenceDataProvider:
    return review_service


def get_reviews() -> ReviewProvider:
    return review_service


@lru_cache(maxsize=1)
def get_image_store() -> Optional[ImageStore]:
    try:
        return S3ImageStore.from_env()
    except UploadError as e:
        logger.warning("Image uploads disabled: %s", e)
        return None


def _controller(
    presenter: RecordingPresenter,
    *,
    user_id: Optional[str],
    session_user_id: Optional[str] = None,
    store: ProfileStore,
    reference: ReferenceDataProvider,
    reviews: ReviewProvider,
    images: Optional[ImageStore],
    settings: ProfileSettings,
) -> ProfileController:
    return ProfileController(
        store=store,
        reference=reference,
        reviews=reviews,
        images=images,
        session=StaticSessionProvider(session_user_id),
        presenter=presenter,
        nav_params={"userId": user_id} if user_id else None,
        settings=settings,
    )


# ---------------------------
# Health / reference data
# ---------------------------
@app.get("/health")
async def health():
    return {"ok": await ping()}


@app.get("/reference/services")
async def list_services(reference: ReferenceDataProvider = Depends(get_reference)) -> List[dict]:
    try:
        return list(await reference.list_services())
    except StoreError as e:
        raise HTTPException(503, e.message)


@app.get("/reference/states")
async def list_states(reference: ReferenceDataProvider = Depends(get_reference)) -> List[dict]:
    try:
        return list(await reference.list_states())
    except StoreError as e:
        raise HTTPException(503, e.message)


# ---------------------------
# Profile page
# ---------------------------
@app.get("/profiles/{user_id}", response_model=ProfilePageOut)
async def load_profile_page(
    user_id: str,
    store: ProfileStore = Depends(get_store),
    reference: ReferenceDataProvider = Depends(get_reference),
    reviews: ReviewProvider = Depends(get_reviews),
    settings: ProfileSettings = Depends(get_settings),
):
    presenter = RecordingPresenter()
    ctrl = _controller(
        presenter, user_id=user_id, store=store, reference=reference,
        reviews=reviews, images=None, settings=settings,
    )
    await ctrl.activate()
    return page_out(ctrl.snapshot(), presenter)


@app.get("/profile", response_model=ProfilePageOut)
async def load_own_profile_page(
    x_user_id: Optional[str] = Header(default=None),
    store: ProfileStore = Depends(get_store),
    reference: ReferenceDataProvider = Depends(get_reference),
    reviews: ReviewProvider = Depends(get_reviews),
    settings: ProfileSettings = Depends(get_settings),
):
    presenter = RecordingPresenter()
    ctrl = _controller(
        presenter, user_id=None, session_user_id=x_user_id, store=store,
        reference=reference, reviews=reviews, images=None, settings=settings,
    )
    await ctrl.activate()
    return page_out(ctrl.snapshot(), presenter)


@app.put("/profiles/{user_id}", response_model=ActionOut)
async def save_profile(
    user_id: str,
    payload: ProfileIn,
    response: Response,
    store: ProfileStore = Depends(get_store),
    reference: ReferenceDataProvider = Depends(get_reference),
    reviews: ReviewProvider = Depends(get_reviews),
    settings: ProfileSettings = Depends(get_settings),
):
    presenter = RecordingPresenter()
    ctrl = _controller(
        presenter, user_id=user_id, store=store, reference=reference,
        reviews=reviews, images=None, settings=settings,
    )
    await ctrl.load_profile()
    if ctrl.profile_load_failed:
        response.status_code = 503
        return action_out(False, presenter, ctrl.form)
    ctrl.update_fields(payload.model_dump(exclude_unset=True))
    ok = await ctrl.save()
    if not ok:
        response.status_code = 400
    return action_out(ok, presenter, ctrl.form)


@app.post("/profiles/{user_id}/image", response_model=ActionOut)
async def upload_profile_image(
    user_id: str,
    response: Response,
    file: UploadFile = File(...),
    store: ProfileStore = Depends(get_store),
    reference: ReferenceDataProvider = Depends(get_reference),
    reviews: ReviewProvider = Depends(get_reviews),
    images: Optional[ImageStore] = Depends(get_image_store),
    settings: ProfileSettings = Depends(get_settings),
):
    if not file.filename:
        raise HTTPException(400, "Missing file name")
    data = await file.read()
    if not data:
        raise HTTPException(400, "Empty file")

    presenter = RecordingPresenter()
    ctrl = _controller(
        presenter, user_id=user_id, store=store, reference=reference,
        reviews=reviews, images=images, settings=settings,
    )
    await ctrl.load_profile()
    if ctrl.profile_load_failed:
        response.status_code = 503
        return action_out(False, presenter, ctrl.form)
    ok = await ctrl.upload_image(file.filename, data, file.content_type)
    if not ok:
        response.status_code = 502
    return action_out(ok, presenter, ctrl.form)


@app.post("/profiles/{user_id}/delete-request", response_model=ActionOut)
async def request_delete(
    user_id: str,
    payload: DeleteRequestIn,
    store: ProfileStore = Depends(get_store),
    reference: ReferenceDataProvider = Depends(get_reference),
    reviews: ReviewProvider = Depends(get_reviews),
    settings: ProfileSettings = Depends(get_settings),
):
    presenter = RecordingPresenter(confirm_role="confirm" if payload.confirm else "cancel")
    ctrl = _controller(
        presenter, user_id=user_id, store=store, reference=reference,
        reviews=reviews, images=None, settings=settings,
    )
    ok = await ctrl.confirm_delete()
    return action_out(ok, presenter)
