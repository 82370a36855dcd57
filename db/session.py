# db/session.py
from __future__ import annotations

import os
import pathlib
import logging
from typing import Iterable, Any, Dict

from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
import ssl as _ssl
from sqlalchemy.pool import NullPool

logger = logging.getLogger("contractor-profile")

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./contractor_profiles.db"


def _load_env_files(candidates: Iterable[str]) -> None:
    """
    Load env files from both CWD and project root (relative to this file),
    without overriding values already provided by the platform.
    """
    here = pathlib.Path(__file__).resolve()
    roots = {
        pathlib.Path.cwd(),
        here.parent.parent,
    }
    for fname in candidates:
        for root in roots:
            p = root / fname
            if p.exists():
                load_dotenv(p, override=False)


# Load secrets if present (won't override variables already set by the platform)
_load_env_files((".env.local", "env.local", ".env"))


def _ssl_arg(sslmode: str) -> Any:
    sslmode = (sslmode or "disable").lower()
    if sslmode in ("disable", "off", "false", "0"):
        return False
    if sslmode in ("require",):
        return "require"  # encrypted, no verification
    if sslmode in ("verify-ca", "verify-full"):
        ctx = _ssl.create_default_context(cafile=os.getenv("DB_SSLROOTCERT"))
        ctx.check_hostname = sslmode == "verify-full"
        if sslmode == "verify-ca":
            ctx.verify_mode = _ssl.CERT_REQUIRED
        return ctx
    return False  # sane fallback


def make_engine(url: str) -> AsyncEngine:
    """Async engine for `url`. Postgres goes through asyncpg with DB_SSLMODE; sqlite via aiosqlite."""
    backend = make_url(url).get_backend_name()
    kwargs: Dict[str, Any] = {"echo": bool(os.getenv("SQL_ECHO"))}
    if backend == "postgresql":
        kwargs.update(
            pool_pre_ping=True,
            poolclass=NullPool,
            connect_args={"ssl": _ssl_arg(os.getenv("DB_SSLMODE", "disable"))},
        )
    return create_async_engine(url, **kwargs)


DATABASE_URL = os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL
# Avoid printing secrets; only the backend
logger.debug("DATABASE_URL backend: %s", make_url(DATABASE_URL).get_backend_name())

engine = make_engine(DATABASE_URL)

Session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def ping() -> bool:
    """Simple connectivity check, used by the API health endpoint."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database ping failed")
        return False
