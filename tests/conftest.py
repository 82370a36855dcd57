# tests/conftest.py
import os
import sys
from pathlib import Path

# --- Part 1: Path Setup ---
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


# --- Part 2: Environment ---
# Must be set before db.session is imported; tests never touch a real database.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("CONFIG_PATH", str(REPO_ROOT / "config.yaml"))
os.environ.pop("S3_BUCKET", None)


# --- Part 3: Application / test library imports ---
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from db.models import Base


# --- Part 4: Core fixtures ---
@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncSession:
    """
    Clean in-memory SQLite database per test.
    StaticPool keeps the single connection alive so every session sees the same schema.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    Session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with Session() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def bind_session(monkeypatch, db_session: AsyncSession):
    """
    Make a service module use the SAME AsyncSession as the test:
        bind_session(profile_service)
    """
    class _Ctx:
        async def __aenter__(self):
            return db_session
        async def __aexit__(self, exc_type, exc, tb):
            return False

    def _bind(module):
        monkeypatch.setattr(module, "Session", lambda: _Ctx(), raising=True)
        return module

    return _bind
