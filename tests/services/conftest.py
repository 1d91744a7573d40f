"""Service test fixtures — async DB, FastAPI test client, signed tokens.

Invariants:
    - Every test gets a fresh file-backed SQLite database (tmp_path)
    - get_db dependency overridden to use the test DB session
    - db_manager patched so collections open sessions on the test engine
    - app.state.auth_config set to a fake secret (lifespan does not run under ASGITransport)

Design Decisions:
    - File-backed over :memory: SQLite: concurrent find/count sessions each get
      their own connection to the same database
    - raise_app_exceptions=False: the catch-all handler answers with the envelope
      and Starlette re-raises afterwards; the test inspects the response
"""

from datetime import timedelta
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from catalog_api.db.base import Base
from catalog_api.infrastructure.database import get_db, DatabaseSessionManager
import catalog_api.infrastructure.database as db_module
from catalog_api.main import app
from catalog_api.models.author import Author
from catalog_api.models.book import Book
from catalog_api.models.user import User
from tests.services.helpers import BASE_TIME, TEST_AUTH, token_for


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency and auth config overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager
    app.state.auth_config = TEST_AUTH

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
    del app.state.auth_config


# ─── Tokens ──────────────────────────────────────────────────────

@pytest.fixture
def admin_headers():
    return token_for(uuid4(), is_admin=True)


# ─── Seed Data ───────────────────────────────────────────────────

@pytest.fixture
async def seed_catalog(test_db):
    """Two authors and five books with strictly increasing created_at."""
    herbert = Author(name="Frank Herbert", created_at=BASE_TIME)
    le_guin = Author(name="Ursula K. Le Guin", created_at=BASE_TIME + timedelta(minutes=1))
    test_db.add_all([herbert, le_guin])
    await test_db.flush()
    rows = [
        ("Dune", "sf", 1965, herbert),
        ("Dune Messiah", "sf", 1969, herbert),
        ("The Left Hand of Darkness", "sf", 1969, le_guin),
        ("A Wizard of Earthsea", "fantasy", 1968, le_guin),
        ("The Dispossessed", "sf", 1974, le_guin),
    ]
    books = []
    for index, (title, genre, year, author) in enumerate(rows):
        book = Book(
            title=title, genre=genre, published_year=year, author_id=author.id,
            created_at=BASE_TIME + timedelta(hours=index + 1),
        )
        books.append(book)
    test_db.add_all(books)
    await test_db.commit()
    return {"authors": [herbert, le_guin], "books": books}


@pytest.fixture
async def seed_user(test_db):
    user = User(username="alice", email="alice@example.com")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user

