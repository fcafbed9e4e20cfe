"""
Test fixtures - in-memory SQLite database, temporary document store,
authenticated HTTP client
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from backend.config import get_settings
from backend.database import Base, get_db
from backend.main import app
from backend.api.auth import get_password_hash, create_access_token
from backend.models.user import User, UserRole
from backend.services.document_store import DocumentStore, get_document_store


@pytest.fixture()
def store(tmp_path):
    """Document store rooted in a per-test temp directory"""
    s = DocumentStore(tmp_path / "data", tmp_path / "public")
    s.ensure_dirs()
    return s


@pytest.fixture(autouse=True)
def isolated_frontend(tmp_path, monkeypatch):
    """Keep the SPA route away from any real frontend build"""
    monkeypatch.setattr(get_settings(), "FRONTEND_BUILD_DIR", tmp_path / "dist")


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture()
async def seed_data(db_session):
    """Insert baseline test data: one NGO + two restaurants"""
    ngo = User(
        email="ngo@test.org",
        password_hash=get_password_hash("testpass123"),
        role=UserRole.NGO,
    )
    spice = User(
        email="spice@test.com",
        password_hash=get_password_hash("testpass123"),
        role=UserRole.RESTAURANT,
        restaurant_name="Spice Route",
        gst_number="29ABCDE1234F1Z5",
    )
    green = User(
        email="green@test.com",
        password_hash=get_password_hash("testpass123"),
        role=UserRole.RESTAURANT,
        restaurant_name="Green Bowl",
    )

    db_session.add_all([ngo, spice, green])
    await db_session.commit()
    for u in (ngo, spice, green):
        await db_session.refresh(u)

    return {"ngo": ngo, "spice": spice, "green": green}


def _override(db_session, store):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_document_store] = lambda: store


@pytest_asyncio.fixture()
async def client(db_session, seed_data, store):
    """httpx AsyncClient authenticated as the NGO user"""
    _override(db_session, store)

    token = create_access_token(data={"userId": seed_data["ngo"].id, "role": "NGO"})

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        ac.headers["Authorization"] = f"Bearer {token}"
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def unauth_client(db_session, store):
    """Unauthenticated httpx AsyncClient"""
    _override(db_session, store)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
