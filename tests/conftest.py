"""
Shared fixtures: a temporary SQLite database, fast bcrypt and a temp
upload directory.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.service import AuthService
from config.settings import Settings
from database.repository import SqlUserRepository
from database.session import build_engine, build_session_factory, init_db
from api.app import create_app
from media.intake import MediaStore

TEST_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        upload_dir=str(tmp_path / "uploads"),
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        max_upload_bytes=1024,
    )


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET, expiry_seconds=3600)


@pytest.fixture
def media(tmp_path) -> MediaStore:
    return MediaStore(tmp_path / "uploads", max_bytes=1024)


@pytest_asyncio.fixture
async def db_session(settings):
    engine = build_engine(settings.database_url)
    await init_db(engine)
    factory = build_session_factory(engine)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def repo(db_session) -> SqlUserRepository:
    return SqlUserRepository(db_session)


@pytest.fixture
def service(repo, hasher, tokens, media) -> AuthService:
    return AuthService(users=repo, hasher=hasher, tokens=tokens, media=media)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client
