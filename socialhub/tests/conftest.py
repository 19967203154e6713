import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import FastAPI
from socialhub.config import Settings
from socialhub.main import create_app

# Test database URL - in-memory SQLite
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from any local .env file"""
    return Settings(
        _env_file=None,
        ENVIRONMENT="testing",
        TESTING=True,
        TEST_DATABASE_URL=TEST_DATABASE_URL,
        TEST_SECRET_KEY="test-secret-key",
    )

@pytest.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Application with a fresh database per test"""
    application = create_app(test_settings)
    await application.state.db.create_all()

    yield application

    await application.state.db.drop_all()
    await application.state.db.dispose()

@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create test client"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

@pytest.fixture
async def db_session(app: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    """Database session for service-level tests"""
    async with app.state.db.session_factory() as session:
        yield session

@pytest.fixture
def register(client: AsyncClient):
    """Register a user through the API; returns (user, auth headers)"""
    async def _register(name: str = "Ann", email: str = "ann@x.com", password: str = "secret1"):
        response = await client.post("/api/auth/register", json={
            "name": name,
            "email": email,
            "password": password
        })
        assert response.status_code == 200, response.text
        data = response.json()
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register

@pytest.fixture
def cloudinary_uploads(monkeypatch):
    """Replace the Cloudinary upload call; records every call made"""
    calls = []

    def fake_upload(file, **options):
        calls.append({"data": file.read(), **options})
        resource_type = options.get("resource_type", "image")
        return {
            "secure_url": f"https://res.cloudinary.com/demo/{resource_type}/upload/socialhub/{len(calls)}",
            "resource_type": resource_type,
        }

    monkeypatch.setattr("socialhub.services.media_service.uploader.upload", fake_upload)
    return calls
