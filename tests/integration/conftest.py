import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.utils.jwt import TokenIssuer
from src.depends import get_unit_of_work

TEST_DB_URI = "sqlite+aiosqlite:///./test.db"

USER_PAYLOAD = {
    "first_name": "Jane",
    "last_name": "Doe",
    "user_name": "jane_doe",
    "email": "jane@example.com",
    "password": "SecurePass123!",
    "gender": "female",
    "dob": "1990-05-17",
}

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class IntegrationConfig(ApplicationConfig):
    DB_URI = TEST_DB_URI
    DB_CREATE_ALL = False
    JWT_SECRET = "integration-test-secret"
    BCRYPT_ROUNDS = 4
    SESSION_SWEEP_ON_STARTUP = False
    SESSION_SWEEP_INTERVAL_SECONDS = 0


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(TEST_DB_URI)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    from src.api.app import create_app

    app = create_app(IntegrationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"User-Agent": CHROME_WINDOWS},
    ) as ac:
        yield ac
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def isolated_client(session_factory):
    """Client whose requests each get their own database session"""
    from src.api.app import create_app

    app = create_app(IntegrationConfig)

    async def override_get_unit_of_work():
        async with session_factory() as session:
            yield SqlAlchemyUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"User-Agent": CHROME_WINDOWS},
    ) as ac:
        yield ac
    await app.state.engine.dispose()


@pytest.fixture
def token_issuer():
    return TokenIssuer.from_config(IntegrationConfig)


@pytest.fixture
def user_payload():
    return dict(USER_PAYLOAD)


@pytest_asyncio.fixture
async def registered_user(client, user_payload):
    response = await client.post("/api/auth/register", json=user_payload)
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def logged_in(client, registered_user, user_payload):
    """Login response body of the registered user"""
    response = await client.post(
        "/api/auth/login",
        json={"identifier": user_payload["email"], "password": user_payload["password"]},
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def auth_headers(logged_in):
    return {"Authorization": f"Bearer {logged_in['access_token']}"}
