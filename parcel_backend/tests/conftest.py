"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from parcel_backend.app.main import app
from parcel_backend.app.db.session import get_db, Base
from parcel_backend.app.core.jwt import create_access_token
from parcel_backend.app.models.user import User
from parcel_backend.app.models.enums import UserRole

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_EMAIL = "admin@parcel.test"
CUSTOMER_EMAIL = "customer@parcel.test"
RIDER_EMAIL = "rider@parcel.test"


def auth_headers(email: str) -> dict:
    """Bearer header for a token the app's verifier accepts."""
    token = create_access_token({"sub": email, "email": email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def session_factory():
    """Fresh database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(autouse=True)
def override_db(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides = {}


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def admin_headers(db_session):
    """An admin user; roles are only granted in the store, never at sign-in."""
    db_session.add(User(email=ADMIN_EMAIL, name="Admin", role=UserRole.ADMIN))
    await db_session.commit()
    return auth_headers(ADMIN_EMAIL)


@pytest.fixture
def customer_headers():
    return auth_headers(CUSTOMER_EMAIL)


@pytest.fixture
def parcel_payload():
    return {
        "created_by": CUSTOMER_EMAIL,
        "title": "Birthday gift",
        "parcel_type": "non-document",
        "weight_kg": 1.5,
        "sender_name": "Alice",
        "sender_district": "Dhaka",
        "receiver_name": "Bob",
        "receiver_district": "Khulna",
        "delivery_cost": 120.0,
    }


@pytest.fixture
async def parcel(client, parcel_payload):
    """A freshly booked, pending parcel."""
    response = await client.post("/v1/parcels", json=parcel_payload)
    assert response.status_code == 201
    return response.json()["parcel"]


@pytest.fixture
async def active_rider(client, admin_headers):
    """A rider who applied, signed in as a user, and was approved by an admin."""
    await client.post("/v1/users", json={"email": RIDER_EMAIL, "name": "Rahim"})
    response = await client.post("/v1/riders", json={
        "name": "Rahim",
        "email": RIDER_EMAIL,
        "phone": "+8801700000000",
        "district": "Dhaka",
    })
    assert response.status_code == 201
    rider = response.json()

    response = await client.patch(
        f"/v1/riders/{rider['id']}/status",
        json={"status": "active"},
        headers=admin_headers
    )
    assert response.status_code == 200
    return rider
