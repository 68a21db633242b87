import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.services.tenant_store import TenantStoreRegistry
from src.adapter.services.unit_of_work import SqlAlchemyPlatformUnitOfWork
from src.api.utils.jwt import generate_jwt, generate_platform_jwt
from src.app.services.item_locks import ItemLockRegistry
from src.depends import get_item_locks, get_store_registry, get_unit_of_work
from src.domain.entities import PLATFORM_TABLES
from tests.fixtures.json_loader import TestDataLoader

API = ApplicationConfig.API_PREFIX


@pytest_asyncio.fixture
def test_data():
    return TestDataLoader()


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'platform.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all, tables=PLATFORM_TABLES)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def store_registry():
    registry = TenantStoreRegistry()
    yield registry
    await registry.dispose_all()


@pytest.fixture
def item_locks():
    return ItemLockRegistry()


@pytest_asyncio.fixture
async def client(engine, store_registry, item_locks, tmp_path, monkeypatch):
    from src.api.app import create_app

    monkeypatch.setattr(
        ApplicationConfig,
        "STORE_DB_URI_TEMPLATE",
        f"sqlite+aiosqlite:///{tmp_path}/stores/store_{{tenant_id}}.db",
    )
    app = create_app(ApplicationConfig)

    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    async def override_get_unit_of_work():
        async with Session() as session:
            yield SqlAlchemyPlatformUnitOfWork(session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_store_registry] = lambda: store_registry
    app.dependency_overrides[get_item_locks] = lambda: item_locks

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        ac.app = app
        yield ac


@pytest.fixture
def admin_headers():
    token = generate_platform_jwt("admin-1", "Platform Ops")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def tenant(client, admin_headers):
    response = await client.post(
        f"{API}/admin/tenants",
        json={"name": "Lotus Bridal", "owner_email": "owner@lotus.example"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def store_headers(tenant):
    token = generate_jwt(user_id="staff-1", tenant_id=tenant["id"], role="owner")
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def item(client, store_headers, test_data):
    response = await client.post(
        f"{API}/items", json=test_data.get_copy("item"), headers=store_headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def rent_payload(item, test_data):
    def build(**overrides):
        return test_data.get_copy("rent_invoice", **{"item_id": item["id"], **overrides})

    return build
