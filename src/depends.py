from typing import Optional

from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.libs.result import Error
from src.adapter.services.tenant_store import TenantStoreRegistry
from src.adapter.services.unit_of_work import SqlAlchemyPlatformUnitOfWork
from src.api.error import ClientError, raise_for_error
from src.api.utils.jwt import verify_jwt
from src.app.services.item_locks import ItemLockRegistry
from src.app.services.tenant_context import TenantHandle
from src.app.use_cases.tenancy import ResolveTenantUseCase
from src.domain.entities import PLATFORM_TABLES

engine = create_async_engine(ApplicationConfig.PLATFORM_DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

store_registry = TenantStoreRegistry()
item_locks = ItemLockRegistry()

security = HTTPBearer(auto_error=False)


async def init_platform_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all, tables=PLATFORM_TABLES)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyPlatformUnitOfWork(session)


def get_store_registry() -> TenantStoreRegistry:
    return store_registry


def get_item_locks() -> ItemLockRegistry:
    return item_locks


async def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Args:
        credentials: Bearer token from Authorization header

    Returns:
        Decoded JWT payload (tenant session or platform admin session)

    Raises:
        ClientError: 401 if token is missing, invalid or expired
    """
    if credentials is None:
        raise ClientError(
            Error("UNAUTHENTICATED", "Authorization bearer token required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    payload = verify_jwt(credentials.credentials)
    if payload is None:
        raise ClientError(
            Error("UNAUTHENTICATED", "Invalid or expired token"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return payload


async def get_tenant_handle(
    session: dict = Depends(get_current_session),
    uow: SqlAlchemyPlatformUnitOfWork = Depends(get_unit_of_work),
    stores: TenantStoreRegistry = Depends(get_store_registry),
) -> TenantHandle:
    """Resolve the caller's store; every store route depends on this"""
    result = await ResolveTenantUseCase(uow, stores).execute(session)
    if result.is_err():
        raise_for_error(result.error)
    return result.value
