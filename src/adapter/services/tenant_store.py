"""
Per-tenant store registry.

Each tenant's data lives in its own database, located by Tenant.db_uri. The
registry keeps one async engine per tenant and hands out units of work bound
to it.
"""

import logging
import os
from typing import Callable, Dict, Tuple
from uuid import UUID

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyStoreUnitOfWork
from src.app.services.tenant_context import ITenantStoreRegistry
from src.app.services.unit_of_work import StoreUnitOfWork
from src.domain.entities import STORE_TABLES, Tenant

logger = logging.getLogger(__name__)


def _sqlite_path(db_uri: str):
    url = make_url(db_uri)
    if not url.drivername.startswith("sqlite"):
        return None
    if not url.database or url.database == ":memory:":
        return None
    return url.database


class TenantStoreRegistry(ITenantStoreRegistry):
    def __init__(self, echo: bool = False):
        self.echo = echo
        self._engines: Dict[UUID, Tuple[str, AsyncEngine, sessionmaker]] = {}

    def _entry(self, tenant: Tenant) -> Tuple[str, AsyncEngine, sessionmaker]:
        entry = self._engines.get(tenant.id)
        if entry is not None and entry[0] == tenant.db_uri:
            return entry

        engine = create_async_engine(tenant.db_uri, echo=self.echo, future=True)
        session_local = sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        entry = (tenant.db_uri, engine, session_local)
        self._engines[tenant.id] = entry
        logger.debug(f"Opened store engine for tenant {tenant.id}")
        return entry

    def engine_for(self, tenant: Tenant) -> AsyncEngine:
        return self._entry(tenant)[1]

    def unit_of_work_factory(self, tenant: Tenant) -> Callable[[], StoreUnitOfWork]:
        session_local = self._entry(tenant)[2]

        def factory() -> StoreUnitOfWork:
            return SqlAlchemyStoreUnitOfWork(session_local())

        return factory

    async def provision(self, tenant: Tenant) -> None:
        path = _sqlite_path(tenant.db_uri)
        if path:
            directory = os.path.dirname(os.path.abspath(path))
            os.makedirs(directory, exist_ok=True)

        engine = self.engine_for(tenant)
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all, tables=STORE_TABLES)
        logger.info(f"Provisioned store for tenant {tenant.id}")

    async def drop(self, tenant: Tenant) -> None:
        engine = self.engine_for(tenant)
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all, tables=STORE_TABLES)
        await self.dispose(tenant.id)

        path = _sqlite_path(tenant.db_uri)
        if path and os.path.exists(path):
            os.remove(path)
        logger.warning(f"Dropped store for tenant {tenant.id}")

    async def dispose(self, tenant_id: UUID) -> None:
        entry = self._engines.pop(tenant_id, None)
        if entry is not None:
            await entry[1].dispose()

    async def dispose_all(self) -> None:
        for tenant_id in list(self._engines):
            await self.dispose(tenant_id)
