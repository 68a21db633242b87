import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from src.app.services.tenant_context import TenantHandle


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_store_uow(mock_uow):
    """Store unit of work whose writes hand back what they were given"""
    mock_uow.invoices.update = AsyncMock(side_effect=lambda invoice: invoice)
    mock_uow.invoices.create = AsyncMock(side_effect=lambda invoice: invoice)
    mock_uow.status_history.create = AsyncMock(side_effect=lambda entry: entry)
    mock_uow.payments.create = AsyncMock(side_effect=lambda payment: payment)
    mock_uow.payments.get_by_invoice_id = AsyncMock(return_value=[])
    return mock_uow


@pytest.fixture
def mock_stores():
    stores = MagicMock()
    stores.unit_of_work_factory = MagicMock(return_value=lambda: None)
    stores.provision = AsyncMock()
    stores.drop = AsyncMock()
    stores.dispose = AsyncMock()
    return stores


@pytest.fixture
def tenant_handle(mock_store_uow):
    return TenantHandle(
        tenant_id=uuid4(),
        tenant_name="Lotus Bridal",
        uow_factory=lambda: mock_store_uow,
        actor_id="staff-1",
        role="owner",
    )
