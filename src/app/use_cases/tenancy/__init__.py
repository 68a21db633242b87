"""Tenant resolution for store requests."""

from .resolve_tenant_use_case import ResolveTenantUseCase

__all__ = ["ResolveTenantUseCase"]
