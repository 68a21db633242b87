"""
Platform Admin Authentication

Validates platform-admin sessions for store administration endpoints.
"""

from fastapi import Depends, status

from src.libs.result import Error
from src.api.error import ClientError
from src.api.utils.jwt import PLATFORM_ADMIN_ROLE, PLATFORM_SCOPE
from src.depends import get_current_session


async def verify_platform_admin(session: dict = Depends(get_current_session)) -> dict:
    """
    Require a platform-admin JWT.

    Tenant sessions, including impersonated ones, are refused: an admin acting
    inside a store cannot reach platform operations with that session.

    Raises:
        ClientError: 403 if the token is not a platform-admin token

    Returns:
        The admin session payload (admin_id, admin_name, scope, role)
    """
    if (
        session.get("scope") != PLATFORM_SCOPE
        or session.get("role") != PLATFORM_ADMIN_ROLE
        or not session.get("admin_id")
    ):
        raise ClientError(
            Error("FORBIDDEN", "Platform admin privileges required"),
            status_code=status.HTTP_403_FORBIDDEN,
        )

    return session
