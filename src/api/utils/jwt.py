from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig

PLATFORM_SCOPE = "platform"
PLATFORM_ADMIN_ROLE = "platform_admin"


def generate_jwt(
    user_id: str,
    tenant_id: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
    impersonated_by: Optional[str] = None,
) -> str:
    """
    Generate a tenant-scoped JWT access token

    Args:
        user_id: Store user identifier
        tenant_id: Tenant UUID as string
        role: Store role (owner, manager, staff)
        expires_delta: Token lifetime, ACCESS_TOKEN_MINUTES when omitted
        impersonated_by: Platform admin id when the session is an impersonation

    Returns:
        JWT token string (HS256)
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_MINUTES)
    payload = {
        "user_id": str(user_id),
        "tenant_id": str(tenant_id),
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
    }
    if impersonated_by:
        payload["impersonated_by"] = str(impersonated_by)
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def generate_platform_jwt(
    admin_id: str, admin_name: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Generate a platform-admin JWT; it carries no tenant and cannot read store data

    Args:
        admin_id: Platform admin identifier
        admin_name: Display name recorded in audit events
        expires_delta: Token lifetime, ACCESS_TOKEN_MINUTES when omitted
    """
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_MINUTES)
    payload = {
        "admin_id": str(admin_id),
        "admin_name": admin_name,
        "scope": PLATFORM_SCOPE,
        "role": PLATFORM_ADMIN_ROLE,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
        return payload
    except JWTError:
        return None
