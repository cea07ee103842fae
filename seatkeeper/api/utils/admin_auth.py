"""
Admin API Key Authentication

Guards the billing and maintenance endpoints.
"""

import hmac

from fastapi import Header, status

from config import ApplicationConfig
from seatkeeper.api.error import ClientError
from seatkeeper.libs.result import Error


async def verify_admin_api_key(x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Service-to-service auth for the billing system, separate from user JWTs.

    Raises:
        ClientError: 401 if key is missing or invalid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not hmac.compare_digest(x_admin_api_key, str(ApplicationConfig.ADMIN_API_KEY)):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
