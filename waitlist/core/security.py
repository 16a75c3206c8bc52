"""
Admin authentication and request rate limiting.
"""

import secrets
from typing import Optional

import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from slowapi import Limiter
from slowapi.util import get_remote_address

from waitlist.config import settings

logger = structlog.get_logger(__name__)

limiter = Limiter(key_func=get_remote_address)

_bearer = HTTPBearer(auto_error=False)


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    """
    Check the Bearer token against ADMIN_API_TOKEN.

    Returns:
        Actor name recorded in config history ("admin").

    Raises:
        HTTPException 503 if no admin token is configured, 401 otherwise.
    """
    if settings.ADMIN_API_TOKEN is None or not settings.ADMIN_API_TOKEN.get_secret_value():
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"error_code": "ADMIN_DISABLED", "message": "Admin API is not configured"},
        )

    expected = settings.ADMIN_API_TOKEN.get_secret_value()
    if credentials is None or not secrets.compare_digest(credentials.credentials, expected):
        logger.warning("admin_auth_failed", has_credentials=credentials is not None)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error_code": "UNAUTHORIZED", "message": "Invalid or missing admin token"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return "admin"
