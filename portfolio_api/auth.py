"""Admin authentication using a shared bearer secret."""

import hmac
import logging
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from portfolio_api.config import Settings

# Configure logging
logger = logging.getLogger(__name__)

# HTTP Bearer for admin token; missing headers are handled below
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    """Dependency returning the settings the app was built with."""
    return request.app.state.settings


def token_matches(settings: Settings, credentials: Optional[HTTPAuthorizationCredentials]) -> bool:
    """
    Check a bearer token against the admin secret.

    Args:
        settings: Application settings holding the admin key
        credentials: Parsed Authorization header, if any

    Returns:
        bool: True only when a secret is configured and the token equals it exactly
    """
    if not settings.admin_key or credentials is None:
        return False
    return hmac.compare_digest(
        credentials.credentials.encode("utf-8"),
        settings.admin_key.encode("utf-8"),
    )


def check_admin(settings: Settings, credentials: Optional[HTTPAuthorizationCredentials]):
    """
    Enforce admin access, distinguishing each failure mode.

    Raises:
        HTTPException: 503 if no secret is configured, 401 if no bearer token
            was sent, 403 if the token is wrong
    """
    if not settings.admin_key:
        logger.warning("Admin request rejected: ADMIN_KEY not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin operations not configured"
        )

    if credentials is None:
        logger.warning("Admin request rejected: missing bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin authorization required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not token_matches(settings, credentials):
        logger.warning("Admin request rejected: invalid token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin token"
        )


def require_admin(
    settings: Settings = Depends(get_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """Dependency gating admin-only routes."""
    check_admin(settings, credentials)


def is_admin(
    settings: Settings = Depends(get_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> bool:
    """Dependency reporting admin access without rejecting the request."""
    return token_matches(settings, credentials)
