"""API key authentication for back-office routes.

User sessions belong to the hosted auth provider; this API only checks a
shared ``X-API-Key`` that the web front-end and admin tools present when they
read private data (guest lists) or create sites.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Annotated

from fastapi import Header

from bind8.core.config import settings
from bind8.core.errors import AuthenticationAppError, ConfigurationAppError

logger = logging.getLogger(__name__)


def parse_api_keys(keys_string: str | None) -> set[str]:
    """Parse comma-separated API keys into a set.

    Examples:
        >>> parse_api_keys("key1, key2 , key3 ")
        {'key1', 'key2', 'key3'}
        >>> parse_api_keys(None)
        set()
    """
    if not keys_string:
        return set()
    return {key.strip() for key in keys_string.split(",") if key.strip()}


def _key_hash(key: str) -> str:
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def validate_api_key(provided_key: str | None) -> None:
    """Check a key against the configured set.

    Raises:
        ConfigurationAppError: If auth is required but no keys are configured.
        AuthenticationAppError: If the key is missing or unknown.
    """
    if not settings.app.api_key_required:
        return

    valid_keys = parse_api_keys(settings.app.api_keys)
    if not valid_keys:
        logger.error(
            "api_key_validation_failed",
            extra={"reason": "api_keys_not_configured"},
        )
        raise ConfigurationAppError(
            code="api_keys_not_configured",
            message="API key authentication is enabled but no valid keys are configured",
            details={"hint": "Set APP_API_KEYS or disable auth with APP_API_KEY_REQUIRED=false"},
        )

    if not provided_key:
        logger.warning("api_key_validation_failed", extra={"reason": "missing_api_key"})
        raise AuthenticationAppError(
            code="missing_api_key",
            message="Authentication required. Provide X-API-Key header.",
        )

    if provided_key not in valid_keys:
        logger.warning(
            "api_key_validation_failed",
            extra={"reason": "invalid_api_key", "api_key_hash": _key_hash(provided_key)},
        )
        raise AuthenticationAppError(
            code="invalid_api_key",
            message="Invalid or missing API key",
        )


async def verify_api_key(
    x_api_key: Annotated[str | None, Header(alias="X-API-Key")] = None,
) -> None:
    """FastAPI dependency for API key authentication.

    Usage:
        @router.get("/private", dependencies=[Depends(verify_api_key)])
    """
    validate_api_key(x_api_key)
    if settings.app.api_key_required:
        logger.debug("auth.success", extra={"api_key_hash": _key_hash(x_api_key or "")})
