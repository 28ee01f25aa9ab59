"""API dependencies for authentication and shared pipeline services.

This module provides:
- Optional API key authentication for network-exposed deployments
- Process-wide cache store and pipeline controller instances
"""

import logging
import secrets
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from subtrans.config import settings
from subtrans.core.cache import CacheStore
from subtrans.core.translation.orchestrator import PipelineController
from subtrans.models.database.base import async_session_maker

logger = logging.getLogger(__name__)


# =============================================================================
# Authentication Dependencies
# =============================================================================


async def verify_api_token(
    authorization: Annotated[Optional[str], Header()] = None,
    x_api_key: Annotated[Optional[str], Header(alias="X-API-Key")] = None,
) -> bool:
    """Verify API token for mutating endpoints.

    Supports two authentication methods:
    1. Authorization: Bearer <token>
    2. X-API-Key: <token>

    If API_AUTH_TOKEN is not set, authentication is disabled.

    Raises:
        HTTPException: 401 if auth is required but token is invalid/missing
    """
    if not settings.api_auth_token:
        return True

    token = None
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:]
    elif x_api_key:
        token = x_api_key

    if not token:
        raise HTTPException(
            status_code=401,
            detail="Authentication required. Provide Authorization: Bearer <token> or X-API-Key header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Constant-time comparison
    if not secrets.compare_digest(token, settings.api_auth_token):
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return True


async def verify_api_token_if_configured(
    authorization: Annotated[Optional[str], Header()] = None,
    x_api_key: Annotated[Optional[str], Header(alias="X-API-Key")] = None,
) -> bool:
    """Verify API token only if require_auth_all is enabled."""
    if not settings.require_auth_all:
        return True
    return await verify_api_token(authorization, x_api_key)


# Type aliases for cleaner dependency injection
RequireAuth = Annotated[bool, Depends(verify_api_token)]
OptionalAuth = Annotated[bool, Depends(verify_api_token_if_configured)]


# =============================================================================
# Pipeline Services
# =============================================================================

_cache_store: Optional[CacheStore] = None
_controller: Optional[PipelineController] = None


def get_cache_store() -> CacheStore:
    """Get the process-wide cache store."""
    global _cache_store
    if _cache_store is None:
        _cache_store = CacheStore(async_session_maker)
    return _cache_store


def get_pipeline_controller() -> PipelineController:
    """Get the process-wide pipeline controller."""
    global _controller
    if _controller is None:
        _controller = PipelineController(store=get_cache_store())
        logger.info("[API] Pipeline controller created")
    return _controller


Store = Annotated[CacheStore, Depends(get_cache_store)]
Controller = Annotated[PipelineController, Depends(get_pipeline_controller)]
