# Policy Registry - Insurance Policy Records API
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""FastAPI dependencies for authentication and data access.

This module provides reusable dependencies that can be injected into
API endpoints for cross-cutting concerns.
"""

from beartype import beartype
from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.config import Settings, get_settings
from ..core.database import Database, PostgresPolicyStore, get_database
from ..core.logging_utils import get_logger
from ..core.security import InvalidTokenError, get_security
from ..core.store import PolicyStore
from ..schemas.auth import CurrentUser
from ..services.policy_service import PolicyService

logger = get_logger(__name__)

# Security scheme; missing credentials are reported by get_current_user
security = HTTPBearer(auto_error=False)


@beartype
async def get_db() -> Database:
    """Provide the shared database pool wrapper."""
    return get_database()


@beartype
async def get_policy_store(db: Database = Depends(get_db)) -> PolicyStore:
    """Provide the policy store backed by the shared pool."""
    return PostgresPolicyStore(db)


@beartype
async def get_policy_service(
    store: PolicyStore = Depends(get_policy_store),
    settings: Settings = Depends(get_settings),
) -> PolicyService:
    """Provide a request-scoped policy service."""
    return PolicyService(store, settings.policies_table)


@beartype
async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
) -> CurrentUser:
    """Validate the bearer token and return the current user.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        # NOTE: This is a dependency function, not an endpoint
        # We need to keep raising HTTPException here as FastAPI expects it
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = get_security().decode_token(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return CurrentUser(
        user_id=payload.sub,
        email=payload.email,
        role=payload.role,
    )
