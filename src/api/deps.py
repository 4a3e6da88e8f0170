"""FastAPI dependency injection for database access and admin checks."""

import secrets
from collections.abc import AsyncGenerator

from fastapi import Header, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config import settings


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session from the app's session factory.

    Args:
        request: FastAPI request containing app state.

    Yields:
        AsyncSession for database operations with automatic commit/rollback.
    """
    async with request.app.state.async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def verify_admin_api_key(
    x_admin_api_key: str | None = Header(default=None, alias="X-Admin-Api-Key"),
    admin_api_key: str | None = Query(default=None, alias="admin_api_key"),
) -> None:
    """Verify API key for admin endpoints.

    Args:
        x_admin_api_key: API key from X-Admin-Api-Key header.
        admin_api_key: API key from the admin_api_key query parameter.

    Raises:
        HTTPException: If API key is unconfigured, missing or invalid.
    """
    if not settings.admin_api_key:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API key is not configured",
        )
    api_key = x_admin_api_key or admin_api_key
    if api_key is None or not secrets.compare_digest(
        api_key.encode(), settings.admin_api_key.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin API key",
        )


def get_client_ip(request: Request) -> str:
    """Client IP, preferring the first X-Forwarded-For hop behind a proxy."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    if first_hop:
        return first_hop
    if request.client is not None:
        return request.client.host
    return "unknown"
