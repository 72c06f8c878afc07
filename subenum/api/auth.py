"""Optional shared-secret protection for the enumeration endpoints.

Clients send the key in the ``X-API-Key`` header. An empty ``api.api_key``
leaves the endpoints open.
"""

from __future__ import annotations

import secrets
from typing import Awaitable, Callable, Optional

from fastapi import HTTPException, Security, status
from fastapi.security.api_key import APIKeyHeader

from subenum.core.config import APIConfig

API_KEY_HEADER = "X-API-Key"

_key_header = APIKeyHeader(name=API_KEY_HEADER, auto_error=False)


def require_api_key(settings: APIConfig) -> Callable[..., Awaitable[None]]:
    """Return a dependency enforcing ``settings.api_key`` on a route."""
    expected = settings.api_key

    async def _verify(provided: Optional[str] = Security(_key_header)) -> None:
        if not expected:
            return
        if provided is None or not secrets.compare_digest(provided.encode(), expected.encode()):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or missing API key",
                headers={"WWW-Authenticate": "ApiKey"},
            )

    return _verify
