"""Pydantic models for the SUBENUM REST API.

Defines request/response schemas for all API endpoints. Enumeration results
reuse the core models from :mod:`subenum.core.models`.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from subenum.core.models import EnumerationOptions


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RequestOptions(EnumerationOptions):
    """Options block of an enumeration request.

    Numeric fields default to ``0`` so that omitted values fall back to the
    server defaults. ``all`` and ``only_recursive`` default to ``false`` and
    replace the server defaults whenever the block is present.
    """

    threads: int = 0
    timeout: int = 0
    max_enumeration_time: int = 0


class EnumerateRequest(BaseModel):
    """Request body for ``POST /enumerate`` and ``POST /enumerate/batch``.

    Attributes:
        domain: Target of a single-domain request.
        domains: Targets of a batch request, processed in order.
        options: Optional engine option overrides.
    """

    domain: str = Field(default="", examples=["hackerone.com"])
    domains: List[str] = Field(
        default_factory=list,
        examples=[["hackerone.com", "bugcrowd.com"]],
    )
    options: Optional[RequestOptions] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response body for ``GET /health``.

    Attributes:
        success: Always ``True`` while the service is up.
        message: Human-readable status.
        version: SUBENUM version.
        timestamp: Current UTC time.
    """

    success: bool = True
    message: str = "Subfinder API is running"
    version: str
    timestamp: datetime
