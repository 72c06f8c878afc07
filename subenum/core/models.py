"""Data model shared by the orchestrator and the API boundary."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class EnumerationOptions(BaseModel):
    """Caller-tunable engine options.

    Numeric fields that are omitted or non-positive fall back to the
    configured defaults when translated.

    Attributes:
        threads: Upper bound on concurrent engine-internal workers.
        timeout: Per-source network timeout in seconds.
        max_enumeration_time: Ceiling on total engine runtime per domain, in
            minutes.
        all: Enable slow / low-yield sources.
        only_recursive: Restrict to sources supporting recursive discovery.
    """

    threads: int = 10
    timeout: int = 30
    max_enumeration_time: int = 10
    all: bool = False
    only_recursive: bool = False


class EngineConfig(BaseModel):
    """Immutable configuration handed to an enumeration engine."""

    model_config = ConfigDict(frozen=True)

    threads: int
    timeout: int
    max_enumeration_time: int
    all: bool = False
    only_recursive: bool = False
    json_output: bool = True


class RawDiscoveryRecord(BaseModel):
    """One structured line of engine output."""

    host: str
    source: str = ""
    input: str = ""

    @field_validator("source", "input", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class SubdomainResult(BaseModel):
    """A discovered subdomain and every source that reported it."""

    subdomain: str
    sources: List[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def source_count(self) -> int:
        return len(self.sources)


class DomainOutcome(BaseModel):
    """Per-domain status of a batch run.

    Attributes:
        domain: Requested domain.
        success: ``False`` when the engine failed for this domain.
        count: Number of engine records produced for this domain, before
            batch-wide deduplication.
        error: Engine error message for failed domains.
    """

    domain: str
    success: bool = True
    count: int = 0
    error: Optional[str] = None


class EnumerationResponse(BaseModel):
    """Envelope returned for a successful single or batch enumeration."""

    success: bool = True
    message: Optional[str] = None
    results: List[SubdomainResult] = Field(default_factory=list)
    duration: str = "0s"
    domains: Optional[List[DomainOutcome]] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def count(self) -> int:
        return len(self.results)


class ErrorResponse(BaseModel):
    """Envelope returned for any failed request."""

    success: bool = False
    error: str
