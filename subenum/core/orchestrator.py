"""Request-to-result orchestration for SUBENUM.

The :class:`EnumerationOrchestrator` validates input, translates options,
drives the engine once per domain and folds everything into an
:class:`~subenum.core.models.EnumerationResponse`.
"""

from __future__ import annotations

import asyncio
import time
from typing import List, Optional, Sequence, Tuple

from subenum.core.config import Config
from subenum.core.engine import EngineFactory, EnumerationEngine, build_engine
from subenum.core.errors import EngineInitError, EngineInvocationError
from subenum.core.models import (
    DomainOutcome,
    EngineConfig,
    EnumerationOptions,
    EnumerationResponse,
    RawDiscoveryRecord,
)
from subenum.core.options import translate
from subenum.core.results import ResultAggregator, normalize
from subenum.utils.helpers import format_duration
from subenum.utils.logger import get_logger
from subenum.utils.validators import validate_domain, validate_domains

logger = get_logger(__name__)

_DomainRun = Tuple[DomainOutcome, List[RawDiscoveryRecord]]


class EnumerationOrchestrator:
    """Coordinate single and batch enumerations.

    Each call builds its own engine and aggregator, so one orchestrator can
    serve concurrent requests.

    Example::

        orchestrator = EnumerationOrchestrator(
            defaults=EnumerationOptions(),
            engine_factory=build_engine(EngineSettings()),
        )
        response = await orchestrator.enumerate("example.com")
    """

    def __init__(
        self,
        defaults: EnumerationOptions,
        engine_factory: EngineFactory,
        batch_concurrency: int = 1,
    ) -> None:
        """Initialise the orchestrator.

        Args:
            defaults: Options used where the request leaves them unset.
            engine_factory: Builds an engine from a translated configuration.
            batch_concurrency: Maximum domains enumerated at once within a
                batch. ``1`` keeps batches strictly sequential.
        """
        self.defaults = defaults
        self.engine_factory = engine_factory
        self.batch_concurrency = max(1, batch_concurrency)

    @classmethod
    def from_config(cls, config: Config) -> EnumerationOrchestrator:
        """Build an orchestrator driving the subfinder binary described by *config*."""
        return cls(
            defaults=config.defaults,
            engine_factory=build_engine(config.engine),
            batch_concurrency=config.engine.batch_concurrency,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def enumerate(
        self,
        domain: str,
        options: Optional[EnumerationOptions] = None,
    ) -> EnumerationResponse:
        """Enumerate a single domain.

        Args:
            domain: Domain to enumerate.
            options: Request overrides, or ``None``.

        Returns:
            Successful :class:`EnumerationResponse`.

        Raises:
            InvalidInput: When *domain* is empty or invalid.
            EngineInitError: When the engine cannot be constructed.
            EngineInvocationError: When enumeration fails; no partial
                results are returned.
        """
        validate_domain(domain)
        config = translate(self.defaults, options)

        start = time.perf_counter()
        engine = self._build_engine(config)
        try:
            lines = await engine.enumerate(domain)
        except Exception as exc:  # noqa: BLE001
            logger.error("Enumeration failed for %s: %s", domain, exc)
            raise EngineInvocationError(f"Failed to enumerate subdomains: {exc}") from exc

        aggregator = ResultAggregator()
        aggregator.extend(normalize(lines))
        results = aggregator.results()
        duration = format_duration(time.perf_counter() - start)

        logger.info("Found %d subdomains for %s in %s", len(results), domain, duration)
        return EnumerationResponse(results=results, duration=duration)

    async def enumerate_batch(
        self,
        domains: Sequence[str],
        options: Optional[EnumerationOptions] = None,
    ) -> EnumerationResponse:
        """Enumerate several domains into one merged result list.

        Every domain is validated before any engine work starts. A domain
        whose enumeration fails is logged, reported in ``domains`` and
        otherwise skipped; the batch as a whole still succeeds.

        Args:
            domains: Domains in the order they should be processed.
            options: Request overrides shared by every domain, or ``None``.

        Returns:
            Successful :class:`EnumerationResponse` with a per-domain
            ``domains`` status list.

        Raises:
            InvalidInput: When *domains* is empty or any entry is invalid.
            EngineInitError: When the engine cannot be constructed.
        """
        targets = validate_domains(domains)
        config = translate(self.defaults, options)

        start = time.perf_counter()
        engine = self._build_engine(config)

        if self.batch_concurrency == 1:
            runs = [await self._run_domain(engine, domain) for domain in targets]
        else:
            semaphore = asyncio.Semaphore(self.batch_concurrency)

            async def _bounded(domain: str) -> _DomainRun:
                async with semaphore:
                    return await self._run_domain(engine, domain)

            # gather keeps input order regardless of completion order
            runs = list(await asyncio.gather(*(_bounded(d) for d in targets)))

        aggregator = ResultAggregator()
        for _, records in runs:
            aggregator.extend(records)
        results = aggregator.results()
        duration = format_duration(time.perf_counter() - start)

        outcomes = [outcome for outcome, _ in runs]
        failed = sum(1 for outcome in outcomes if not outcome.success)
        logger.info(
            "Batch of %d domains finished in %s: %d subdomains, %d failed domains",
            len(targets),
            duration,
            len(results),
            failed,
        )
        return EnumerationResponse(results=results, duration=duration, domains=outcomes)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_engine(self, config: EngineConfig) -> EnumerationEngine:
        """Construct an engine, wrapping any failure in :class:`EngineInitError`."""
        try:
            return self.engine_factory(config)
        except Exception as exc:  # noqa: BLE001
            logger.error("Could not create enumeration engine: %s", exc)
            raise EngineInitError(f"Failed to create subfinder runner: {exc}") from exc

    @staticmethod
    async def _run_domain(engine: EnumerationEngine, domain: str) -> _DomainRun:
        """Enumerate one batch domain, isolating its failure."""
        try:
            lines = await engine.enumerate(domain)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to enumerate domain %s: %s", domain, exc)
            return DomainOutcome(domain=domain, success=False, error=str(exc)), []

        records = normalize(lines)
        logger.info("Enumerated %s: %d records", domain, len(records))
        return DomainOutcome(domain=domain, count=len(records)), records
