"""Shared pytest fixtures for the SUBENUM test suite."""

from __future__ import annotations

import asyncio
import json
from typing import Callable, Dict, List, Optional

import pytest

from subenum.core.config import Config
from subenum.core.engine import EnumerationEngine
from subenum.core.errors import EngineInvocationError
from subenum.core.models import EngineConfig, EnumerationOptions
from subenum.core.orchestrator import EnumerationOrchestrator


def record_line(host: str, source: str, domain: str = "example.com") -> str:
    """Return one JSON output line the way subfinder writes it."""
    return json.dumps({"host": host, "source": source, "input": domain})


class ScriptedEngine(EnumerationEngine):
    """Engine double replaying canned output per domain."""

    name = "scripted"

    def __init__(self, config: EngineConfig, factory: "ScriptedEngineFactory") -> None:
        super().__init__(config)
        self.factory = factory

    async def enumerate(self, domain: str) -> List[str]:
        factory = self.factory
        factory.calls.append(domain)
        factory.active += 1
        factory.max_active = max(factory.max_active, factory.active)
        try:
            delay = factory.delays.get(domain, 0.0)
            if delay:
                await asyncio.sleep(delay)
            if domain in factory.failures:
                raise EngineInvocationError(factory.failures[domain])
            return list(factory.outputs.get(domain, []))
        finally:
            factory.active -= 1


class ScriptedEngineFactory:
    """Callable engine factory recording every configuration and call."""

    def __init__(
        self,
        outputs: Optional[Dict[str, List[str]]] = None,
        failures: Optional[Dict[str, str]] = None,
        delays: Optional[Dict[str, float]] = None,
        init_error: Optional[Exception] = None,
    ) -> None:
        self.outputs = outputs or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.init_error = init_error
        self.configs: List[EngineConfig] = []
        self.calls: List[str] = []
        self.active = 0
        self.max_active = 0

    def __call__(self, config: EngineConfig) -> EnumerationEngine:
        self.configs.append(config)
        if self.init_error is not None:
            raise self.init_error
        return ScriptedEngine(config, self)


DEFAULT_OUTPUTS: Dict[str, List[str]] = {
    "example.com": [
        record_line("api.example.com", "crtsh"),
        record_line("www.example.com", "hackertarget"),
        "",
        "{}",
        record_line("api.example.com", "alienvault"),
    ],
    "a.com": [
        record_line("www.a.com", "crtsh", "a.com"),
        record_line("mail.a.com", "dnsdumpster", "a.com"),
    ],
    "b.com": [
        record_line("www.b.com", "crtsh", "b.com"),
    ],
}


@pytest.fixture
def sample_config() -> Config:
    """Return a default Config instance with no external dependencies."""
    return Config()


@pytest.fixture
def make_factory() -> Callable[..., ScriptedEngineFactory]:
    """Return a builder for scripted engine factories.

    Outputs default to :data:`DEFAULT_OUTPUTS` unless overridden.
    """

    def _make(**kwargs) -> ScriptedEngineFactory:
        kwargs.setdefault("outputs", DEFAULT_OUTPUTS)
        return ScriptedEngineFactory(**kwargs)

    return _make


@pytest.fixture
def engine_factory(make_factory) -> ScriptedEngineFactory:
    """Return a scripted factory with the default outputs and no failures."""
    return make_factory()


@pytest.fixture
def orchestrator(engine_factory) -> EnumerationOrchestrator:
    """Return a sequential orchestrator backed by :func:`engine_factory`."""
    return EnumerationOrchestrator(
        defaults=EnumerationOptions(),
        engine_factory=engine_factory,
    )
