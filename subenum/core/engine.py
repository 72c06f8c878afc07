"""Enumeration engine adapter.

The engine is an opaque collaborator: given a domain it returns the raw
output lines it produced, or raises :class:`EngineInvocationError`. The
production implementation drives the ``subfinder`` binary as an asyncio
subprocess; tests substitute scripted doubles through the same interface.
"""

from __future__ import annotations

import asyncio
import shutil
from abc import ABC, abstractmethod
from typing import Callable, List

from subenum.core.config import EngineSettings
from subenum.core.errors import EngineInitError, EngineInvocationError
from subenum.core.models import EngineConfig
from subenum.core.results import split_output
from subenum.utils.logger import get_logger

logger = get_logger(__name__)


class EnumerationEngine(ABC):
    """Abstract base class for subdomain enumeration engines.

    Example::

        class StaticEngine(EnumerationEngine):
            name = "static"

            async def enumerate(self, domain):
                return ['{"host": "www.%s", "source": "static"}' % domain]
    """

    name: str = "base"

    def __init__(self, config: EngineConfig) -> None:
        self.config = config

    @abstractmethod
    async def enumerate(self, domain: str) -> List[str]:
        """Enumerate *domain* and return every output line.

        Args:
            domain: Apex domain to enumerate.

        Returns:
            Raw output lines in emission order.

        Raises:
            EngineInvocationError: When the engine fails for *domain*.
        """


EngineFactory = Callable[[EngineConfig], EnumerationEngine]


class SubfinderEngine(EnumerationEngine):
    """Run ``subfinder`` once per domain and capture its JSON-lines output."""

    name = "subfinder"

    def __init__(self, config: EngineConfig, settings: EngineSettings) -> None:
        super().__init__(config)
        self.settings = settings
        binary = shutil.which(settings.binary)
        if binary is None:
            raise EngineInitError(f"{settings.binary!r} executable not found in PATH")
        self.binary = binary

    def build_command(self, domain: str) -> List[str]:
        """Return the argv used to enumerate *domain*."""
        cfg = self.config
        command = [
            self.binary,
            "-d", domain,
            "-silent",
            "-nc",
            "-oJ",
            "-t", str(cfg.threads),
            "-timeout", str(cfg.timeout),
            "-max-time", str(cfg.max_enumeration_time),
        ]
        if cfg.all:
            command.append("-all")
        if cfg.only_recursive:
            command.append("-recursive")
        if self.settings.provider_config:
            command.extend(["-pc", self.settings.provider_config])
        if self.settings.resolvers:
            command.extend(["-r", ",".join(self.settings.resolvers)])
        return command

    async def enumerate(self, domain: str) -> List[str]:
        command = self.build_command(domain)
        logger.debug("Starting subfinder command: %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise EngineInvocationError(str(exc)) from exc

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

        if process.returncode != 0:
            raise EngineInvocationError(
                _last_line(stderr) or f"subfinder exited with status {process.returncode}"
            )

        return split_output(stdout.decode("utf-8", errors="replace"))


def _last_line(data: bytes) -> str:
    """Return the last non-blank line of *data*, decoded."""
    lines = [ln.strip() for ln in data.decode("utf-8", errors="replace").splitlines()]
    lines = [ln for ln in lines if ln]
    return lines[-1] if lines else ""


def build_engine(settings: EngineSettings) -> EngineFactory:
    """Return an engine factory bound to *settings*.

    Args:
        settings: Binary location and static invocation settings.

    Returns:
        Callable turning an :class:`EngineConfig` into a :class:`SubfinderEngine`.
    """

    def _factory(config: EngineConfig) -> EnumerationEngine:
        return SubfinderEngine(config, settings)

    return _factory
