"""Tests for subenum.core.engine."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from subenum.core.config import EngineSettings
from subenum.core.engine import SubfinderEngine, build_engine
from subenum.core.errors import EngineInitError, EngineInvocationError
from subenum.core.models import EngineConfig


@pytest.fixture()
def engine_config() -> EngineConfig:
    return EngineConfig(threads=10, timeout=30, max_enumeration_time=10)


@pytest.fixture()
def which():
    with patch("subenum.core.engine.shutil.which", return_value="/usr/local/bin/subfinder") as mock:
        yield mock


def _process(stdout: bytes = b"", stderr: bytes = b"", returncode: int = 0) -> MagicMock:
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    proc.returncode = returncode
    return proc


# --- construction ---

def test_missing_binary_raises_init_error(engine_config):
    with patch("subenum.core.engine.shutil.which", return_value=None):
        with pytest.raises(EngineInitError, match="not found"):
            SubfinderEngine(engine_config, EngineSettings(binary="nope"))


def test_binary_is_resolved(engine_config, which):
    engine = SubfinderEngine(engine_config, EngineSettings())
    assert engine.binary == "/usr/local/bin/subfinder"
    which.assert_called_once_with("subfinder")


def test_build_engine_returns_factory(engine_config, which):
    factory = build_engine(EngineSettings())
    engine = factory(engine_config)
    assert isinstance(engine, SubfinderEngine)
    assert engine.config is engine_config


# --- build_command ---

def test_build_command_defaults(engine_config, which):
    command = SubfinderEngine(engine_config, EngineSettings()).build_command("example.com")
    assert command == [
        "/usr/local/bin/subfinder",
        "-d", "example.com",
        "-silent",
        "-nc",
        "-oJ",
        "-t", "10",
        "-timeout", "30",
        "-max-time", "10",
    ]


def test_build_command_optional_flags(which):
    config = EngineConfig(threads=5, timeout=7, max_enumeration_time=2, all=True, only_recursive=True)
    settings = EngineSettings(provider_config="/etc/subfinder/provider.yaml", resolvers=["1.1.1.1", "8.8.8.8"])
    command = SubfinderEngine(config, settings).build_command("example.com")

    assert "-all" in command
    assert "-recursive" in command
    assert command[command.index("-pc") + 1] == "/etc/subfinder/provider.yaml"
    assert command[command.index("-r") + 1] == "1.1.1.1,8.8.8.8"
    assert command[command.index("-t") + 1] == "5"


def test_build_command_always_requests_json(which):
    config = EngineConfig(threads=1, timeout=1, max_enumeration_time=1, json_output=False)
    assert "-oJ" in SubfinderEngine(config, EngineSettings()).build_command("example.com")


# --- enumerate ---

@pytest.mark.asyncio
async def test_enumerate_returns_stdout_lines(engine_config, which):
    stdout = (
        b'{"host":"api.example.com","source":"crtsh","input":"example.com"}\n'
        b'{"host":"www.example.com","source":"anubis","input":"example.com"}\n'
    )
    exec_mock = AsyncMock(return_value=_process(stdout=stdout))
    with patch("subenum.core.engine.asyncio.create_subprocess_exec", exec_mock):
        lines = await SubfinderEngine(engine_config, EngineSettings()).enumerate("example.com")

    assert len(lines) == 2
    assert lines[0].startswith('{"host":"api.example.com"')
    args = exec_mock.call_args[0]
    assert args[0] == "/usr/local/bin/subfinder"
    assert "example.com" in args


@pytest.mark.asyncio
async def test_enumerate_nonzero_exit_uses_last_stderr_line(engine_config, which):
    proc = _process(stderr=b"[INF] starting\n[FTL] Could not run enumeration: bad\n\n", returncode=1)
    with patch("subenum.core.engine.asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
        with pytest.raises(EngineInvocationError) as excinfo:
            await SubfinderEngine(engine_config, EngineSettings()).enumerate("example.com")
    assert excinfo.value.message == "[FTL] Could not run enumeration: bad"


@pytest.mark.asyncio
async def test_enumerate_nonzero_exit_without_stderr(engine_config, which):
    proc = _process(returncode=2)
    with patch("subenum.core.engine.asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
        with pytest.raises(EngineInvocationError, match="exited with status 2"):
            await SubfinderEngine(engine_config, EngineSettings()).enumerate("example.com")


@pytest.mark.asyncio
async def test_enumerate_spawn_failure(engine_config, which):
    exec_mock = AsyncMock(side_effect=PermissionError("permission denied"))
    with patch("subenum.core.engine.asyncio.create_subprocess_exec", exec_mock):
        with pytest.raises(EngineInvocationError, match="permission denied"):
            await SubfinderEngine(engine_config, EngineSettings()).enumerate("example.com")
