from types import SimpleNamespace
from typing import Any, List

import pytest

from supabase_mcp import cli
from supabase_mcp.core.config import ServerConfig


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep the process environment and any .env file out of the picture.
    monkeypatch.setattr(cli, "ServerConfig", SimpleNamespace(from_env=lambda: ServerConfig.from_env({})))


def test_parser_defaults() -> None:
    args = cli.build_parser().parse_args([])
    assert not args.http
    assert args.port is None
    assert args.log_level is None


def test_log_level_is_case_insensitive() -> None:
    assert cli.build_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"


def test_http_mode_applies_flags(clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    seen: List[ServerConfig] = []
    monkeypatch.setattr(cli, "run_http", seen.append)

    assert cli.main(["--http", "--host", "127.0.0.1", "--port", "9000", "--log-level", "warning"]) == 0

    assert len(seen) == 1
    assert (seen[0].host, seen[0].port, seen[0].log_level) == ("127.0.0.1", 9000, "WARNING")


def test_stdio_is_the_default(clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    started: List[Any] = []

    async def fake_run_stdio(config: ServerConfig) -> None:
        started.append(config)

    monkeypatch.setattr(cli, "run_stdio", fake_run_stdio)
    monkeypatch.setattr(cli, "run_http", lambda config: pytest.fail("HTTP mode should not start"))

    assert cli.main([]) == 0
    assert len(started) == 1


def test_keyboard_interrupt_exits_cleanly(clean_env: None, monkeypatch: pytest.MonkeyPatch) -> None:
    def interrupted(config: ServerConfig) -> None:
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "run_http", interrupted)

    assert cli.main(["--http"]) == 0
