"""
Unit tests for the notebrotr CLI module.

Tests:
- parse_args argument parsing
- setup_logging configuration
- build_config YAML loading and overrides
- run exit codes
- main and cli entry points
"""

import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from notebrotr.__main__ import (
    DEFAULT_VAULT,
    build_config,
    cli,
    main,
    parse_args,
    run,
    setup_logging,
)
from notebrotr.core.dispatcher import DispatchProgress
from notebrotr.core.exceptions import ConfigurationError
from notebrotr.core.logger import StructuredFormatter
from notebrotr.models import Event


@pytest.fixture
def events_file(tmp_path: Path, note_event: Event, profile_event: Event) -> Path:
    path = tmp_path / "events.jsonl"
    path.write_text(f"{note_event.to_json()}\n{profile_event.to_json()}\n", encoding="utf-8")
    return path


# ============================================================================
# parse_args Tests
# ============================================================================


class TestParseArgs:
    def test_events_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])

    def test_defaults(self) -> None:
        args = parse_args(["events.jsonl"])
        assert args.events == Path("events.jsonl")
        assert args.vault == DEFAULT_VAULT
        assert args.config is None
        assert args.batch_size is None
        assert args.delay_ms is None
        assert args.log_level == "INFO"

    def test_all_options(self) -> None:
        args = parse_args(
            [
                "e.json",
                "--vault",
                "/tmp/v",
                "--config",
                "c.yaml",
                "--batch-size",
                "10",
                "--delay-ms",
                "250",
                "--log-level",
                "DEBUG",
            ]
        )
        assert args.vault == Path("/tmp/v")
        assert args.config == Path("c.yaml")
        assert args.batch_size == 10
        assert args.delay_ms == 250
        assert args.log_level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(SystemExit):
            parse_args(["e.json", "--log-level", "TRACE"])


# ============================================================================
# setup_logging Tests
# ============================================================================


class TestSetupLogging:
    def test_installs_structured_formatter(self) -> None:
        root = logging.getLogger()
        original_level = root.level
        try:
            with patch.object(root, "addHandler") as add_handler:
                setup_logging("WARNING")
            handler = add_handler.call_args.args[0]
            assert isinstance(handler.formatter, StructuredFormatter)
            assert root.level == logging.WARNING
        finally:
            root.setLevel(original_level)


# ============================================================================
# build_config Tests
# ============================================================================


class TestBuildConfig:
    def test_no_config_file(self) -> None:
        assert build_config(parse_args(["e.json"])) == {"batch": {}}

    def test_overrides_applied_over_file(self, tmp_path: Path) -> None:
        config = tmp_path / "archiver.yaml"
        config.write_text("batch:\n  size: 5\n  delay_ms: 100\nverify_signatures: true\n")
        data = build_config(parse_args(["e.json", "--config", str(config), "--batch-size", "9"]))
        assert data == {"batch": {"size": 9, "delay_ms": 100}, "verify_signatures": True}

    def test_missing_config_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError):
            build_config(parse_args(["e.json", "--config", str(tmp_path / "none.yaml")]))


# ============================================================================
# run Tests
# ============================================================================


class TestRun:
    async def test_success(self, events_file: Path, tmp_path: Path) -> None:
        vault = tmp_path / "vault"
        args = parse_args([str(events_file), "--vault", str(vault)])
        assert await run(args) == 0
        assert (vault / "nostr" / "profiles" / "Alice.md").is_file()
        assert (vault / "nostr" / "notes" / "Hello nostr.md").is_file()

    async def test_missing_events_file(self, tmp_path: Path) -> None:
        args = parse_args([str(tmp_path / "absent.jsonl"), "--vault", str(tmp_path)])
        assert await run(args) == 1

    async def test_invalid_config(self, events_file: Path, tmp_path: Path) -> None:
        args = parse_args([str(events_file), "--vault", str(tmp_path), "--batch-size", "0"])
        assert await run(args) == 1

    async def test_archiver_failure(self, events_file: Path, tmp_path: Path) -> None:
        args = parse_args([str(events_file), "--vault", str(tmp_path)])
        with patch(
            "notebrotr.__main__.Archiver.run", AsyncMock(side_effect=RuntimeError("boom"))
        ):
            assert await run(args) == 1

    async def test_stopped_exit_code(self, events_file: Path, tmp_path: Path) -> None:
        args = parse_args([str(events_file), "--vault", str(tmp_path)])
        with patch(
            "notebrotr.__main__.Archiver.run",
            AsyncMock(return_value=DispatchProgress(total=2, processed=1, stopped=True)),
        ):
            assert await run(args) == 130


# ============================================================================
# Entry Point Tests
# ============================================================================


class TestEntryPoints:
    async def test_main(self) -> None:
        with (
            patch("notebrotr.__main__.setup_logging") as mock_setup,
            patch("notebrotr.__main__.run", AsyncMock(return_value=0)) as mock_run,
        ):
            assert await main(["e.json", "--log-level", "ERROR"]) == 0
        mock_setup.assert_called_once_with("ERROR")
        mock_run.assert_awaited_once()

    def test_cli_exits_with_code(self) -> None:
        with (
            patch("notebrotr.__main__.main", MagicMock()),
            patch("notebrotr.__main__.asyncio.run", return_value=130),
            pytest.raises(SystemExit) as exc_info,
        ):
            cli()
        assert exc_info.value.code == 130
