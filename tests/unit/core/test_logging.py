"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path

import pytest
import structlog
from structlog.testing import capture_logs

from stress_tracker.core.config import Settings
from stress_tracker.core.logging import (
    add_app_context,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from stress_tracker.engine.character import CharacterEngine
from stress_tracker.models.character import DEFAULT_CHARACTER, Character
from stress_tracker.models.panic import PanicTable
from stress_tracker.session import StressTrackerSession, create_session
from stress_tracker.storage.backends import MemoryBackend
from stress_tracker.storage.durable import DurableValue


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_app_context(self) -> None:
        """Test that the app name is added to every entry."""
        event_dict = add_app_context(None, "info", {"event": "x"})

        assert event_dict["app"] == "stress_tracker"

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON rendering with bound context."""
        configure_logging(level="DEBUG", json_format=True)
        bind_context(character="Ellen Ripley")

        get_logger("test").info("Stress incremented", stress=3)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "Stress incremented"
        assert record["stress"] == 3
        assert record["level"] == "info"
        assert record["app"] == "stress_tracker"
        assert record["character"] == "Ellen Ripley"
        assert "timestamp" in record

    def test_clear_context(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that cleared context no longer appears in entries."""
        configure_logging(json_format=True)
        bind_context(character="Ellen Ripley")

        clear_context()
        get_logger("test").info("after clear")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert "character" not in record

    def test_module_loggers_follow_reconfiguration(
        self,
        make_session: Callable[..., StressTrackerSession],
    ) -> None:
        """Test that module loggers used once still honor a later configuration."""
        configure_logging(json_format=True)
        session = make_session(name="Parker")
        session.increment_stress()

        with capture_logs() as logs:
            session.increment_stress()

        assert any(entry["event"] == "Stress incremented" for entry in logs)

    def test_level_filtering(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that entries below the configured level are dropped."""
        configure_logging(level="WARNING", json_format=True)

        get_logger("test").info("hidden")
        get_logger("test").warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out

    def test_log_file_handler(self, tmp_path: Path) -> None:
        """Test that a log file handler is attached to the root logger."""
        log_file = tmp_path / "tracker.log"

        configure_logging(log_file=str(log_file))

        assert any(
            isinstance(h, logging.FileHandler) and h.baseFilename == str(log_file)
            for h in logging.getLogger().handlers
        )


class TestOperationLogging:
    """Tests for log events emitted by tracker operations."""

    def test_mutations_logged(self, make_session: Callable[..., StressTrackerSession]) -> None:
        """Test that stress changes produce structured log events."""
        session = make_session(name="Parker", stress=1)

        with capture_logs() as logs:
            session.increment_stress()

        events = [entry for entry in logs if entry["event"] == "Stress incremented"]
        assert events
        assert events[0]["stress"] == 2
        assert events[0]["log_level"] == "info"

    def test_storage_failure_logged(self) -> None:
        """Test that unreadable stored data is logged as an error."""
        backend = MemoryBackend()
        backend.set_item("character", "{broken")

        with capture_logs() as logs:
            DurableValue(backend, "character", DEFAULT_CHARACTER, Character)

        assert [entry["log_level"] for entry in logs] == ["error"]
        assert logs[0]["key"] == "character"


class TestSessionLogging:
    """Tests for per-session log tagging."""

    def test_sessions_tagged_independently(
        self,
        make_session: Callable[..., StressTrackerSession],
        panic_table: PanicTable,
    ) -> None:
        """Test that two sessions keep their own character tag."""
        with capture_logs() as logs:
            first = make_session(name="Ripley")
            store = DurableValue(MemoryBackend(), "character", DEFAULT_CHARACTER, Character)
            store.write(Character(name="Newt"))
            second = StressTrackerSession(CharacterEngine(store, panic_table))

            first.increment_stress()
            second.increment_stress()
            second.close()
            first.increment_stress()

        dispatched = [(e["character"], e["stress"]) for e in logs if e["event"] == "Action dispatched"]
        assert dispatched == [("Ripley", 1), ("Newt", 1), ("Ripley", 2)]
        assert "character" not in structlog.contextvars.get_contextvars()

    def test_rename_retags(self, make_session: Callable[..., StressTrackerSession]) -> None:
        """Test that entries after a rename carry the new name."""
        with capture_logs() as logs:
            session = make_session(name="Ripley")
            session.update_name("Call")
            session.increment_stress()

        dispatched = [e["character"] for e in logs if e["event"] == "Action dispatched"]
        assert dispatched == ["Call"]


class TestCreateSessionLogging:
    """Tests for logging configured from settings."""

    def test_level_and_format_from_settings(self) -> None:
        """Test that log_level and log_json configure structlog."""
        create_session(Settings(log_level="WARNING", log_json=True), backend=MemoryBackend())

        config = structlog.get_config()
        assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.WARNING)
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)

    def test_debug_forces_debug_level(self) -> None:
        """Test that debug mode overrides the configured level."""
        create_session(Settings(debug=True, log_level="ERROR"), backend=MemoryBackend())

        config = structlog.get_config()
        assert config["wrapper_class"] is structlog.make_filtering_bound_logger(logging.DEBUG)
        assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)
