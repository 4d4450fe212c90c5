"""Tests for telemetry and configuration."""

import io
import json
import logging

import pytest

from iterpipes import Lazy, PipeConfig, PipeIter, get_config, set_config
from iterpipes.telemetry import (
    JsonFormatter,
    LogContext,
    LogLevel,
    PipeLogger,
    TextFormatter,
    get_log_context,
    get_logger,
    log_context,
    set_log_context,
)


def _records(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestLogContext:
    """Tests for LogContext."""

    def test_empty_context(self) -> None:
        """Test empty context."""
        assert LogContext().to_dict() == {}

    def test_context_with_fields(self) -> None:
        """Test context with fields."""
        ctx = LogContext(pipeline="metronome", stage="envelope", extra={"run": 1})
        assert ctx.to_dict() == {"pipeline": "metronome", "stage": "envelope", "run": 1}

    def test_with_extra(self) -> None:
        """Test extending a context."""
        ctx = LogContext(pipeline="p").with_extra(run=2)
        assert ctx.pipeline == "p"
        assert ctx.extra == {"run": 2}

    def test_set_and_get(self) -> None:
        """Test the context round-trips through the context variable."""
        set_log_context(LogContext(pipeline="p", extra={"run": 3}))
        ctx = get_log_context()
        assert ctx.pipeline == "p"
        assert ctx.stage is None
        assert ctx.extra == {"run": 3}

    def test_log_context_restores(self) -> None:
        """Test a scoped context inherits fields and is undone on exit."""
        set_log_context(LogContext(pipeline="p", extra={"run": 1}))
        with log_context(stage="source", frame=4) as ctx:
            assert ctx.pipeline == "p"
            assert get_log_context().to_dict() == {
                "pipeline": "p",
                "stage": "source",
                "run": 1,
                "frame": 4,
            }
        assert get_log_context().to_dict() == {"pipeline": "p", "run": 1}


class TestFormatters:
    """Tests for log formatters."""

    def _record(self, **extra_fields) -> logging.LogRecord:
        record = logging.LogRecord(
            "iterpipes.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
        )
        if extra_fields:
            record.extra_fields = extra_fields
        return record

    def test_json(self) -> None:
        """Test JSON output includes message, fields and context."""
        set_log_context(LogContext(pipeline="p"))
        data = json.loads(JsonFormatter().format(self._record(stage_count=2)))
        assert data["message"] == "hello world"
        assert data["level"] == "INFO"
        assert data["stage_count"] == 2
        assert data["context"] == {"pipeline": "p"}
        assert data["timestamp"].endswith("Z")

    def test_text(self) -> None:
        """Test text output appends fields."""
        line = TextFormatter().format(self._record(first="PipeIter"))
        assert "hello world" in line
        assert line.endswith("first=PipeIter")


class TestPipeLogger:
    """Tests for PipeLogger."""

    def test_get_logger_cached(self) -> None:
        """Test loggers are created once per name."""
        assert get_logger("iterpipes.x")._logger is get_logger("iterpipes.x")._logger
        assert get_logger("iterpipes.x").name == "iterpipes.x"

    def test_default_level_hides_debug(self) -> None:
        """Test debug messages are off by default."""
        PipeLogger.configure()
        assert not get_logger("iterpipes.y").is_enabled_for(LogLevel.DEBUG)

    def test_composition_logged(self) -> None:
        """Test connecting pipes logs at debug level."""
        stream = io.StringIO()
        PipeLogger.configure(level=LogLevel.DEBUG, format="json", stream=stream)
        PipeIter([1]) >> Lazy(str)
        records = _records(stream)
        connected = [r for r in records if r["message"] == "Connected pipes"]
        assert connected
        assert connected[-1]["first"] == "PipeIter"
        assert connected[-1]["second"] == "Lazy"

    def test_exhaustion_logged(self) -> None:
        """Test source exhaustion is logged once."""
        stream = io.StringIO()
        PipeLogger.configure(level=LogLevel.DEBUG, format="json", stream=stream)
        source = PipeIter([1, 2])
        for _ in range(4):
            source.step(None)
        exhausted = [r for r in _records(stream) if r["message"] == "Source exhausted"]
        assert len(exhausted) == 1
        assert exhausted[0]["yielded"] == 2
        assert exhausted[0]["context"] == {"stage": "PipeIter"}

    def test_run_names_pipeline(self) -> None:
        """Test records emitted while running carry the pipeline name."""
        stream = io.StringIO()
        PipeLogger.configure(level=LogLevel.DEBUG, format="json", stream=stream)
        pipe = PipeIter([1, 2]) >> Lazy(lambda x: x)
        assert pipe.run() == 3
        exhausted = [r for r in _records(stream) if r["message"] == "Source exhausted"]
        assert exhausted[0]["context"] == {"pipeline": "Connector", "stage": "PipeIter"}
        assert get_log_context().to_dict() == {}

    def test_run_keeps_enclosing_pipeline(self) -> None:
        """Test an enclosing pipeline name wins over the class name."""
        stream = io.StringIO()
        PipeLogger.configure(level=LogLevel.DEBUG, format="json", stream=stream)
        with log_context(pipeline="metronome"):
            PipeIter([1]).run()
        exhausted = [r for r in _records(stream) if r["message"] == "Source exhausted"]
        assert exhausted[0]["context"]["pipeline"] == "metronome"


class TestPipeConfig:
    """Tests for PipeConfig."""

    def test_defaults(self) -> None:
        """Test default configuration."""
        config = PipeConfig.default()
        assert config.validate_items is False
        assert config.log_level == LogLevel.WARNING
        assert config.log_format == "text"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test configuration from environment variables."""
        monkeypatch.setenv("ITERPIPES_VALIDATE_ITEMS", "true")
        monkeypatch.setenv("ITERPIPES_LOG_LEVEL", "debug")
        monkeypatch.setenv("ITERPIPES_LOG_FORMAT", "JSON")
        config = PipeConfig.from_env()
        assert config.validate_items is True
        assert config.log_level == LogLevel.DEBUG
        assert config.log_format == "json"

    def test_from_env_invalid_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test unknown values fall back to defaults."""
        monkeypatch.setenv("ITERPIPES_LOG_LEVEL", "loud")
        monkeypatch.setenv("ITERPIPES_LOG_FORMAT", "xml")
        config = PipeConfig.from_env()
        assert config.log_level == LogLevel.WARNING
        assert config.log_format == "text"

    def test_get_config_reads_env_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the active configuration is loaded lazily and cached."""
        monkeypatch.setenv("ITERPIPES_VALIDATE_ITEMS", "1")
        assert get_config().validate_items is True
        monkeypatch.setenv("ITERPIPES_VALIDATE_ITEMS", "0")
        assert get_config().validate_items is True

    def test_env_log_level_applied_on_load(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the environment log level reaches existing loggers."""
        monkeypatch.setenv("ITERPIPES_LOG_LEVEL", "DEBUG")
        logger = get_logger("iterpipes.pipe.connect")
        assert not logger.is_enabled_for(LogLevel.DEBUG)
        assert get_config().log_level == LogLevel.DEBUG
        assert logger.is_enabled_for(LogLevel.DEBUG)

    def test_set_config(self) -> None:
        """Test replacing the active configuration."""
        config = PipeConfig(validate_items=True, log_level=LogLevel.ERROR)
        set_config(config)
        assert get_config() is config
        assert not get_logger("iterpipes.z").is_enabled_for(LogLevel.WARNING)
