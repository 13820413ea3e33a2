"""Tests for visualprep.utils.logging."""

from __future__ import annotations

from pathlib import Path

import structlog

from visualprep.utils.logging import (
    bind_run_id,
    clear_correlation_context,
    configure_logging,
    get_correlation_context,
    get_logger,
    operation_context,
)


class TestOperationContext:
    """Tests for scoped correlation fields."""

    def test_binds_fields_inside_block(self) -> None:
        with operation_context(source=Path("/in/tall.png"), segment=0):
            assert get_correlation_context() == {
                "source": "/in/tall.png",
                "segment": 0,
            }

    def test_fields_removed_on_exit(self) -> None:
        with operation_context(source="/in/a.png"):
            pass
        assert get_correlation_context() == {}

    def test_nested_segment_restores_outer_context(self) -> None:
        with operation_context(source="/in/a.png"):
            with operation_context(segment=3):
                assert get_correlation_context()["segment"] == 3
            assert get_correlation_context() == {"source": "/in/a.png"}

    def test_fields_removed_when_block_raises(self) -> None:
        try:
            with operation_context(source="/in/a.png", segment=1):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert get_correlation_context() == {}

    def test_run_id_survives_operations(self) -> None:
        bind_run_id("run-1")
        with operation_context(source="/in/a.png"):
            pass
        assert get_correlation_context() == {"run_id": "run-1"}

    def test_clear(self) -> None:
        bind_run_id("run-1")
        clear_correlation_context()
        assert get_correlation_context() == {}


class TestConfigureLogging:
    """Tests for configure_logging and get_logger."""

    def test_json_format_configures_renderer(self) -> None:
        configure_logging(level="DEBUG", log_format="json")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert structlog.contextvars.merge_contextvars in processors

    def test_console_format_configures_renderer(self) -> None:
        configure_logging(level="INFO", log_format="console")

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_events_carry_bound_fields(self) -> None:
        merge = structlog.contextvars.merge_contextvars
        bind_run_id("run-7")

        with operation_context(source="/in/a.png"):
            inside = merge(None, "info", {"event": "inside"})
        outside = merge(None, "info", {"event": "outside"})

        assert inside == {"event": "inside", "run_id": "run-7", "source": "/in/a.png"}
        assert outside == {"event": "outside", "run_id": "run-7"}

    def test_get_logger_binds(self) -> None:
        configure_logging(level="INFO", log_format="console")
        logger = get_logger("visualprep.test")
        assert hasattr(logger, "bind")
