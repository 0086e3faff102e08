import json
import logging

from observability.logging import (
    ColoredFormatter,
    JSONFormatter,
    get_structured_logger,
    log_performance,
    setup_logging,
)


def make_record(**extra):
    record = logging.LogRecord("fluxui.test", logging.WARNING, __file__, 10, "Fetch failed", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Console and JSON formatting."""

    def test_json_formatter_includes_context(self):
        payload = json.loads(JSONFormatter().format(make_record(ctx_item="button")))
        assert payload["level"] == "WARNING"
        assert payload["message"] == "Fetch failed"
        assert payload["service"] == "fluxui-docs"
        assert payload["ctx_item"] == "button"

    def test_colored_formatter_appends_context(self):
        line = ColoredFormatter(use_colors=False).format(make_record(ctx_item="button", ctx_category="component"))
        assert "WARNING" in line
        assert line.endswith("| item=button category=component")


class TestStructuredLogger:
    """Context-carrying logger wrapper."""

    def test_context_passed_as_extra(self, caplog):
        events = get_structured_logger("fluxui.test", run="nightly")
        with caplog.at_level(logging.INFO, logger="fluxui.test"):
            events.info("Scraping page", item="modal")

        record = caplog.records[-1]
        assert record.getMessage() == "Scraping page"
        assert record.ctx_item == "modal"
        assert record.ctx_run == "nightly"


class TestLogPerformance:
    """Slow call warnings."""

    def test_slow_call_logged(self, caplog):
        @log_performance("fluxui.perf", threshold_ms=-1)
        def rebuild():
            return 42

        with caplog.at_level(logging.WARNING, logger="fluxui.perf"):
            assert rebuild() == 42
        assert "Slow function execution: rebuild" in caplog.text

    def test_fast_call_not_logged(self, caplog):
        @log_performance("fluxui.perf", threshold_ms=60_000)
        def rebuild():
            return 42

        with caplog.at_level(logging.WARNING, logger="fluxui.perf"):
            rebuild()
        assert caplog.records == []


class TestSetupLogging:
    """Root logger configuration."""

    def test_level_from_environment(self, monkeypatch):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        monkeypatch.setenv("FLUXDOCS_LOG_LEVEL", "debug")
        try:
            setup_logging(use_colors=False)
            assert root.level == logging.DEBUG
            assert len(root.handlers) == 1
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_json_file_handler(self, temp_dir):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        log_file = temp_dir / "logs" / "fluxui.log"
        try:
            setup_logging(level="INFO", log_file=str(log_file), use_json=True)
            logging.getLogger("fluxui.test").info("written")
            for handler in root.handlers:
                handler.flush()
            assert json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])["message"] == "written"
        finally:
            for handler in root.handlers:
                if handler not in saved_handlers:
                    handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
