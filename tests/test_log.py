"""Tests for the package logging helpers."""

import logging

from reflex_datatable import log
from reflex_datatable.engine import GridEngine
from reflex_datatable.models import PaginationOptions


class TestLogging:
    """Tests for get_logger and the level helpers."""

    def test_single_logger(self):
        assert log.get_logger() is log.get_logger()
        assert log.get_logger().name == "reflex_datatable"

    def test_set_level_accepts_names(self):
        log.set_level("ERROR")
        assert log.get_logger().level == logging.ERROR
        log.set_level(logging.WARNING)
        assert log.get_logger().level == logging.WARNING

    def test_engine_logs_recompute_in_debug(self, caplog):
        log.enable_debug()
        try:
            with caplog.at_level(logging.DEBUG, logger="reflex_datatable"):
                engine = GridEngine([{"id": 1}], [], pagination=PaginationOptions(page_size=10))
                engine.dispose()
            messages = [r.getMessage() for r in caplog.records]
            assert any(m.startswith("[GridEngine] recompute") for m in messages)
            assert "[GridEngine] disposed" in messages
        finally:
            log.set_level(logging.WARNING)

    def test_warn_emits_at_warning_level(self, caplog):
        with caplog.at_level(logging.WARNING, logger="reflex_datatable"):
            log.debug("hidden")
            log.warn("careful")
        assert [(r.levelname, r.getMessage()) for r in caplog.records] == [
            ("WARNING", "careful")
        ]
