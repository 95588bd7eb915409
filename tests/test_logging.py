"""Tests for the PprintLogger and setup_logging functionality.

This module verifies:
- PprintLogger wraps a standard logging.Logger and delegates to it
- Offset ranges print in half-open notation, alone or inside containers
- Pydantic models (responses, policies) are logged as indented JSON
- pprint=False falls back to plain string conversion
- setup_logging names the logger after its caller and adds one handler
"""

import logging
from io import StringIO

from spanalign.logging import PprintLogger, setup_logging
from spanalign.matcher import AlignmentPolicy

from tests.conftest import make_response, r


def capture(name: str) -> tuple[PprintLogger, StringIO]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
    logger.addHandler(handler)
    return PprintLogger(logger), stream


class TestPprintLogger:
    """Tests for PprintLogger formatting and delegation."""

    def test_offset_range_compact(self) -> None:
        log, stream = capture("test_offset_range_compact")
        log.info(r(20, 47))
        assert "[20,47)" in stream.getvalue()

    def test_ranges_inside_containers(self) -> None:
        """Ranges nested in dicts, lists and sets print compactly."""
        log, stream = capture("test_ranges_inside_containers")
        log.info({"merged": [r(0, 9), r(20, 25)], "heads": {r(33, 37)}, "span": (r(4, 10),)})

        output = stream.getvalue()
        assert "[0,9)" in output
        assert "[20,25)" in output
        assert "[33,37)" in output
        assert "[4,10)" in output
        assert "start=" not in output

    def test_pydantic_model_uses_model_dump_json(self) -> None:
        log, stream = capture("test_pydantic_model_uses_model_dump_json")
        log.info(make_response((0, 10), response_id="resp-json"))

        output = stream.getvalue()
        assert '"response_id": "resp-json"' in output
        assert '"base_filler"' in output

    def test_pprint_false_uses_str(self) -> None:
        log, stream = capture("test_pprint_false_uses_str")
        log.info(AlignmentPolicy.exact(), pprint=False)

        output = stream.getvalue()
        assert "exact_head_only_for_auxiliary=True" in output

    def test_simple_string_with_args(self) -> None:
        """Strings are passed through so %-style arguments still work."""
        log, stream = capture("test_simple_string_with_args")
        log.info("aligned %d of %d", 3, 4)
        assert "aligned 3 of 4" in stream.getvalue()

    def test_all_log_levels(self) -> None:
        log, stream = capture("test_all_log_levels")
        data = {"level": "test"}

        log.debug(data)
        log.info(data)
        log.warning(data)
        log.error(data)
        log.critical(data)

        output = stream.getvalue()
        for level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            assert level in output

    def test_exception_logging(self) -> None:
        log, stream = capture("test_exception_logging")
        try:
            raise ValueError("Test exception")
        except ValueError:
            log.exception({"error": "details"})

        output = stream.getvalue()
        assert "details" in output
        assert "ValueError" in output

    def test_delegates_to_underlying_logger(self) -> None:
        logger = logging.getLogger("test_delegates")
        log = PprintLogger(logger)

        log.setLevel(logging.WARNING)
        assert logger.level == logging.WARNING
        assert log.handlers == logger.handlers


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_returns_pprint_logger(self) -> None:
        def test_function() -> PprintLogger:
            return setup_logging()

        assert isinstance(test_function(), PprintLogger)

    def test_setup_logging_uses_caller_name(self) -> None:
        """The logger is named after the calling module and function."""

        def my_test_function() -> PprintLogger:
            return setup_logging()

        logger = my_test_function()
        assert logger.name.endswith(".my_test_function")

    def test_explicit_name_and_level(self) -> None:
        logger = setup_logging(level=logging.DEBUG, name="spanalign.test.explicit")
        assert logger.name == "spanalign.test.explicit"
        assert logger.level == logging.DEBUG

    def test_setup_logging_does_not_duplicate_handlers(self) -> None:
        def test_function() -> PprintLogger:
            logger1 = setup_logging()
            logger2 = setup_logging()
            assert logger1._logger is logger2._logger  # pylint: disable=protected-access
            assert len(logger1.handlers) == 1
            return logger1

        assert len(test_function().handlers) == 1
