import logging

from pywaveform.logging import get_logger, is_configured, setup_logging


def test_loggers_share_package_hierarchy():
    assert get_logger("pywaveform.core.frame").name == "pywaveform.core.frame"
    assert get_logger("tests.helper").name == "pywaveform.tests.helper"


def test_setup_writes_debug_log_file(tmp_path):
    log_file = tmp_path / "debug.log"
    setup_logging(level="DEBUG", log_file=str(log_file))
    try:
        assert is_configured()
        get_logger("pywaveform.test").debug("hello from test")
        for handler in logging.getLogger("pywaveform").handlers:
            handler.flush()
        assert "hello from test" in log_file.read_text()
    finally:
        setup_logging(level="WARNING")


def test_warning_level_skips_file(tmp_path):
    log_file = tmp_path / "quiet.log"
    setup_logging(level="WARNING", log_file=str(log_file))
    root = logging.getLogger("pywaveform")
    assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
    assert not log_file.exists()


def test_numeric_and_unknown_levels():
    try:
        assert setup_logging(level=logging.INFO).level == logging.INFO
        assert setup_logging(level="chatty").level == logging.WARNING
    finally:
        setup_logging(level="WARNING")


def test_lookalike_names_are_nested():
    assert get_logger("pywaveform").name == "pywaveform"
    assert get_logger("pywaveformish").name == "pywaveform.pywaveformish"
