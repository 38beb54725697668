"""Tests for logging setup."""

import logging

import pytest

from git_moar.logging_config import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    ours = logging.getLogger("git_moar")
    handlers, level, our_level = root.handlers[:], root.level, ours.level
    yield
    ours.setLevel(our_level)
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    @pytest.mark.parametrize(
        "verbose,quiet,level",
        [
            (False, False, logging.WARNING),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.ERROR),
        ],
    )
    def test_levels(self, verbose, quiet, level):
        assert setup_logging(verbose=verbose, quiet=quiet).level == level

    def test_file_copy(self, tmp_path):
        target = tmp_path / "moar.log"
        setup_logging(verbose=True, log_file=str(target))

        get_logger("history.parser").debug("parsed %d commits", 3)

        line = target.read_text(encoding="utf-8").strip()
        assert "DEBUG" in line
        assert "git_moar.history.parser: parsed 3 commits" in line


class TestGetLogger:
    def test_namespacing(self):
        assert get_logger().name == "git_moar"
        assert get_logger("git_moar.pipeline").name == "git_moar.pipeline"
        assert get_logger("pipeline").name == "git_moar.pipeline"
        assert get_logger("git_moar_plugin").name == "git_moar.git_moar_plugin"
