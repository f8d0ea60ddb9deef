import io
import logging

import pytest

from planscan.logging.logger import Log


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("planscan")
    saved = list(logger.handlers), logger.level
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])


class TestLog:
    def test_configure_writes_formatted_lines(self, clean_logger: logging.Logger) -> None:
        stream = io.StringIO()
        Log.configure("info", stream=stream)

        Log.info("Wizard step 1 -> 2")
        Log.debug("Progress 10% [running]")

        output = stream.getvalue()
        assert "[INFO] Wizard step 1 -> 2" in output
        assert "Progress" not in output

    def test_configure_twice_keeps_one_handler(self, clean_logger: logging.Logger) -> None:
        Log.configure("info", stream=io.StringIO())
        Log.configure("debug", stream=io.StringIO())

        assert len(clean_logger.handlers) == 1
        assert clean_logger.level == logging.DEBUG
