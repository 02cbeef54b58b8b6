import logging

import pytest

from command_router.util.logging import LogConfig, Logger


@pytest.mark.parametrize(
    "level,expected",
    [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), ("bogus", logging.INFO), (None, logging.INFO)],
)
def test_set_log_level(level, expected):
    assert LogConfig.set_log_level(level) == expected
    assert logging.getLogger().level == expected


def test_logger_appends_extra_data():
    logger = Logger("test-source")
    with pytest.MonkeyPatch.context() as mp:
        calls = []
        mp.setattr(logger.python_logger, "info", calls.append)
        logger.info("Loaded", extra_data={"commands": ["GE"]})

    assert calls == ["Loaded - {'commands': ['GE']}"]
