import io
import json
import logging

import pytest

from refbot.core.logging import AIOGRAM_EVENT_LOGGER, JsonFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("refbot.test", logging.INFO, __file__, 1, "referral_code_created", None, None)
    for k, v in extra.items():
        setattr(record, k, v)
    return record


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    event_logger = logging.getLogger(AIOGRAM_EVENT_LOGGER)
    saved = root.handlers[:], root.level, event_logger.level
    yield
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    event_logger.setLevel(saved[2])


def test_json_formatter_includes_context():
    out = json.loads(JsonFormatter().format(_record(tg_id=1, referral_code="aZ3kP9qL")))

    assert out["level"] == "INFO"
    assert out["logger"] == "refbot.test"
    assert out["msg"] == "referral_code_created"
    assert out["tg_id"] == 1
    assert out["referral_code"] == "aZ3kP9qL"
    assert "corr_id" not in out


def test_json_formatter_drops_empty_context():
    out = json.loads(JsonFormatter().format(_record(tg_id=None, corr_id="u7")))

    assert "tg_id" not in out
    assert out["corr_id"] == "u7"


def test_setup_logging_writes_json(restore_logging):
    stream = io.StringIO()
    setup_logging("info", stream=stream)

    logging.getLogger("refbot.test").info("bot_start", extra={"update_id": 3})

    line = json.loads(stream.getvalue().splitlines()[-1])
    assert line["msg"] == "bot_start"
    assert line["update_id"] == 3
    assert logging.getLogger().level == logging.INFO
    assert len(logging.getLogger().handlers) == 1


def test_aiogram_update_lines_follow_debug(restore_logging):
    setup_logging("info")
    assert logging.getLogger(AIOGRAM_EVENT_LOGGER).level == logging.WARNING

    setup_logging("info", debug=True)
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger(AIOGRAM_EVENT_LOGGER).level == logging.NOTSET
