import logging

from shared.frame import Message
from shared.log import GenericFormatter, get_logger, log_chat_message


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("fchat.test", logging.INFO, __file__, 1, "Joined", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_prefixes_chat_context():
    formatter = GenericFormatter(fmt="%(message)s")

    text = formatter.format(_record(character="Alice", channel="Development", msg_type="JCH"))

    assert text == "[char=Alice chan=Development msg=JCH] Joined"


def test_formatter_skips_empty_context():
    formatter = GenericFormatter(fmt="%(message)s")

    assert formatter.format(_record(channel=None)) == "Joined"


def test_get_logger_configures_once():
    first = get_logger("fchat.test.once")
    handlers = list(first.handlers)

    assert get_logger("fchat.test.once") is first
    assert first.handlers == handlers
    assert first.propagate is False


def test_log_chat_message_extracts_context_from_message():
    records = []

    class Collect(logging.Handler):
        def emit(self, record):
            records.append(record)

    logger = logging.getLogger("fchat.test.collect")
    logger.setLevel(logging.DEBUG)
    logger.addHandler(Collect())

    msg = Message("MSG", {"channel": "Development", "character": "Alice", "message": "!hello"})
    log_chat_message(logger, "debug", "Dispatching", message=msg, extra_field="x")

    record = records[0]
    assert record.levelno == logging.DEBUG
    assert record.msg_type == "MSG"
    assert record.channel == "Development"
    assert record.character == "Alice"
    assert record.extra_field == "x"
