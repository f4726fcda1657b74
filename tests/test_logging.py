import logging

from flextable.util.logging import get_logger


def test_loggers_share_one_handler():
    a = get_logger("flextable.table")
    b = get_logger("convert")

    assert b.name == "flextable.convert"
    assert not a.handlers and not b.handlers
    assert len(logging.getLogger("flextable").handlers) == 1
    get_logger()
    assert len(logging.getLogger("flextable").handlers) == 1


def test_debug_records_reach_caplog(caplog):
    log = get_logger("flextable.grouping", level=logging.DEBUG)
    with caplog.at_level(logging.DEBUG, logger="flextable"):
        log.debug("grouped %d rows", 3)
    assert "grouped 3 rows" in caplog.text
