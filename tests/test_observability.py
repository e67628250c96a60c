import logging

from carelog.observability import configure_logging


def test_configure_logging_attaches_one_handler():
    logger = configure_logging("debug")
    configure_logging("debug")

    ours = [h for h in logger.handlers if getattr(h, "_carelog", False)]
    assert len(ours) == 1
    assert logger.level == logging.DEBUG


def test_unknown_level_name_falls_back_to_info():
    assert configure_logging("chatty").level == logging.INFO
