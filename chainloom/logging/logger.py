# chainloom/logging/logger.py
"""
Logging setup for chainloom.

Modules log through a namespaced logger and prefix messages with a
subsystem tag from chainloom.logging.tags:

    from chainloom.logging.logger import get_logger
    from chainloom.logging.tags import CHAIN

    logger = get_logger(__name__)
    logger.debug(f"{CHAIN} LLM chain started")

configure_logging() installs one handler on the "chainloom" logger. Its
formatter lifts the leading tag into a fixed column and names the worker
thread, so interleaved batch output stays readable:

    12:01:07 DEBUG   [CHAIN]   chainloom-batch_0  LLM chain started
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from chainloom.logging import tags

ROOT_LOGGER = "chainloom"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(subsystem)-11s %(threadName)-18s %(message)s"

DEFAULT_DATEFMT = "%H:%M:%S"

_KNOWN_TAGS = frozenset(tags.ALL_TAGS)

_HANDLER_NAME = "chainloom-stream"


class SubsystemFormatter(logging.Formatter):
    """
    Formatter exposing ``%(subsystem)s``.

    A message starting with a known tag has the tag moved into the
    subsystem field; any other message gets "-".
    """

    def format(self, record: logging.LogRecord) -> str:
        # Other handlers share the record; rewrite a copy
        record = logging.makeLogRecord(record.__dict__)
        message = record.getMessage()
        head, _, rest = message.partition(" ")
        if head in _KNOWN_TAGS:
            record.subsystem = head
            record.msg, record.args = rest, None
        else:
            record.subsystem = "-"
        return super().format(record)


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Safe to call multiple times: the handler is installed once and later
    calls only change the level.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(SubsystemFormatter(fmt, datefmt=DEFAULT_DATEFMT))
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a chainloom module. Never configures anything."""
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "SubsystemFormatter", "DEFAULT_FORMAT"]
