from __future__ import annotations

import logging
from types import SimpleNamespace

from rich.logging import RichHandler

from autovault import log


def test_console_logging_uses_rich_on_a_terminal(monkeypatch) -> None:
    monkeypatch.setattr(log, "sys", SimpleNamespace(stderr=SimpleNamespace(isatty=lambda: True)))
    logger = logging.getLogger("autovault.test_log")
    logger.handlers.clear()

    log.setup_logging_to_console(logging.DEBUG, logger=logger)

    assert logger.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in logger.handlers)
    logger.handlers.clear()


def test_console_logging_is_idempotent(monkeypatch) -> None:
    monkeypatch.setattr(log, "sys", SimpleNamespace(stderr=SimpleNamespace(isatty=lambda: True)))
    logger = logging.getLogger("autovault.test_log.idempotent")
    logger.handlers.clear()

    log.setup_logging_to_console(logging.INFO, logger=logger)
    log.setup_logging_to_console(logging.WARNING, logger=logger)

    handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
    assert len(handlers) == 1
    assert handlers[0].level == logging.WARNING
    assert logger.level == logging.WARNING
    logger.handlers.clear()


def test_console_logging_falls_back_to_basic_config(monkeypatch) -> None:
    monkeypatch.setattr(log, "sys", SimpleNamespace(stderr=SimpleNamespace(isatty=lambda: False)))
    calls = []
    monkeypatch.setattr(log.logging, "basicConfig", lambda **kw: calls.append(kw))

    log.setup_logging_to_console(logging.WARNING)

    assert calls and calls[0]["level"] == logging.WARNING
