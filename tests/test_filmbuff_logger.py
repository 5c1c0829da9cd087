import logging

import pytest

import filmbuff.config_base as cfg
import filmbuff.logger as logger
from filmbuff import FilmBuff


def test_truncate_line_marks_truncated():
    out = logger.truncate_line("x" * 50, max_chars=10)
    assert "truncated" in out
    assert len(out) <= 50

    assert logger.truncate_line("short", max_chars=10) == "short"


def test_debug_ctx_is_noop_without_debug_mode(monkeypatch, caplog):
    monkeypatch.setattr(cfg, "DEBUG_MODE", False)

    with caplog.at_level(logging.DEBUG, logger=logger.LOGGER_NAME):
        logger.debug_ctx("filmbuff", "hidden")

    assert "hidden" not in caplog.text


def test_debug_ctx_emits_tagged_line(monkeypatch, caplog):
    monkeypatch.setattr(cfg, "DEBUG_MODE", True)
    monkeypatch.setattr(cfg, "SILENT_MODE", False)
    monkeypatch.setattr(cfg, "LOG_LEVEL", None)

    with caplog.at_level(logging.DEBUG, logger=logger.LOGGER_NAME):
        logger.debug_ctx("filmbuff", "hello")

    assert "[FILMBUFF][DEBUG] hello" in caplog.text


def test_silent_mode_suppresses_warnings_unless_always(monkeypatch, caplog):
    monkeypatch.setattr(cfg, "SILENT_MODE", True)
    monkeypatch.setattr(cfg, "LOG_LEVEL", None)

    with caplog.at_level(logging.DEBUG, logger=logger.LOGGER_NAME):
        logger.warning("quiet")
        logger.warning("loud", always=True)
        logger.error("broken")

    assert "quiet" not in caplog.text
    assert "loud" in caplog.text
    assert "broken" in caplog.text


def test_log_level_from_config(monkeypatch):
    monkeypatch.setattr(cfg, "LOG_LEVEL", "warning")
    assert logger._resolve_level_from_config() == logging.WARNING

    monkeypatch.setattr(cfg, "LOG_LEVEL", None)
    monkeypatch.setattr(cfg, "DEBUG_MODE", True)
    assert logger._resolve_level_from_config() == logging.DEBUG

    monkeypatch.setattr(cfg, "DEBUG_MODE", False)
    assert logger._resolve_level_from_config() is None


@pytest.fixture()
def library_logger(monkeypatch):
    """Logger "filmbuff" sin inicializar; restaura nivel y handlers al salir."""
    log = logging.getLogger(logger.LOGGER_NAME)
    saved_level = log.level
    saved_handlers = list(log.handlers)

    monkeypatch.setattr(logger, "_LOGGER", None)
    monkeypatch.setattr(logger, "_CONFIGURED", False)
    monkeypatch.setattr(logger, "_LEVEL_APPLIED", False)
    monkeypatch.setattr(cfg, "LOG_LEVEL", None)
    monkeypatch.setattr(cfg, "DEBUG_MODE", False)
    monkeypatch.setattr(cfg, "SILENT_MODE", False)

    yield log

    log.setLevel(saved_level)
    log.handlers[:] = saved_handlers


def test_root_logger_is_left_to_the_application(monkeypatch, library_logger):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda *a, **kw: calls.append(kw))
    root = logging.getLogger()
    before = list(root.handlers)

    logger.warning("Invalid int for 'FILMBUFF_HTTP_RETRY_TOTAL'", always=True)

    assert calls == []
    assert root.handlers == before
    assert any(isinstance(h, logging.NullHandler) for h in library_logger.handlers)


def test_application_level_is_not_overridden(library_logger, make_session, to_response, wizard_of_oz_payload):
    class BrokenCache:
        def get(self, key):
            raise RuntimeError("down")

        def set(self, key, value):
            raise RuntimeError("down")

    library_logger.setLevel(logging.ERROR)

    imdb = FilmBuff(session=make_session(lookup=to_response(wizard_of_oz_payload)), cache=BrokenCache())
    imdb.look_up_id("tt0032138")
    imdb.look_up_id("tt0032138")

    assert library_logger.level == logging.ERROR


def test_explicit_log_level_is_applied_once(monkeypatch, library_logger):
    monkeypatch.setattr(cfg, "LOG_LEVEL", "debug")

    logger.get_logger()
    assert library_logger.level == logging.DEBUG

    library_logger.setLevel(logging.ERROR)
    logger.warning("again")
    logger.get_logger()

    assert library_logger.level == logging.ERROR
