from __future__ import annotations

"""
filmbuff/logger.py

Logger central de la librería (fachada sobre `logging`).

API estable
-----------
- get_logger()
- debug / info / warning / error
- debug_ctx(tag, msg) (debug contextual alineado con SILENT/DEBUG)
- truncate_line(text, max_chars) (para snippets de payloads)

Política
--------
- SILENT_MODE=True: suprime debug/info/warning (salvo always=True). `error()` siempre emite.
- DEBUG_MODE=True: habilita `debug_ctx`.
- El logging nunca debe romper una llamada del cliente.

Notas técnicas
--------------
- No importamos `filmbuff.config_base` directamente (evitamos circular imports).
  Lo leemos desde `sys.modules` si ya está importado.
- Inicialización idempotente.
- Como librería, nunca se toca el root logger: solo un NullHandler en "filmbuff".
- LOG_LEVEL / DEBUG_MODE fijan el nivel de "filmbuff" una sola vez; sin ellos,
  el nivel lo decide la aplicación.
"""

import logging
import sys
from types import ModuleType, TracebackType
from typing import Final, Mapping, TypedDict

from typing_extensions import TypeAlias, Unpack

# ============================================================================
# TIPOS: kwargs seguros para logging
# ============================================================================

_ExcInfoTuple: TypeAlias = tuple[type[BaseException], BaseException, TracebackType | None]
ExcInfo: TypeAlias = bool | _ExcInfoTuple | BaseException | None


class LogKwargs(TypedDict, total=False):
    """Subconjunto de kwargs soportados por logging.Logger.*."""

    exc_info: ExcInfo
    stack_info: bool
    stacklevel: int
    extra: Mapping[str, object] | None


# ============================================================================
# CONFIGURACIÓN GLOBAL
# ============================================================================

LOGGER_NAME: Final[str] = "filmbuff"

_LOGGER: logging.Logger | None = None
_CONFIGURED: bool = False
_LEVEL_APPLIED: bool = False

_CONFIG_MODULE: Final[str] = "filmbuff.config_base"


def _safe_get_cfg() -> ModuleType | None:
    """Devuelve filmbuff.config_base si ya ha sido importado (evita circular imports)."""
    mod = sys.modules.get(_CONFIG_MODULE)
    return mod if isinstance(mod, ModuleType) else None


def _cfg_bool(name: str, default: bool = False) -> bool:
    cfg = _safe_get_cfg()
    if cfg is None:
        return default
    try:
        return bool(getattr(cfg, name, default))
    except Exception:
        return default


def _cfg_str(name: str, default: str | None = None) -> str | None:
    cfg = _safe_get_cfg()
    if cfg is None:
        return default
    try:
        v = getattr(cfg, name, default)
        if v is None:
            return None
        s = str(v).strip()
        return s or default
    except Exception:
        return default


def is_silent_mode() -> bool:
    return _cfg_bool("SILENT_MODE", False)


def is_debug_mode() -> bool:
    return _cfg_bool("DEBUG_MODE", False)


# ============================================================================
# RESOLUCIÓN DE LEVEL + EXTERNAL LOGGERS
# ============================================================================

_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
}


def _resolve_level_from_config() -> int | None:
    """
    Nivel del logger de la librería.

    Prioridad:
      1) LOG_LEVEL explícito
      2) DEBUG_MODE
      3) None: no se toca el nivel (lo decide la aplicación)
    """
    lvl = _cfg_str("LOG_LEVEL", None)
    if isinstance(lvl, str) and lvl.strip():
        mapped = _LEVELS.get(lvl.strip().upper())
        if mapped is not None:
            return mapped

    if is_debug_mode():
        return logging.DEBUG

    return None


def _configure_external_loggers() -> None:
    """Baja el nivel de urllib3/requests salvo HTTP_DEBUG=True."""
    if _cfg_bool("HTTP_DEBUG", False):
        return

    for name in ("urllib3", "urllib3.connectionpool", "requests"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _apply_level_once(log: logging.Logger) -> None:
    """
    Aplica LOG_LEVEL / DEBUG_MODE una sola vez, cuando config_base ya está cargado.

    Si no hay nada explícito, el nivel queda en manos de la aplicación.
    """
    global _LEVEL_APPLIED

    if _LEVEL_APPLIED:
        return
    cfg = _safe_get_cfg()
    # LOG_LEVEL es lo último que define config_base.
    if cfg is None or not hasattr(cfg, "LOG_LEVEL"):
        return

    _LEVEL_APPLIED = True
    level = _resolve_level_from_config()
    if level is not None:
        log.setLevel(level)


def _ensure_configured() -> logging.Logger:
    """
    Inicializa el logger de la librería de forma idempotente.

    - NullHandler en "filmbuff": nunca se configura el root logger.
    - Los handlers/formatos son cosa de la aplicación.
    """
    global _LOGGER, _CONFIGURED

    if _CONFIGURED and _LOGGER is not None:
        _apply_level_once(_LOGGER)
        return _LOGGER

    log = logging.getLogger(LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in log.handlers):
        log.addHandler(logging.NullHandler())

    _configure_external_loggers()
    _apply_level_once(log)

    _LOGGER = log
    _CONFIGURED = True
    return log


def get_logger() -> logging.Logger:
    """Devuelve el logger principal, asegurando inicialización."""
    return _ensure_configured()


def _should_log(*, always: bool = False) -> bool:
    if always:
        return True
    return not is_silent_mode()


# ============================================================================
# API PÚBLICA DE LOGGING
# ============================================================================


def debug(
    msg: str,
    *args: object,
    always: bool = False,
    **kwargs: Unpack[LogKwargs],
) -> None:
    if not _should_log(always=always):
        return
    log = _ensure_configured()
    try:
        log.debug(msg, *args, **kwargs)
    except Exception:
        pass


def info(
    msg: str,
    *args: object,
    always: bool = False,
    **kwargs: Unpack[LogKwargs],
) -> None:
    if not _should_log(always=always):
        return
    log = _ensure_configured()
    try:
        log.info(msg, *args, **kwargs)
    except Exception:
        pass


def warning(
    msg: str,
    *args: object,
    always: bool = False,
    **kwargs: Unpack[LogKwargs],
) -> None:
    if not _should_log(always=always):
        return
    log = _ensure_configured()
    try:
        log.warning(msg, *args, **kwargs)
    except Exception:
        pass


def error(
    msg: str,
    *args: object,
    always: bool = False,
    **kwargs: Unpack[LogKwargs],
) -> None:
    """ERROR siempre se emite (ignora SILENT_MODE)."""
    log = _ensure_configured()
    try:
        log.error(msg, *args, **kwargs)
    except Exception:
        try:
            print(msg)
        except Exception:
            pass


# ============================================================================
# DEBUG CONTEXTUAL + TRUNCADO
# ============================================================================

_DEFAULT_LOG_LINE_MAX_CHARS: Final[int] = 500


def truncate_line(text: str, max_chars: int | None = None) -> str:
    """Trunca una línea para evitar volcar payloads JSON enormes."""
    limit = max_chars if isinstance(max_chars, int) and max_chars > 0 else _DEFAULT_LOG_LINE_MAX_CHARS
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 12)] + " …(truncated)"


def debug_ctx(tag: str, msg: object) -> None:
    """
    Debug contextual con tag.

    - DEBUG_MODE=False -> no-op
    - DEBUG_MODE=True y no SILENT -> info("[TAG][DEBUG] ...")
    """
    if not is_debug_mode():
        return

    t = (tag or "DEBUG").strip().upper()
    info(f"[{t}][DEBUG] {msg}")
