"""
Structured logging configuration using structlog.

Every module logs snake_case events through structlog; configure_logging()
routes them through the stdlib root logger to the console and to one file
per process run under the logs directory.

Rendering follows settings.debug: colored console lines while developing,
JSON lines otherwise. API keys never reach the output, and oversized string
values (participant messages, raw model output) are clipped.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, List, MutableMapping, Optional

import structlog
from structlog.typing import Processor

from openinterviewer.core.config import settings

LOG_FILE_PREFIX = "openinterviewer_"

SECRET_KEYS = ("api_key", "apikey", "authorization", "secret")
MAX_VALUE_LENGTH = 500


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask values whose key names a credential."""
    for key in event_dict:
        if any(secret in key.lower() for secret in SECRET_KEYS):
            event_dict[key] = "***"
    return event_dict


def clip_long_values(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = value[:MAX_VALUE_LENGTH] + f"...(+{len(value) - MAX_VALUE_LENGTH})"
    return event_dict


def build_processors(debug: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        clip_long_values,
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )
    return processors


def _rotate_run_logs(logs_dir: Path, keep: int) -> Path:
    """Drop all but the newest `keep` run logs and name the next one."""
    existing = sorted(
        logs_dir.glob(f"{LOG_FILE_PREFIX}*.log"),
        key=lambda p: p.stat().st_mtime,
        reverse=True,
    )
    for stale in existing[keep:]:
        try:
            os.remove(stale)
        except OSError:
            pass  # Another process may hold or have removed it

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"{LOG_FILE_PREFIX}{stamp}.log"


def _install_handlers(log_file: Path, level: int) -> None:
    root = logging.getLogger()
    # Reconfiguration (tests, reloads) must not duplicate output
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)

    plain = logging.Formatter("%(message)s")
    for handler in (logging.StreamHandler(), logging.FileHandler(log_file, mode="w")):
        handler.setFormatter(plain)
        root.addHandler(handler)
    root.setLevel(level)


def configure_logging(
    log_runs_to_keep: int = 5, logs_dir: Optional[Path] = None
) -> None:
    """Configure structlog for the application.

    Call once at startup, before any logging. Each call starts a new run
    log and culls older ones so that at most `log_runs_to_keep` remain.

    Args:
        log_runs_to_keep: Number of run logs retained, the new one included
        logs_dir: Directory receiving the log files (default: settings.logs_dir)
    """
    logs_dir = Path(logs_dir or settings.logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    log_file = _rotate_run_logs(logs_dir, keep=max(log_runs_to_keep - 1, 0))
    _install_handlers(log_file, level)

    structlog.configure(
        processors=build_processors(settings.debug),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Bound structlog logger for a module: `log = get_logger(__name__)`."""
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """
    Bind request-scoped values (request_id, session_id) to every later event
    in the current context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
