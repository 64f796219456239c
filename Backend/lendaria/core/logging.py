"""
Lendária - Logging unificado
============================
Configuracao unica de logging para o backend, os scripts de manutencao e a
captura de voz. Logs em console e em arquivo rotativo na pasta logs/.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter as _JsonFormatterBase


LOG_FILE_NAME = "backend.log"
SERVICE_NAME = os.getenv("SERVICE_NAME", "lendaria-backend")
LOG_PREFIX = "[Backend]"
DEFAULT_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))
DEFAULT_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "5"))
CONTEXT_KEYS = ("request_id", "field_id", "table", "trace_id", "event")


class UnifiedFormatter(logging.Formatter):
    """Formatador legivel para ambientes locais."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.upper()
        message = record.getMessage()

        context_parts: list[str] = []
        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None:
                context_parts.append(f"{key}={value}")

        context_segment = (" | " + " ".join(context_parts)) if context_parts else ""
        line = f"[{timestamp}] {LOG_PREFIX} [{level}] [{record.name}] {message}{context_segment}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(_JsonFormatterBase):
    """Formatter JSON compativel com Elastic e Loki."""

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        if "timestamp" not in log_record:
            log_record["timestamp"] = datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds")
        log_record.setdefault("service", SERVICE_NAME)
        log_record.setdefault("logger", record.name)
        log_record.setdefault("level", record.levelname.upper())

        message = log_record.get("message")
        if isinstance(message, (dict, list)):
            log_record["message"] = json.dumps(message, ensure_ascii=False)

        for key in CONTEXT_KEYS:
            value = getattr(record, key, None)
            if value is not None and key not in log_record:
                log_record[key] = value


_logging_configured = False
_exceptions_hooked = False


def _build_log_file_path() -> Path:
    env_dir = os.getenv("LENDARIA_LOG_DIR")
    if env_dir:
        base_path = Path(env_dir)
    else:
        base_path = Path(__file__).resolve().parents[3] / "logs"
    base_path.mkdir(parents=True, exist_ok=True)
    return base_path / LOG_FILE_NAME


def _install_exception_hooks() -> None:
    global _exceptions_hooked
    if _exceptions_hooked:
        return

    def handle_exception(exc_type, exc_value, exc_traceback) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger("lendaria.uncaught").error("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))

    sys.excepthook = handle_exception
    _exceptions_hooked = True


def setup_unified_logging(level: str | None = None) -> None:
    global _logging_configured

    log_format = os.getenv("LOG_FORMAT", "text").lower()
    log_level = getattr(logging, (level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    use_json = log_format == "json"

    formatter: logging.Formatter = JsonFormatter(fmt="%(message)s") if use_json else UnifiedFormatter()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if os.getenv("LOG_TO_FILE", "true").lower() not in ("0", "false", "no"):
        file_handler = logging.handlers.RotatingFileHandler(
            _build_log_file_path(),
            maxBytes=DEFAULT_MAX_BYTES,
            backupCount=DEFAULT_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    _install_exception_hooks()
    logging.getLogger("uvicorn").propagate = True
    logging.getLogger("uvicorn.access").propagate = True
    logging.getLogger("uvicorn.error").propagate = True
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _logging_configured = True


def ensure_logging_configured() -> None:
    if not _logging_configured:
        setup_unified_logging()


def get_logger(name: str) -> logging.Logger:
    ensure_logging_configured()
    return logging.getLogger(name)


# Configurar automaticamente ao importar
ensure_logging_configured()
