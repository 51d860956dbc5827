# userauth/crosscutting/logger.py
"""
===============================================================================
TARJETA CRC — crosscutting/logger.py (Logging estructurado)
===============================================================================

Responsabilidades:
  - Emitir una línea JSON por evento con el contexto del request
    (request_id, method, path, subject).
  - Nunca escribir secretos: passwords, hashes, tokens y la URI de Mongo
    se reemplazan; los emails se enmascaran.
  - Caer a formato texto cuando LOG_JSON=false (desarrollo/tests).

Colaboradores:
  - userauth/context.py (as_log_fields)
  - crosscutting/config.py (log_level / log_json)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import re
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from ..context import as_log_fields

_REDACTED = "[redacted]"
_MAX_FIELD_CHARS = 2_000
_SECRET_KEY = re.compile(r"pass|secret|token|authorization|hash|mongo_uri", re.I)
_EMAIL_FIELD = re.compile(r"email", re.I)

# Atributos estándar de LogRecord (todo lo demás viene de `extra=`).
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def mask_email(address: str) -> str:
    local, sep, domain = address.partition("@")
    if not sep:
        return _REDACTED
    return f"{local[:1]}***@{domain}"


def scrub(key: str, value: Any) -> Any:
    """Versión apta para log de un campo extra."""
    if _SECRET_KEY.search(key):
        return _REDACTED
    if isinstance(value, str):
        if _EMAIL_FIELD.search(key):
            return mask_email(value)
        return value if len(value) <= _MAX_FIELD_CHARS else value[:_MAX_FIELD_CHARS] + "..."
    if isinstance(value, dict):
        return {str(k): scrub(str(k), v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [scrub(key, item) for item in value]
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        entry.update(as_log_fields())
        entry.update(
            (key, scrub(key, value))
            for key, value in vars(record).items()
            if key not in _RESERVED
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exc_type"] = record.exc_info[0].__name__
            entry["exc"] = "".join(traceback.format_exception(*record.exc_info))
        return json.dumps(entry, ensure_ascii=False, default=str)


def _configured_level_and_format() -> tuple[str, bool]:
    from .config import get_settings

    try:
        settings = get_settings()
    except ValidationError:
        # R: settings inválidos los reporta el lifespan al arrancar.
        return "INFO", True
    return settings.log_level, settings.log_json


def setup_logger(name: str = "userauth") -> logging.Logger:
    log = logging.getLogger(name)
    level, as_json = _configured_level_and_format()
    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if as_json
            else logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


logger = setup_logger()
