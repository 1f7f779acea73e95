from __future__ import annotations

import re
import time
from datetime import date, datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

# Aceita "2024-03-05", "2024-3-5", "2024/03/05" (opcionalmente seguido de horario)
_YMD_RE = re.compile(r"^\s*(\d{4})[-/](\d{1,2})[-/](\d{1,2})(?:[T\s].*)?$")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def now_millis() -> int:
    return int(time.time() * 1000)


def parse_record_date(value: object) -> Optional[date]:
    """Converte o campo ``date`` de um registro em ``datetime.date``.

    Tenta primeiro o formato ano-mes-dia (separador ``-`` ou ``/``) e so depois
    recorre ao dateutil. Retorna None para vazio ou ilegivel.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None

    m = _YMD_RE.match(text)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError):
        return None
