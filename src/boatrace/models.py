from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from src.boatrace.config import TYPE_LABELS_INV

# chaves do payload remoto (camelCase) -> atributo
_WIRE_FIELDS = ("id", "date", "invest", "returnVal", "type", "userCount", "createdAt")


def _to_float(value: object) -> float:
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(out) or math.isinf(out):
        return 0.0
    return out


def _to_optional_int(value: object) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return None


def normalize_type(value: object) -> str:
    """Mapeia rotulos da planilha ("無料"/"有料") para "free"/"paid"."""
    text = str(value or "").strip()
    if text in TYPE_LABELS_INV:
        return TYPE_LABELS_INV[text]
    return text.lower()


@dataclass
class ResultRecord:
    id: str
    date: str
    invest: float = 0.0
    return_val: float = 0.0
    type: str = ""
    user_count: Optional[int] = None
    created_at: Optional[str] = None
    extra: Dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Dict[str, object]) -> "ResultRecord":
        extra = {k: v for k, v in raw.items() if k not in _WIRE_FIELDS}
        created_at = raw.get("createdAt")
        return cls(
            id=str(raw.get("id") or ""),
            date=str(raw.get("date") or ""),
            invest=_to_float(raw.get("invest")),
            return_val=_to_float(raw.get("returnVal")),
            type=normalize_type(raw.get("type")),
            user_count=_to_optional_int(raw.get("userCount")),
            created_at=str(created_at) if created_at else None,
            extra=extra,
        )

    def to_dict(self) -> Dict[str, object]:
        out: Dict[str, object] = dict(self.extra)
        out.update(
            {
                "id": self.id,
                "date": self.date,
                "invest": self.invest,
                "returnVal": self.return_val,
                "type": self.type,
            }
        )
        if self.user_count is not None:
            out["userCount"] = self.user_count
        if self.created_at:
            out["createdAt"] = self.created_at
        return out


@dataclass
class DailyStat:
    date: str
    invest: float = 0.0
    return_val: float = 0.0
    user_count: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "date": self.date,
            "invest": self.invest,
            "returnVal": self.return_val,
            "userCount": self.user_count,
        }
