from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from src.boatrace.config import TYPE_LABELS
from src.boatrace.models import DailyStat, ResultRecord
from src.boatrace.utils.dates import parse_record_date

RecordLike = Union[ResultRecord, Mapping[str, object]]

_FRAME_COLUMNS = ["id", "date", "invest", "return_val", "type", "user_count", "created_at"]


def _as_records(records: Iterable[RecordLike]) -> List[ResultRecord]:
    out: List[ResultRecord] = []
    for r in records or []:
        out.append(r if isinstance(r, ResultRecord) else ResultRecord.from_dict(dict(r)))
    return out


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def recovery_rate(invest: object, return_val: object) -> int:
    """Percentual do investimento que voltou (0 quando nao ha investimento)."""
    try:
        invest_f = float(invest or 0)  # type: ignore[arg-type]
        return_f = float(return_val or 0)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0
    if not invest_f or math.isnan(invest_f) or math.isnan(return_f):
        return 0
    return round_half_up(return_f / invest_f * 100)


def hit_rate(records: Iterable[RecordLike]) -> int:
    items = _as_records(records)
    if not items:
        return 0
    hits = sum(1 for r in items if r.return_val > 0)
    return round_half_up(hits / len(items) * 100)


def recent_window(
    records: Iterable[RecordLike],
    days: int = 14,
    today: Optional[date] = None,
) -> List[ResultRecord]:
    """Registros de [hoje - (days-1), hoje], ordenados pela string de data (desc)."""
    if days < 1:
        return []
    end = today or date.today()
    start = end - timedelta(days=days - 1)
    selected: List[ResultRecord] = []
    for r in _as_records(records):
        d = parse_record_date(r.date)
        if d is not None and start <= d <= end:
            selected.append(r)
    return sorted(selected, key=lambda r: str(r.date), reverse=True)


def by_month(records: Iterable[RecordLike], year: int, month: int) -> List[ResultRecord]:
    selected: List[ResultRecord] = []
    for r in _as_records(records):
        d = parse_record_date(r.date)
        if d is not None and d.year == int(year) and d.month == int(month):
            selected.append(r)
    return selected


def records_to_frame(records: Iterable[RecordLike]) -> pd.DataFrame:
    rows = []
    for r in _as_records(records):
        rows.append(
            {
                "id": r.id,
                "date": r.date,
                "invest": r.invest,
                "return_val": r.return_val,
                "type": r.type,
                "user_count": r.user_count,
                "created_at": r.created_at,
            }
        )
    return pd.DataFrame(rows, columns=_FRAME_COLUMNS)


def daily_rollup(records: Iterable[RecordLike]) -> List[DailyStat]:
    """Soma investimento, retorno e usuarios por dia, em ordem crescente de data."""
    df = records_to_frame(records)
    if df.empty:
        return []

    parsed = [parse_record_date(v) for v in df["date"]]
    # chave normalizada quando a data e legivel; senao mantem o texto original
    df["day_key"] = [d.isoformat() if d is not None else str(raw) for d, raw in zip(parsed, df["date"])]
    df["day_sort"] = pd.to_datetime([d.isoformat() if d is not None else None for d in parsed], errors="coerce")
    df["user_count"] = pd.to_numeric(df["user_count"], errors="coerce").fillna(0)

    grouped = (
        df.groupby(["day_key"], as_index=False, sort=False)
        .agg(
            invest=("invest", "sum"),
            return_val=("return_val", "sum"),
            user_count=("user_count", "sum"),
            day_sort=("day_sort", "first"),
        )
        .sort_values("day_sort", na_position="last", kind="stable")
    )

    return [
        DailyStat(
            date=str(row["day_key"]),
            invest=float(row["invest"]),
            return_val=float(row["return_val"]),
            user_count=int(row["user_count"]),
        )
        for _, row in grouped.iterrows()
    ]


def type_stats(records: Iterable[RecordLike]) -> Dict[str, int]:
    totals: Dict[str, Dict[str, float]] = {key: {"invest": 0.0, "return_val": 0.0} for key in TYPE_LABELS}
    for r in _as_records(records):
        if r.type in totals:
            totals[r.type]["invest"] += r.invest
            totals[r.type]["return_val"] += r.return_val
    return {key: recovery_rate(t["invest"], t["return_val"]) for key, t in totals.items()}


def summarize(records: Iterable[RecordLike]) -> Dict[str, object]:
    items = _as_records(records)
    invest = sum(r.invest for r in items)
    returned = sum(r.return_val for r in items)
    return {
        "count": len(items),
        "invest": invest,
        "return_val": returned,
        "profit": returned - invest,
        "recovery_rate": recovery_rate(invest, returned),
        "hit_rate": hit_rate(items),
    }
