from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from src.boatrace.config import settings
from src.boatrace.models import DailyStat, ResultRecord


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_results_csv(csv_path: Path, records: Iterable[ResultRecord]) -> Path:
    ensure_dir(csv_path.parent)
    df = pd.DataFrame([r.to_dict() for r in records])
    df.to_csv(csv_path, index=False, encoding=settings.CSV_ENCODING)
    return csv_path


def write_daily_csv(csv_path: Path, stats: Iterable[DailyStat]) -> Path:
    ensure_dir(csv_path.parent)
    df = pd.DataFrame([s.to_dict() for s in stats], columns=["date", "invest", "returnVal", "userCount"])
    df.to_csv(csv_path, index=False, encoding=settings.CSV_ENCODING)
    return csv_path
