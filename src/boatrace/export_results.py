from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

if __package__ in (None, ""):
    project_root = Path(__file__).resolve().parents[2]
    if str(project_root) not in sys.path:
        sys.path.append(str(project_root))

from loguru import logger

from src.boatrace.analysis.stats import by_month, daily_rollup, recent_window, summarize, type_stats
from src.boatrace.config import TYPE_LABELS, ensure_data_dir, settings
from src.boatrace.models import ResultRecord
from src.boatrace.store import ResultStore
from src.boatrace.utils.files import write_daily_csv, write_results_csv


def _parse_month(value: str) -> Tuple[int, int]:
    try:
        year_s, month_s = value.split("-", 1)
        year, month = int(year_s), int(month_s)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Mes invalido (use YYYY-MM): {value}") from exc
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError(f"Mes fora do intervalo: {value}")
    return year, month


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Exporta os resultados da API para CSV.")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--days", type=int, help="Apenas os ultimos N dias (inclui hoje).")
    group.add_argument("--month", type=_parse_month, help="Apenas um mes (YYYY-MM).")
    parser.add_argument("--out", type=Path, help="Diretorio de saida (default: data/boatrace).")
    return parser.parse_args(argv)


def export(store: ResultStore, args: argparse.Namespace) -> Tuple[Path, Path]:
    records: List[ResultRecord] = store.all()
    suffix = "all"
    if args.days:
        records = recent_window(records, args.days)
        suffix = f"last{args.days}d"
    elif args.month:
        year, month = args.month
        records = by_month(records, year, month)
        suffix = f"{year:04d}-{month:02d}"

    out_dir = args.out or ensure_data_dir()
    today_str = date.today().isoformat()
    results_path = write_results_csv(out_dir / f"results_{suffix}_{today_str}.csv", records)
    daily_path = write_daily_csv(out_dir / f"daily_{suffix}_{today_str}.csv", daily_rollup(records))

    summary = summarize(records)
    logger.info(
        "{} registros | investido {:.0f} | retorno {:.0f} | recuperacao {}% | acerto {}%",
        summary["count"],
        summary["invest"],
        summary["return_val"],
        summary["recovery_rate"],
        summary["hit_rate"],
    )
    for key, rate in type_stats(records).items():
        logger.info("Recuperacao {}: {}%", TYPE_LABELS[key], rate)
    return results_path, daily_path


def main(argv: Optional[List[str]] = None) -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    args = parse_cli_args(argv)
    store = ResultStore()
    try:
        logger.info("Carregando resultados de {}", store.client.base_url)
        store.initialize()
        results_path, daily_path = export(store, args)
    except Exception as exc:
        logger.exception("Erro inesperado ao exportar resultados: {}", exc)
        raise SystemExit(1)
    finally:
        store.client.close()

    logger.info("Resultados salvos em: {}", results_path)
    logger.info("Resumo diario salvo em: {}", daily_path)


if __name__ == "__main__":
    main()
