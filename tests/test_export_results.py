import argparse

import pandas as pd
import pytest

from src.boatrace.export_results import _parse_month, export, parse_cli_args


def test_parse_cli_args_month():
    args = parse_cli_args(["--month", "2024-03"])

    assert args.month == (2024, 3)
    assert args.days is None


@pytest.mark.parametrize("value", ["2024", "2024-13", "abc-def"])
def test_parse_month_rejects_bad_values(value):
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_month(value)


def test_export_month_writes_results_and_daily(store, fake_session, make_payload, sample_items, tmp_path):
    fake_session.get_responses.append(make_payload(sample_items))
    store.initialize()
    args = argparse.Namespace(days=None, month=(2024, 3), out=tmp_path)

    results_path, daily_path = export(store, args)

    results = pd.read_csv(results_path, encoding="utf-8-sig")
    daily = pd.read_csv(daily_path, encoding="utf-8-sig")
    assert sorted(results["id"].astype(str)) == ["1", "3"]
    assert list(daily["date"]) == ["2024-03-05", "2024-03-31"]
    assert list(daily["invest"]) == [500, 1000]
