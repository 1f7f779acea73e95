import sys
import datetime
from pathlib import Path

import altair as alt
import pandas as pd
import streamlit as st

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(PROJECT_ROOT))

from src.boatrace.analysis.stats import (
    by_month,
    daily_rollup,
    recent_window,
    records_to_frame,
    summarize,
    type_stats,
)
from src.boatrace.api_client import MissingWriteTokenError
from src.boatrace.config import TYPE_LABELS, TYPE_LABELS_INV, settings
from src.boatrace.store import ResultStore


def _get_store() -> ResultStore:
    # Um store por sessao do navegador; recarrega apenas quando solicitado
    if "store" not in st.session_state:
        store = ResultStore()
        store.initialize()
        st.session_state["store"] = store
    return st.session_state["store"]


def _render_summary(records) -> None:
    summary = summarize(records)
    rates = type_stats(records)
    c1, c2, c3, c4, c5, c6 = st.columns(6)
    with c1:
        st.metric("Registros", summary["count"])
    with c2:
        st.metric("Investido", f"{summary['invest']:,.0f}")
    with c3:
        st.metric("Retorno", f"{summary['return_val']:,.0f}")
    with c4:
        st.metric("Recuperacao", f"{summary['recovery_rate']}%")
    with c5:
        st.metric("Acerto", f"{summary['hit_rate']}%")
    with c6:
        st.metric(
            "Recuperacao por tipo",
            " / ".join(f"{TYPE_LABELS[k]} {v}%" for k, v in rates.items()),
        )


def _render_daily_chart(records) -> None:
    daily = pd.DataFrame([s.to_dict() for s in daily_rollup(records)])
    if daily.empty:
        st.info("Sem dados para o grafico.")
        return
    daily["day"] = pd.to_datetime(daily["date"], errors="coerce")
    daily = daily.dropna(subset=["day"])
    daily["profit"] = daily["returnVal"] - daily["invest"]
    daily["cum_profit"] = daily["profit"].cumsum()

    zero_line = alt.Chart(pd.DataFrame({"y": [0]})).mark_rule(color="red", strokeWidth=1).encode(y="y:Q")
    bars = (
        alt.Chart(daily)
        .mark_bar()
        .encode(
            x=alt.X("day:T", title="", axis=alt.Axis(format="%Y-%m-%d")),
            y=alt.Y("profit:Q", title="Lucro do dia"),
            tooltip=["date", "invest", "returnVal", "userCount"],
        )
    )
    line = (
        alt.Chart(daily)
        .mark_line(color="#f58518")
        .encode(
            x=alt.X("day:T", title=""),
            y=alt.Y("cum_profit:Q", title="Acumulado"),
        )
    )
    st.altair_chart(alt.layer(zero_line, bars, line).configure_view(stroke="#888", strokeWidth=1), use_container_width=True)


def _render_table(records) -> None:
    df = records_to_frame(records)
    if df.empty:
        st.info("Nenhum resultado no periodo.")
        return
    df["type"] = df["type"].map(lambda t: TYPE_LABELS.get(t, t))
    st.dataframe(df.drop(columns=["created_at"]), use_container_width=True)


def _render_entry_form(store: ResultStore) -> None:
    with st.sidebar:
        st.header("Novo resultado")
        token = st.text_input("Token de escrita", type="password")
        with st.form("new_result", clear_on_submit=True):
            day = st.date_input("Data", value=datetime.date.today())
            type_label = st.selectbox("Tipo", list(TYPE_LABELS_INV.keys()))
            invest = st.number_input("Investido", min_value=0, step=100)
            return_val = st.number_input("Retorno", min_value=0, step=10)
            user_count = st.number_input("Usuarios", min_value=0, step=1)
            submitted = st.form_submit_button("Enviar")
        if submitted:
            store.set_write_token(token)
            data = {
                "date": day.isoformat(),
                "type": TYPE_LABELS_INV[type_label],
                "invest": invest,
                "returnVal": return_val,
                "userCount": user_count,
            }
            try:
                store.create_remote(data)
            except MissingWriteTokenError:
                st.error("Informe o token de escrita.")
            else:
                st.success("Enviado. Dados recarregados da API.")


def main() -> None:
    st.set_page_config(page_title="Resultados Boat Race", layout="wide")
    st.title("Resultados Boat Race")

    store = _get_store()
    if st.button("Recarregar da API"):
        store.initialize()
    _render_entry_form(store)

    tab_recent, tab_month = st.tabs([f"Ultimos {settings.DEFAULT_RECENT_DAYS} dias", "Mensal"])

    with tab_recent:
        recent = recent_window(store.all(), settings.DEFAULT_RECENT_DAYS)
        _render_summary(recent)
        _render_daily_chart(recent)
        _render_table(recent)

    with tab_month:
        today = datetime.date.today()
        col_y, col_m, _ = st.columns([1, 1, 4])
        with col_y:
            year = st.number_input("Ano", min_value=2000, max_value=2100, value=today.year, step=1)
        with col_m:
            month = st.selectbox("Mes", list(range(1, 13)), index=today.month - 1)
        monthly = by_month(store.all(), int(year), int(month))
        _render_summary(monthly)
        _render_daily_chart(monthly)
        _render_table(monthly)


if __name__ == "__main__":
    main()
