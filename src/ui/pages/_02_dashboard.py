from __future__ import annotations

from datetime import date

import plotly.express as px
import streamlit as st

from portfolio.display import format_currency
from portfolio.summary import summarize
from ui import queries
from ui.actions import to_result
from ui.state import get_engine


def render():
    st.header("Tableau de bord")
    engine = get_engine()

    load = st.session_state.get("load_result")
    if load is not None and not load.ok:
        st.error(f"Chargement impossible : {load.error}")

    b1, b2 = st.columns([1, 3])
    with b1:
        if st.button("Recharger depuis le store", use_container_width=True):
            m = engine.load()
            st.session_state.load_result = m
            res = to_result(m)
            (st.success if res.ok else st.error)(res.message)

    devices = engine.devices
    if not devices:
        st.info("Aucun appareil.")
        return

    today = date.today()
    summary = summarize(devices, today)
    k1, k2, k3 = st.columns(3)
    k1.metric("Total des actifs", format_currency(summary.total_asset))
    k2.metric("Coût journalier total", format_currency(summary.total_daily_cost))
    k3.metric("Appareils", summary.device_count)

    st.divider()

    left, right = st.columns(2)
    with left:
        cat = queries.category_frame(devices)
        fig = px.pie(cat, names="label", values="value", title="Répartition par catégorie")
        st.plotly_chart(fig, use_container_width=True)

    with right:
        n = st.number_input("Top N", min_value=1, max_value=50, value=int(st.session_state.top_n), step=1)
        st.session_state.top_n = int(n)
        top = queries.top_daily_cost_frame(devices, n=int(n), today=today)
        fig = px.bar(
            top, x="value", y="label", orientation="h",
            hover_name="name", title=f"Top {int(n)} — coût journalier",
            labels={"value": "¥ / jour", "label": ""},
        )
        fig.update_yaxes(autorange="reversed")
        st.plotly_chart(fig, use_container_width=True)
