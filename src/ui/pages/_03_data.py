# src/ui/pages/_03_data.py
from __future__ import annotations

import streamlit as st

from storage.repo import get_events
from ui import queries
from ui.snapshot import save_snapshot
from ui.state import get_engine


def _download_csv(df, filename: str, label: str):
    st.download_button(
        label=label,
        data=df.to_csv(index=False).encode("utf-8"),
        file_name=filename,
        mime="text/csv",
    )


def render():
    st.header("Données")
    engine = get_engine()

    table = st.selectbox("Table", ["appareils", "catégories", "journal"], index=0)

    col1, col2 = st.columns([2, 2])
    with col1:
        limit = st.number_input("Limit", min_value=10, max_value=5000, value=300, step=50)

    if table == "appareils":
        df = queries.devices_frame(
            engine.devices,
            key=st.session_state.sort_key,
            direction=st.session_state.sort_direction,
        ).head(int(limit))
    elif table == "catégories":
        df = queries.category_frame(engine.devices)
    else:  # journal
        df = get_events(st.session_state.db, limit=int(limit))

    st.caption(f"{len(df)} ligne(s) — version locale {engine.state.version}")
    st.dataframe(df, use_container_width=True, height=520)

    # Exports
    st.divider()
    c1, c2 = st.columns([1, 1])
    with c1:
        _download_csv(df, f"{table}.csv", "Télécharger CSV (vue actuelle)")
    with c2:
        if st.button("Exporter un snapshot (CSV + PNG)"):
            paths = save_snapshot(engine.devices, top_n=int(st.session_state.top_n))
            st.success(f"Snapshot exporté : {paths.devices_csv.name}, {paths.png.name}")
