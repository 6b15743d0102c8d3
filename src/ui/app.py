# src/ui/app.py
from __future__ import annotations

from dotenv import load_dotenv
load_dotenv()

import streamlit as st

from ui.state import ensure_session_defaults
from utils.logging import configure_logging
from ui.pages import (
    devices_page,
    dashboard_page,
    data_page,
)

st.set_page_config(page_title="asset_tracker", layout="wide")
configure_logging()

ensure_session_defaults()

st.sidebar.title("asset_tracker")
page = st.sidebar.radio(
    "Navigation",
    ["Appareils", "Tableau de bord", "Données"],
    index=0,
)

if page == "Appareils":
    devices_page.render()
elif page == "Tableau de bord":
    dashboard_page.render()
elif page == "Données":
    data_page.render()
