
import streamlit as st

from app.engine import SyncEngine
from remote.store_api import StoreClient
from storage.db import connect, init_db
from storage.repo import journal_for


def ensure_session_defaults():
    st.session_state.setdefault("sort_key", "none")
    st.session_state.setdefault("sort_direction", "desc")
    st.session_state.setdefault("top_n", 5)
    st.session_state.setdefault("busy", False)
    st.session_state.setdefault("editing_id", None)
    st.session_state.setdefault("flash", None)

    if "engine" not in st.session_state:
        conn = connect()
        init_db(conn)
        engine = SyncEngine(StoreClient(), journal=journal_for(conn))
        # chargement unique au démarrage de la session
        st.session_state.db = conn
        st.session_state.engine = engine
        st.session_state.load_result = engine.load()


def get_engine() -> SyncEngine:
    return st.session_state.engine
