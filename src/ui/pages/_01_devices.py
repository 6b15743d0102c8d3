# src/ui/pages/_01_devices.py
from __future__ import annotations

from datetime import date

import streamlit as st

from portfolio.display import category_label, format_currency, format_daily
from portfolio.models import Category
from portfolio.ranking import SortKey, next_sort_state, sort_devices
from portfolio.summary import summarize
from portfolio.valuation import evaluate
from ui.actions import add_device, delete_device, edit_device, flash_kind
from ui.state import get_engine


CATEGORIES = [c.value for c in Category]
SORT_BUTTONS = [
    (SortKey.PRICE, "Prix"),
    (SortKey.DAILY_COST, "Coût / jour"),
    (SortKey.OWNERSHIP_DAYS, "Jours"),
]


def _flash(res) -> None:
    st.session_state.flash = (flash_kind(res), res.message)


def _device_form(key: str, defaults: dict, submit_label: str, clear: bool = False):
    """Formulaire appareil ; les widgets sont indexés `{key}_{champ}` dans session_state."""
    fields = ("name", "price", "purchase_date", "category")
    if clear:
        # avant instanciation des widgets : ils repartent des valeurs par défaut
        for f in fields:
            st.session_state.pop(f"{key}_{f}", None)

    with st.form(key, clear_on_submit=False):
        name = st.text_input(
            "Nom", value=defaults.get("name", ""), placeholder="ex : iPhone 16", key=f"{key}_name"
        )
        col1, col2, col3 = st.columns(3)
        with col1:
            price = st.text_input(
                "Prix (¥)", value=defaults.get("price", ""), placeholder="8999", key=f"{key}_price"
            )
        with col2:
            d = defaults.get("purchase_date")
            purchase = st.date_input(
                "Date d'achat",
                value=date.fromisoformat(d) if d else None,
                max_value=date.today(),
                key=f"{key}_purchase_date",
            )
        with col3:
            cat = defaults.get("category", Category.OTHER.value)
            category = st.selectbox(
                "Type",
                CATEGORIES,
                index=CATEGORIES.index(cat) if cat in CATEGORIES else CATEGORIES.index("other"),
                format_func=category_label,
                key=f"{key}_category",
            )
        submitted = st.form_submit_button(submit_label, disabled=st.session_state.busy)

    values = {
        "name": name,
        "price": price,
        "purchase_date": purchase.isoformat() if purchase else "",
        "category": category,
    }
    return submitted, values


def render():
    st.header("Mes appareils")
    engine = get_engine()

    if st.session_state.flash:
        kind, msg = st.session_state.flash
        {"success": st.success, "info": st.info}.get(kind, st.error)(msg)
        st.session_state.flash = None

    today = date.today()
    summary = summarize(engine.devices, today)
    k1, k2, k3 = st.columns(3)
    k1.metric("Total des actifs", format_currency(summary.total_asset))
    k2.metric("Coût journalier total", format_currency(summary.total_daily_cost))
    k3.metric("Appareils", summary.device_count)

    # Tri : clic sur une colonne -> desc, re-clic -> asc, troisième clic -> sans tri
    cols = st.columns(len(SORT_BUTTONS) + 1)
    for col, (key, label) in zip(cols, SORT_BUTTONS):
        active = st.session_state.sort_key == key.value
        arrow = ("↓" if st.session_state.sort_direction == "desc" else "↑") if active else ""
        if col.button(f"{label} {arrow}".strip(), use_container_width=True):
            k, d = next_sort_state(st.session_state.sort_key, st.session_state.sort_direction, key)
            st.session_state.sort_key, st.session_state.sort_direction = k.value, d.value
            st.rerun()
    if cols[-1].button("Ordre d'ajout", use_container_width=True):
        st.session_state.sort_key, st.session_state.sort_direction = "none", "desc"
        st.rerun()

    ordered = sort_devices(engine.devices, st.session_state.sort_key, st.session_state.sort_direction, today=today)
    if not ordered:
        st.info("Aucun appareil, ajoutez-en un ci-dessous.")

    for m in evaluate(ordered, today):
        dev = m.device
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([4, 2, 1, 1])
            c1.markdown(f"**{dev.name}**  \n{category_label(dev.display_category.value)}")
            c2.write(f"{format_currency(dev.price)} • {format_daily(m.daily_cost)}")
            c2.caption(f"{m.ownership_days} jours")
            if c3.button("Modifier", key=f"edit_{dev.id}"):
                st.session_state.editing_id = dev.id
                st.rerun()
            confirm = c4.checkbox("Confirmer", key=f"confirm_{dev.id}")
            if c4.button("Supprimer", key=f"del_{dev.id}", disabled=st.session_state.busy):
                st.session_state.busy = True
                try:
                    res = delete_device(engine, dev.id, confirmed=confirm)
                finally:
                    st.session_state.busy = False
                _flash(res)
                st.rerun()

    st.divider()

    editing = engine.state.get(st.session_state.editing_id) if st.session_state.editing_id else None
    if editing is not None:
        st.subheader(f"Modifier « {editing.name} »")
        engine.form.fill(editing)
        submitted, values = _device_form(f"edit_form_{editing.id}", engine.form.as_raw(), "Enregistrer")
        if st.button("Annuler"):
            st.session_state.editing_id = None
            engine.form.reset()
            st.rerun()
        if submitted:
            st.session_state.busy = True
            try:
                res = edit_device(engine, editing.id, values)
            finally:
                st.session_state.busy = False
            if res.ok:
                st.session_state.editing_id = None
                engine.form.reset()
            _flash(res)
            st.rerun()
    else:
        st.subheader("Ajouter un appareil")
        clear = st.session_state.pop("clear_add_form", False)
        submitted, values = _device_form("add_form", engine.form.as_raw(), "Ajouter", clear=clear)
        if submitted:
            st.session_state.busy = True
            try:
                res = add_device(engine, values)
            finally:
                st.session_state.busy = False
            if res.ok:
                st.session_state.clear_add_form = True
            _flash(res)
            st.rerun()
