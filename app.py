# Project: Ecological Footprint Calculator (Streamlit App)

# app.py
from __future__ import annotations

import logging

import streamlit as st

from engine import Computation
from exporters import ExportUnavailable, export_filename, json_export, xlsx_export
from guides import glossary, how_it_works
from parsing import format_number
from session import FootprintSession
from settings import load_settings
from storage import LocalStore
from ui_components import breakdown_chart, note, pill, status_line, totals_panel

log = logging.getLogger(__name__)

# ---------------------------------
# App State / Navigation
# ---------------------------------

PAGES = {
    "Calculator": "calc",
    "Import & Export": "transfer",
    "About": "about",
}

PARAM_FIELDS = {
    "param_base_year": "base_year",
    "param_unit_name": "unit_name",
    "param_absorption": "absorption_factor",
    "param_equivalence": "equivalence_factor",
    "param_population": "population",
    "param_use_gha": "use_gha",
}

WIDGET_PREFIX = "cat_"


def _init_state():
    if "page" not in st.session_state:
        st.session_state.page = "calc"
    if "store" not in st.session_state:
        settings = load_settings()
        st.session_state.store = LocalStore(settings.storage_dir)
        st.session_state.settings = settings
    if "session" not in st.session_state:
        session = FootprintSession()
        session.params.base_year = st.session_state.settings.base_year
        session.load(st.session_state.store)
        st.session_state.session = session


def _session() -> FootprintSession:
    return st.session_state.session


def _forget_widgets(include_params: bool = False):
    """Drop cached widget values so they re-read the session on next render."""
    for key in list(st.session_state.keys()):
        if key.startswith(WIDGET_PREFIX) or (include_params and key in PARAM_FIELDS):
            del st.session_state[key]


def _raw_text(value) -> str:
    return "" if value is None else str(value)


def _index_of(category_id: str) -> int:
    for i, category in enumerate(_session().categories):
        if category.id == category_id:
            return i
    return -1


# ---------------------------------
# Callbacks
# ---------------------------------

def _on_param_change(widget_key: str):
    setattr(_session().params, PARAM_FIELDS[widget_key], st.session_state[widget_key])


def _on_field_change(category_id: str, field: str, widget_key: str):
    _session().update_category(_index_of(category_id), field, st.session_state[widget_key])


def _on_remove(category_id: str):
    _session().remove_category(_index_of(category_id))


def _on_add():
    _session().add_category()


def _on_reset_consumption():
    _session().reset_consumption()
    _forget_widgets()


def _on_restore_defaults():
    _session().reset_to_defaults()
    _forget_widgets()


def _on_exported(kind: str):
    _session().mark_exported(kind)


# ---------------------------------
# Shared sidebar
# ---------------------------------

def sidebar_parameters():
    session = _session()
    params = session.params

    with st.sidebar:
        st.markdown("###  Navigate")
        page_labels = list(PAGES.keys())
        page_keys = list(PAGES.values())
        current = st.session_state.get("page", "calc")
        selected_label = st.radio(
            "Go to",
            page_labels,
            index=page_keys.index(current) if current in page_keys else 0,
            label_visibility="collapsed",
            key="nav_radio",
        )
        st.session_state.page = PAGES[selected_label]

        st.markdown("---")
        st.markdown("### Parameters")
        st.caption("Numbers accept 1234.56 or 1.234,56. Totals update as you type.")

        st.text_input("Base year", value=params.base_year, key="param_base_year",
                      on_change=_on_param_change, args=("param_base_year",))
        st.text_input("Reporting unit", value=params.unit_name, key="param_unit_name",
                      on_change=_on_param_change, args=("param_unit_name",),
                      help="Institution, campus, household…")
        st.text_input("Absorption factor (t CO₂/ha/year)", value=params.absorption_factor,
                      key="param_absorption", on_change=_on_param_change, args=("param_absorption",),
                      help="Blank or invalid values fall back to 6.27.")
        st.text_input("Equivalence factor (ha → gha)", value=params.equivalence_factor,
                      key="param_equivalence", on_change=_on_param_change, args=("param_equivalence",),
                      help="Blank or invalid values fall back to 1.37.")
        st.text_input("Population", value=params.population, key="param_population",
                      on_change=_on_param_change, args=("param_population",))
        st.checkbox("Report footprint in global hectares (gha)", value=params.use_gha,
                    key="param_use_gha", on_change=_on_param_change, args=("param_use_gha",))


# ---------------------------------
# Pages
# ---------------------------------

def _category_row(index: int, computation: Computation):
    row = computation.rows[index]
    category, metrics = row.category, row.metrics
    cid = category.id

    with st.container(border=True):
        c_on, c_name, c_cons, c_unit, c_fe, c_del = st.columns([0.6, 3, 2, 1.6, 1.4, 1.1])
        with c_on:
            st.checkbox("Active", value=category.enabled, key=f"{WIDGET_PREFIX}enabled_{cid}",
                        on_change=_on_field_change, args=(cid, "enabled", f"{WIDGET_PREFIX}enabled_{cid}"))
        with c_name:
            st.text_input("Category", value=category.name, key=f"{WIDGET_PREFIX}name_{cid}",
                          on_change=_on_field_change, args=(cid, "name", f"{WIDGET_PREFIX}name_{cid}"))
        with c_cons:
            st.text_input("Consumption", value=_raw_text(category.consumption), placeholder="0",
                          key=f"{WIDGET_PREFIX}consumption_{cid}", on_change=_on_field_change,
                          args=(cid, "consumption", f"{WIDGET_PREFIX}consumption_{cid}"))
        with c_unit:
            st.text_input("Unit", value=category.unit, key=f"{WIDGET_PREFIX}unit_{cid}",
                          on_change=_on_field_change, args=(cid, "unit", f"{WIDGET_PREFIX}unit_{cid}"))
        with c_fe:
            st.text_input("FE (kg CO₂/unit)", value=_raw_text(category.fe), placeholder="FE",
                          key=f"{WIDGET_PREFIX}fe_{cid}", on_change=_on_field_change,
                          args=(cid, "fe", f"{WIDGET_PREFIX}fe_{cid}"))
        with c_del:
            st.button("Remove" if category.custom else "Built-in", key=f"{WIDGET_PREFIX}remove_{cid}",
                      disabled=not category.custom, on_click=_on_remove, args=(cid,))

        c_life, c_span, c_method = st.columns([1.4, 1.4, 6])
        with c_life:
            st.checkbox("Useful life", value=category.has_useful_life, key=f"{WIDGET_PREFIX}life_{cid}",
                        disabled=not category.custom, on_change=_on_field_change,
                        args=(cid, "has_useful_life", f"{WIDGET_PREFIX}life_{cid}"))
        with c_span:
            if category.has_useful_life:
                st.text_input("Years", value=_raw_text(category.life_span), key=f"{WIDGET_PREFIX}span_{cid}",
                              on_change=_on_field_change, args=(cid, "life_span", f"{WIDGET_PREFIX}span_{cid}"))
        with c_method:
            st.text_input("Methodology", value=category.method, key=f"{WIDGET_PREFIX}method_{cid}",
                          on_change=_on_field_change, args=(cid, "method", f"{WIDGET_PREFIX}method_{cid}"))

        st.caption(
            f"{format_number(metrics.kg, 4)} kg CO₂ · {format_number(metrics.ton, 6)} t CO₂ · "
            f"{format_number(metrics.area_ha, 6)} ha · {format_number(metrics.gha, 6)} gha"
        )


def page_calculator():
    session = _session()
    params = session.params

    st.title("Ecological Footprint Calculator")
    st.caption(
        "Enter the annual consumption of each category. Emissions are converted into land area "
        "(ha) and global hectares (gha) using the absorption and equivalence factors."
    )
    if params.unit_name:
        st.markdown(f"**{params.unit_name}** · base year {params.base_year or '—'}")

    computation = session.compute()
    totals_panel(computation)

    warnings = session.warnings()
    for message in warnings.messages():
        st.warning(message)

    st.markdown("---")
    st.subheader("Categories")

    c1, c2, c3 = st.columns(3)
    with c1:
        st.button("Add category", on_click=_on_add, key="btn_add", width="stretch")
    with c2:
        st.button("Clear consumption", on_click=_on_reset_consumption, key="btn_reset", width="stretch")
    with c3:
        st.button("Restore built-in catalog", on_click=_on_restore_defaults, key="btn_defaults", width="stretch")

    for index in range(len(computation.rows)):
        _category_row(index, computation)

    st.markdown("---")
    st.subheader("Breakdown")
    breakdown_chart(computation)


def page_transfer():
    session = _session()
    st.header("Import & Export")
    st.caption("Save the whole dataset as JSON or a spreadsheet, or load a JSON exported earlier.")

    col_json, col_xlsx = st.columns(2)
    with col_json:
        pill("JSON", "Parameters and categories, re-importable here.")
        st.download_button(
            "Download JSON",
            data=json_export(session).encode("utf-8"),
            file_name=export_filename(session.params.base_year, "json"),
            mime="application/json",
            key="dl_json",
            width="stretch",
            on_click=_on_exported,
            args=("JSON",),
        )
    with col_xlsx:
        pill("Excel", "Summary and Categories sheets with computed metrics.")
        try:
            data = xlsx_export(session)
        except ExportUnavailable as e:
            session.set_status(f"{e} Install it and try again.", error=True)
        else:
            st.download_button(
                "Download Excel",
                data=data,
                file_name=export_filename(session.params.base_year, "xlsx"),
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                key="dl_xlsx",
                width="stretch",
                on_click=_on_exported,
                args=("Excel spreadsheet",),
            )

    st.markdown("---")
    uploaded = st.file_uploader("Import JSON", type=["json"], key="import_json")
    if uploaded is not None:
        marker = (uploaded.name, uploaded.size)
        if st.session_state.get("last_import") != marker:
            st.session_state.last_import = marker
            ok = session.import_json(uploaded.getvalue())
            log.info("Import of %s: %s", uploaded.name, session.status)
            if ok:
                _forget_widgets(include_params=True)
                st.rerun()


def page_about():
    st.header("About")
    st.markdown(
        """
        Each category converts annual consumption into CO₂ emissions with its emission factor,
        then into the land area needed to absorb them. Categories with a useful life (such as
        constructed area) have their emissions spread over that many years.

        Data is saved automatically on this machine after every change.
        """
    )
    st.subheader("How it works")
    for item in how_it_works():
        st.markdown(f"- **{item['step']}**: {item['formula']}")

    st.subheader("Glossary")
    for item in glossary():
        pill(item["term"], item["meaning"])

    note("Emission factors are user data; check each methodology before reporting.")


# ---------------------------------
# Helpers
# ---------------------------------

def _route():
    page = st.session_state.page
    if page == "calc":
        page_calculator()
    elif page == "transfer":
        page_transfer()
    elif page == "about":
        page_about()


# ---------------------------------
# Entry
# ---------------------------------

def main():
    st.set_page_config(page_title="Ecological Footprint Calculator", layout="wide")
    _init_state()
    sidebar_parameters()
    _route()

    session = _session()
    event = session.take_status()
    session.save(st.session_state.store)
    saved = session.take_status()
    # A failed save wins; otherwise show what happened this run (import, export, load)
    message, error = saved if saved[1] or event is None else event
    status_line(message, error)


if __name__ == "__main__":
    main()
