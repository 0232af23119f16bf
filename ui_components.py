# ui_components.py
from __future__ import annotations

import pandas as pd
import plotly.express as px
import streamlit as st
from typing import Iterable, Tuple

from engine import Computation
from parsing import format_number


def pill(title: str, body: str):
    with st.container(border=True):
        st.markdown(f"**{title}**")
        st.caption(body)


def metric_row(items: Iterable[Tuple[str, str]]):
    items = list(items)
    cols = st.columns(len(items))
    for col, (label, value) in zip(cols, items):
        with col:
            st.metric(label, value)


def totals_panel(computation: Computation):
    footprint_unit = f"{computation.unit_label}/year"
    if computation.per_capita is None:
        per_capita = "Enter the population"
    else:
        per_capita = f"{format_number(computation.per_capita, 6)} {computation.unit_label}/person/year"

    metric_row([
        ("Total emission", f"{format_number(computation.total_ton, 6)} t CO₂/year"),
        ("Total area", f"{format_number(computation.total_ha, 6)} ha/year"),
        ("Footprint", f"{format_number(computation.total_footprint, 6)} {footprint_unit}"),
        ("Per capita", per_capita),
    ])


def breakdown_chart(computation: Computation):
    ranked = computation.breakdown()
    if not ranked:
        st.caption("No contribution to display. Enter valid consumption values.")
        return

    df = pd.DataFrame(
        [
            {"Category": row.category.name, "Amount": amount, "Share_%": percent}
            for row, amount, percent in ranked
        ]
    )
    fig = px.bar(
        df,
        x="Amount",
        y="Category",
        orientation="h",
        text=df["Share_%"].map(lambda p: f"{p:.1f}%"),
        labels={"Amount": f"{computation.unit_label}/year", "Category": ""},
        title="Contribution by category",
    )
    fig.update_layout(
        yaxis={"categoryorder": "total ascending"},
        margin=dict(l=10, r=10, t=40, b=40),
    )
    fig.update_traces(textposition="outside")
    st.plotly_chart(fig, width="stretch")


def status_line(message: str, error: bool = False):
    if not message:
        return
    if error:
        st.error(message)
    else:
        st.caption(message)


def note(msg: str):
    st.info(msg)
