# app.py
from __future__ import annotations
import logging

import streamlit as st

from config import get_settings
from finance.solver import (
    Unknown, REQUIRED_FIELDS, OPTIONAL_FIELDS, LABELS, SHORT_LABELS,
    inputs_from_mapping, solve
)

settings = get_settings()
logging.basicConfig(level=settings.log_level)

st.set_page_config(page_title=settings.app_name, layout="centered")

TABS = [Unknown.FV, Unknown.PV, Unknown.PMT, Unknown.RATE, Unknown.N]
ICONS = {
    Unknown.FV: "💲",
    Unknown.PV: "💵",
    Unknown.PMT: "💳",
    Unknown.RATE: "％",
    Unknown.N: "📅",
}


# ===================== helpers =====================
def tela(unknown: Unknown) -> None:
    """Formulário de uma incógnita: campos de entrada + resultado."""
    prefix = unknown.name.lower()
    with st.form(f"{prefix}_form"):
        raw = {}
        for name in REQUIRED_FIELDS[unknown]:
            raw[name] = st.text_input(LABELS[name], placeholder=SHORT_LABELS[name], key=f"{prefix}_{name}")
        for name in OPTIONAL_FIELDS[unknown]:
            raw[name] = st.text_input(f"{LABELS[name]} (optional)", placeholder="0",
                                      key=f"{prefix}_{name}")
        no_comeco = st.toggle("Payments at start of period?", value=False, key=f"{prefix}_due")
        submitted = st.form_submit_button(f"Calculate {unknown.short}")
    if submitted:
        res = solve(inputs_from_mapping(raw), unknown, payments_at_start=no_comeco, settings=settings)
        if res.ok:
            st.success(f"{unknown.label}: {res.formatted}")
        else:
            st.error(res.error)
            st.caption(f"{unknown.label}: {res.formatted}")


# ===================== layout geral =====================
st.title(settings.app_name)
st.caption("Future value, present value, payment, interest rate and number of periods.")

tabs = st.tabs([f"{ICONS[u]} {u.short}" for u in TABS])
for aba, unknown in zip(tabs, TABS):
    with aba:
        tela(unknown)
