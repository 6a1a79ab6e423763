from __future__ import annotations
# --- local path hack so the sibling modules import when run with `streamlit run app/app.py` ---
import sys, os
sys.path.append(os.path.dirname(__file__))
# ---------------------------------------------------------------------------------------------

import logging
from dataclasses import replace
from datetime import date

import streamlit as st
import pandas as pd

from carfin_core.defaults import get_defaults, load_form_defaults
from carfin_core.models import CalculationType, FinancingInputs, FuelType, VehicleProfile
from carfin_core.ownership import aggregate_cost_of_ownership, compute_all_modes
from carfin_core.taxes import co2_surcharge, power_age_tax, registration_fee, total_yearly_tax
from carfin_core.tariffs import CO2_THRESHOLD

from charts import make_breakdown_df, fig_bar_breakdown, make_cum_df, fig_line_cumulative
from formatting import format_currency, parse_int
from settings import load_app_config, setup_logging
from storage import CalculationStore, build_saved_calculation, stored_override

CONFIG = load_app_config()
setup_logging(CONFIG)
logger = logging.getLogger("carfin.app")

STORE = CalculationStore(CONFIG.storage_path)
FORM_DEFAULTS = load_form_defaults()

MODE_LABELS = {
    CalculationType.FINANCIAL_RENTING: "Financial renting",
    CalculationType.PURCHASE: "Purchase",
}
FUEL_LABELS = {FuelType.BENZINE: "Benzine", FuelType.DIESEL: "Diesel", FuelType.ELECTRIC: "Electric"}


# ======================== Form state ========================

def initial_state() -> dict:
    """Widget values for a fresh form (defaults of the financial renting type)."""
    d = get_defaults(CalculationType.FINANCIAL_RENTING, FORM_DEFAULTS)
    return {
        "mode": CalculationType.FINANCIAL_RENTING.value,
        "title": "",
        "car_model": "",
        "production_year": str(date.today().year),
        "fuel_type": d["fuel_type"],
        "power_kw": "",
        "engine_capacity_cc": "",
        "co2_g_per_km": "",
        "total_amount": "",
        "months": str(d["months"]),
        "remaining_value_percent": str(int(d["remaining_value_percent"])),
        "vat_deductible": bool(d["vat_deductible"]),
        "has_loan": bool(d["has_loan"]),
        "annual_interest_rate_percent": float(d["annual_interest_rate_percent"]),
    }


def reset_form() -> None:
    for key, value in initial_state().items():
        st.session_state[key] = value
    st.session_state.pop("overrides", None)


def _as_widget_value(template, value):
    """Stored input -> widget value of the same kind as the fresh form's."""
    if isinstance(template, bool):
        return bool(value)
    if isinstance(template, float):
        return float(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def load_calculation(calc_id: str) -> None:
    calc = STORE.get(calc_id)
    if calc is None:
        st.session_state["flash"] = ("error", "Saved calculation not found")
        return
    inputs = calc.inputs
    state = initial_state()
    for key, template in state.items():
        if key in inputs:
            state[key] = _as_widget_value(template, inputs[key])
    for key, value in state.items():
        st.session_state[key] = value
    st.session_state["overrides"] = {
        "registration_cost": inputs.get("registration_cost"),
        "yearly_tax": inputs.get("yearly_tax"),
    }
    st.session_state["show_saved"] = False


def delete_calculation(calc_id: str) -> None:
    STORE.delete(calc_id)


if "mode" not in st.session_state or st.session_state.pop("pending_reset", False):
    reset_form()
st.session_state.setdefault("show_saved", False)


# ============================ UI ============================

st.set_page_config(page_title="Car Finance Calculator", page_icon="🚗", layout="centered")

col_title, col_saved = st.columns([3, 1])
with col_title:
    st.title("Car Finance Calculator")
with col_saved:
    if st.button("Hide Saved" if st.session_state["show_saved"] else "View Saved"):
        st.session_state["show_saved"] = not st.session_state["show_saved"]
        st.rerun()

flash = st.session_state.pop("flash", None)
if flash:
    getattr(st, flash[0])(flash[1])

if st.session_state["show_saved"]:
    st.subheader("Saved Calculations")
    saved = STORE.list()
    if not saved:
        st.caption("No saved calculations yet.")
    for calc in saved:
        with st.container(border=True):
            c1, c2 = st.columns([4, 1])
            with c1:
                st.markdown(f"**{calc.title}**  \n{calc.vehicle_description}")
                st.caption(f"Saved on: {calc.saved_date}")
                st.write(f"Amount: {format_currency(float(calc.inputs.get('total_amount', 0)))}")
                st.write(f"Monthly Payment: {format_currency(calc.result.monthly_with_vat)}")
            with c2:
                st.button("Load", key=f"load_{calc.id}", on_click=load_calculation, args=(calc.id,))
                st.button("Delete", key=f"delete_{calc.id}", on_click=delete_calculation, args=(calc.id,))
    st.stop()

mode = CalculationType(st.radio(
    "Calculation type",
    [m.value for m in CalculationType],
    format_func=lambda v: MODE_LABELS[CalculationType(v)],
    horizontal=True,
    key="mode",
))

st.text_input("Title", key="title")

st.markdown("### Car Details")
st.text_input("Car model", key="car_model")
c1, c2 = st.columns(2)
with c1:
    production_year = parse_int(st.text_input("Production year", key="production_year"), date.today().year)
    power_kw = parse_int(st.text_input("Power (kW)", key="power_kw"))
    co2 = parse_int(st.text_input("CO₂ emissions (g/km)", key="co2_g_per_km"))
with c2:
    fuel_type = FuelType(st.selectbox(
        "Fuel type",
        [f.value for f in FuelType],
        format_func=lambda v: FUEL_LABELS[FuelType(v)],
        key="fuel_type",
    ))
    if fuel_type.is_electric:
        engine_capacity = 0
        st.text_input("Engine capacity (CC)", value="0", disabled=True, key="engine_capacity_electric")
    else:
        engine_capacity = parse_int(st.text_input("Engine capacity (CC)", key="engine_capacity_cc"))

vehicle = VehicleProfile(
    power_kw=power_kw,
    production_year=production_year,
    engine_capacity_cc=engine_capacity,
    co2_g_per_km=co2,
    fuel_type=fuel_type,
)

# Registration cost and yearly tax follow the car details but stay editable
computed_registration = registration_fee(vehicle.engine_capacity_cc)
computed_yearly_tax = total_yearly_tax(power_kw, production_year, co2, fuel_type)
overrides = st.session_state.get("overrides") or {}

st.markdown("### Registration & Tax Details")
c1, c2 = st.columns(2)
with c1:
    registration_cost = st.number_input(
        "Registration cost (€)",
        min_value=0.0,
        value=stored_override(overrides, "registration_cost", computed_registration),
        step=1.0,
        key=f"registration_cost_{engine_capacity}",
    )
with c2:
    yearly_tax = st.number_input(
        "Yearly tax (€)",
        min_value=0.0,
        value=stored_override(overrides, "yearly_tax", computed_yearly_tax),
        step=1.0,
        key=f"yearly_tax_{power_kw}_{production_year}_{co2}_{fuel_type.value}",
    )
st.session_state.pop("overrides", None)

st.markdown("### Financial Details")
c1, c2 = st.columns(2)
with c1:
    total_amount = parse_int(st.text_input("Total amount (€)", key="total_amount"))
    months = parse_int(st.text_input("Number of months", key="months"))
with c2:
    if mode == CalculationType.FINANCIAL_RENTING:
        remaining_pct = parse_int(st.text_input("Remaining value (%)", key="remaining_value_percent"))
        vat_deductible = False
    else:
        remaining_pct = 0
        vat_deductible = st.checkbox("VAT deductible", key="vat_deductible")
    has_loan = st.checkbox("Include loan", key="has_loan")
    interest_rate = st.number_input(
        "Annual interest rate (%)", min_value=0.0, max_value=100.0, step=0.1,
        key="annual_interest_rate_percent", disabled=not has_loan,
    )

financing = FinancingInputs(
    mode=mode,
    total_amount=total_amount,
    months=months,
    remaining_value_percent=remaining_pct,
    vat_deductible=vat_deductible,
    has_loan=has_loan,
    annual_interest_rate_percent=interest_rate,
)

# ============================ Calculation ============================

other_mode = CalculationType.PURCHASE if mode == CalculationType.FINANCIAL_RENTING else CalculationType.FINANCIAL_RENTING
other_defaults = get_defaults(other_mode, FORM_DEFAULTS)
inputs_by_mode = {
    mode: financing,
    other_mode: replace(
        financing,
        mode=other_mode,
        remaining_value_percent=float(other_defaults["remaining_value_percent"]) if other_mode == CalculationType.FINANCIAL_RENTING else 0.0,
        vat_deductible=False,
    ),
}
all_results = compute_all_modes(vehicle, inputs_by_mode)
ownership = all_results[mode]
results = ownership.financing

# ======================== Results ========================

st.divider()
st.markdown("### Results")
c1, c2 = st.columns(2)
with c1:
    st.metric("Monthly (excl. VAT)", format_currency(results.monthly_base))
    if has_loan:
        st.metric("Monthly with interest (excl. VAT)", format_currency(results.monthly_with_interest))
with c2:
    st.metric("Monthly (incl. VAT)", format_currency(results.monthly_with_vat))
    if has_loan:
        st.metric("Monthly with interest (incl. VAT)", format_currency(results.monthly_with_vat_and_interest))
if has_loan:
    st.write(f"Total interest: **{format_currency(results.total_interest_paid)}**")

st.markdown("#### Total Cost of Ownership Breakdown")
tax_over_period = yearly_tax * ownership.tax_years
lines = [
    ("Total payments (incl. VAT & interest)", results.total_with_vat_and_interest),
    ("Registration cost", registration_cost),
    ("Total tax over period", tax_over_period),
    ("Yearly base tax", power_age_tax(power_kw, production_year)),
]
if not fuel_type.is_electric and co2 >= CO2_THRESHOLD:
    lines.append(("Yearly CO₂ tax", co2_surcharge(co2, fuel_type)))
for label, amount in lines:
    st.write(f"{label}: **{format_currency(amount)}**")
if ownership.registration_extrapolated:
    st.caption("Registration cost above 4150 cc is an estimate.")
total_cost = aggregate_cost_of_ownership(results.total_with_vat_and_interest, registration_cost, yearly_tax, months)
st.success(f"Total Cost of Ownership: {format_currency(total_cost)}")

with st.expander("Yearly breakdown"):
    st.dataframe(ownership.yearly_table, use_container_width=True, hide_index=True)

with st.expander("Financial renting vs purchase"):
    st.plotly_chart(fig_bar_breakdown(make_breakdown_df(all_results)), use_container_width=True)
    st.plotly_chart(fig_line_cumulative(make_cum_df(all_results)), use_container_width=True)
    recap = pd.DataFrame([
        {"Type": MODE_LABELS[m], "Monthly (incl. VAT)": format_currency(r.financing.monthly_with_vat_and_interest),
         "Total cost": format_currency(r.total_cost)}
        for m, r in all_results.items()
    ])
    st.dataframe(recap, use_container_width=True, hide_index=True)

# ======================== Save / reset ========================

c1, c2 = st.columns(2)
with c1:
    if st.button("Save calculation", type="primary"):
        try:
            calc = build_saved_calculation(
                st.session_state["title"],
                st.session_state["car_model"],
                vehicle,
                financing,
                results,
                extra_inputs={"registration_cost": registration_cost, "yearly_tax": yearly_tax},
            )
        except ValueError as exc:
            st.error(str(exc))
        else:
            STORE.save(calc)
            st.session_state["pending_reset"] = True
            st.session_state["flash"] = ("success", "Calculation saved successfully!")
            st.rerun()
with c2:
    st.button("Reset", on_click=reset_form)
