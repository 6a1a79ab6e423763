from __future__ import annotations
from typing import Dict, Optional
import math
import pandas as pd

from .models import CalculationType, FinancingInputs, OwnershipResult, VehicleProfile
from .financing import compute_financing
from .taxes import co2_surcharge, is_registration_extrapolated, power_age_tax, registration_fee

YEARLY_COLUMNS = [
    "Year", "Months", "Financing", "Registration", "Road tax", "CO2 surcharge", "Total", "Cumulative",
]


def tax_years(months: int) -> int:
    """Started years covered by the term (13 months -> 2)."""
    return math.ceil(months / 12) if months else 0


def aggregate_cost_of_ownership(
    financing_total: float, registration_fee: float, yearly_tax: float, months: int
) -> float:
    tax_over_period = yearly_tax * tax_years(months)
    return financing_total + registration_fee + tax_over_period


def _yearly_table(
    months: int, monthly_payment: float, reg_fee: float, road_tax: float, co2_tax: float
) -> pd.DataFrame:
    rows = []
    for year in range(1, tax_years(months) + 1):
        months_in_year = min(12, months - 12 * (year - 1))
        registration = reg_fee if year == 1 else 0.0
        financing = monthly_payment * months_in_year
        rows.append({
            "Year": year,
            "Months": months_in_year,
            "Financing": financing,
            "Registration": registration,
            "Road tax": road_tax,
            "CO2 surcharge": co2_tax,
            "Total": financing + registration + road_tax + co2_tax,
        })
    df = pd.DataFrame(rows, columns=YEARLY_COLUMNS)
    df["Cumulative"] = df["Total"].cumsum()
    return df


def compute_cost_of_ownership(
    vehicle: VehicleProfile,
    financing: FinancingInputs,
    current_year: Optional[int] = None,
) -> OwnershipResult:
    result = compute_financing(financing)

    road_tax = power_age_tax(vehicle.power_kw, vehicle.production_year, current_year)
    co2_tax = co2_surcharge(vehicle.co2_g_per_km, vehicle.fuel_type)
    reg_fee = registration_fee(vehicle.engine_capacity_cc)
    years = tax_years(financing.months)

    total = aggregate_cost_of_ownership(
        result.total_with_vat_and_interest, reg_fee, road_tax + co2_tax, financing.months
    )

    df = _yearly_table(financing.months, result.monthly_with_vat_and_interest, reg_fee, road_tax, co2_tax)
    # for the charts
    df.attrs["mode"] = financing.mode.value
    df.attrs["fuel_type"] = vehicle.fuel_type.value

    return OwnershipResult(
        mode=financing.mode,
        financing=result,
        power_age_tax=road_tax,
        co2_surcharge=co2_tax,
        registration_fee=reg_fee,
        registration_extrapolated=is_registration_extrapolated(vehicle.engine_capacity_cc),
        tax_years=years,
        tax_over_period=(road_tax + co2_tax) * years,
        total_cost=total,
        yearly_table=df,
    )


def compute_all_modes(
    vehicle: VehicleProfile,
    inputs_by_mode: Dict[CalculationType, FinancingInputs],
    current_year: Optional[int] = None,
) -> Dict[CalculationType, OwnershipResult]:
    return {mode: compute_cost_of_ownership(vehicle, inputs, current_year) for mode, inputs in inputs_by_mode.items()}

