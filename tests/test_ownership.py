# tests/test_ownership.py
import math

from carfin_core.models import CalculationType, FinancingInputs, FuelType, VehicleProfile
from carfin_core.ownership import (
    YEARLY_COLUMNS, aggregate_cost_of_ownership, compute_all_modes, compute_cost_of_ownership, tax_years,
)

YEAR = 2026


def _vehicle(**kw):
    values = dict(power_kw=120, production_year=2020, engine_capacity_cc=1600, co2_g_per_km=150,
                  fuel_type=FuelType.BENZINE)
    values.update(kw)
    return VehicleProfile(**values)


def _purchase(months=24):
    return FinancingInputs(mode=CalculationType.PURCHASE, total_amount=20_000, months=months)


def test_tax_years_round_up():
    assert tax_years(12) == 1
    assert tax_years(13) == 2
    assert tax_years(48) == 4
    assert tax_years(0) == 0


def test_aggregate_cost_of_ownership():
    assert aggregate_cost_of_ownership(1_000, 100, 200, 13) == 1_000 + 100 + 2 * 200
    assert aggregate_cost_of_ownership(1_000, 100, 200, 12) == 1_000 + 100 + 200


def test_cost_of_ownership_purchase_simple():
    res = compute_cost_of_ownership(_vehicle(), _purchase(), current_year=YEAR)
    # road tax 111-120 kW at 6 years = 619.50 ; CO2 150 g/km = 100 ; 1600 cc = 351.52
    assert res.power_age_tax == 619.50
    assert res.co2_surcharge == 100
    assert res.yearly_tax == 719.50
    assert res.registration_fee == 351.52
    assert not res.registration_extrapolated
    # payments incl. VAT = 20'000 * 1.21 = 24'200 ; 2 tax years
    assert math.isclose(res.financing.total_with_vat_and_interest, 24_200.0)
    assert res.tax_years == 2
    assert math.isclose(res.tax_over_period, 1_439.0)
    assert math.isclose(res.total_cost, 24_200.0 + 351.52 + 1_439.0)


def test_yearly_table_sums_to_total():
    res = compute_cost_of_ownership(_vehicle(), _purchase(months=30), current_year=YEAR)
    df = res.yearly_table
    assert list(df.columns) == YEARLY_COLUMNS
    assert list(df["Year"]) == [1, 2, 3]
    assert list(df["Months"]) == [12, 12, 6]
    assert df["Registration"].iloc[0] == 351.52
    assert (df["Registration"].iloc[1:] == 0).all()
    assert math.isclose(df["Total"].sum(), res.total_cost)
    assert math.isclose(df["Cumulative"].iloc[-1], res.total_cost)
    assert df.attrs["mode"] == "purchase"


def test_electric_vehicle_has_no_co2_or_registration():
    ev = _vehicle(fuel_type=FuelType.ELECTRIC, engine_capacity_cc=0, co2_g_per_km=300)
    res = compute_cost_of_ownership(ev, _purchase(), current_year=YEAR)
    assert res.co2_surcharge == 0
    assert res.registration_fee == 0
    assert math.isclose(res.total_cost, 24_200.0 + 2 * 619.50)


def test_missing_amount_keeps_fees_and_tax():
    empty = FinancingInputs(mode=CalculationType.FINANCIAL_RENTING, total_amount=0, months=12)
    res = compute_cost_of_ownership(_vehicle(), empty, current_year=YEAR)
    assert res.financing.total_with_vat_and_interest == 0
    assert math.isclose(res.total_cost, 351.52 + 719.50)


def test_compute_all_modes():
    leasing = FinancingInputs(mode=CalculationType.FINANCIAL_RENTING, total_amount=20_000, months=24,
                              remaining_value_percent=35)
    results = compute_all_modes(_vehicle(), {
        CalculationType.FINANCIAL_RENTING: leasing,
        CalculationType.PURCHASE: _purchase(),
    }, current_year=YEAR)
    assert set(results) == {CalculationType.FINANCIAL_RENTING, CalculationType.PURCHASE}
    # residual value deducted -> leasing pays less over the term
    assert results[CalculationType.FINANCIAL_RENTING].total_cost < results[CalculationType.PURCHASE].total_cost
