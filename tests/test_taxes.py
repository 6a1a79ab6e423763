# tests/test_taxes.py
import pytest

from carfin_core.brackets import check_contiguous, find_bracket
from carfin_core.models import FuelType, TaxBracket
from carfin_core.tariffs import CO2_BRACKETS, REGISTRATION_BRACKETS, TAX_BRACKETS
from carfin_core.taxes import (
    co2_surcharge, is_registration_extrapolated, power_age_tax, registration_fee, total_yearly_tax, vehicle_age,
)

YEAR = 2026


@pytest.mark.parametrize("table", [TAX_BRACKETS, CO2_BRACKETS, REGISTRATION_BRACKETS])
def test_tables_are_ordered_and_contiguous(table):
    check_contiguous(table)


def test_tax_brackets_have_16_rates():
    assert all(len(b.rates) == 16 for b in TAX_BRACKETS)
    with pytest.raises(ValueError):
        TaxBracket(max_kw=70, rates=(61.5,) * 15)


def test_find_bracket_upper_bound_scan():
    assert find_bracket(70, TAX_BRACKETS).max_kw == 70
    assert find_bracket(71, TAX_BRACKETS).min_kw == 71
    # between two integer bounds -> upper bracket, no gap
    assert find_bracket(70.5, TAX_BRACKETS).min_kw == 71
    assert find_bracket(10_000, TAX_BRACKETS).min_kw == 156
    assert find_bracket(100, CO2_BRACKETS) is None


@pytest.mark.parametrize("bracket", TAX_BRACKETS)
def test_power_age_tax_reads_rate_by_age(bracket):
    power = bracket.min_kw or 0
    for age in range(16):
        assert power_age_tax(power, YEAR - age, current_year=YEAR) == bracket.rates[age]
    assert power_age_tax(bracket.max_kw if bracket.max_kw != float("inf") else 500, YEAR, YEAR) == bracket.rates[0]


def test_power_age_tax_clamps_age():
    assert power_age_tax(120, YEAR - 20, YEAR) == power_age_tax(120, YEAR - 15, YEAR) == 61.50
    assert power_age_tax(120, YEAR + 3, YEAR) == power_age_tax(120, YEAR, YEAR) == 1239.00
    assert vehicle_age(YEAR + 3, YEAR) == 0
    assert vehicle_age(1990, YEAR) == 15


def test_power_age_tax_examples():
    assert power_age_tax(120, 2020, YEAR) == 619.50
    assert power_age_tax(0, 2020, YEAR) == 61.50
    assert power_age_tax(85, YEAR - 2, YEAR) == 98.40
    assert power_age_tax(200, YEAR - 14, YEAR) == 495.70


def test_power_age_tax_defaults_to_current_year():
    assert power_age_tax(120, 1900) == 61.50


def test_co2_surcharge_threshold_and_brackets():
    assert co2_surcharge(145, FuelType.BENZINE) == 0
    assert co2_surcharge(146, FuelType.BENZINE) == 100
    assert co2_surcharge(155, FuelType.DIESEL) == 100
    assert co2_surcharge(156, FuelType.DIESEL) == 175
    assert co2_surcharge(255, "benzine") == 2000
    assert co2_surcharge(999, FuelType.BENZINE) == 2500


def test_co2_surcharge_electric_exempt():
    assert co2_surcharge(300, FuelType.ELECTRIC) == 0
    assert co2_surcharge(300, "ELECTRIC") == 0


def test_co2_surcharge_rejects_unknown_fuel():
    with pytest.raises(TypeError):
        co2_surcharge(200, "steam")


def test_total_yearly_tax():
    assert total_yearly_tax(120, 2020, 150, FuelType.BENZINE, YEAR) == 619.50 + 100
    assert total_yearly_tax(120, 2020, 150, FuelType.ELECTRIC, YEAR) == 619.50


def test_registration_fee_table():
    assert registration_fee(0) == 0
    assert registration_fee(750) == 100.98
    assert registration_fee(751) == 126.32
    assert registration_fee(1600) == 351.52
    assert registration_fee(4150) == 2582.32
    assert not is_registration_extrapolated(4150)


def test_registration_fee_extrapolation():
    assert is_registration_extrapolated(4200)
    assert registration_fee(4200) == pytest.approx(2582.32 + 140.84)
    assert registration_fee(4350) == pytest.approx(2582.32 + 140.84)
    assert registration_fee(4351) == pytest.approx(2582.32 + 2 * 140.84)
    fees = [registration_fee(cc) for cc in range(4151, 6000, 37)]
    assert all(a <= b for a, b in zip(fees, fees[1:]))
    assert fees[-1] > fees[0]


def test_resolvers_are_idempotent():
    assert power_age_tax(99, 2018, YEAR) == power_age_tax(99, 2018, YEAR)
    assert co2_surcharge(212, FuelType.DIESEL) == co2_surcharge(212, FuelType.DIESEL)
    assert registration_fee(5123) == registration_fee(5123)
