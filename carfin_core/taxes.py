# carfin_core/taxes.py
from __future__ import annotations
import logging
import math
from datetime import date
from typing import Any, Optional

from .brackets import find_bracket
from .models import FuelType
from .tariffs import (
    TAX_BRACKETS, MAX_AGE_INDEX,
    CO2_BRACKETS, CO2_THRESHOLD,
    REGISTRATION_BRACKETS, REGISTRATION_CEILING_CC, REGISTRATION_STEP_CC, REGISTRATION_FEE_PER_HP,
)

logger = logging.getLogger(__name__)


# ---------- helpers ----------

def _as_float(x: Any) -> float:
    """Cast to float, raising a clear error if a placeholder (e.g., Ellipsis) slipped in."""
    if x is ... or x is None:
        raise TypeError(f"Found {x!r} where a number was expected.")
    return float(x)


def _ensure_fuel_enum(fuel_type: Any) -> FuelType:
    """Coerce fuel_type into FuelType if it arrives as str/value."""
    if isinstance(fuel_type, FuelType):
        return fuel_type
    # From value ("benzine"/"diesel"/"electric")
    try:
        return FuelType(fuel_type)
    except ValueError:
        pass
    # From name (BENZINE/DIESEL/ELECTRIC)
    if isinstance(fuel_type, str):
        try:
            return FuelType[fuel_type.upper()]
        except KeyError:
            pass
    raise TypeError(f"Invalid fuel type: {fuel_type!r} (expected FuelType enum or valid string)")


def vehicle_age(production_year: int, current_year: Optional[int] = None) -> int:
    """Age in whole years, clamped to the table range [0, 15]."""
    if current_year is None:
        current_year = date.today().year
    age = int(current_year) - int(production_year)
    return min(max(age, 0), MAX_AGE_INDEX)


# ---------- yearly taxes ----------

def power_age_tax(power_kw: float, production_year: int, current_year: Optional[int] = None) -> float:
    """Yearly road tax from engine power (kW) and vehicle age.

    Parameters
    ----------
    power_kw:
        Engine power; selects the bracket.
    production_year:
        Year of production. A future year counts as a new car, anything 15
        years or older uses the last column of the table.
    current_year:
        Reference year, today's year when omitted.
    """
    bracket = find_bracket(_as_float(power_kw), TAX_BRACKETS)
    if bracket is None:
        logger.warning("No road tax bracket for %s kW, defaulting to 0", power_kw)
        return 0.0
    age = vehicle_age(production_year, current_year)
    return float(bracket.rates[age])


def co2_surcharge(co2_g_per_km: float, fuel_type: FuelType | str = FuelType.BENZINE) -> float:
    """Flat yearly CO2 surcharge. Electric vehicles are exempt."""
    if _ensure_fuel_enum(fuel_type).is_electric:
        return 0.0
    co2 = _as_float(co2_g_per_km)
    if co2 < CO2_THRESHOLD:
        return 0.0
    bracket = find_bracket(co2, CO2_BRACKETS)
    if bracket is None:
        logger.warning("No CO2 bracket for %s g/km, defaulting to 0", co2)
        return 0.0
    return float(bracket.amount)


def total_yearly_tax(
    power_kw: float,
    production_year: int,
    co2_g_per_km: float,
    fuel_type: FuelType | str,
    current_year: Optional[int] = None,
) -> float:
    """Road tax + CO2 surcharge (the latter is 0 for electric vehicles)."""
    return power_age_tax(power_kw, production_year, current_year) + co2_surcharge(co2_g_per_km, fuel_type)


# ---------- registration ----------

def is_registration_extrapolated(engine_capacity_cc: float) -> bool:
    return _as_float(engine_capacity_cc) > REGISTRATION_CEILING_CC


def registration_fee(engine_capacity_cc: float) -> float:
    """One-time registration fee from the engine capacity (cc).

    0 cc (electric) is free. Above the last tabulated bracket the fee grows
    by a fixed amount per started step of 200 cc.
    """
    cc = _as_float(engine_capacity_cc)
    if cc == 0:
        return 0.0

    if cc > REGISTRATION_CEILING_CC:
        last = REGISTRATION_BRACKETS[-1]
        estimated_hp = math.ceil((cc - REGISTRATION_CEILING_CC) / REGISTRATION_STEP_CC) + last.fiscal_hp
        extra_hp = estimated_hp - last.fiscal_hp
        logger.debug("Registration fee extrapolated for %s cc: %d CV", cc, estimated_hp)
        return last.fee + extra_hp * REGISTRATION_FEE_PER_HP

    bracket = find_bracket(cc, REGISTRATION_BRACKETS)
    if bracket is None:
        logger.warning("No registration bracket for %s cc, defaulting to 0", cc)
        return 0.0
    return float(bracket.fee)
