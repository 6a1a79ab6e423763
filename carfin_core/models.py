from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Optional, Tuple

import pandas as pd


AGE_STEPS = 16  # index 0 = new car, index 15 = 15 years and older


class FuelType(Enum):
    BENZINE = "benzine"
    DIESEL = "diesel"
    ELECTRIC = "electric"

    @property
    def is_electric(self) -> bool:
        return self is FuelType.ELECTRIC


class CalculationType(Enum):
    FINANCIAL_RENTING = "financial-renting"   # leasing
    PURCHASE = "purchase"


@dataclass(frozen=True)
class VehicleProfile:
    power_kw: float
    production_year: int
    engine_capacity_cc: float          # 0 for electric vehicles
    co2_g_per_km: float
    fuel_type: FuelType = FuelType.BENZINE


@dataclass(frozen=True)
class FinancingInputs:
    mode: CalculationType
    total_amount: float                # EUR, VAT included
    months: int
    remaining_value_percent: float = 35.0      # leasing only, 0..100
    vat_deductible: bool = False               # purchase only
    has_loan: bool = False
    annual_interest_rate_percent: float = 5.0


# ---------- bracket records ----------

@dataclass(frozen=True)
class TaxBracket:
    max_kw: float                      # inf for the top bracket
    rates: Tuple[float, ...]
    min_kw: Optional[float] = None     # None = implicit 0

    def __post_init__(self):
        if len(self.rates) != AGE_STEPS:
            raise ValueError(f"TaxBracket needs {AGE_STEPS} rates, got {len(self.rates)}")

    @property
    def lower(self) -> float:
        return self.min_kw or 0.0

    @property
    def upper(self) -> float:
        return self.max_kw


@dataclass(frozen=True)
class Co2Bracket:
    min_g_per_km: float
    max_g_per_km: float                # inf for the top bracket
    amount: float

    @property
    def lower(self) -> float:
        return self.min_g_per_km

    @property
    def upper(self) -> float:
        return self.max_g_per_km


@dataclass(frozen=True)
class RegistrationBracket:
    max_cc: float
    fiscal_hp: int                     # "CV", unit count used by the extrapolation
    fee: float
    min_cc: Optional[float] = None

    @property
    def lower(self) -> float:
        return self.min_cc or 0.0

    @property
    def upper(self) -> float:
        return self.max_cc


# ---------- results ----------

@dataclass(frozen=True)
class CalculationResult:
    monthly_base: float
    monthly_with_vat: float
    monthly_with_interest: float
    monthly_with_vat_and_interest: float
    total_interest_paid: float
    total_with_vat_and_interest: float

    @classmethod
    def zero(cls) -> "CalculationResult":
        return cls(0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    def to_dict(self) -> Dict[str, float]:
        """camelCase mapping, as stored with saved calculations."""
        return {
            "monthlyBase": self.monthly_base,
            "monthlyWithVat": self.monthly_with_vat,
            "monthlyWithInterest": self.monthly_with_interest,
            "monthlyWithVatAndInterest": self.monthly_with_vat_and_interest,
            "totalInterestPaid": self.total_interest_paid,
            "totalWithVatAndInterest": self.total_with_vat_and_interest,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "CalculationResult":
        return cls(
            monthly_base=float(data.get("monthlyBase", 0.0)),
            monthly_with_vat=float(data.get("monthlyWithVat", 0.0)),
            monthly_with_interest=float(data.get("monthlyWithInterest", 0.0)),
            monthly_with_vat_and_interest=float(data.get("monthlyWithVatAndInterest", 0.0)),
            total_interest_paid=float(data.get("totalInterestPaid", 0.0)),
            total_with_vat_and_interest=float(data.get("totalWithVatAndInterest", 0.0)),
        )


@dataclass
class OwnershipResult:
    mode: CalculationType
    financing: CalculationResult
    power_age_tax: float               # yearly
    co2_surcharge: float               # yearly
    registration_fee: float            # one-time
    registration_extrapolated: bool
    tax_years: int
    tax_over_period: float
    total_cost: float
    yearly_table: pd.DataFrame = field(repr=False)

    @property
    def yearly_tax(self) -> float:
        return self.power_age_tax + self.co2_surcharge


def vehicle_to_dict(vehicle: VehicleProfile) -> Dict[str, object]:
    d = asdict(vehicle)
    d["fuel_type"] = vehicle.fuel_type.value
    return d


def financing_to_dict(inputs: FinancingInputs) -> Dict[str, object]:
    d = asdict(inputs)
    d["mode"] = inputs.mode.value
    return d
