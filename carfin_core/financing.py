# carfin_core/financing.py
from __future__ import annotations
import logging
from typing import Any, Callable, Dict

from .models import CalculationType, CalculationResult, FinancingInputs
from .tariffs import VAT_RATE

logger = logging.getLogger(__name__)


def _ensure_mode_enum(mode: Any) -> CalculationType:
    """Coerce mode into CalculationType if it arrives as str/value."""
    if isinstance(mode, CalculationType):
        return mode
    try:
        return CalculationType(mode)   # "financial-renting" / "purchase"
    except ValueError:
        pass
    if isinstance(mode, str):
        aliases = {"leasing": CalculationType.FINANCIAL_RENTING}
        if mode.lower() in aliases:
            return aliases[mode.lower()]
        try:
            return CalculationType[mode.upper().replace("-", "_")]
        except KeyError:
            pass
    raise TypeError(f"Invalid calculation type: {mode!r} (expected CalculationType enum or valid string)")


def strip_vat(gross: float) -> float:
    return gross / (1.0 + VAT_RATE)


def loan_factor(annual_rate_percent: float, months: int) -> float:
    """Annuity factor r(1+r)^n / ((1+r)^n - 1) with r the monthly rate."""
    r = annual_rate_percent / 100.0 / 12.0
    try:
        growth = (1.0 + r) ** months
    except OverflowError:
        # growth / (growth - 1) -> 1
        return r
    if growth == 1.0:
        # rate too small to register: limit of the factor as r -> 0
        return 1.0 / months
    return r * growth / (growth - 1.0)


# ---------- pre-steps per mode: return the monthly base (VAT excluded) ----------

def _leasing_monthly_base(inputs: FinancingInputs) -> float:
    net_amount = strip_vat(inputs.total_amount)
    remaining_value = net_amount * inputs.remaining_value_percent / 100.0
    amount_to_finance = net_amount - remaining_value
    return amount_to_finance / inputs.months


def _purchase_monthly_base(inputs: FinancingInputs) -> float:
    base_amount = strip_vat(inputs.total_amount) if inputs.vat_deductible else inputs.total_amount
    return base_amount / inputs.months


_PRE_STEPS: Dict[CalculationType, Callable[[FinancingInputs], float]] = {
    CalculationType.FINANCIAL_RENTING: _leasing_monthly_base,
    CalculationType.PURCHASE: _purchase_monthly_base,
}


def compute_financing(inputs: FinancingInputs) -> CalculationResult:
    """Monthly payments for a leasing or a purchase, with an optional loan.

    Returns ``CalculationResult.zero()`` when the total amount or the number of
    months is missing (0/None). No rounding is applied.
    """
    if not inputs.total_amount or not inputs.months:
        return CalculationResult.zero()

    mode = _ensure_mode_enum(inputs.mode)
    monthly_base = _PRE_STEPS[mode](inputs)
    monthly_with_vat = monthly_base * (1.0 + VAT_RATE)

    monthly_with_interest = monthly_base
    monthly_with_vat_and_interest = monthly_with_vat
    total_interest_paid = 0.0

    if inputs.has_loan and inputs.annual_interest_rate_percent > 0:
        factor = loan_factor(inputs.annual_interest_rate_percent, inputs.months)
        # base payment scaled by (1 + annuity factor), kept as the tool always computed it
        monthly_with_interest = monthly_base * (1.0 + factor)
        monthly_with_vat_and_interest = monthly_with_vat * (1.0 + factor)
        total_interest_paid = (monthly_with_vat_and_interest - monthly_with_vat) * inputs.months

    logger.debug("%s: base %.2f/month over %d months", mode.value, monthly_base, inputs.months)

    return CalculationResult(
        monthly_base=monthly_base,
        monthly_with_vat=monthly_with_vat,
        monthly_with_interest=monthly_with_interest,
        monthly_with_vat_and_interest=monthly_with_vat_and_interest,
        total_interest_paid=total_interest_paid,
        total_with_vat_and_interest=monthly_with_vat_and_interest * inputs.months,
    )


def compute(
    mode: CalculationType | str,
    total_amount: float,
    months: int,
    remaining_value_percent: float = 0.0,
    vat_deductible: bool = False,
    has_loan: bool = False,
    annual_interest_rate_percent: float = 0.0,
) -> CalculationResult:
    """Keyword form of :func:`compute_financing`."""
    return compute_financing(FinancingInputs(
        mode=_ensure_mode_enum(mode),
        total_amount=total_amount,
        months=months,
        remaining_value_percent=remaining_value_percent,
        vat_deductible=vat_deductible,
        has_loan=has_loan,
        annual_interest_rate_percent=annual_interest_rate_percent,
    ))
