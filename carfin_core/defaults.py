"""Utilities to load the form defaults, grouped by calculation type."""
from __future__ import annotations

import copy
import json
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

from .models import CalculationType, FinancingInputs, FuelType, VehicleProfile

_PACKAGE_ROOT = Path(__file__).resolve().parent
_DEFAULTS_PATH = _PACKAGE_ROOT / "data" / "form_defaults.json"


@lru_cache(maxsize=None)
def _load_defaults_cached(path_str: str) -> Dict[str, Any]:
    path = Path(path_str)
    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def load_form_defaults(path: str | Path | None = None) -> Dict[str, Any]:
    """Return the form defaults.

    Parameters
    ----------
    path:
        Optional path to the JSON file. When omitted, the packaged
        ``data/form_defaults.json`` is used.

    Returns
    -------
    dict
        A *deep copy* of the defaults structure so callers can manipulate the
        returned mapping without mutating the cached data.
    """

    resolved_path = Path(path) if path is not None else _DEFAULTS_PATH
    data = _load_defaults_cached(str(resolved_path))
    return copy.deepcopy(data)


def _normalize_mode(mode: CalculationType | str) -> str:
    if isinstance(mode, CalculationType):
        return mode.value
    return str(mode).lower()


def get_defaults(
    mode: CalculationType | str,
    form_defaults: Mapping[str, Any] | None = None,
) -> Dict[str, Any]:
    """Return the merged defaults (common + mode specific) for a calculation type."""

    defaults = form_defaults or load_form_defaults()
    mode_key = _normalize_mode(mode)
    try:
        mode_defaults = defaults[mode_key]
    except KeyError as exc:
        available = ", ".join(k for k in defaults if k != "common")
        raise KeyError(f"Unknown calculation type '{mode}' (available: {available})") from exc

    merged = copy.deepcopy(dict(defaults.get("common", {})))
    merged.update(copy.deepcopy(mode_defaults))
    return merged


def make_financing_inputs(
    mode: CalculationType,
    defaults: Mapping[str, Any] | None = None,
    **overrides: Any,
) -> FinancingInputs:
    """Instantiate :class:`FinancingInputs` from the defaults, with keyword overrides."""

    values = dict(defaults or get_defaults(mode))
    values.update(overrides)
    return FinancingInputs(
        mode=mode,
        total_amount=float(values["total_amount"]),
        months=int(values["months"]),
        remaining_value_percent=float(values["remaining_value_percent"]),
        vat_deductible=bool(values["vat_deductible"]),
        has_loan=bool(values["has_loan"]),
        annual_interest_rate_percent=float(values["annual_interest_rate_percent"]),
    )


def make_vehicle_profile(defaults: Mapping[str, Any] | None = None, **overrides: Any) -> VehicleProfile:
    """Instantiate :class:`VehicleProfile`; production year defaults to the current year."""

    values = dict(defaults or load_form_defaults()["common"])
    values.update(overrides)
    return VehicleProfile(
        power_kw=float(values["power_kw"]),
        production_year=int(values.get("production_year") or date.today().year),
        engine_capacity_cc=float(values["engine_capacity_cc"]),
        co2_g_per_km=float(values["co2_g_per_km"]),
        fuel_type=FuelType(values["fuel_type"]),
    )
