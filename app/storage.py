"""Saved calculations, persisted as an ordered list in a JSON key-value file."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from carfin_core.models import (
    CalculationResult, FinancingInputs, VehicleProfile, financing_to_dict, vehicle_to_dict,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "savedCalculations"


@dataclass
class SavedCalculation:
    id: str
    title: str
    vehicle_description: str
    saved_date: str
    inputs: Dict[str, Any] = field(default_factory=dict)
    results: Dict[str, float] = field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "vehicleDescription": self.vehicle_description,
            "savedDate": self.saved_date,
            "inputs": self.inputs,
            "results": self.results,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "SavedCalculation":
        return cls(
            id=str(record["id"]),
            title=record.get("title", ""),
            vehicle_description=record.get("vehicleDescription", ""),
            saved_date=record.get("savedDate", ""),
            inputs=dict(record.get("inputs", {})),
            results=dict(record.get("results", {})),
        )

    @property
    def result(self) -> CalculationResult:
        return CalculationResult.from_dict(self.results)


def _us_date(d: date) -> str:
    return f"{d.month}/{d.day}/{d.year}"


def build_saved_calculation(
    title: str,
    car_model: str,
    vehicle: VehicleProfile,
    financing: FinancingInputs,
    result: CalculationResult,
    *,
    extra_inputs: Optional[Dict[str, Any]] = None,
    today: Optional[date] = None,
) -> SavedCalculation:
    """Snapshot of the current inputs and results. Title and car model are required."""
    title = (title or "").strip()
    car_model = (car_model or "").strip()
    if not title or not car_model:
        raise ValueError("Please enter a title and car model before saving")

    inputs = {"title": title, "car_model": car_model}
    inputs.update(vehicle_to_dict(vehicle))
    inputs.update(financing_to_dict(financing))
    if extra_inputs:
        inputs.update(extra_inputs)

    return SavedCalculation(
        id=str(int(time.time() * 1000)),
        title=title,
        vehicle_description=f"{car_model} ({vehicle.production_year})",
        saved_date=_us_date(today or date.today()),
        inputs=inputs,
        results=result.to_dict(),
    )


def stored_override(overrides: Dict[str, Any], key: str, computed: float) -> float:
    """Value saved with a calculation when present (0 included), else the computed one."""
    value = overrides.get(key)
    return float(value) if value is not None else float(computed)


class CalculationStore:
    """JSON file holding ``{"savedCalculations": [...]}`` in save order."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def _write(self, calculations: List[SavedCalculation]) -> None:
        data = self._read()
        data[STORAGE_KEY] = [c.to_record() for c in calculations]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        tmp.replace(self.path)

    def list(self) -> List[SavedCalculation]:
        return [SavedCalculation.from_record(r) for r in self._read().get(STORAGE_KEY, [])]

    def get(self, calc_id: str) -> Optional[SavedCalculation]:
        return next((c for c in self.list() if c.id == calc_id), None)

    def save(self, calculation: SavedCalculation) -> List[SavedCalculation]:
        calculations = self.list()
        # ids are millisecond timestamps; bump on collision so they stay unique
        existing = {c.id for c in calculations}
        while calculation.id in existing:
            calculation.id = str(int(calculation.id) + 1)
        calculations.append(calculation)
        self._write(calculations)
        logger.info("Saved calculation %s (%s)", calculation.id, calculation.title)
        return calculations

    def delete(self, calc_id: str) -> List[SavedCalculation]:
        calculations = [c for c in self.list() if c.id != calc_id]
        self._write(calculations)
        logger.info("Deleted calculation %s", calc_id)
        return calculations
