import json
from datetime import date

import pytest

from app.storage import STORAGE_KEY, CalculationStore, SavedCalculation, build_saved_calculation, stored_override
from carfin_core.financing import compute_financing
from carfin_core.models import CalculationType, FinancingInputs, FuelType, VehicleProfile


@pytest.fixture
def vehicle():
    return VehicleProfile(power_kw=110, production_year=2021, engine_capacity_cc=1998, co2_g_per_km=160,
                          fuel_type=FuelType.DIESEL)


@pytest.fixture
def financing():
    return FinancingInputs(mode=CalculationType.FINANCIAL_RENTING, total_amount=30_000, months=48,
                           remaining_value_percent=35)


def _calc(vehicle, financing, title="Company car"):
    return build_saved_calculation(title, "Golf GTD", vehicle, financing, compute_financing(financing),
                                   today=date(2026, 3, 7))


def test_build_saved_calculation_record(vehicle, financing):
    calc = _calc(vehicle, financing)
    record = calc.to_record()
    assert set(record) == {"id", "title", "vehicleDescription", "savedDate", "inputs", "results"}
    assert record["vehicleDescription"] == "Golf GTD (2021)"
    assert record["savedDate"] == "3/7/2026"
    assert record["inputs"]["mode"] == "financial-renting"
    assert record["inputs"]["fuel_type"] == "diesel"
    assert record["inputs"]["car_model"] == "Golf GTD"
    assert record["results"]["monthlyWithVat"] == pytest.approx(406.25)
    assert calc.id.isdigit()


@pytest.mark.parametrize("title,car_model", [("", "Golf"), ("Quote", ""), ("   ", "Golf")])
def test_title_and_car_model_required(vehicle, financing, title, car_model):
    with pytest.raises(ValueError):
        build_saved_calculation(title, car_model, vehicle, financing, compute_financing(financing))


def test_missing_file_is_empty(tmp_path):
    store = CalculationStore(tmp_path / "nested" / "saved.json")
    assert store.list() == []
    assert store.get("123") is None


def test_save_list_delete_keeps_order(tmp_path, vehicle, financing):
    store = CalculationStore(tmp_path / "saved.json")
    first = _calc(vehicle, financing, "First")
    second = _calc(vehicle, financing, "Second")
    second.id = first.id  # same millisecond
    store.save(first)
    store.save(second)

    saved = store.list()
    assert [c.title for c in saved] == ["First", "Second"]
    assert len({c.id for c in saved}) == 2

    on_disk = json.loads((tmp_path / "saved.json").read_text(encoding="utf-8"))
    assert [r["title"] for r in on_disk[STORAGE_KEY]] == ["First", "Second"]

    store.delete(saved[0].id)
    assert [c.title for c in store.list()] == ["Second"]
    assert store.get(saved[1].id).result.monthly_with_vat == pytest.approx(406.25)


def test_from_record_roundtrip(vehicle, financing):
    calc = _calc(vehicle, financing)
    assert SavedCalculation.from_record(calc.to_record()) == calc


def test_stored_override_keeps_saved_zero():
    assert stored_override({"registration_cost": 0}, "registration_cost", 351.52) == 0.0
    assert stored_override({"yearly_tax": 250.0}, "yearly_tax", 719.5) == 250.0
    assert stored_override({"yearly_tax": None}, "yearly_tax", 719.5) == 719.5
    assert stored_override({}, "registration_cost", 351.52) == 351.52
