import json
from pathlib import Path

import pytest

from apex_api.core.config import settings
from apex_api.services import plan_catalog_service
from apex_api.services.plan_catalog_service import (
    get_plan_by_id,
    get_plans_by_type,
    load_plan_catalog,
    read_plan_catalog,
)


@pytest.fixture
def fresh_catalog_cache():
    load_plan_catalog.cache_clear()
    yield
    load_plan_catalog.cache_clear()


def test_shipped_catalog_has_unique_ids_and_every_type() -> None:
    catalog = load_plan_catalog()
    ids = [plan.id for plan in catalog]

    assert len(catalog) == 24
    assert len(set(ids)) == len(ids)
    assert {plan.type for plan in catalog} == {"Health", "Auto", "Life", "Travel", "Sports"}
    assert all(plan.base_price > 0 for plan in catalog)


def test_plans_by_type_and_id() -> None:
    health = get_plans_by_type("Health")
    assert len(health) == 6
    assert all(plan.type == "Health" for plan in health)
    assert get_plans_by_type("Pet") == []

    plan = get_plan_by_id("health-001")
    assert plan.base_price == 450
    assert plan.currency == "RM"


def test_unknown_plan_id_raises_lookup_error() -> None:
    with pytest.raises(LookupError, match="not-a-plan"):
        get_plan_by_id("not-a-plan")


def test_missing_catalog_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="PLAN_CATALOG_PATH"):
        read_plan_catalog(tmp_path / "missing.json")


def test_duplicate_ids_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "plans.json"
    path.write_text(
        json.dumps(
            [
                {"id": "x", "type": "Health", "basePrice": 10},
                {"id": "x", "type": "Auto", "basePrice": 20},
            ]
        ),
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="Duplicate plan id 'x'"):
        read_plan_catalog(path)


def test_catalog_accepts_wrapped_plans_key(tmp_path: Path) -> None:
    path = tmp_path / "plans.json"
    path.write_text(json.dumps({"plans": [{"id": "p1", "type": "Life", "basePrice": 99.5}]}), encoding="utf-8")

    plans = read_plan_catalog(path)
    assert [plan.id for plan in plans] == ["p1"]
    assert plans[0].base_price == 99.5


def test_catalog_path_override(tmp_path: Path, monkeypatch, fresh_catalog_cache) -> None:
    path = tmp_path / "custom.json"
    path.write_text(json.dumps([{"id": "only", "type": "Travel", "basePrice": 12}]), encoding="utf-8")
    monkeypatch.setattr(settings, "plan_catalog_path", str(path))

    assert plan_catalog_service._catalog_path() == path
    assert [plan.id for plan in load_plan_catalog()] == ["only"]
