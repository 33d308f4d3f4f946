from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

from apex_api.core.config import settings
from apex_api.models.schemas import InsurancePlan

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[1] / "data" / "insurance_plans.json"


def _catalog_path() -> Path:
    override = settings.plan_catalog_path.strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_CATALOG_PATH


def read_plan_catalog(path: Path) -> tuple[InsurancePlan, ...]:
    if not path.exists() or not path.is_file():
        raise FileNotFoundError(
            f"Plan catalog not found at {path}. Set PLAN_CATALOG_PATH or restore the bundled catalog."
        )

    payload = json.loads(path.read_text(encoding="utf-8"))
    rows = payload if isinstance(payload, list) else payload.get("plans", [])
    plans = tuple(InsurancePlan.model_validate(row) for row in rows)

    seen: set[str] = set()
    for plan in plans:
        if plan.id in seen:
            raise ValueError(f"Duplicate plan id '{plan.id}' in catalog {path}")
        seen.add(plan.id)
    return plans


@lru_cache(maxsize=1)
def load_plan_catalog() -> tuple[InsurancePlan, ...]:
    return read_plan_catalog(_catalog_path())


def get_plans_by_type(plan_type: str) -> list[InsurancePlan]:
    return [plan for plan in load_plan_catalog() if plan.type == plan_type]


def get_plan_by_id(plan_id: str) -> InsurancePlan:
    for plan in load_plan_catalog():
        if plan.id == plan_id:
            return plan
    raise LookupError(f"Plan '{plan_id}' not found.")
