from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from apex_api.models.schemas import InsurancePlan
from apex_api.services.plan_catalog_service import get_plan_by_id, get_plans_by_type, load_plan_catalog

router = APIRouter()


@router.get("", response_model=list[InsurancePlan])
def list_plans(plan_type: Optional[str] = Query(default=None, alias="type")) -> list[InsurancePlan]:
    try:
        if plan_type:
            return get_plans_by_type(plan_type)
        return list(load_plan_catalog())
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/{plan_id}", response_model=InsurancePlan)
def plan_detail(plan_id: str) -> InsurancePlan:
    try:
        return get_plan_by_id(plan_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
