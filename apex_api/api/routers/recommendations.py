from fastapi import APIRouter, Depends, HTTPException

from apex_api.api.deps import get_gemini_client
from apex_api.models.schemas import (
    RecommendationBundle,
    RecommendationRequest,
    RiskScoreResponse,
    UserProfile,
)
from apex_api.services.gemini_client import GeminiClient
from apex_api.services.plan_catalog_service import load_plan_catalog
from apex_api.services.recommendation_service import recommend_plans
from apex_api.services.risk_service import compute_risk

router = APIRouter()


@router.post("/generate", response_model=RecommendationBundle)
def generate_recommendations(
    payload: RecommendationRequest,
    gemini: GeminiClient = Depends(get_gemini_client),
) -> RecommendationBundle:
    try:
        catalog = payload.plans if payload.plans is not None else load_plan_catalog()
    except (FileNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return recommend_plans(payload.user_profile, catalog, gemini=gemini)


@router.post("/risk", response_model=RiskScoreResponse)
def risk_score(profile: UserProfile) -> RiskScoreResponse:
    return RiskScoreResponse(risk_score=compute_risk(profile))
