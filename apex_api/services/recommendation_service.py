from __future__ import annotations

from typing import Iterable, Optional

import structlog
from pydantic import ValidationError

from apex_api.core.config import settings
from apex_api.models.schemas import (
    CamelModel,
    InsurancePlan,
    RecommendationBundle,
    RecommendationResult,
    UserProfile,
)
from apex_api.services import narrative_service
from apex_api.services.gemini_client import GeminiClient, GeminiError, extract_json_object
from apex_api.services.pricing_service import (
    adjusted_price,
    price_adjustment_for_risk,
    savings_vs_traditional,
)
from apex_api.services.risk_service import compute_risk

logger = structlog.get_logger(__name__)

BASE_MATCH_SCORE = 70
MAX_MATCH_SCORE = 99
DEFAULT_TOP_N = 4

# (predicate on profile, plan type, points). Every matching row applies.
PROFILE_TYPE_BONUSES = [
    (lambda p: p.age < 35, "Health", 10),
    (lambda p: p.age < 35, "Sports", 8),
    (lambda p: p.age > 50, "Life", 12),
    (lambda p: p.lifestyle == "Active", "Sports", 15),
    (lambda p: p.lifestyle == "Active", "Travel", 10),
    (lambda p: p.lifestyle == "Sedentary", "Health", 8),
]
EXERCISE_BONUSES = {"Often": 10, "Rarely": 3}
NON_SMOKER_BONUS = 12
SMOKER_PENALTY = -8
AFFORDABLE_RATIO = 2
AFFORDABLE_BONUS = 5
STRETCHED_RATIO = 0.8
STRETCHED_PENALTY = -10

NARRATIVE_GENERATION_CONFIG = {"temperature": 0.4, "maxOutputTokens": 1024, "topP": 0.95, "topK": 40}
PROMPT_PLAN_LIMIT = 6


class _AiNarrative(CamelModel):
    overall_analysis: str
    risk_factors: list[str]
    savings_tips: list[str]


def score_plan(profile: UserProfile, plan: InsurancePlan) -> int:
    """Raw additive match score; callers cap it at MAX_MATCH_SCORE."""
    score = BASE_MATCH_SCORE
    for applies, plan_type, points in PROFILE_TYPE_BONUSES:
        if plan.type == plan_type and applies(profile):
            score += points

    score += EXERCISE_BONUSES.get(profile.exercise_frequency, 0)
    score += NON_SMOKER_BONUS if profile.smoking_status == "No" else SMOKER_PENALTY

    affordability = profile.budget / plan.base_price
    if affordability > AFFORDABLE_RATIO:
        score += AFFORDABLE_BONUS
    if affordability < STRETCHED_RATIO:
        score += STRETCHED_PENALTY
    return score


def _to_result(profile: UserProfile, plan: InsurancePlan, price_adjustment: int) -> RecommendationResult:
    raw_score = score_plan(profile, plan)
    final_price = adjusted_price(plan.base_price, price_adjustment)
    return RecommendationResult(
        plan_id=plan.id,
        match_score=min(raw_score, MAX_MATCH_SCORE),
        reasoning=narrative_service.build_reasoning(raw_score, profile, plan),
        price_adjustment=price_adjustment,
        final_price=final_price,
        savings=savings_vs_traditional(plan.base_price, final_price),
    )


def rank_plans(
    profile: UserProfile,
    risk_value: int,
    catalog: Iterable[InsurancePlan],
    top_n: int = DEFAULT_TOP_N,
) -> RecommendationBundle:
    wanted = set(profile.selected_types)
    price_adjustment = price_adjustment_for_risk(risk_value)

    scored = [_to_result(profile, plan, price_adjustment) for plan in catalog if plan.type in wanted]
    # sorted() is stable, so equal scores keep catalog order.
    top = sorted(scored, key=lambda r: r.match_score, reverse=True)[:top_n]

    return RecommendationBundle(
        top_recommendations=top,
        overall_analysis=narrative_service.overall_analysis(profile, risk_value),
        risk_factors=narrative_service.risk_factors(profile, risk_value),
        savings_tips=narrative_service.savings_tips(profile, risk_value),
        risk_score=risk_value,
        total_potential_savings=round(sum(r.savings for r in top), 2),
    )


def build_narrative_prompt(profile: UserProfile, plans: list[InsurancePlan], risk_value: int) -> str:
    plan_lines = "\n".join(
        f"{idx}. {plan.name or plan.id} - {plan.type} insurance - {plan.currency}{plan.base_price:g}/month"
        for idx, plan in enumerate(plans[:PROMPT_PLAN_LIMIT], start=1)
    )
    extra_lines = ""
    if profile.name:
        extra_lines += f"- Name: {profile.name}\n"
    if profile.genetic_strengths:
        extra_lines += f"- Genetic strengths: {', '.join(profile.genetic_strengths)}\n"
    return (
        "You are an insurance advisor. Summarise this customer's insurance situation.\n\n"
        "Customer Profile:\n"
        f"{extra_lines}"
        f"- Age: {profile.age} years\n"
        f"- Lifestyle: {profile.lifestyle}\n"
        f"- Exercise: {profile.exercise_frequency}\n"
        f"- Smoker: {profile.smoking_status}\n"
        f"- Budget: RM{profile.budget:g} per month\n"
        f"- Risk score: {risk_value}/100\n\n"
        f"Recommended Plans:\n{plan_lines or '- none selected'}\n\n"
        "Return your answer as JSON only:\n"
        '{"overallAnalysis": "...", "riskFactors": ["..."], "savingsTips": ["..."]}'
    )


def request_ai_narrative(
    gemini: GeminiClient,
    profile: UserProfile,
    plans: list[InsurancePlan],
    risk_value: int,
) -> Optional[_AiNarrative]:
    """Single best-effort attempt; any failure yields None and is never retried."""
    try:
        text = gemini.generate_content(
            build_narrative_prompt(profile, plans, risk_value),
            generation_config=NARRATIVE_GENERATION_CONFIG,
        )
        narrative = _AiNarrative.model_validate(extract_json_object(text))
    except (GeminiError, ValidationError) as exc:
        logger.warning("ai_narrative_discarded", error=str(exc))
        return None

    if not narrative.overall_analysis.strip():
        logger.warning("ai_narrative_discarded", error="empty analysis")
        return None
    return narrative


def recommend_plans(
    profile: UserProfile,
    catalog: Iterable[InsurancePlan],
    *,
    gemini: Optional[GeminiClient] = None,
    top_n: Optional[int] = None,
) -> RecommendationBundle:
    catalog = list(catalog)
    risk_value = compute_risk(profile)
    if top_n is None:
        top_n = settings.recommendation_top_n
    bundle = rank_plans(profile, risk_value, catalog, top_n=top_n)
    logger.info(
        "recommendations_generated",
        risk_score=risk_value,
        candidates=len(catalog),
        returned=len(bundle.top_recommendations),
    )

    if gemini is None or not gemini.config.ai_narrative_enabled or not gemini.configured:
        return bundle

    by_id = {plan.id: plan for plan in catalog}
    top_plans = [by_id[r.plan_id] for r in bundle.top_recommendations]
    narrative = request_ai_narrative(gemini, profile, top_plans, risk_value)
    if narrative is None:
        logger.info("ai_narrative_fallback", risk_score=risk_value)
        return bundle

    return bundle.model_copy(
        update={
            "overall_analysis": narrative.overall_analysis,
            "risk_factors": narrative.risk_factors or bundle.risk_factors,
            "savings_tips": narrative.savings_tips or bundle.savings_tips,
            "narrative_source": "ai",
        }
    )
