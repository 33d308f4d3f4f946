from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Lifestyle = Literal["Active", "Moderate", "Sedentary"]
ExerciseFrequency = Literal["Often", "Sometimes", "Rarely", "Never"]
SmokingStatus = Literal["Yes", "No"]
TravelFrequency = Literal["0-1", "2", "3-5", "6+"]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(CamelModel):
    model_config = ConfigDict(frozen=True)

    age: int = Field(..., ge=0)
    lifestyle: Lifestyle
    exercise_frequency: ExerciseFrequency
    smoking_status: SmokingStatus
    budget: float = Field(..., ge=0, description="Monthly spending ceiling")
    selected_types: list[str] = Field(default_factory=list)
    dna_risks: list[str] = Field(default_factory=list)
    family_history: list[str] = Field(default_factory=list)
    has_car: bool = False
    has_car_insurance: bool = False
    travel_frequency: Optional[TravelFrequency] = None
    name: Optional[str] = Field(default=None, max_length=120)
    genetic_strengths: list[str] = Field(default_factory=list)


class InsurancePlan(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    base_price: float = Field(..., gt=0)
    features: list[str] = Field(default_factory=list)
    provider: Optional[str] = None
    name: Optional[str] = None
    currency: str = "RM"
    coverage: Optional[str] = None


class RecommendationResult(CamelModel):
    plan_id: str
    match_score: int
    reasoning: str
    price_adjustment: int
    final_price: float
    savings: float


class RecommendationBundle(CamelModel):
    top_recommendations: list[RecommendationResult]
    overall_analysis: str
    risk_factors: list[str]
    savings_tips: list[str]
    risk_score: int = Field(..., ge=0, le=100)
    total_potential_savings: float
    narrative_source: Literal["algorithm", "ai"] = "algorithm"


class RecommendationRequest(CamelModel):
    user_profile: UserProfile
    plans: Optional[list[InsurancePlan]] = Field(
        default=None, description="Override catalog; defaults to the shipped plans."
    )


class RiskScoreResponse(CamelModel):
    risk_score: int


class ChatHistoryItem(CamelModel):
    sender: Literal["user", "bot"]
    text: str


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1, max_length=4000)
    context: dict[str, Any] = Field(default_factory=dict)
    history: list[ChatHistoryItem] = Field(default_factory=list)


class ChatResponse(CamelModel):
    reply: str
    success: bool
    intent: str
    confidence: float
    matched_keywords: list[str]


class QuickAction(CamelModel):
    id: str
    label: str
    icon: str
    navigate: Optional[str] = None
    message: Optional[str] = None


class GeminiProxyRequest(CamelModel):
    prompt: Optional[str] = None
    config: dict[str, Any] = Field(default_factory=dict)


class GeminiProxyResponse(CamelModel):
    text: str
    success: bool = True


class HealthResponse(CamelModel):
    status: str
    message: str
    timestamp: datetime
