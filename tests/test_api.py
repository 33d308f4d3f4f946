import pytest
from fastapi.testclient import TestClient

from apex_api.core.config import Settings, settings
from apex_api.main import create_app
from apex_api.services.assist_service import FALLBACK_REPLY
from apex_api.services.plan_catalog_service import load_plan_catalog

PROFILE = {
    "age": 28,
    "lifestyle": "Active",
    "exerciseFrequency": "Often",
    "smokingStatus": "No",
    "budget": 200,
    "selectedTypes": ["Health", "Sports"],
    "dnaRisks": [],
    "familyHistory": [],
}


@pytest.fixture
def app():
    return create_app(Settings(gemini_api_key="", log_level="WARNING"))


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert "timestamp" in body


def test_list_and_filter_plans(client: TestClient) -> None:
    all_plans = client.get("/api/plans").json()
    travel = client.get("/api/plans", params={"type": "Travel"}).json()

    assert len(all_plans) == 24
    assert "basePrice" in all_plans[0]
    assert travel and all(plan["type"] == "Travel" for plan in travel)


def test_plan_detail(client: TestClient) -> None:
    assert client.get("/api/plans/travel-001").json()["basePrice"] == 45
    missing = client.get("/api/plans/nope")
    assert missing.status_code == 404


def test_plan_endpoints_report_missing_catalog(client: TestClient, tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "plan_catalog_path", str(tmp_path / "gone.json"))
    load_plan_catalog.cache_clear()
    try:
        for url in ("/api/plans", "/api/plans/health-001"):
            response = client.get(url)
            assert response.status_code == 500
            assert "Plan catalog not found" in response.json()["detail"]
    finally:
        load_plan_catalog.cache_clear()


def test_very_old_applicant_is_accepted(client: TestClient) -> None:
    response = client.post("/api/recommendations/risk", json={**PROFILE, "age": 140})
    assert response.status_code == 200
    assert response.json() == {"riskScore": 75}


def test_generate_recommendations_uses_camel_case(client: TestClient) -> None:
    response = client.post("/api/recommendations/generate", json={"userProfile": PROFILE})

    assert response.status_code == 200
    body = response.json()
    assert set(body) >= {
        "topRecommendations",
        "overallAnalysis",
        "riskFactors",
        "savingsTips",
        "riskScore",
        "totalPotentialSavings",
        "narrativeSource",
    }
    assert body["riskScore"] == 25
    assert body["narrativeSource"] == "algorithm"
    assert 1 <= len(body["topRecommendations"]) <= 4
    first = body["topRecommendations"][0]
    assert set(first) == {"planId", "matchScore", "reasoning", "priceAdjustment", "finalPrice", "savings"}
    assert first["priceAdjustment"] == -10


def test_generate_with_supplied_plans(client: TestClient) -> None:
    payload = {
        "userProfile": {**PROFILE, "selectedTypes": ["Health"]},
        "plans": [{"id": "h1", "type": "Health", "basePrice": 80, "features": []}],
    }
    body = client.post("/api/recommendations/generate", json=payload).json()

    assert body["topRecommendations"] == [
        {
            "planId": "h1",
            "matchScore": 99,
            "reasoning": "Excellent match for your profile, great value at your age, non-smoker benefits",
            "priceAdjustment": -10,
            "finalPrice": 72.0,
            "savings": 32.0,
        }
    ]


@pytest.mark.parametrize(
    "override",
    [
        {"age": -1},
        {"budget": -5},
        {"lifestyle": "Extreme"},
        {"smokingStatus": "Sometimes"},
        {"exerciseFrequency": None},
    ],
)
def test_invalid_profile_is_rejected(client: TestClient, override) -> None:
    response = client.post("/api/recommendations/generate", json={"userProfile": {**PROFILE, **override}})
    assert response.status_code == 422


def test_plan_with_zero_price_is_rejected(client: TestClient) -> None:
    payload = {"userProfile": PROFILE, "plans": [{"id": "z", "type": "Health", "basePrice": 0}]}
    assert client.post("/api/recommendations/generate", json=payload).status_code == 422


def test_risk_endpoint(client: TestClient) -> None:
    response = client.post("/api/recommendations/risk", json={**PROFILE, "smokingStatus": "Yes"})
    assert response.json() == {"riskScore": 50}


def test_ai_narrative_through_api(app, client: TestClient, gemini_settings, make_gemini_client, answering) -> None:
    app.state.gemini_client = make_gemini_client(
        answering('{"overallAnalysis": "AI summary", "riskFactors": [], "savingsTips": []}'),
        config=gemini_settings,
    )
    body = client.post("/api/recommendations/generate", json={"userProfile": PROFILE}).json()

    assert body["narrativeSource"] == "ai"
    assert body["overallAnalysis"] == "AI summary"
    # Empty AI lists keep the rule-based ones.
    assert body["riskFactors"] == ["Standard risk profile"]


def test_chat_reply_and_intent(app, client: TestClient, make_gemini_client, answering) -> None:
    app.state.gemini_client = make_gemini_client(answering("Here is how to file a claim."))
    response = client.post(
        "/api/chat",
        json={
            "message": "How do I file a claim?",
            "context": {"page": "/claims"},
            "history": [{"sender": "user", "text": "hi"}, {"sender": "bot", "text": "Hello!"}],
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert body["reply"] == "Here is how to file a claim."
    assert body["success"] is True
    assert body["intent"] == "claims"
    assert body["matchedKeywords"] == ["claim", "file"]


def test_chat_falls_back_when_gemini_fails(app, client: TestClient, make_gemini_client, failing) -> None:
    app.state.gemini_client = make_gemini_client(failing(503))
    body = client.post("/api/chat", json={"message": "hello"}).json()

    assert body["reply"] == FALLBACK_REPLY
    assert body["success"] is False
    assert body["intent"] == "general_query"


def test_chat_rejects_empty_message(client: TestClient) -> None:
    assert client.post("/api/chat", json={"message": ""}).status_code == 422


def test_chat_welcome_and_quick_actions(client: TestClient) -> None:
    assert "APEX AI Assistant" in client.get("/api/chat/welcome").json()["message"]

    claims = client.get("/api/chat/quick-actions", params={"page": "/claims"}).json()
    assert [action["label"] for action in claims] == ["Check Status", "File New Claim", "Upload Documents"]

    unknown = client.get("/api/chat/quick-actions", params={"page": "/nowhere"}).json()
    assert unknown[0]["navigate"] == "/dashboard"


def test_gemini_proxy_requires_prompt(client: TestClient) -> None:
    for payload in ({}, {"prompt": ""}, {"prompt": "   "}):
        response = client.post("/api/gemini/chat", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Prompt is required"


def test_gemini_proxy_without_key(client: TestClient) -> None:
    response = client.post("/api/gemini/chat", json={"prompt": "hi"})
    assert response.status_code == 500
    assert response.json()["detail"] == "API key not configured"


def test_gemini_proxy_success(app, client: TestClient, make_gemini_client, answering) -> None:
    app.state.gemini_client = make_gemini_client(answering("Proxy says hi"))
    response = client.post("/api/gemini/chat", json={"prompt": "hi", "config": {"temperature": 0.2}})

    assert response.status_code == 200
    assert response.json() == {"text": "Proxy says hi", "success": True}


def test_gemini_proxy_upstream_failure(app, client: TestClient, make_gemini_client, failing) -> None:
    app.state.gemini_client = make_gemini_client(failing(429))
    response = client.post("/api/gemini/chat", json={"prompt": "hi"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to generate AI response"
    assert body["success"] is False
    assert "429" in body["message"]
