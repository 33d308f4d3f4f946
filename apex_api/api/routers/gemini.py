from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from apex_api.api.deps import get_gemini_client
from apex_api.models.schemas import GeminiProxyRequest, GeminiProxyResponse
from apex_api.services.gemini_client import GeminiClient, GeminiError

router = APIRouter()


@router.post("/chat", response_model=GeminiProxyResponse)
def gemini_chat(
    payload: GeminiProxyRequest,
    gemini: GeminiClient = Depends(get_gemini_client),
):
    if not (payload.prompt or "").strip():
        raise HTTPException(status_code=400, detail="Prompt is required")
    if not gemini.configured:
        raise HTTPException(status_code=500, detail="API key not configured")

    generation_config = {**gemini.config.generation_config, **payload.config}
    try:
        text = gemini.generate_content(payload.prompt, generation_config=generation_config)
    except GeminiError as exc:
        return JSONResponse(
            status_code=500,
            content={
                "error": "Failed to generate AI response",
                "message": str(exc),
                "success": False,
            },
        )
    return GeminiProxyResponse(text=text)
