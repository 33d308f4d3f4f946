from fastapi import APIRouter, Depends, Query

from apex_api.api.deps import get_gemini_client
from apex_api.models.schemas import ChatRequest, ChatResponse, QuickAction
from apex_api.services.assist_service import quick_actions, reply_to_chat, welcome_message
from apex_api.services.gemini_client import GeminiClient

router = APIRouter()


@router.post("", response_model=ChatResponse)
def chat(payload: ChatRequest, gemini: GeminiClient = Depends(get_gemini_client)) -> ChatResponse:
    return reply_to_chat(payload.message, payload.context, payload.history, gemini)


@router.get("/welcome")
def welcome() -> dict[str, str]:
    return {"message": welcome_message()}


@router.get("/quick-actions", response_model=list[QuickAction])
def page_quick_actions(page: str = Query(default="/")) -> list[QuickAction]:
    return quick_actions(page)
