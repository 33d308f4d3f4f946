from fastapi import Request

from apex_api.services.gemini_client import GeminiClient


def get_gemini_client(request: Request) -> GeminiClient:
    return request.app.state.gemini_client
