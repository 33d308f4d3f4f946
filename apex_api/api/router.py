from fastapi import APIRouter

from apex_api.api.routers import chat, gemini, health, plans, recommendations

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
api_router.include_router(recommendations.router, prefix="/recommendations", tags=["recommendations"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
api_router.include_router(gemini.router, prefix="/gemini", tags=["gemini"])
