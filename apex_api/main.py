from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apex_api.api.router import api_router
from apex_api.core.config import Settings, settings
from apex_api.core.logging import configure_logging
from apex_api.services.gemini_client import GeminiClient, ModelNameCache


def create_app(config: Settings | None = None) -> FastAPI:
    config = config or settings
    configure_logging(config.log_level)

    app = FastAPI(
        title=config.app_name,
        version="0.1.0",
        description="Insurance plan recommendations and APEX AI assistant backend.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.gemini_client = GeminiClient(config, ModelNameCache())
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
