from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "APEX AI API"
    cors_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]
    log_level: str = "INFO"

    gemini_api_key: str = ""
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1"
    gemini_fallback_model: str = "models/gemini-2.5-flash"
    gemini_timeout_seconds: float = 30.0
    gemini_temperature: float = 0.7
    gemini_top_k: int = 40
    gemini_top_p: float = 0.95
    gemini_max_output_tokens: int = 1024

    ai_narrative_enabled: bool = False
    recommendation_top_n: int = 4
    plan_catalog_path: str = ""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value

    @property
    def generation_config(self) -> dict[str, float | int]:
        return {
            "temperature": self.gemini_temperature,
            "topK": self.gemini_top_k,
            "topP": self.gemini_top_p,
            "maxOutputTokens": self.gemini_max_output_tokens,
        }


settings = Settings()
