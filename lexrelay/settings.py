# lexrelay/settings.py
import os
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="LexRelay")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    ALLOWED_ORIGINS: str = Field(default="http://localhost:3000,http://127.0.0.1:3000")
    STATIC_DIR: str | None = None

    # upstream model
    LLM_CLIENT: str = Field(default="gemini")  # gemini | echo
    GEMINI_API_KEY: str | None = None
    GEMINI_API_URL: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent"
    )
    UPSTREAM_TIMEOUT_S: float = Field(default=60.0)
    TEMPERATURE: float | None = None
    MAX_OUTPUT_TOKENS: int | None = None

    # transport limits
    RATE_LIMIT_WINDOW_MS: int = Field(default=60_000)
    RATE_LIMIT_MAX: int = Field(default=20)
    MAX_UPLOAD_FILES: int = Field(default=10)
    MAX_UPLOAD_BYTES: int = Field(default=10 * 1024 * 1024)

    # extraction
    OCR_LANG: str = Field(default="eng")

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )

    @property
    def app_name(self) -> str:
        return self.APP_NAME

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


settings = Settings()
