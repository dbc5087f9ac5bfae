from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    # Base
    APP_ENV: str = "dev"  # dev | staging | prod
    APP_NAME: str = "Ejes Study Tracker"
    APP_VERSION: str = "0.1.0"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Security (remplacement / purge des exercices)
    API_KEY: str = "change_me"

    # Storage
    DATA_DIR: str = "/gestor/system/ejes"
    VERCEL: Optional[str] = None  # présent sur Vercel : seul /tmp est inscriptible
    VERCEL_DATA_DIR: str = "/tmp/ejes"
    IMPROVEMENTS_FILE: Optional[str] = None  # défaut : <data_path>/mejorar.js

    # Client compilé (optionnel)
    STATIC_DIR: Optional[str] = None

    # Feedback (Groq)
    FEEDBACK_MAX_TOKENS: int = 600

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def data_path(self) -> Path:
        if self.VERCEL:
            return Path(self.VERCEL_DATA_DIR)
        return Path(self.DATA_DIR)

    @property
    def improvements_path(self) -> Path:
        if self.IMPROVEMENTS_FILE:
            return Path(self.IMPROVEMENTS_FILE)
        return self.data_path / "mejorar.js"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
