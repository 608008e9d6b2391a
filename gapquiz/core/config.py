from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_QUESTIONS_PATH = Path(__file__).resolve().parent.parent / "data" / "questions.json"


class Settings(BaseSettings):
    # Base
    APP_ENV: str = "dev"  # dev | staging | prod
    APP_NAME: str = "GAPQUIZ"
    APP_VERSION: str = "0.1.0"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Banque de questions
    QUESTIONS_PATH: str = str(DEFAULT_QUESTIONS_PATH)
    GROUP_KEYS: str = "group_de,group_zai"  # ordre des onglets
    ACTIVE_SET_SIZE: int = 10
    SHUFFLE_SEED: Optional[int] = None

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def group_keys(self) -> List[str]:
        return [k.strip() for k in self.GROUP_KEYS.split(",") if k.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
