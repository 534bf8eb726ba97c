from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[2]  # backend/
(BASE_DIR / "_data").mkdir(exist_ok=True)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_ENV: str = "dev"
    API_PREFIX: str = "/api"
    DATABASE_URL: str = "sqlite:///./_data/dev.db"
    CORS_ORIGINS: str = "http://localhost:5173,http://127.0.0.1:5173"
    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"
    ACCESS_TTL_MIN: int = 60
    NONCE_TTL_SEC: int = 12 * 60 * 60
    LOG_LEVEL: str = "INFO"

    # 잠금: 하트비트(15초)가 두 번 빠지면 만료
    LOCK_TTL_SEC: int = 30
    HEARTBEAT_INTERVAL_SEC: int = 15
    LOCK_BACKEND: Literal["db", "memory"] = "db"

    # "key=Title,key2=Title 2"
    PADS: str = "scratchpad=Scratchpad,agenda=Agenda Scratchpad"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def pads_list(self) -> List[tuple[str, str]]:
        out = []
        for item in self.PADS.split(","):
            if not item.strip():
                continue
            key, _, title = item.partition("=")
            key = key.strip()
            out.append((key, title.strip() or key.title()))
        return out


settings = Settings()


def get_settings() -> Settings:
    return settings
