# backend/padsync/client/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PADSYNC_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    BASE_URL: str = "http://127.0.0.1:8000"
    API_PREFIX: str = "/api"
    TOKEN: str = ""
    TIMEOUT_SEC: float = 10.0
    HEARTBEAT_INTERVAL_SEC: float = 15.0
    # 마지막 입력 후 이 시간이 지나면 "편집 중" 아님
    IDLE_TIMEOUT_SEC: float = 30.0
