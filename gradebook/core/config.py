import os
from functools import lru_cache

from typing import Literal, Optional

from pydantic import Field, HttpUrl, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


class Settings(BaseSettings):
    """Strongly typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Gradebook Rank API")
    environment: Literal["dev", "test", "staging", "prod"] = Field(default="dev")
    debug: bool = Field(default=False)

    roster_store_url: Optional[HttpUrl] = Field(default=None, description="Spreadsheet web-app endpoint holding class rosters")
    roster_store_timeout_ms: int = Field(default=10_000, ge=1)
    use_mock_store: bool = Field(default=False)
    mock_store_path: str = Field(default="./gradebook_data_v3.json")
    mock_store_seed: int = Field(default=661)

    teacher_password: str = Field(default="admin", min_length=1)

    jwt_secret_key: str = Field(default_factory=lambda: _load_required_env("JWT_SECRET_KEY"), min_length=8, description="Symmetric key for HS256 JWT signing")
    jwt_algorithm: Literal["HS256"] = Field(default="HS256")
    jwt_issuer: str = Field(default="gradebook-api")
    jwt_audience: str = Field(default="gradebook-users")
    access_token_expire_minutes: int = Field(default=240, ge=1)

    @field_validator("roster_store_url", mode="before")
    @classmethod
    def _normalize_blank_url(cls, value: object) -> Optional[str | HttpUrl]:
        if value in (None, "", b""):
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        if isinstance(value, HttpUrl):
            return value
        raise TypeError("ROSTER_STORE_URL must be a URL string")

    @computed_field(return_type=bool)
    def is_production(self) -> bool:
        return self.environment == "prod"

    @computed_field(return_type=bool)
    def mock_store_active(self) -> bool:
        return self.use_mock_store or self.roster_store_url is None


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
