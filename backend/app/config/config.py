import json
from typing import Annotated, Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["*"],
        validation_alias=AliasChoices("allow_origins", "cors_origins"),
    )
    github_token: str = ""
    github_username: str = ""
    github_api_base_url: str = "https://api.github.com"
    github_timeout_seconds: float = 10.0

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        """Accept ``a,b`` as well as a JSON list; blank means any origin."""
        if not isinstance(value, str):
            return value
        value = value.strip()
        if value.startswith("["):
            return json.loads(value)
        origins = [origin.strip() for origin in value.split(",") if origin.strip()]
        return origins or ["*"]

    def missing_required(self) -> list[str]:
        """Names of the settings the service cannot start without."""
        required = {"GITHUB_TOKEN": self.github_token, "GITHUB_USERNAME": self.github_username}
        return [name for name, value in required.items() if not value.strip()]


settings = Settings()
