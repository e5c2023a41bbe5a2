"""Application configuration settings using Pydantic."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings
from pydantic import Field, ValidationError


class Settings(BaseSettings):
    """Application configuration settings."""

    # Service metadata
    service_name: str = Field(
        "BrainSAIT RCM Validation API", validation_alias="SERVICE_NAME"
    )
    service_version: str = Field("2.0.0", validation_alias="SERVICE_VERSION")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # API Configuration
    api_host: str = Field("0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(8000, validation_alias="API_PORT")
    debug: bool = Field(False, validation_alias="DEBUG")

    # CORS Configuration
    allowed_origins: list[str] = Field(
        ["*"],
        validation_alias="ALLOWED_ORIGINS",
    )

    # Trusted Hosts Configuration
    trusted_hosts: list[str] = Field(["*"], validation_alias="TRUSTED_HOSTS")

    # Storage backend: "memory" keeps everything in-process, "dynamodb" uses AWS
    storage_backend: Literal["memory", "dynamodb"] = Field(
        "memory", validation_alias="STORAGE_BACKEND"
    )

    # AWS DynamoDB Configuration
    aws_region: str = Field("me-south-1", validation_alias="AWS_REGION")
    aws_access_key_id: Optional[str] = Field(None, validation_alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(
        None, validation_alias="AWS_SECRET_ACCESS_KEY"
    )
    dynamodb_responses_table: str = Field(
        "rcm_survey_responses", validation_alias="DYNAMODB_RESPONSES_TABLE"
    )
    dynamodb_cache_table: str = Field(
        "rcm_survey_cache", validation_alias="DYNAMODB_CACHE_TABLE"
    )
    dynamodb_audit_table: str = Field(
        "rcm_survey_audit_log", validation_alias="DYNAMODB_AUDIT_TABLE"
    )

    # Advisory (OpenAI) Configuration
    enable_ai_analysis: bool = Field(False, validation_alias="ENABLE_AI_ANALYSIS")
    openai_api_key: Optional[str] = Field(None, validation_alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-4o-mini", validation_alias="OPENAI_MODEL")
    openai_max_tokens: int = Field(600, validation_alias="OPENAI_MAX_TOKENS")
    openai_temperature: float = Field(0.3, validation_alias="OPENAI_TEMPERATURE")
    advisory_timeout_seconds: float = Field(
        8.0, gt=0, validation_alias="ADVISORY_TIMEOUT_SECONDS"
    )

    class Config:
        """Pydantic configuration to load from .env file."""

        env_file = ".env"
        case_sensitive = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    try:
        s = Settings()  # type: ignore[call-arg]
    except ValidationError as e:
        # Raise a helpful message in logs for invalid envs
        raise RuntimeError(f"Configuration error: {e}") from e
    return s
