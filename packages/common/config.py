"""
Application configuration using Pydantic Settings
Reads from environment variables and .env file
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    environment: str = Field(default="production", alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Hugging Face Inference API
    hf_api_key: Optional[str] = Field(default=None, alias="HF_API_KEY")
    hf_base_url: str = Field(default="https://api-inference.huggingface.co", alias="HF_BASE_URL")
    hf_analysis_model: str = Field(default="microsoft/DialoGPT-medium", alias="HF_ANALYSIS_MODEL")
    hf_zero_shot_model: str = Field(default="facebook/bart-large-mnli", alias="HF_ZERO_SHOT_MODEL")
    hf_description_model: str = Field(default="gpt2", alias="HF_DESCRIPTION_MODEL")
    hf_request_timeout_seconds: float = Field(default=10.0, alias="HF_REQUEST_TIMEOUT_SECONDS")

    # Enrichment pipeline
    enrichment_request_delay_seconds: float = Field(default=0.1, alias="ENRICHMENT_REQUEST_DELAY_SECONDS")
    enrichment_max_concurrency: int = Field(default=1, alias="ENRICHMENT_MAX_CONCURRENCY")
    enrichment_remote_failure_policy: str = Field(default="heuristic", alias="ENRICHMENT_REMOTE_FAILURE_POLICY")

    # Row defaults
    default_warehouse: str = Field(default="Main Warehouse", alias="DEFAULT_WAREHOUSE")
    default_country: str = Field(default="United States", alias="DEFAULT_COUNTRY")

    # Monitoring
    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")

    @property
    def hf_configured(self) -> bool:
        """True when an inference API key is available"""
        return bool(self.hf_api_key)

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @validator("environment")
    def validate_environment(cls, v):
        """Validate environment"""
        valid_envs = ["development", "staging", "production", "test"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of {valid_envs}")
        return v.lower()

    @validator("enrichment_remote_failure_policy")
    def validate_remote_failure_policy(cls, v):
        """Validate remote failure routing"""
        valid_policies = ["heuristic", "fallback"]
        if v.lower() not in valid_policies:
            raise ValueError(f"ENRICHMENT_REMOTE_FAILURE_POLICY must be one of {valid_policies}")
        return v.lower()

    @validator("enrichment_max_concurrency")
    def validate_max_concurrency(cls, v):
        """At least one remote call must be allowed in flight"""
        if v < 1:
            raise ValueError("ENRICHMENT_MAX_CONCURRENCY must be >= 1")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
