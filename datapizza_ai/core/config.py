"""
Configuration Settings.

This module defines the toolkit configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# LLM Provider Configuration Models
# =====================================================================


class LLMConfig(BaseModel):
    """OpenAI-compatible chat completion endpoint configuration."""

    base_url: str = Field(
        default="https://api.openai.com/v1",
        alias="LLM_BASE_URL",
        description="Base URL of the OpenAI-compatible API (the client appends /chat/completions)",
    )
    api_key: Optional[str] = Field(default=None, alias="LLM_API_KEY", description="Bearer token for the endpoint")
    model: str = Field(default="gpt-4o-mini", alias="LLM_MODEL", description="Model name sent with every request")
    temperature: float = Field(
        default=0.0, alias="LLM_TEMPERATURE", description="Sampling temperature; 0.0 keeps ReAct reasoning precise"
    )
    timeout: float = Field(default=60.0, alias="LLM_TIMEOUT", description="Request timeout in seconds")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Toolkit settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="DATAPIZZA_AI_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="DATAPIZZA_AI_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        alias="DATAPIZZA_AI_LOG_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Write DEBUG logs to <log_file_dir>/datapizza_ai.log",
        alias="DATAPIZZA_AI_FILE_LOGGING",
    )

    # =====================================================================
    # Orchestration Configuration
    # =====================================================================
    agent_max_iterations: int = Field(
        default=5,
        ge=1,
        description="Completion-call budget of a single ReAct run",
        alias="DATAPIZZA_AI_AGENT_MAX_ITERATIONS",
    )
    pipeline_max_concurrency: int = Field(
        default=1,
        ge=1,
        description="Ready pipeline modules executed at once (1 keeps execution sequential)",
        alias="DATAPIZZA_AI_PIPELINE_MAX_CONCURRENCY",
    )
    file_reader_root: str = Field(
        default="data",
        description="Sandbox directory of the built-in file_reader tool",
        alias="DATAPIZZA_AI_FILE_READER_ROOT",
    )

    # =====================================================================
    # LLM Endpoint Configuration
    # =====================================================================
    llm_base_url: str = Field(default="https://api.openai.com/v1", alias="LLM_BASE_URL")
    llm_api_key: Optional[str] = Field(default=None, alias="LLM_API_KEY")
    llm_model: str = Field(default="gpt-4o-mini", alias="LLM_MODEL")
    llm_temperature: float = Field(default=0.0, alias="LLM_TEMPERATURE")
    llm_timeout: float = Field(default=60.0, alias="LLM_TIMEOUT")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def llm(self) -> LLMConfig:
        """Get the completion endpoint configuration from environment variables."""
        return LLMConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
