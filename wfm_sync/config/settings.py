"""
Configuration management for the WorkflowMax sync.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WfmSyncConfig(BaseSettings):
    """Configuration settings for the WorkflowMax sync.

    The API and account keys may also come from ``wfm.apiKey`` and
    ``wfm.accountKey`` in the Timetrap config file; the environment wins
    when both are set.
    """

    # WorkflowMax API Configuration
    wfm_api_key: Optional[str] = Field(default=None, alias="WFM_API_KEY")
    wfm_account_key: Optional[str] = Field(default=None, alias="WFM_ACCOUNT_KEY")
    wfm_base_url: str = Field(
        default="https://api.workflowmax.com", alias="WFM_BASE_URL"
    )
    # Overrides wfm.email from the Timetrap config file when set
    wfm_staff_email: Optional[str] = Field(default=None, alias="WFM_STAFF_EMAIL")

    # Timetrap Configuration
    timetrap_config_file: str = Field(
        default="~/.timetrap.yml", alias="TIMETRAP_CONFIG_FILE"
    )
    timetrap_database_file: str = Field(
        default="~/.timetrap.db", alias="TIMETRAP_DATABASE_FILE"
    )

    # Processing Configuration
    max_retries: int = Field(default=3, alias="MAX_RETRIES")
    retry_delay: float = Field(default=1.0, alias="RETRY_DELAY")
    request_timeout: float = Field(default=30.0, alias="REQUEST_TIMEOUT")

    # LOG_* entries in .env belong to LoggingConfig
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("wfm_base_url")
    @classmethod
    def validate_base_url(cls, v):
        """Ensure base URL is an http(s) URL without trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("WFM base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("wfm_api_key", "wfm_account_key")
    @classmethod
    def blank_key_is_unset(cls, v):
        """Treat an empty key as not configured."""
        if v is not None and not v.strip():
            return None
        return v


def load_config(env_file: Optional[str] = None) -> WfmSyncConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return WfmSyncConfig()


# Global configuration instance
_config: Optional[WfmSyncConfig] = None


def get_config() -> WfmSyncConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> WfmSyncConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
