from typing import Any, Dict, Literal, Optional

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .exceptions import ConfigurationError

# Names uvicorn accepts as well as logging.
LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    """
    Service configuration, read from the environment.
    The .env file is loaded into the environment by drive_run before this is built.
    """

    model_config = SettingsConfigDict(env_ignore_empty=True)

    # --- Google Drive service account (one of the two is required) ---
    # The key itself as a JSON object; decoded from the environment value.
    GOOGLE_SERVICE_ACCOUNT_KEY: Optional[Dict[str, Any]] = None
    # Path to a key file.
    GOOGLE_SERVICE_ACCOUNT_JSON: Optional[str] = None

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = Field(3000, ge=1, le=65535)
    LOG_LEVEL: LogLevel = "INFO"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("GOOGLE_SERVICE_ACCOUNT_JSON", mode="before")
    @classmethod
    def blank_key_file_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def require_service_account(self):
        if self.GOOGLE_SERVICE_ACCOUNT_KEY is None and self.GOOGLE_SERVICE_ACCOUNT_JSON is None:
            raise ValueError(
                "Please set GOOGLE_SERVICE_ACCOUNT_KEY (or GOOGLE_SERVICE_ACCOUNT_JSON) in your .env file"
            )
        return self


def load_settings(**values) -> Settings:
    """Build the settings, turning any validation failure into ``ConfigurationError``.

    Keyword arguments override the environment.
    """
    try:
        return Settings(**values)
    except (ValidationError, SettingsError) as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
