"""Client configuration loaded from the environment."""

import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.askyourpdf.com"
DEFAULT_TIMEOUT = 60.0
DEFAULT_UPLOAD_FILENAME = "script.pdf"
DEFAULT_EXTRACTION_PROMPT = (
    "Extract and format the entire script content as plain text, "
    "preserving line breaks and character dialogues."
)

_TRUTHY = {"1", "true", "yes", "on"}


class ClientSettings(BaseModel):
    """Immutable settings for DocumentExtractionClient.

    An empty api_key is accepted here; the client refuses to make any request until
    one is configured.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    upload_filename: str = DEFAULT_UPLOAD_FILENAME
    extraction_prompt: str = DEFAULT_EXTRACTION_PROMPT
    log_key_prefix: bool = False

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be a positive number of seconds")
        return value

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, api_key: Optional[str] = None, **overrides) -> "ClientSettings":
        """
        Build settings from environment variables (and a local .env file).

        Args:
            api_key: Explicit API key. If not provided, ASKYOURPDF_API_KEY is used.
            **overrides: Any other field, taking precedence over the environment.

        Returns:
            ClientSettings instance

        Raises:
            ConfigurationError: If an environment value cannot be used
        """
        load_dotenv()

        raw_timeout = os.getenv("ASKYOURPDF_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigurationError(
                f"ASKYOURPDF_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            ) from None

        values = {
            "api_key": api_key or os.getenv("ASKYOURPDF_API_KEY", ""),
            "base_url": os.getenv("ASKYOURPDF_BASE_URL", DEFAULT_BASE_URL),
            "timeout": timeout,
            "log_key_prefix": os.getenv("ASKYOURPDF_LOG_KEY_PREFIX", "false").strip().lower() in _TRUTHY,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid client settings: {e}") from e
