"""Configuration management using Pydantic Settings"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Mapping

from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from starling_spend.domain.exceptions import ConfigurationError

# Properties-file keys mapped onto settings fields
PROPERTY_KEYS = {
    "starling.baseUrl": "base_url",
    "starling.accessToken": "access_token",
    "starling.timeoutSeconds": "http_timeout_seconds",
}
REQUIRED_PROPERTY_KEYS = ("starling.baseUrl", "starling.accessToken")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or a properties file"""

    model_config = SettingsConfigDict(
        env_prefix="STARLING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Bank API
    base_url: str = "https://api-sandbox.starlingbank.com"
    access_token: SecretStr

    # Service
    service_name: str = "starling-spend"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "Settings":
        """
        Build settings from `starling.*` properties.

        Raises:
            ConfigurationError: A required key is absent or a value is invalid
        """
        missing = [key for key in REQUIRED_PROPERTY_KEYS if not properties.get(key)]
        if missing:
            raise ConfigurationError(f"Missing required configuration key(s): {', '.join(missing)}")

        values = {field: properties[key] for key, field in PROPERTY_KEYS.items() if key in properties}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_properties(path: str | Path) -> Dict[str, str]:
    """
    Parse `key=value` lines into a mapping.

    Blank lines and lines starting with `#` are skipped; each line splits on
    its first `=` and both sides are stripped.
    """
    properties: Dict[str, str] = {}
    for line_number, raw_line in enumerate(Path(path).read_text(encoding="utf-8").splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, separator, value = line.partition("=")
        if not separator:
            raise ConfigurationError(f"{path}:{line_number}: expected key=value, got {line!r}")
        properties[key.strip()] = value.strip()
    return properties


@lru_cache
def get_settings() -> Settings:
    """Load settings once from the environment / .env"""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
