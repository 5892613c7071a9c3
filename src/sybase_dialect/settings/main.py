from typing import Optional

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from .base import DialectBaseSettings
from .connection import ConnectionSettings
from .generator import GeneratorSettings


class _Settings(DialectBaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    generator: GeneratorSettings = Field(
        default_factory=GeneratorSettings,
        description="SQL generation behavior and engine capabilities"
    )
    connection: ConnectionSettings = Field(
        default_factory=ConnectionSettings,
        description="ODBC connection and pool configuration"
    )


_settings: Optional[_Settings] = None


def get_settings(force_reload: bool = False) -> _Settings:
    """Get the singleton settings instance.

    Args:
        force_reload: If True, creates a new Settings instance even if
                     one already exists. Useful for testing or when
                     environment variables have changed.

    Returns:
        Settings: The singleton Settings instance

    Example:
        ```python
        settings = get_settings()
        settings.generator.max_statement_arguments  # 250
        ```
    """
    global _settings

    if _settings is None or force_reload:
        _settings = _Settings()

    return _settings


def _reload_settings() -> _Settings:
    """Force reload of settings.

    This is primarily for testing purposes where you need to reset
    the singleton instance.
    """
    global _settings
    _settings = None
    return get_settings(force_reload=True)
