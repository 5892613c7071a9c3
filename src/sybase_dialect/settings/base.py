from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DialectBaseSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__"
    )

    log_level: str = Field(
        default="INFO",
        description="Log level applied by setup_logging when the package configures logging"
    )

    @classmethod
    def get_env_prefix(cls) -> str:
        """Get the environment variable prefix for this settings class.

        Override this method in subclasses to provide custom prefixes for
        environment variable namespacing.

        Returns:
            str: Environment variable prefix (empty string for base class)
        """
        return ""
