"""Settings that shape generated SQL."""

from datetime import tzinfo

import pytz
from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from sybase_dialect.types.capabilities import Supports
from .base import DialectBaseSettings


class GeneratorSettings(DialectBaseSettings):
    model_config = SettingsConfigDict(env_prefix="SYBASE_GENERATOR_")

    quote_char: str = Field(
        default='"',
        min_length=1,
        max_length=1,
        description="Character wrapped around identifiers"
    )
    max_statement_arguments: int = Field(
        default=250,
        ge=2,
        description="Per-statement value budget; bulk inserts are batched against it"
    )
    default_delete_limit: int = Field(
        default=1,
        ge=1,
        description="Row cap applied to DELETE when the request does not set one"
    )
    strict_features: bool = Field(
        default=True,
        description=(
            "Raise UnsupportedFeatureError when a request needs a capability the engine lacks. "
            "When False the unsupported part is dropped and a warning is logged."
        )
    )
    timezone: str = Field(
        default="UTC",
        description="Timezone aware datetimes are converted to before they are inlined"
    )
    supports: Supports = Field(
        default_factory=Supports,
        description="Capability matrix of the target engine"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError as e:
            raise ValueError(f"Unknown timezone '{v}'") from e
        return v

    @property
    def tzinfo(self) -> tzinfo:
        return pytz.timezone(self.timezone)

    @classmethod
    def get_env_prefix(cls) -> str:
        return "SYBASE_GENERATOR_"
