"""Connection settings for SQL Anywhere over ODBC."""

from typing import Dict, Optional

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from .base import DialectBaseSettings


class ConnectionSettings(DialectBaseSettings):
    model_config = SettingsConfigDict(env_prefix="SYBASE_")

    host: str = Field(default="localhost", description="Database server host")
    port: int = Field(default=2638, ge=1, le=65535, description="Database server port")
    username: Optional[str] = Field(default=None, description="Login user id")
    password: Optional[SecretStr] = Field(default=None, description="Login password")
    database: Optional[str] = Field(default=None, description="Database name (DBN)")
    server_name: Optional[str] = Field(default=None, description="Database server name")
    driver: str = Field(default="SQL Anywhere 17", description="ODBC driver name")

    odbc_connection_string: Optional[SecretStr] = Field(
        default=None,
        description="Full ODBC connection string. When set it overrides every other connection field."
    )
    dialect_options: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra ODBC keywords appended to the connection string"
    )

    pool_size: int = Field(default=5, ge=1, le=100)
    max_overflow: int = Field(default=10, ge=0)
    pool_timeout: int = Field(default=30, ge=1)
    connect_timeout: int = Field(default=15, ge=1)

    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum number of retry attempts for transient connection failures"
    )
    retry_delay_seconds: float = Field(
        default=1.0,
        ge=0.1,
        le=60.0,
        description="Initial delay between retry attempts in seconds"
    )

    @classmethod
    def get_env_prefix(cls) -> str:
        return "SYBASE_"

    def get_odbc_string(self) -> str:
        """Build the ODBC connection string.

        Returns:
            The override string when configured, otherwise one assembled
            from host, port, credentials and dialect options
        """
        if self.odbc_connection_string is not None:
            return self.odbc_connection_string.get_secret_value()

        parts: Dict[str, str] = {
            "DRIVER": "{" + self.driver + "}",
            "HOST": f"{self.host}:{self.port}",
        }
        if self.server_name:
            parts["ServerName"] = self.server_name
        if self.database:
            parts["DBN"] = self.database
        if self.username:
            parts["UID"] = self.username
        if self.password is not None:
            parts["PWD"] = self.password.get_secret_value()
        parts.update(self.dialect_options)
        return ";".join(f"{key}={value}" for key, value in parts.items())
