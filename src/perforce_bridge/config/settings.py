"""Configuration management for perforce-bridge."""

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from perforce_bridge.models.connection import ConnectionConfig


DEFAULT_P4_EXECUTABLE = "p4"


class Settings(BaseSettings):
    """Application settings loaded from the environment and ``.env``.

    Connection fields accept the standard Perforce variables (P4USER,
    P4PASSWD, P4CLIENT, P4PORT) as well as P4BRIDGE_-prefixed names.
    """

    model_config = SettingsConfigDict(
        env_prefix="P4BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Storage base directory (debug captures)
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".perforce-bridge")

    # Connection settings (empty = p4 default)
    user_name: str = Field(
        default="",
        validation_alias=AliasChoices("P4BRIDGE_USER_NAME", "P4USER"),
    )
    password: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("P4BRIDGE_PASSWORD", "P4PASSWD"),
    )
    client_name: str = Field(
        default="",
        validation_alias=AliasChoices("P4BRIDGE_CLIENT_NAME", "P4CLIENT"),
    )
    server_name: str = Field(
        default="",
        validation_alias=AliasChoices("P4BRIDGE_SERVER_NAME", "P4PORT"),
    )
    exe_path: str = DEFAULT_P4_EXECUTABLE

    # Sync behaviour
    use_force_sync: bool = False

    # Debug settings
    debug: bool = False

    @property
    def debug_log_dir(self) -> Path:
        """Get the debug log directory."""
        return self.data_dir / "logs"

    def connection_config(self, **overrides: Optional[object]) -> ConnectionConfig:
        """Build the immutable connection config, applying non-None overrides.

        Args:
            **overrides: Field values (e.g. from CLI flags); None leaves the setting as is

        Returns:
            ConnectionConfig for the provider
        """
        values = {
            "user_name": self.user_name,
            "password": self.password,
            "client_name": self.client_name,
            "server_name": self.server_name,
            "exe_path": self.exe_path,
            "use_force_sync": self.use_force_sync,
        }
        for key, value in overrides.items():
            if key not in values:
                raise KeyError(f"Unknown connection setting: {key}")
            if value is not None:
                values[key] = value
        return ConnectionConfig(**values)
