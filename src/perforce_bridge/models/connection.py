"""Connection settings handed to every p4 invocation."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConnectionConfig(BaseModel):
    """Immutable Perforce connection settings.

    Empty strings mean "use the p4 default" (P4USER, P4CLIENT, ... from the
    environment or P4CONFIG) and the matching flag is left off the command line.

    Attributes:
        user_name: Perforce user (-u)
        password: Perforce password or ticket (-P); never shown in repr or logs
        client_name: Client workspace name (-c)
        server_name: Server address, e.g. "ssl:perforce:1666" (-p)
        exe_path: Path to the p4 executable
        use_force_sync: Pass -f to every sync
    """

    user_name: str = Field(default="", description="Perforce user name")
    password: str = Field(default="", repr=False, description="Perforce password")
    client_name: str = Field(default="", description="Client workspace name")
    server_name: str = Field(default="", description="Server address (P4PORT)")
    exe_path: str = Field(default="p4", description="Path to the p4 executable")
    use_force_sync: bool = Field(default=False, description="Force sync (-f)")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "user_name": "builder",
                "client_name": "build-ws",
                "server_name": "perforce:1666",
                "exe_path": "/usr/local/bin/p4",
            }
        },
    )

    @field_validator("user_name", "password", "client_name", "server_name", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        """Treat None as "use the tool default"."""
        return "" if v is None else v

    @field_validator("exe_path", mode="before")
    @classmethod
    def default_exe_path(cls, v):
        """Fall back to p4 on the PATH when no executable is given."""
        if v is None or not str(v).strip():
            return "p4"
        return str(v).strip()
