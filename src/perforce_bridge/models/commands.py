"""Client command catalog entries."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientCommand(BaseModel):
    """A p4 command that can be run through the passthrough executor."""

    name: str = Field(..., description="p4 command name")
    description: str = Field(default="", description="One-line description")

    model_config = ConfigDict(frozen=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Command name cannot be empty")
        return v.strip()
