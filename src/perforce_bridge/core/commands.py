"""Catalog of p4 commands offered by the passthrough executor."""

from importlib import resources

from perforce_bridge.models.commands import ClientCommand

COMMANDS_RESOURCE = "p4_commands.txt"


def parse_commands(text: str) -> list[ClientCommand]:
    """Parse "name description" lines; blank lines are ignored."""
    commands = []
    for line in text.splitlines():
        parts = line.split(None, 1)
        if not parts:
            continue
        description = parts[1].strip() if len(parts) > 1 else ""
        commands.append(ClientCommand(name=parts[0], description=description))
    return commands


def load_available_commands() -> list[ClientCommand]:
    """Load the packaged p4 command list."""
    text = (
        resources.files("perforce_bridge")
        .joinpath("data")
        .joinpath(COMMANDS_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return parse_commands(text)
