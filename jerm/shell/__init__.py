"""Shell-facing collaborators: input parsing, ``cd`` resolution, command execution."""

from .executor import CommandResult, CommandRunner, execute_command, resolve_cd_path, set_actual_directory
from .parser import CommandKind, ParsedCommand, parse_command

__all__ = [
    "CommandKind",
    "CommandResult",
    "CommandRunner",
    "ParsedCommand",
    "execute_command",
    "parse_command",
    "resolve_cd_path",
    "set_actual_directory",
]
