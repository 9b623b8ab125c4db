"""Classify one line of user input into a built-in or shell command."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class CommandKind(enum.Enum):
    EMPTY = "empty"
    CD = "cd"
    CD_LIST = "cd-list"
    CLEAR = "clear"
    EXIT = "exit"
    JERM_SAVE = "jerm-save"
    JERM_GOTO = "jerm-goto"
    SHELL = "shell"


@dataclass(frozen=True)
class ParsedCommand:
    kind: CommandKind
    argument: str | None = None


def parse_command(text: str) -> ParsedCommand:
    trimmed = text.strip()
    if not trimmed:
        return ParsedCommand(CommandKind.EMPTY)

    parts = trimmed.split(None, 1)
    head = parts[0]
    args = parts[1].strip() if len(parts) > 1 else None

    if head == "cd":
        if args in {"-list", "--list"}:
            return ParsedCommand(CommandKind.CD_LIST)
        return ParsedCommand(CommandKind.CD, args)
    if head == "clear":
        return ParsedCommand(CommandKind.CLEAR)
    if head in {"exit", "quit"}:
        return ParsedCommand(CommandKind.EXIT)
    if head == "jerm" and args == "save":
        return ParsedCommand(CommandKind.JERM_SAVE)
    if head == "jerm" and args == "goto":
        return ParsedCommand(CommandKind.JERM_GOTO)
    return ParsedCommand(CommandKind.SHELL, trimmed)
