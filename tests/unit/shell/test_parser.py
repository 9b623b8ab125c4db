from __future__ import annotations

import unittest

from jerm.shell import CommandKind, ParsedCommand, parse_command


class ParseCommandTests(unittest.TestCase):
    def test_builtins(self) -> None:
        cases = {
            "": ParsedCommand(CommandKind.EMPTY),
            "   ": ParsedCommand(CommandKind.EMPTY),
            "cd": ParsedCommand(CommandKind.CD),
            "cd  ../src ": ParsedCommand(CommandKind.CD, "../src"),
            "cd -list": ParsedCommand(CommandKind.CD_LIST),
            "cd --list": ParsedCommand(CommandKind.CD_LIST),
            "clear": ParsedCommand(CommandKind.CLEAR),
            "exit": ParsedCommand(CommandKind.EXIT),
            "quit": ParsedCommand(CommandKind.EXIT),
            "jerm save": ParsedCommand(CommandKind.JERM_SAVE),
            "jerm goto": ParsedCommand(CommandKind.JERM_GOTO),
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(parse_command(text), expected)

    def test_cd_argument_with_spaces_is_kept_whole(self) -> None:
        self.assertEqual(parse_command("cd 'My Docs'"), ParsedCommand(CommandKind.CD, "'My Docs'"))

    def test_everything_else_goes_to_the_shell(self) -> None:
        self.assertEqual(parse_command("  ls -la "), ParsedCommand(CommandKind.SHELL, "ls -la"))
        self.assertEqual(parse_command("jerm status"), ParsedCommand(CommandKind.SHELL, "jerm status"))
        self.assertEqual(parse_command("cdx"), ParsedCommand(CommandKind.SHELL, "cdx"))


if __name__ == "__main__":
    unittest.main()
