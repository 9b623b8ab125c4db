"""Shell syntax highlighting for the input line and terminal text sanitizing."""

from __future__ import annotations

import re

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import BashLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_LEXER = BashLexer()
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    resolved = style
    try:
        get_style_by_name(style)
    except ClassNotFound:
        resolved = DEFAULT_STYLE
    formatter = Terminal256Formatter(style=resolved)
    _FORMATTERS[style] = formatter
    return formatter


def highlight_command_line(text: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Colorize a single command line; visible width is unchanged."""
    text = sanitize_terminal_text(text)
    if no_color or not text:
        return text
    rendered = highlight(text, _LEXER, _formatter_for_style(style))
    # Pygments always terminates output with a newline.
    if rendered.endswith("\n") and not text.endswith("\n"):
        rendered = rendered[:-1]
    return rendered
