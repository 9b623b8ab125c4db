"""Full-screen frame composition.

A frame is the shortcut sidebar on the left and, on the right, either the
terminal transcript ending in the prompt line or the directory navigator.
The bottom row carries the mode label and a hint or transient message.
Frames are built as plain row lists so layout can be tested without a tty.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .ansi import clip_ansi_line, display_width, pad_ansi_line, truncate_left
from .coordinator import InteractionMode, RenderSnapshot
from .highlight import DEFAULT_STYLE, highlight_command_line, sanitize_terminal_text
from .navigation import BrowseView
from .prompt import format_git_segment
from .ui_theme import UITheme

SIDEBAR_WIDTH = 25
MIN_WIDTH_FOR_SIDEBAR = 60

MODE_LABELS = {
    InteractionMode.NORMAL: " NORMAL ",
    InteractionMode.BROWSING: " BROWSE ",
    InteractionMode.SHORTCUT_SELECTION: " GOTO ",
}
MODE_HINTS = {
    InteractionMode.NORMAL: "cd -list/Ctrl+N browse  Alt+1..9 shortcut  jerm save|goto  Ctrl+D quit",
    InteractionMode.BROWSING: "Up/Down select  Right enter  Left parent  Enter cd here  Esc cancel",
    InteractionMode.SHORTCUT_SELECTION: "Up/Down select  Enter jump  Esc cancel",
}


@dataclass(frozen=True)
class RenderContext:
    snapshot: RenderSnapshot
    output_lines: Sequence[str]
    input_text: str
    input_cursor: int
    width: int
    height: int
    theme: UITheme
    style: str = DEFAULT_STYLE
    no_color: bool = False
    running_command: str | None = None


@dataclass(frozen=True)
class Frame:
    rows: list[str]
    cursor: tuple[int, int] | None


def styled_prompt(snapshot: RenderSnapshot, theme: UITheme) -> str:
    """Colorized prompt; identical to ``snapshot.prompt`` once ANSI codes are removed."""
    path = f"{theme.prompt_path}{snapshot.display_path}{theme.reset}"
    if snapshot.status is None:
        return f"{path} $"
    git_color = theme.git_dirty if snapshot.status.dirty else theme.git_clean
    return f"{path} {git_color}{format_git_segment(snapshot.status)}{theme.reset} $"


def build_sidebar_rows(snapshot: RenderSnapshot, theme: UITheme, width: int, rows: int) -> list[str]:
    out: list[str] = []
    if not snapshot.shortcuts:
        out.extend([f"{theme.hint}No shortcuts{theme.reset}", "", f"{theme.hint}jerm save to add{theme.reset}"])
    for index, shortcut in enumerate(snapshot.shortcuts):
        age = shortcut.time_ago()
        name_cols = max(1, width - 3 - len(age))
        name = truncate_left(shortcut.display_name(), name_cols)
        gap = " " * max(1, width - 2 - display_width(name) - len(age))
        line = (
            f"{theme.shortcut_number}{index + 1}{theme.reset} "
            f"{theme.shortcut_path}{name}{theme.reset}{gap}{theme.shortcut_age}{age}{theme.reset}"
        )
        if snapshot.shortcut_selected == index:
            line = f"{theme.reverse}{index + 1} {name}{gap}{age}{theme.reset}"
        out.append(line)
    return (out + [""] * rows)[:rows]


def build_browser_rows(view: BrowseView, theme: UITheme, width: int, rows: int) -> list[str]:
    header = f"{theme.browse_path}{truncate_left(str(view.virtual_path), width)}{theme.reset}"
    list_rows = max(0, rows - 1)
    out = [header]
    if not view.entries:
        out.append(f"{theme.hint}(no subdirectories){theme.reset}")
        return (out + [""] * rows)[:rows]

    start = 0
    if list_rows > 0 and view.selected >= list_rows:
        start = view.selected - list_rows + 1
    for index in range(start, min(len(view.entries), start + list_rows)):
        name = sanitize_terminal_text(view.entries[index]) + "/"
        if index == view.selected:
            out.append(f"{theme.reverse}> {name}{theme.reset}")
        else:
            out.append(f"  {theme.browse_dir}{name}{theme.reset}")
    return (out + [""] * rows)[:rows]


def build_terminal_rows(context: RenderContext, width: int, rows: int) -> tuple[list[str], tuple[int, int] | None]:
    """Return transcript rows ending in the prompt line, plus the cursor cell."""
    snapshot = context.snapshot
    prompt_plain = snapshot.prompt + " "
    input_before_cursor = context.input_text[: context.input_cursor]
    cursor_col = display_width(prompt_plain) + display_width(sanitize_terminal_text(input_before_cursor))
    if cursor_col < width:
        prompt_line = (
            styled_prompt(snapshot, context.theme)
            + " "
            + highlight_command_line(context.input_text, context.style, context.no_color)
        )
    else:
        # Scroll the plain line horizontally so the cursor stays visible.
        shift = cursor_col - width + 1
        plain = prompt_plain + sanitize_terminal_text(context.input_text)
        prompt_line = plain[shift:]
        cursor_col -= shift

    transcript = [sanitize_terminal_text(line) for line in context.output_lines]
    if context.running_command is not None:
        transcript.append(f"{context.theme.hint}running: {context.running_command}{context.theme.reset}")
    visible = (transcript + [prompt_line])[-rows:] if rows > 0 else []
    cursor = (len(visible) - 1, cursor_col) if visible else None
    return visible + [""] * (rows - len(visible)), cursor


def build_status_row(snapshot: RenderSnapshot, theme: UITheme, width: int) -> str:
    label = MODE_LABELS[snapshot.mode]
    if snapshot.message:
        detail = f"{theme.message}{snapshot.message}{theme.reset}"
    else:
        detail = f"{theme.hint}{MODE_HINTS[snapshot.mode]}{theme.reset}"
    return clip_ansi_line(f"{theme.reverse}{label}{theme.reset} {detail}", width)


def build_frame(context: RenderContext) -> Frame:
    width = max(1, context.width)
    height = max(2, context.height)
    theme = context.theme
    snapshot = context.snapshot
    body_rows = height - 2

    sidebar_width = SIDEBAR_WIDTH if width >= MIN_WIDTH_FOR_SIDEBAR else 0
    main_col = sidebar_width + 1 if sidebar_width else 0
    main_width = max(1, width - main_col)

    if snapshot.mode is InteractionMode.BROWSING and snapshot.browse is not None:
        title = " Browse "
        main_rows = build_browser_rows(snapshot.browse, theme, main_width, body_rows)
        cursor = None
    else:
        title = " Terminal "
        main_rows, cursor = build_terminal_rows(context, main_width, body_rows)

    rows: list[str] = []
    if sidebar_width:
        sidebar = build_sidebar_rows(snapshot, theme, sidebar_width, body_rows)
        header = (
            pad_ansi_line(f"{theme.title} Shortcuts{theme.reset}", sidebar_width)
            + f"{theme.divider}│{theme.reset}"
            + f"{theme.title}{title}{theme.reset}"
        )
        rows.append(header)
        for left, right in zip(sidebar, main_rows):
            rows.append(pad_ansi_line(left, sidebar_width) + f"{theme.divider}│{theme.reset}" + right)
    else:
        rows.append(f"{theme.title}{title}{theme.reset}")
        rows.extend(main_rows)
    rows.append(build_status_row(snapshot, theme, width))

    if cursor is not None:
        cursor = (cursor[0] + 1, main_col + cursor[1])
    return Frame(rows=[clip_ansi_line(row, width) for row in rows], cursor=cursor)


def paint_frame(frame: Frame) -> str:
    """Escape-sequence string that redraws the whole screen for ``frame``."""
    out: list[str] = ["\033[?25l\033[H"]
    for index, row in enumerate(frame.rows):
        out.append(row)
        out.append("\033[0m\033[K")
        if index < len(frame.rows) - 1:
            out.append("\r\n")
    if frame.cursor is not None:
        row, col = frame.cursor
        out.append(f"\033[{row + 1};{col + 1}H\033[?25h")
    return "".join(out)
