"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes. Prompt text is identical in every theme;
colors only wrap it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    title: str
    prompt_path: str
    git_clean: str
    git_dirty: str
    browse_dir: str
    browse_path: str
    shortcut_number: str
    shortcut_path: str
    shortcut_age: str
    hint: str
    message: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;81m",
    prompt_path="\033[1;34m",
    git_clean="\033[38;5;42m",
    git_dirty="\033[38;5;214m",
    browse_dir="\033[1;34m",
    browse_path="\033[1;38;5;81m",
    shortcut_number="\033[1;33m",
    shortcut_path="\033[38;5;252m",
    shortcut_age="\033[2;38;5;250m",
    hint="\033[2;38;5;250m",
    message="\033[38;5;203m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;45m",
    prompt_path="\033[1;38;5;45m",
    git_clean="\033[38;5;84m",
    git_dirty="\033[38;5;215m",
    browse_dir="\033[1;38;5;45m",
    browse_path="\033[1;38;5;39m",
    shortcut_number="\033[1;38;5;153m",
    shortcut_path="\033[38;5;252m",
    shortcut_age="\033[2;38;5;110m",
    hint="\033[2;38;5;110m",
    message="\033[38;5;210m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="",
    reset="",
    title="",
    prompt_path="",
    git_clean="",
    git_dirty="",
    browse_dir="",
    browse_path="",
    shortcut_number="",
    shortcut_path="",
    shortcut_age="",
    hint="",
    message="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    candidate = str(name or "").strip().lower()
    return _THEMES.get(candidate, DEFAULT_THEME)
