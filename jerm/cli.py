"""Command-line front door for jerm.

Parses CLI options, layers them over the persisted config, and either prints
a single prompt line (``--prompt``) or starts the interactive session.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .app import JermApp
from .config import Settings, load_settings, save_theme_name
from .coordinator import Coordinator
from .errors import JermError
from .git import NOT_A_REPOSITORY, GitProbe, StatusService, collect_status
from .highlight import DEFAULT_STYLE
from .logs import configure_logging, resolve_log_path
from .navigation import validate_directory
from .prompt import abbreviate_home, format_prompt
from .shell import CommandRunner
from .shortcuts import ShortcutManager
from .terminal import TerminalController
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)


def _positive_float(value: str) -> float:
    """argparse type for positive number values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jerm",
        description="Terminal front-end with a virtual directory browser and git-aware prompt.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); remembered for later sessions.",
    )
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style for the input line.")
    parser.add_argument(
        "--refresh-seconds",
        type=_positive_float,
        default=None,
        help="Seconds between remote-syncing status refreshes (default: config or 30).",
    )
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Append debug logs to PATH.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--prompt",
        metavar="PATH",
        default=None,
        help="Print the prompt line for PATH and exit.",
    )
    return parser


def render_prompt_line(path: Path, settings: Settings, probe: GitProbe | None = None) -> str:
    """Compute repository status for ``path`` synchronously and format the prompt."""
    if probe is None:
        probe = GitProbe(settings.git_probe_timeout_seconds, settings.git_fetch_timeout_seconds)
    try:
        outcome = collect_status(probe, path, 0)
    except JermError as exc:
        logger.debug("status unavailable for %s: %s", path, exc)
        outcome = None
    snapshot = None if outcome is None or outcome is NOT_A_REPOSITORY else outcome
    return format_prompt(abbreviate_home(path), snapshot)


def _startup_directory() -> Path:
    try:
        return Path.cwd().resolve()
    except OSError:
        # Deleted cwd; fall back to the filesystem root.
        root = Path(os.sep)
        os.chdir(root)
        return root


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch jerm in the current directory."""
    args = build_parser().parse_args(argv)
    configure_logging(resolve_log_path(args.log_file, args.debug), debug=args.debug)
    settings = load_settings()

    if args.prompt is not None:
        try:
            target = validate_directory(Path(args.prompt).expanduser().resolve())
        except JermError as exc:
            raise SystemExit(f"jerm: {exc}") from exc
        sys.stdout.write(render_prompt_line(target, settings) + "\n")
        return

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        raise SystemExit("jerm: an interactive terminal is required (try --prompt PATH)")

    if args.theme is not None:
        save_theme_name(args.theme)
    theme = resolve_theme(args.theme or settings.theme, no_color=args.no_color)
    refresh_seconds = args.refresh_seconds or settings.git_refresh_seconds

    probe = GitProbe(settings.git_probe_timeout_seconds, settings.git_fetch_timeout_seconds)

    def make_status_service(current_generation):
        return StatusService(
            probe,
            current_generation,
            timeout_seconds=settings.git_probe_timeout_seconds,
            fetch_timeout_seconds=settings.git_fetch_timeout_seconds,
        )

    coordinator = Coordinator(
        _startup_directory(),
        shortcuts=ShortcutManager(),
        make_status_service=make_status_service,
    )
    app = JermApp(
        coordinator,
        runner=CommandRunner(timeout_seconds=settings.command_timeout_seconds),
        theme=theme,
        refresh_seconds=refresh_seconds,
        style=args.style,
        no_color=args.no_color,
    )
    logger.info("session started in %s", coordinator.working_directory)
    stdin_fd = sys.stdin.fileno()
    app.run(TerminalController(stdin_fd, sys.stdout.fileno()), stdin_fd)


if __name__ == "__main__":
    main()
