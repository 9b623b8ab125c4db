"""Main interactive loop and key handling.

One synchronous loop owns every state change: it drains completed status
and command results, fires the periodic status tick, redraws when the frame
changed, and then waits briefly for one key. Nothing here blocks on git or
on a shell command.
"""

from __future__ import annotations

import logging
import shutil
import time
from collections.abc import Callable

from .coordinator import Coordinator, InteractionMode
from .highlight import DEFAULT_STYLE
from .input import read_key
from .key_registry import KeyComboBinding, KeyComboRegistry
from .line_editor import LineEditor
from .render import Frame, RenderContext, build_frame, paint_frame
from .shell import CommandKind, CommandRunner, parse_command
from .terminal import TerminalController
from .ui_theme import UITheme

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 50
MAX_OUTPUT_LINES = 5000


class JermApp:
    def __init__(
        self,
        coordinator: Coordinator,
        *,
        runner: CommandRunner,
        theme: UITheme,
        refresh_seconds: float,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.coordinator = coordinator
        self.runner = runner
        self.theme = theme
        self.refresh_seconds = refresh_seconds
        self.style = style
        self.no_color = no_color
        self._monotonic = monotonic
        self.editor = LineEditor()
        self.output: list[str] = []
        self.should_quit = False
        self.running_command: str | None = None
        self._last_tick = monotonic()
        self._last_frame: Frame | None = None
        self._registries = {
            InteractionMode.NORMAL: self._normal_bindings(),
            InteractionMode.BROWSING: self._browsing_bindings(),
            InteractionMode.SHORTCUT_SELECTION: self._selection_bindings(),
        }

    # Key tables

    def _normal_bindings(self) -> KeyComboRegistry:
        editor = self.editor
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("ENTER",), self.submit_line),
            KeyComboBinding(("BACKSPACE",), editor.backspace),
            KeyComboBinding(("DELETE",), editor.delete),
            KeyComboBinding(("LEFT",), editor.move_left),
            KeyComboBinding(("RIGHT",), editor.move_right),
            KeyComboBinding(("UP",), editor.history_prev),
            KeyComboBinding(("DOWN",), editor.history_next),
            KeyComboBinding(("HOME", "CTRL_A"), editor.home),
            KeyComboBinding(("END", "CTRL_E"), editor.end),
            KeyComboBinding(("CTRL_U", "ESC"), editor.clear),
            KeyComboBinding(("CTRL_L",), self.output.clear),
            KeyComboBinding(("CTRL_C",), self._interrupt_line),
            KeyComboBinding(("CTRL_D",), self._quit_if_empty),
            KeyComboBinding(("CTRL_N",), self.coordinator.activate_browsing),
            KeyComboBinding(("TAB",), lambda: None),
        )
        for slot in range(1, 10):
            registry.register_bindings(KeyComboBinding((f"ALT_{slot}",), self._jump_handler(slot)))
        return registry

    def _browsing_bindings(self) -> KeyComboRegistry:
        coordinator = self.coordinator
        engine = coordinator.engine
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP",), lambda: engine.move_selection(-1)),
            KeyComboBinding(("DOWN",), lambda: engine.move_selection(1)),
            KeyComboBinding(("RIGHT",), engine.descend),
            KeyComboBinding(("LEFT",), engine.ascend),
            KeyComboBinding(("ENTER",), self._confirm_browsing),
            KeyComboBinding(("ESC", "CTRL_C"), coordinator.cancel_browsing),
            KeyComboBinding(("CTRL_N",), coordinator.activate_browsing),
        )

    def _selection_bindings(self) -> KeyComboRegistry:
        coordinator = self.coordinator
        return KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP",), lambda: coordinator.move_shortcut_selection(-1)),
            KeyComboBinding(("DOWN",), lambda: coordinator.move_shortcut_selection(1)),
            KeyComboBinding(("ENTER",), self._confirm_shortcut_selection),
            KeyComboBinding(("ESC", "CTRL_C"), coordinator.cancel_shortcut_selection),
            KeyComboBinding(("CTRL_N",), coordinator.activate_browsing),
        )

    def handle_key(self, key: str) -> None:
        mode = self.coordinator.mode
        registry = self._registries[mode]
        if registry.handles(key):
            registry.dispatch(key)
            return
        if mode is InteractionMode.NORMAL and key.isprintable() and len(key) == 1:
            self.editor.insert(key)

    # Actions

    def add_output(self, line: str) -> None:
        self.output.append(line)
        overflow = len(self.output) - MAX_OUTPUT_LINES
        if overflow > 0:
            del self.output[:overflow]

    def _interrupt_line(self) -> None:
        if not self.editor.text:
            self.should_quit = True
            return
        self.add_output(f"{self.coordinator.render_snapshot().prompt} {self.editor.text}^C")
        self.editor.clear()

    def _quit_if_empty(self) -> None:
        if not self.editor.text:
            self.should_quit = True

    def _jump_handler(self, slot: int) -> Callable[[], None]:
        def jump() -> None:
            target = self.coordinator.jump_to_shortcut(slot)
            if target is not None:
                self.add_output(f"cd {target}")

        return jump

    def _confirm_browsing(self) -> None:
        target = self.coordinator.confirm_browsing()
        if target is not None:
            self.add_output(f"cd {target}")

    def _confirm_shortcut_selection(self) -> None:
        target = self.coordinator.confirm_shortcut_selection()
        if target is not None:
            self.add_output(f"cd {target}")

    def submit_line(self) -> None:
        if self.running_command is not None:
            self.coordinator.set_message("a command is still running")
            return

        prompt = self.coordinator.render_snapshot().prompt
        line = self.editor.submit()
        self.add_output(f"{prompt} {line}")
        command = parse_command(line)
        coordinator = self.coordinator

        if command.kind is CommandKind.CD:
            if coordinator.change_directory(command.argument) is None:
                self.add_output(coordinator.message)
        elif command.kind is CommandKind.CD_LIST:
            coordinator.activate_browsing()
        elif command.kind is CommandKind.CLEAR:
            self.output.clear()
        elif command.kind is CommandKind.EXIT:
            self.should_quit = True
        elif command.kind is CommandKind.JERM_SAVE:
            coordinator.save_shortcut()
            self.add_output(coordinator.message)
        elif command.kind is CommandKind.JERM_GOTO:
            coordinator.enter_shortcut_selection()
        elif command.kind is CommandKind.SHELL and command.argument:
            if self.runner.submit(command.argument, coordinator.working_directory):
                self.running_command = command.argument

    # Loop

    def tick(self) -> None:
        """Drain background results and fire the periodic status refresh."""
        self.coordinator.poll()
        for result in self.runner.drain_results():
            for line in result.all_lines():
                self.add_output(line)
            self.running_command = None
            self.coordinator.on_command_executed()

        now = self._monotonic()
        if now - self._last_tick >= self.refresh_seconds:
            self._last_tick = now
            self.coordinator.on_timer_tick()

    def render_context(self, width: int, height: int) -> RenderContext:
        return RenderContext(
            snapshot=self.coordinator.render_snapshot(),
            output_lines=self.output,
            input_text=self.editor.text,
            input_cursor=self.editor.cursor,
            width=width,
            height=height,
            theme=self.theme,
            style=self.style,
            no_color=self.no_color,
            running_command=self.running_command,
        )

    def run(self, terminal: TerminalController, stdin_fd: int) -> None:
        self.coordinator.start()
        with terminal.raw_mode():
            terminal.write("\033[2J")
            while not self.should_quit:
                self.tick()
                term = shutil.get_terminal_size((80, 24))
                frame = build_frame(self.render_context(term.columns, term.lines))
                if frame != self._last_frame:
                    terminal.write(paint_frame(frame))
                    self._last_frame = frame
                key = read_key(stdin_fd, timeout_ms=POLL_INTERVAL_MS)
                if key:
                    self.handle_key(key)
        logger.info("session ended in %s", self.coordinator.working_directory)
