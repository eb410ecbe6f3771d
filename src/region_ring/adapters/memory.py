"""In-memory editor host wiring region capture and preview into a command loop."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import count
from typing import Callable, Dict, List, Optional

from region_ring.buffer import Buffer
from region_ring.commands import GLOBAL_KEYMAP, CommandContext, CommandResult
from region_ring.host import KeepPredicate, SelectionSnapshot, snapshot_selection
from region_ring.keymaps import (
    ActionRef,
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    load_default_keymaps,
)
from region_ring.preview import PreviewController, PreviewError, PreviewHooks
from region_ring.regions import RegionTracker
from region_ring.runtime import telemetry
from region_ring.runtime.config import RingSettings

CommandHandler = Callable[[CommandContext], Optional[CommandResult]]

UNBOUND = "host.unbound"


@dataclass(slots=True)
class Overlay:
    id: int
    start: int
    end: int


@dataclass(slots=True)
class TransientBindings:
    keymap: str
    keep_predicate: KeepPredicate
    on_exit: Callable[[], None]


class Editor:
    """Single-buffer editor implementing every host protocol.

    Each command goes through :meth:`execute`, which first lets an installed
    transient keymap decide whether it survives, then brackets the command
    with the region tracker's ``before_command``/``after_command`` pair.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        settings: Optional[RingSettings] = None,
        registry: Optional[KeymapRegistry] = None,
        hooks: Optional[PreviewHooks] = None,
    ) -> None:
        self.buffer = Buffer(text, name=name)
        self.settings = settings or RingSettings.from_env()
        self.registry = registry or KeymapRegistry(logger_name="region_ring.keymaps")
        if registry is None:
            load_default_keymaps(self.registry)
        self.resolver = KeymapResolver(self.registry, logger_name="region_ring.keymaps")
        self.tracker = RegionTracker(
            self.buffer, capacity=self.settings.capacity, name=name
        )
        self.preview = PreviewController(
            self,
            self.tracker,
            settings=self.settings,
            hooks=hooks,
            registry=self.registry,
        )
        self.overlays: Dict[int, Overlay] = {}
        self.messages: List[str] = []
        self.logger = telemetry.get_logger("region_ring.host")
        self._overlay_ids = count(1)
        self._transient: Optional[TransientBindings] = None
        self._pending_keys: List[str] = []
        self._register_host_commands()

    # -- selection -----------------------------------------------------

    def selection_active(self) -> bool:
        return self.buffer.selection_active()

    def current_point(self) -> int:
        return self.buffer.current_point()

    def current_mark(self) -> Optional[int]:
        return self.buffer.current_mark()

    def set_point(self, point: int) -> None:
        self.buffer.set_point(point)

    def clear_selection(self) -> None:
        self.buffer.clear_selection()

    def set_selection(self, point: int, mark: int) -> None:
        self.buffer.set_selection(point, mark)

    def selection(self) -> SelectionSnapshot:
        return snapshot_selection(self.buffer)

    # -- highlights ----------------------------------------------------

    def create_highlight(self, start: int, end: int) -> Overlay:
        overlay = Overlay(id=next(self._overlay_ids), start=start, end=end)
        self.overlays[overlay.id] = overlay
        return overlay

    def move_highlight(self, handle: object, start: int, end: int) -> None:
        overlay = self._overlay(handle)
        overlay.start, overlay.end = start, end

    def destroy_highlight(self, handle: object) -> None:
        del self.overlays[self._overlay(handle).id]

    def _overlay(self, handle: object) -> Overlay:
        if not isinstance(handle, Overlay) or handle.id not in self.overlays:
            raise KeyError(f"Unknown highlight {handle!r}")
        return handle

    # -- transient bindings and messages -------------------------------

    @property
    def transient_keymap(self) -> Optional[str]:
        return self._transient.keymap if self._transient else None

    def install_transient_bindings(
        self,
        keymap: object,
        keep_predicate: KeepPredicate,
        on_exit: Callable[[], None],
    ) -> Callable[[], None]:
        installed = TransientBindings(str(keymap), keep_predicate, on_exit)
        self._transient = installed

        def dispose() -> None:
            if self._transient is installed:
                self._transient = None

        return dispose

    def show_message(self, text: str) -> None:
        self.messages.append(text)
        self.logger.info(f"message::{text}")

    # -- command loop --------------------------------------------------

    def register_command(
        self, command_id: str, handler: CommandHandler, *, description: str = ""
    ) -> None:
        self.registry.register_action(
            ActionRef(id=command_id, handler=handler, description=description),
            replace=True,
        )

    def execute(self, command_id: str, *args: object, count: int = 1) -> CommandResult:
        action = self.registry.get_action(command_id)
        with telemetry.span(
            "host::command",
            component="host",
            metadata={"command": command_id, "buffer": self.buffer.name},
        ):
            self._expire_transient(command_id)
            self.tracker.before_command()
            try:
                outcome = action(
                    CommandContext(
                        command_id=command_id,
                        host=self,
                        preview=self.preview,
                        count=count,
                        args=tuple(args),
                    )
                )
            finally:
                # A running preview owns the selection; it restores it itself.
                if self.preview.active:
                    self.tracker.discard_snapshot()
                else:
                    self.tracker.after_command()
        if isinstance(outcome, CommandResult):
            return outcome
        return CommandResult(command_id)

    def press(self, *keys: str, count: int = 1) -> Optional[CommandResult]:
        """Feed key descriptions (``"C-c"``, ``"r"``, ``"ENTER"``) to the loop.

        Preview refusals are reported as messages, the way an interactive
        command loop surfaces user errors.
        """

        result: Optional[CommandResult] = None
        for key in keys:
            token = KeyStroke.parse(key).token
            self._pending_keys.append(token)
            command_id, args = self._lookup_pending(token)
            if command_id is None:
                continue
            try:
                result = self.execute(command_id, *args, count=count)
            except PreviewError as exc:
                self.show_message(str(exc))
                result = CommandResult(command_id, status="error", message=str(exc))
        return result

    def _lookup_pending(self, token: str) -> tuple[Optional[str], tuple[object, ...]]:
        keymaps = [GLOBAL_KEYMAP]
        if self._transient is not None:
            keymaps.insert(0, self._transient.keymap)

        waiting = False
        for keymap in keymaps:
            resolution = self.resolver.resolve(keymap, self._pending_keys)
            if resolution.status == "match" and resolution.match is not None:
                self._pending_keys.clear()
                return resolution.match.action.id, ()
            waiting = waiting or resolution.status == "pending"
        if waiting:
            return None, ()

        self._pending_keys.clear()
        if len(token) == 1:
            return "host.insert", (token,)
        return UNBOUND, (token,)

    def _expire_transient(self, command_id: str) -> None:
        transient = self._transient
        if transient is None or transient.keep_predicate(command_id):
            return
        self._transient = None
        transient.on_exit()

    def _register_host_commands(self) -> None:
        commands: Dict[str, CommandHandler] = {
            "host.set_mark": _set_mark,
            "host.goto": _goto,
            "host.select": _select,
            "host.deactivate": _deactivate,
            "host.insert": _insert,
            "host.noop": _noop,
            UNBOUND: _noop,
        }
        for command_id, handler in commands.items():
            self.register_command(command_id, handler)


def _set_mark(context: CommandContext) -> CommandResult:
    buffer = context.host.buffer
    buffer.state.set_mark(buffer.current_point())
    return CommandResult(context.command_id, status="mark_set")


def _goto(context: CommandContext) -> CommandResult:
    (offset,) = context.args
    context.host.set_point(offset)
    return CommandResult(context.command_id)


def _select(context: CommandContext) -> CommandResult:
    point, mark = context.args
    context.host.set_selection(point, mark)
    return CommandResult(context.command_id)


def _deactivate(context: CommandContext) -> CommandResult:
    context.host.clear_selection()
    return CommandResult(context.command_id)


def _insert(context: CommandContext) -> CommandResult:
    context.host.buffer.insert_text("".join(str(arg) for arg in context.args))
    return CommandResult(context.command_id)


def _noop(context: CommandContext) -> CommandResult:
    return CommandResult(context.command_id, status="noop")


__all__ = ["Editor", "Overlay", "TransientBindings"]
