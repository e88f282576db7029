"""Key dispatch for the viewer's single interaction mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial

from .input import Key, KeyEvent, ctrl_key
from .navigation import apply_movement
from .state import EditorState

QUIT_BYTE = ctrl_key("q")

MOVEMENT_KEYS: tuple[Key, ...] = (
    Key.ARROW_UP,
    Key.ARROW_DOWN,
    Key.ARROW_LEFT,
    Key.ARROW_RIGHT,
    Key.HOME,
    Key.END,
    Key.PAGE_UP,
    Key.PAGE_DOWN,
)


class LoopExit(Enum):
    QUIT = "quit"


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key events to a single action callback."""

    combos: tuple[KeyEvent, ...]
    handler: Callable[[], object]


class KeyComboRegistry:
    """Small key-dispatch table keyed by decoded ``KeyEvent``s."""

    def __init__(self) -> None:
        self._handlers: dict[KeyEvent, Callable[[], object]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, event: KeyEvent) -> object:
        """Invoke the handler bound to ``event``; unbound events return ``None``."""
        handler = self._handlers.get(event)
        if handler is None:
            return None
        return handler()


def build_editor_keymap(state: EditorState) -> KeyComboRegistry:
    """Bind cursor movement and Ctrl-Q for ``state``."""
    registry = KeyComboRegistry()
    for key in MOVEMENT_KEYS:
        event = KeyEvent.named(key)
        registry.register_binding(KeyComboBinding((event,), partial(apply_movement, state, event)))
    registry.register_binding(KeyComboBinding((KeyEvent.char(QUIT_BYTE),), lambda: LoopExit.QUIT))
    return registry
