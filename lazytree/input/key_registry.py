"""Key-combo dispatch table keyed by canonical key tokens."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .keys import KeyEvent, canonical_token

KeyHandler = Callable[[KeyEvent], bool | None]


@dataclass(frozen=True)
class KeyComboBinding:
    """One handler reachable from one or more key combos."""

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Dispatch table that matches events regardless of token spelling.

    ``"ctrl+a"``, ``"CTRL_A"`` and ``"META_A"`` all register the same slot.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, KeyHandler] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding; later registrations replace earlier ones."""
        for combo in binding.combos:
            self._handlers[canonical_token(combo)] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def bound_tokens(self) -> list[str]:
        return sorted(self._handlers)

    def dispatch(self, event: KeyEvent) -> bool | None:
        """Run the handler bound to ``event``; ``None`` means nothing is bound."""
        handler = self._handlers.get(event.token())
        if handler is None:
            return None
        return handler(event)


__all__ = ["KeyComboBinding", "KeyComboRegistry", "KeyHandler"]
