"""Key events and their canonical string tokens.

Tokens look like ``"DOWN"``, ``"SHIFT_DOWN"``, ``"CTRL_A"`` or
``"CTRL_SHIFT_N"``: modifiers in fixed order, then the key name. Cmd/meta is
folded into ``CTRL`` so one binding covers both platforms.
"""

from __future__ import annotations

from dataclasses import dataclass

MODIFIER_ORDER = ("CTRL", "ALT", "SHIFT")

_KEY_ALIASES = {
    "ARROWUP": "UP",
    "ARROWDOWN": "DOWN",
    "ARROWLEFT": "LEFT",
    "ARROWRIGHT": "RIGHT",
    "RETURN": "ENTER",
    "ESCAPE": "ESC",
    " ": "SPACE",
    "DEL": "DELETE",
}

_MODIFIER_ALIASES = {
    "CTRL": "CTRL",
    "CONTROL": "CTRL",
    "CMD": "CTRL",
    "META": "CTRL",
    "ALT": "ALT",
    "OPTION": "ALT",
    "SHIFT": "SHIFT",
}


def normalize_key_name(key: str) -> str:
    """Map browser-style and terminal-style key names to one spelling."""
    if key == " ":
        return "SPACE"
    upper = key.upper()
    return _KEY_ALIASES.get(upper, upper)


@dataclass(frozen=True)
class KeyEvent:
    """One key press with its modifier state."""

    key: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False

    @property
    def name(self) -> str:
        return normalize_key_name(self.key)

    @property
    def has_ctrl(self) -> bool:
        return self.ctrl or self.meta

    def token(self) -> str:
        parts: list[str] = []
        if self.has_ctrl:
            parts.append("CTRL")
        if self.alt:
            parts.append("ALT")
        if self.shift:
            parts.append("SHIFT")
        parts.append(self.name)
        return "_".join(parts)


def parse_key_token(token: str) -> KeyEvent:
    """Parse a ``CTRL_SHIFT_N``-style token (``+`` also accepted as separator)."""
    if token == " ":
        return KeyEvent("SPACE")
    raw_parts = [part for part in token.replace("+", "_").split("_") if part]
    if not raw_parts:
        return KeyEvent(token)
    modifiers: set[str] = set()
    idx = 0
    while idx < len(raw_parts) - 1 and raw_parts[idx].upper() in _MODIFIER_ALIASES:
        modifiers.add(_MODIFIER_ALIASES[raw_parts[idx].upper()])
        idx += 1
    key = "_".join(raw_parts[idx:])
    return KeyEvent(
        key=key,
        ctrl="CTRL" in modifiers,
        shift="SHIFT" in modifiers,
        alt="ALT" in modifiers,
    )


def canonical_token(key: KeyEvent | str) -> str:
    """Return the canonical token for an event or a loosely spelled token."""
    event = key if isinstance(key, KeyEvent) else parse_key_token(key)
    return event.token()


__all__ = [
    "KeyEvent",
    "MODIFIER_ORDER",
    "canonical_token",
    "normalize_key_name",
    "parse_key_token",
]
