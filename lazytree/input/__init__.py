"""Keyboard input: key tokens, combo registry, and tree navigation."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import KeyEvent, canonical_token, parse_key_token
from .navigator import (
    INTENT_COLLAPSE,
    INTENT_CREATE_FILE,
    INTENT_CREATE_FOLDER,
    INTENT_DELETE,
    INTENT_EXPAND,
    INTENT_OPEN,
    INTENT_RENAME,
    KeyboardNavigator,
    KeyOutcome,
    TreeIntent,
)

__all__ = [
    "KeyEvent",
    "canonical_token",
    "parse_key_token",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyboardNavigator",
    "KeyOutcome",
    "TreeIntent",
    "INTENT_COLLAPSE",
    "INTENT_CREATE_FILE",
    "INTENT_CREATE_FOLDER",
    "INTENT_DELETE",
    "INTENT_EXPAND",
    "INTENT_OPEN",
    "INTENT_RENAME",
]
