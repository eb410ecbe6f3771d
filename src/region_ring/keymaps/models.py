"""Dataclasses describing key strokes, bindings, and the actions they run."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

_MODIFIER_PREFIXES = {"C": "ctrl", "M": "alt", "S": "shift", "s": "super"}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            return "+".join(self.modifiers) + f"+{self.key}"
        return self.key

    @property
    def label(self) -> str:
        """Emacs-style description, e.g. ``C-c``."""

        reverse = {name: prefix for prefix, name in _MODIFIER_PREFIXES.items()}
        prefixes = "".join(f"{reverse.get(m, m)}-" for m in self.modifiers)
        return f"{prefixes}{self.key}"

    @classmethod
    def parse(cls, description: str) -> "KeyStroke":
        """Parse ``"C-c"``, ``"M-S-p"``, ``"ctrl+c"`` or a bare key name."""

        text = description.strip()
        if not text:
            raise ValueError("key description cannot be empty")
        if "+" in text and len(text) > 1:
            *mods, key = text.split("+")
            return cls(key=key, modifiers=tuple(mods))
        modifiers: list[str] = []
        while len(text) > 2 and text[1] == "-" and text[0] in _MODIFIER_PREFIXES:
            modifiers.append(_MODIFIER_PREFIXES[text[0]])
            text = text[2:]
        return cls(key=text, modifiers=tuple(modifiers))


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable, non-empty run of keystrokes."""

    strokes: tuple[KeyStroke, ...]

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @property
    def label(self) -> str:
        return " ".join(stroke.label for stroke in self.strokes)

    @classmethod
    def parse(cls, description: str) -> "KeySequence":
        """Build a sequence from a space separated description like ``"C-c r"``."""

        return cls(tuple(KeyStroke.parse(part) for part in description.split()))


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named command handler."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence in a keymap with an action id."""

    id: str
    keymap: str
    sequence: KeySequence
    action_id: str
    description: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.keymap:
            raise ValueError("binding keymap cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)


__all__ = ["ActionRef", "Binding", "KeySequence", "KeyStroke"]
