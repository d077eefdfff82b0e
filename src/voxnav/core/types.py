"""Core data types shared across voxnav modules."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final, Literal

INTENT_TYPES: Final = frozenset(
    {
        "navigate",
        "search",
        "filter",
        "reset-filters",
        "scroll",
        "ui",
        "game",
        "game-card",
        "settings",
        "sort",
        "spell",
        "library",
        "auth",
        "home",
    }
)

FieldName = Literal["email", "username", "password", "confirm", "identifier"]
SpellAction = Literal["start", "append", "clear", "stop"]


class CommandTableError(ValueError):
    """A static registry or matcher table entry is malformed."""


@dataclass(frozen=True, slots=True)
class Transcript:
    """A finalized recognizer transcript and its monotonic arrival time (ms)."""

    text: str
    at: float


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass(frozen=True, slots=True)
class Intent:
    """Immutable, tagged result of interpreting one transcript.

    *fields* holds only the keys relevant to *type* (``target`` for
    ``navigate``, ``tag`` or ``tags`` for ``filter`` and so on). List values
    are stored as tuples so the whole value stays immutable.
    """

    type: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    utterance: str = ""

    def __post_init__(self) -> None:
        if self.type not in INTENT_TYPES:
            raise ValueError(f"unknown intent type: {self.type!r}")
        frozen = {k: _freeze(v) for k, v in self.fields.items() if v is not None}
        if "type" in frozen or "utterance" in frozen:
            raise ValueError("'type' and 'utterance' are not payload fields")
        if self.type == "filter":
            has_tag = bool(frozen.get("tag"))
            has_tags = bool(frozen.get("tags"))
            if has_tag == has_tags:
                raise ValueError("filter intents carry exactly one of 'tag' or 'tags'")
        object.__setattr__(self, "fields", MappingProxyType(frozen))

    def __hash__(self) -> int:
        return hash((self.type, tuple(sorted(self.fields.items())), self.utterance))

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def with_utterance(self, utterance: str) -> Intent:
        """Return a copy carrying *utterance*."""
        return dataclasses.replace(self, fields=dict(self.fields), utterance=utterance)

    def to_dict(self) -> dict[str, Any]:
        """Flatten into the JSON wire shape used by the interpreter endpoint."""
        data: dict[str, Any] = {"type": self.type}
        data.update({k: _thaw(v) for k, v in self.fields.items()})
        if self.utterance:
            data["utterance"] = self.utterance
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Intent:
        """Build an intent from its wire shape. Raises ValueError if malformed."""
        if not isinstance(data, Mapping):
            raise ValueError("intent payload must be an object")
        kind = data.get("type")
        if not isinstance(kind, str):
            raise ValueError("intent payload has no 'type'")
        utterance = data.get("utterance") or ""
        if not isinstance(utterance, str):
            raise ValueError("'utterance' must be a string")
        payload = {k: v for k, v in data.items() if k not in ("type", "utterance")}
        return cls(type=kind, fields=payload, utterance=utterance)


@dataclass(frozen=True, slots=True)
class DictationEdit:
    """One literal text edit produced by the dictation engine."""

    action: SpellAction
    field: FieldName | None = None
    value: str | None = None
    backspaces: int | None = None
    clear: bool | None = None

    def to_intent(self, utterance: str = "") -> Intent:
        return Intent(
            type="spell",
            fields={
                "action": self.action,
                "field": self.field,
                "value": self.value,
                "backspaces": self.backspaces,
                "clear": self.clear,
            },
            utterance=utterance,
        )
