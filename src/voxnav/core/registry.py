"""Central registry of fixed spoken utterances.

Entries are exact phrases (case and whitespace insensitive) mapped to a
template intent. The table is validated when the module is imported so a
malformed entry fails fast instead of at the first matching transcript.
Add new phrases here; no other code changes are needed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from voxnav.core.text import collapse_whitespace
from voxnav.core.types import CommandTableError, Intent


@dataclass(frozen=True, slots=True)
class RegisteredUtterance:
    """One registry row: several phrasings of the same intent."""

    utterances: tuple[str, ...]
    intent: Intent


def _entry(utterances: list[str], intent: Mapping[str, Any]) -> dict[str, Any]:
    return {"utterances": utterances, "intent": intent}


NAVIGATION_INTENTS = [
    _entry(["go to search", "open search"], {"type": "navigate", "target": "search"}),
    _entry(["go home", "go to home", "home"], {"type": "navigate", "target": "home"}),
    _entry(["back", "go back"], {"type": "navigate", "target": "back"}),
    _entry(["next page", "forward"], {"type": "navigate", "target": "next-page"}),
    _entry(["go to library", "open library", "open my library"], {"type": "navigate", "target": "library"}),
    _entry(["go to wishlist", "open wishlist", "open my wishlist"], {"type": "navigate", "target": "wishlist"}),
    _entry(["go to profile", "open profile", "open my profile"], {"type": "navigate", "target": "profile"}),
]

SETTINGS_INTENTS = [
    _entry(["go to settings", "open settings"], {"type": "navigate", "target": "settings"}),
    _entry(
        ["enable high contrast mode", "turn on high contrast"],
        {"type": "settings", "action": "set-high-contrast-mode", "value": True},
    ),
    _entry(
        ["disable high contrast mode", "turn off high contrast"],
        {"type": "settings", "action": "set-high-contrast-mode", "value": False},
    ),
    _entry(
        ["enable wake word", "turn on wake word"],
        {"type": "settings", "action": "set-wake-word-enabled", "value": True},
    ),
    _entry(
        ["disable wake word", "turn off wake word"],
        {"type": "settings", "action": "set-wake-word-enabled", "value": False},
    ),
    _entry(
        ["increase text size", "make text bigger"],
        {"type": "settings", "action": "set-text-size", "value": "large"},
    ),
    _entry(
        ["decrease text size", "make text smaller"],
        {"type": "settings", "action": "set-text-size", "value": "small"},
    ),
    _entry(
        ["set text size medium", "set text size to medium"],
        {"type": "settings", "action": "set-text-size", "value": "medium"},
    ),
    _entry(["set text size to large"], {"type": "settings", "action": "set-text-size", "value": "large"}),
    _entry(["set text size to small"], {"type": "settings", "action": "set-text-size", "value": "small"}),
    _entry(
        ["enable reduce animation", "reduce animation", "turn on reduce motion"],
        {"type": "settings", "action": "set-reduce-motion", "value": True},
    ),
    _entry(
        ["disable reduce animation", "turn off reduce motion"],
        {"type": "settings", "action": "set-reduce-motion", "value": False},
    ),
    _entry(
        ["enable captions", "turn on captions", "show captions", "turn on subtitles"],
        {"type": "settings", "action": "set-captions", "value": True},
    ),
    _entry(
        ["disable captions", "turn off captions", "hide captions", "turn off subtitles"],
        {"type": "settings", "action": "set-captions", "value": False},
    ),
    _entry(
        ["enable visual alerts", "turn on visual alerts", "turn on visual indicators", "use visual alerts"],
        {"type": "settings", "action": "set-visual-alerts", "value": True},
    ),
    _entry(
        ["disable visual alerts", "turn off visual alerts", "turn off visual indicators", "stop visual alerts"],
        {"type": "settings", "action": "set-visual-alerts", "value": False},
    ),
]


class UtteranceRegistry:
    """Exact-match lookup over validated registry entries."""

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Iterable[Mapping[str, Any]]) -> None:
        self._entries: tuple[RegisteredUtterance, ...] = tuple(
            _validate(position, raw) for position, raw in enumerate(entries)
        )
        self._index: dict[str, Intent] = {}
        for entry in self._entries:
            for phrase in entry.utterances:
                if phrase in self._index:
                    raise CommandTableError(f"utterance registered twice: {phrase!r}")
                self._index[phrase] = entry.intent

    @property
    def entries(self) -> tuple[RegisteredUtterance, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, phrase: object) -> bool:
        return isinstance(phrase, str) and collapse_whitespace(phrase.lower()) in self._index

    def lookup(self, command: str) -> Intent | None:
        """Return the registered intent for *command*, carrying it as utterance."""
        key = collapse_whitespace(command.lower())
        intent = self._index.get(key)
        if intent is None:
            return None
        return intent.with_utterance(key)


def _validate(position: int, raw: Mapping[str, Any]) -> RegisteredUtterance:
    """Check one raw entry and build its immutable form."""
    if not isinstance(raw, Mapping):
        raise CommandTableError(f"registry entry {position} is not a mapping")
    utterances = raw.get("utterances")
    if not isinstance(utterances, (list, tuple)) or not utterances:
        raise CommandTableError(f"registry entry {position} has no utterances")
    phrases: list[str] = []
    for phrase in utterances:
        if not isinstance(phrase, str) or not phrase.strip():
            raise CommandTableError(f"registry entry {position} has a blank utterance")
        phrases.append(collapse_whitespace(phrase.lower()))
    try:
        intent = Intent.from_dict(raw.get("intent"))
    except ValueError as exc:
        raise CommandTableError(f"registry entry {position}: {exc}") from exc
    return RegisteredUtterance(utterances=tuple(phrases), intent=intent)


DEFAULT_REGISTRY = UtteranceRegistry(NAVIGATION_INTENTS + SETTINGS_INTENTS)
