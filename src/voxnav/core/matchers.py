"""Ordered pattern matchers that turn a spoken command into an intent.

Each family is an ordered list of ``(pattern, builder)`` pairs evaluated
first-match-wins; families run in priority order after the exact-match
registry, and a chain of forgiving keyword matchers runs last. Tables are
compiled and validated at import time.

Resolution order:
    registry → navigation → search → filter → game actions → spelling →
    settings → sort → library → game cards → auth → home → fallbacks
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Final

from voxnav.core.constants import ACCESSIBILITY_CATEGORIES, DEFAULT_WAKE_WORD, GENRES
from voxnav.core.dictation import canonical_field, parse_spell_command
from voxnav.core.registry import DEFAULT_REGISTRY, UtteranceRegistry
from voxnav.core.text import normalize_command, strip_wake_word
from voxnav.core.types import CommandTableError, Intent

Builder = Callable[[re.Match[str]], Intent | None]
Fallback = Callable[[str], Intent | None]


@dataclass(frozen=True, slots=True)
class MatcherFamily:
    """A named, prioritized list of anchored patterns and their builders."""

    name: str
    priority: int
    matchers: tuple[tuple[re.Pattern[str], Builder], ...]

    def match(self, command: str) -> Intent | None:
        for pattern, build in self.matchers:
            found = pattern.fullmatch(command)
            if found is None:
                continue
            intent = build(found)
            if intent is not None:
                return intent
        return None


def family(
    name: str,
    priority: int,
    entries: Sequence[tuple[str, Builder]],
) -> MatcherFamily:
    """Compile and validate a matcher table."""
    if not entries:
        raise CommandTableError(f"matcher family {name!r} is empty")
    compiled: list[tuple[re.Pattern[str], Builder]] = []
    for position, entry in enumerate(entries):
        try:
            pattern, build = entry
        except (TypeError, ValueError) as exc:
            raise CommandTableError(f"{name}[{position}] is not a (pattern, builder) pair") from exc
        if not callable(build):
            raise CommandTableError(f"{name}[{position}] builder is not callable")
        try:
            compiled.append((re.compile(pattern), build))
        except (re.error, TypeError) as exc:
            raise CommandTableError(f"{name}[{position}] has a bad pattern: {exc}") from exc
    return MatcherFamily(name=name, priority=priority, matchers=tuple(compiled))


def _intent(kind: str, **fields: Any) -> Intent:
    return Intent(type=kind, fields=fields)


def _const(kind: str, **fields: Any) -> Builder:
    return lambda _m: _intent(kind, **fields)


def _list_name(spoken: str) -> str:
    return "wishlist" if spoken.startswith("wish") else "favourites"


def split_tags(remainder: str) -> list[str]:
    """Split a spoken tag list on commas and the word "and"."""
    parts = re.split(r"\s*(?:,|\band\b)\s*", remainder)
    return [p.strip() for p in parts if p.strip()]


def _capture_filter(m: re.Match[str]) -> Intent | None:
    tags = split_tags(m.group(1))
    if not tags:
        return None
    if len(tags) == 1:
        return _intent("filter", tag=tags[0])
    return _intent("filter", tags=tags)


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------

_CANONICAL_TAGS: Final = {t.lower(): t for t in ACCESSIBILITY_CATEGORIES + GENRES}
_TOGGLE_WORDS: Final = "|".join(sorted(_CANONICAL_TAGS, key=len, reverse=True))
_GENRE_WORDS: Final = "|".join(sorted((g.lower() for g in GENRES), key=len, reverse=True))
_LISTS: Final = r"(favou?rites?|wish ?list)"
_FIELDS: Final = r"(e-?mail|user ?name|password|confirm(?:ed)? password|confirmation|identifier)"

NAVIGATION = family(
    "navigation",
    20,
    [
        (r"go( to)? home|(?:go to |open )?(?:the )?home ?page", _const("navigate", target="home")),
        (r"(?:open |show )?(?:the )?(?:filters|filter panel)", _const("ui", target="filters", action="open")),
        (r"(?:close|hide) (?:the )?(?:filters|filter panel)", _const("ui", target="filters", action="close")),
        (r"(?:show|open) (?:the )?(?:voice )?commands", _const("ui", target="commands", action="open")),
        (r"(?:hide|close) (?:the )?(?:voice )?commands", _const("ui", target="commands", action="close")),
        (r"(?:open |go to )?(?:my )?favou?rites?", _const("navigate", target="favourites")),
        (r"(?:open |go to )(?:my )?wish ?list", _const("navigate", target="wishlist")),
        (r"(?:open |go to )(?:my )?library", _const("navigate", target="library")),
        (r"(?:open |go to )(?:my )?profile", _const("navigate", target="profile")),
        (r"(?:open |go to )(?:the )?search(?: page)?", _const("navigate", target="search")),
        (r"(?:open |go to )(?:the )?settings(?: page)?", _const("navigate", target="settings")),
        (r"(?:go to |open )?(?:the )?(?:log ?in|sign in)(?: page)?", _const("navigate", target="login")),
        (r"(?:go to |open )?(?:the )?sign ?up(?: page)?", _const("navigate", target="signup")),
        (r"next page", _const("navigate", target="next-page")),
        (r"(?:go )?back|previous page", _const("navigate", target="back")),
    ],
)

SEARCH = family(
    "search",
    30,
    [
        (r"search for (.+)|search (.+)", lambda m: _intent("search", query=m.group(1) or m.group(2))),
        (r"find (.+)", lambda m: _intent("search", query=m.group(1))),
        (r"look for (.+)", lambda m: _intent("search", query=m.group(1))),
    ],
)

FILTER = family(
    "filter",
    40,
    [
        (rf"filter by ({_TOGGLE_WORDS})", lambda m: _intent("filter", tag=_CANONICAL_TAGS[m.group(1)])),
        (r"(?:show )?(?:only )?one[- ]handed games(?: only)?", _const("filter", tag="One-Handed")),
        (
            rf"(?:show|list)(?: me)?(?: only)? ({_GENRE_WORDS})(?: games)?",
            lambda m: _intent("filter", tag=_CANONICAL_TAGS[m.group(1)]),
        ),
        (r"(?:reset|clear|remove)(?: all)?(?: the)? filters", _const("reset-filters")),
        (r"(?:apply (?:the )?filters?|filters?(?: by)?)[:,]?\s+(.+)", _capture_filter),
    ],
)

_RATINGS: Final = {"one": 1, "two": 2, "three": 3, "four": 4, "five": 5}

GAME_ACTIONS = family(
    "game",
    50,
    [
        (r"add to (?:my )?watch ?list", _const("game", action="add-to-watchlist")),
        (r"(?:open |show )?(?:the )?reviews", _const("game", action="open-reviews")),
        (r"write (?:a )?review", _const("game", action="write-review")),
        (r"submit (?:the |my )?review", _const("game", action="submit-review")),
        (
            r"rate (?:this game |it )?([1-5]|one|two|three|four|five)(?: stars?)?",
            lambda m: _intent("game", action="set-review-rating", value=_RATINGS.get(m.group(1)) or int(m.group(1))),
        ),
        (r"follow(?: this game)?", _const("game", action="follow")),
        (r"unfollow(?: this game)?", _const("game", action="unfollow")),
        (r"download(?: this game| it)?", _const("game", action="download")),
        (r"add (?:this |the )?(?:game )?to (?:my )?wish ?list", _const("game", action="wishlist")),
        (
            r"add (?:this |the )?(?:game )?to (?:my )?favou?rites?|favou?rite (?:this )?game",
            _const("game", action="favourites"),
        ),
        (r"report(?: this game)?", _const("game", action="report")),
        (r"scroll down", _const("scroll", direction="down")),
        (r"scroll up", _const("scroll", direction="up")),
    ],
)


def _spell(m: re.Match[str]) -> Intent | None:
    edit = parse_spell_command(m.group(0))
    return edit.to_intent() if edit is not None else None


SPELLING = family(
    "spelling",
    55,
    [
        (r"(?:clear and |re-?|start )?spell(?:ing)? .+|start spelling .+", _spell),
        (r"(?:stop|end|finish) spelling", _spell),
    ],
)

SETTINGS = family(
    "settings",
    60,
    [
        (
            r"(?:set|change) (?:the )?wake word to ([a-z]+)",
            lambda m: _intent("settings", action="set-wake-word", value=m.group(1)),
        ),
        (
            r"(?:set|change) (?:the )?spacing to (snug|roomy|airy)",
            lambda m: _intent("settings", action="set-spacing", value=m.group(1)),
        ),
    ],
)

_SORT_KEYS: Final = {
    "relevance": "relevance",
    "newest": "newest",
    "latest": "newest",
    "release date": "newest",
    "rating": "rating",
    "highest rated": "rating",
    "title": "title",
    "name": "title",
    "alphabetical": "title",
}

SORT = family(
    "sort",
    65,
    [
        (
            r"sort (?:results )?(?:by )?(relevance|newest|latest|release date|rating|highest rated|title|name|alphabetical)",
            lambda m: _intent("sort", value=_SORT_KEYS[m.group(1)]),
        ),
    ],
)

LIBRARY = family(
    "library",
    70,
    [
        (
            rf"(?:remove|delete|take) (.+?) (?:from|off|out of) (?:my |the )?{_LISTS}",
            lambda m: _intent("library", action="remove", list=_list_name(m.group(2)), title=m.group(1)),
        ),
        (
            rf"move (.+?) (?:to|into) (?:my |the )?{_LISTS}",
            lambda m: _intent("library", action="move", list=_list_name(m.group(2)), title=m.group(1)),
        ),
        (
            rf"add (.+?) to (?:my |the )?{_LISTS}",
            lambda m: _intent("library", action="add", list=_list_name(m.group(2)), title=m.group(1)),
        ),
    ],
)

GAME_CARDS = family(
    "game-card",
    75,
    [
        (r"open (?:the )?game (?:called |named )?(.+)", lambda m: _intent("game-card", action="open", title=m.group(1))),
        (r"(?:open|show|view) (?:the )?(.+?) game page", lambda m: _intent("game-card", action="open", title=m.group(1))),
        (
            r"(?:open|show|view) (?:the )?(?:details|page) (?:for|of) (.+)",
            lambda m: _intent("game-card", action="open", title=m.group(1)),
        ),
    ],
)


def _auth_field(spoken: str) -> str:
    return canonical_field(spoken) or "email"


AUTH = family(
    "auth",
    80,
    [
        (
            rf"(?:focus|select|go to) (?:the )?{_FIELDS} (?:field|box)",
            lambda m: _intent("auth", action="focus", field=_auth_field(m.group(1))),
        ),
        (
            rf"(?:set|enter|fill in) (?:my |the )?{_FIELDS} (?:to|as|with) (.+)",
            lambda m: _intent("auth", action="set-field", field=_auth_field(m.group(1)), value=m.group(2)),
        ),
        (
            rf"(?:my )?{_FIELDS} is (.+)",
            lambda m: _intent("auth", action="set-field", field=_auth_field(m.group(1)), value=m.group(2)),
        ),
        (r"type (.+)", lambda m: _intent("auth", action="type", value=m.group(1))),
        (
            r"submit(?: (?:the )?form)?|log me in|sign me in|sign me up|create (?:my |an )?account",
            _const("auth", action="submit"),
        ),
        (r"clear (?:the )?form", _const("auth", action="clear")),
    ],
)

HOME = family(
    "home",
    85,
    [
        (r"(next|previous) (?:game|slide|card)", lambda m: _intent("home", action=m.group(1))),
        (r"(?:open|select) (?:this|the selected|selected) game", _const("home", action="open")),
    ],
)

DEFAULT_FAMILIES: Final = (
    NAVIGATION,
    SEARCH,
    FILTER,
    GAME_ACTIONS,
    SPELLING,
    SETTINGS,
    SORT,
    LIBRARY,
    GAME_CARDS,
    AUTH,
    HOME,
)


# ---------------------------------------------------------------------------
# Fallback chain
# ---------------------------------------------------------------------------

_TEXT_SIZES: Final = {
    "small": "small",
    "smaller": "small",
    "medium": "medium",
    "normal": "medium",
    "large": "large",
    "larger": "large",
    "big": "large",
    "bigger": "large",
}
_SIZE_WORD = re.compile(r"\b(smaller|small|medium|normal|larger|large|bigger|big)\b")
_EXTRA_LARGE = re.compile(r"\b(?:extra[- ]?large|x-?large|extra big|huge)\b")
_LARGE = re.compile(r"\b(?:large|larger|big|bigger)\b")
_NORMAL = re.compile(r"\b(?:normal|default|regular|standard|small|smaller)\b")


def text_size_fallback(command: str) -> Intent | None:
    if "text" not in command and "font" not in command:
        return None
    found = _SIZE_WORD.search(command)
    if found is None:
        return None
    return _intent("settings", action="set-text-size", value=_TEXT_SIZES[found.group(1)])


def button_size_fallback(command: str) -> Intent | None:
    if "button" not in command:
        return None
    if _EXTRA_LARGE.search(command):
        value = "xlarge"
    elif _LARGE.search(command):
        value = "large"
    elif _NORMAL.search(command):
        value = "normal"
    else:
        return None
    return _intent("settings", action="set-button-size", value=value)


def spacing_fallback(command: str) -> Intent | None:
    if "spacing" not in command:
        return None
    if re.search(r"\b(?:tight|snug|wider)\b", command):
        value = "snug"
    elif re.search(r"\b(?:roomy|normal)\b", command):
        value = "roomy"
    else:
        value = "airy"
    return _intent("settings", action="set-spacing", value=value)


# First matching phrase wins, so longer phrasings precede their prefixes.
TAG_SYNONYMS: Final = (
    ("colorblind mode", "Colourblind Mode"),
    ("colourblind mode", "Colourblind Mode"),
    ("colour blind mode", "Colourblind Mode"),
    ("color blind mode", "Colourblind Mode"),
    ("colour blind", "Colourblind Mode"),
    ("color blind", "Colourblind Mode"),
    ("colorblind", "Colourblind Mode"),
    ("colourblind", "Colourblind Mode"),
    ("no audio needed", "No Audio Needed"),
    ("no audio required", "No Audio Needed"),
    ("no audio", "No Audio Needed"),
    ("no sound", "No Audio Needed"),
    ("no voice required", "No Voice Required"),
    ("no voice needed", "No Voice Required"),
    ("one handed", "One-Handed"),
    ("one-handed", "One-Handed"),
    ("one hand", "One-Handed"),
    ("screenreader friendly", "Screen Reader Friendly"),
    ("screen reader friendly", "Screen Reader Friendly"),
    ("screen reader", "Screen Reader Friendly"),
    ("high contrast", "High Contrast"),
    ("large text", "Large Text"),
    ("subtitles", "Captions"),
    ("captions", "Captions"),
    ("visual alerts", "Visual Alerts"),
    ("simple controls", "Simple Controls"),
    ("no timed inputs", "No Timed Inputs"),
    ("tutorial", "Tutorial Mode"),
    ("hints", "Hints Available"),
)
_FILTER_WORDS: Final = frozenset({"filter", "filters", "apply"})


def keyword_filter_fallback(command: str) -> Intent | None:
    if not _FILTER_WORDS.intersection(command.split()):
        return None
    for phrase, tag in TAG_SYNONYMS:
        if phrase in command:
            return _intent("filter", tag=tag)
    return None


DEFAULT_FALLBACKS: Final[tuple[Fallback, ...]] = (
    text_size_fallback,
    button_size_fallback,
    spacing_fallback,
    keyword_filter_fallback,
)


# ---------------------------------------------------------------------------
# Cascade
# ---------------------------------------------------------------------------


class CommandCascade:
    """Registry, then matcher families by priority, then the fallback chain."""

    __slots__ = ("registry", "families", "fallbacks")

    def __init__(
        self,
        registry: UtteranceRegistry = DEFAULT_REGISTRY,
        families: Iterable[MatcherFamily] = DEFAULT_FAMILIES,
        fallbacks: Iterable[Fallback] = DEFAULT_FALLBACKS,
    ) -> None:
        ordered = sorted(families, key=lambda f: f.priority)
        priorities = [f.priority for f in ordered]
        if len(set(priorities)) != len(priorities):
            raise CommandTableError("matcher families must have distinct priorities")
        self.registry = registry
        self.families: tuple[MatcherFamily, ...] = tuple(ordered)
        self.fallbacks: tuple[Fallback, ...] = tuple(fallbacks)

    def resolve(self, command: str) -> Intent | None:
        """Resolve an already wake-word-stripped command. Never raises."""
        command = normalize_command(command)
        if not command:
            return None
        intent = self.registry.lookup(command)
        if intent is not None:
            return intent
        for matcher_family in self.families:
            intent = matcher_family.match(command)
            if intent is not None:
                return intent.with_utterance(command)
        for fallback in self.fallbacks:
            intent = fallback(command)
            if intent is not None:
                return intent.with_utterance(command)
        return None

    def parse(self, transcript: str, wake_word: str = DEFAULT_WAKE_WORD) -> Intent | None:
        """Strip the wake word from a raw transcript and resolve the rest.

        Returns None when the transcript does not contain the wake word.
        """
        command = strip_wake_word(transcript, wake_word)
        if not command:
            return None
        return self.resolve(command)


DEFAULT_CASCADE = CommandCascade()


def resolve(command: str) -> Intent | None:
    """Resolve *command* with the default tables."""
    return DEFAULT_CASCADE.resolve(command)


def parse_command(transcript: str, wake_word: str = DEFAULT_WAKE_WORD) -> Intent | None:
    """Parse a raw, wake-word-gated transcript with the default tables."""
    return DEFAULT_CASCADE.parse(transcript, wake_word)
