"""Server-side heuristic interpreter for noisy transcripts.

Deliberately looser than the client cascade: a longer filler list,
substring keyword checks and catalog genre detection. An optional LLM
pass (any litellm provider) runs first when a model is configured.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Final

from voxnav.core.constants import (
    DEFAULT_INTERPRET_PROMPT,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_TIMEOUT,
    GENRES,
)
from voxnav.core.env import LOGGER
from voxnav.core.types import Intent

FILLER_PHRASES: Final = (
    "hey platform",
    "hey",
    "platform",
    "um",
    "uh",
    "er",
    "erm",
    "hmm",
    "okay",
    "ok",
    "so",
    "well",
    "maybe",
    "just",
    "please",
    "could you",
    "can you",
    "would you",
    "will you",
    "i want to",
    "i'd like to",
    "i would like to",
    "let's",
    "lets",
)

_FILLER_PREFIX = re.compile(
    r"^(?:(?:" + "|".join(re.escape(p) for p in sorted(FILLER_PHRASES, key=len, reverse=True)) + r")\b[\s,]*)+"
)
_PLEASE = re.compile(r"\bplease\b")

RESET_KEYWORDS: Final = ("reset filters", "clear filters", "reset all filters", "clear all filters")
NAVIGATE_SEARCH_KEYWORDS: Final = ("search page", "go to search", "open search")
SEARCH_KEYWORDS: Final = ("search", "find", "look for")
FILTER_KEYWORDS: Final = ("filter", "filters", "apply")

_LIST = r"(?:my )?(favou?rites?|wish ?list)"
_REMOVE = re.compile(rf"^(?:remove|delete|take) (.+?) (?:off|from) {_LIST}$")
_MOVE = re.compile(rf"^move (.+?) to {_LIST}$")
_ADD_GAME = re.compile(r"^add (?:this |the )?game to (?:my )?favou?rites?$")
_ADD = re.compile(rf"^add (.+?) to {_LIST}$")
_SEARCH_VERB = re.compile(r"^(?:search(?: for)?|find|look for)\b\s*")
_FILTER_VERB = re.compile(r"^(?:apply(?: the)?(?: filters?)?|filters?(?: by)?)\b[\s:,]*")
_SPLIT = re.compile(r"\s*(?:,|\band\b)\s*")
_GENRE_WORDS: Final = {g.lower(): g for g in GENRES}


@dataclass(frozen=True, slots=True)
class LlmConfig:
    """Optional LLM pass. Disabled when *model* is None."""

    model: str | None = None
    prompt: str = DEFAULT_INTERPRET_PROMPT
    timeout: float = DEFAULT_LLM_TIMEOUT
    max_tokens: int = DEFAULT_LLM_MAX_TOKENS


def strip_fillers(text: str) -> str:
    """Lower-case and drop leading fillers, wake-word parts and any "please"."""
    lowered = re.sub(r"\s+", " ", text.lower()).strip()
    lowered = re.sub(r"[.!?]+$", "", lowered)
    lowered = _FILLER_PREFIX.sub("", lowered)
    lowered = _PLEASE.sub("", lowered)
    return re.sub(r"\s+", " ", lowered).strip(" ,")


def _list_name(spoken: str) -> str:
    return "wishlist" if spoken.startswith("wish") else "favourites"


def _includes_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(k in text for k in keywords)


def _filter_from(remainder: str, text: str) -> Intent | None:
    tags = [t for t in _SPLIT.split(remainder) if t]
    if not tags:
        return None
    if len(tags) == 1:
        return Intent("filter", {"tag": tags[0]}, text)
    return Intent("filter", {"tags": tags}, text)


def _detect_genre(text: str) -> str | None:
    for word in re.findall(r"[a-z]+", text):
        if word in _GENRE_WORDS:
            return _GENRE_WORDS[word]
    return None


def heuristic_interpret(text: str) -> Intent | None:
    """Keyword interpretation of an already filler-stripped transcript."""
    if not text:
        return None

    if m := _REMOVE.match(text):
        return Intent("library", {"action": "remove", "list": _list_name(m.group(2)), "title": m.group(1)}, text)
    if m := _MOVE.match(text):
        return Intent("library", {"action": "move", "list": _list_name(m.group(2)), "title": m.group(1)}, text)
    if _ADD_GAME.match(text):
        return Intent("game", {"action": "favourites"}, text)
    if m := _ADD.match(text):
        return Intent("library", {"action": "add", "list": _list_name(m.group(2)), "title": m.group(1)}, text)

    if _includes_any(text, RESET_KEYWORDS):
        return Intent("reset-filters", {}, text)
    if _includes_any(text, NAVIGATE_SEARCH_KEYWORDS):
        return Intent("navigate", {"target": "search"}, text)
    if "scroll up" in text:
        return Intent("scroll", {"direction": "up"}, text)
    if "scroll" in text:
        return Intent("scroll", {"direction": "down"}, text)

    # Explicit leading verbs are honoured before genre guessing.
    if m := _SEARCH_VERB.match(text):
        return Intent("search", {"query": text[m.end() :].strip() or text}, text)
    if m := _FILTER_VERB.match(text):
        return _filter_from(text[m.end() :], text)

    genre = _detect_genre(text)
    if genre is not None:
        return Intent("filter", {"tag": genre}, text)

    if _includes_any(text, SEARCH_KEYWORDS):
        query = re.sub(r"^.*?\b(?:search(?: for)?|find|look for)\b\s*", "", text)
        return Intent("search", {"query": query or text}, text)
    if _includes_any(text, FILTER_KEYWORDS):
        remainder = re.sub(r"^.*?\b(?:apply(?: the)?(?: filters?)?|filters?(?: by)?)\b[\s:,]*", "", text)
        return _filter_from(remainder, text)
    return None


def _parse_llm_output(content: str, text: str) -> Intent | None:
    content = re.sub(r"<think>.*?</think>", "", content, flags=re.DOTALL).strip()
    content = re.sub(r"^```(?:json)?\s*|\s*```$", "", content)
    if not content or content == "null":
        return None
    try:
        payload: Any = json.loads(content)
        if isinstance(payload, dict) and "utterance" not in payload:
            payload = {**payload, "utterance": text}
        return Intent.from_dict(payload)
    except ValueError as exc:
        LOGGER.debug("LLM output is not a valid intent: %s", exc)
        return None


def llm_interpret(text: str, config: LlmConfig) -> Intent | None:
    """Ask the configured model for an intent.

    Blocking; the HTTP endpoint runs it via ``asyncio.to_thread``. Provider
    errors and unparsable output are logged and reported as None.
    """
    if not config.model:
        return None
    from litellm import completion  # deferred import

    try:
        response = completion(
            model=config.model,
            messages=[
                {"role": "system", "content": config.prompt},
                {"role": "user", "content": text},
            ],
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )
        content = response.choices[0].message.content or ""
    except Exception as exc:
        LOGGER.warning("LLM interpret failed (%s): %s", config.model, exc)
        return None
    return _parse_llm_output(content, text)


def interpret_transcript(transcript: str, config: LlmConfig | None = None) -> Intent | None:
    """Interpret one raw transcript; None when nothing applies."""
    text = strip_fillers(transcript or "")
    if not text:
        return None
    if config is not None:
        intent = llm_interpret(text, config)
        if intent is not None:
            return intent
    return heuristic_interpret(text)
