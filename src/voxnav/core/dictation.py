"""Spoken spelling for form fields.

Translates letter, word and punctuation tokens into literal text edits.
parse_dictation() is pure and stateless: the target field and the text
typed so far belong to the caller (see FieldBuffer for a reference
form controller).
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

from voxnav.core.env import LOGGER
from voxnav.core.text import collapse_whitespace
from voxnav.core.types import DictationEdit, FieldName, Intent

if TYPE_CHECKING:
    from voxnav.bus import VoiceCommandEvent

FILLER_WORDS: Final = frozenset(
    {"hey", "platform", "um", "uh", "er", "erm", "okay", "ok", "please", "letter", "then", "and", "the"}
)

PUNCTUATION_WORDS: Final = {
    "dot": ".",
    "period": ".",
    "point": ".",
    "full stop": ".",
    "dash": "-",
    "hyphen": "-",
    "minus": "-",
    "underscore": "_",
    "space": " ",
    "at": "@",
    "at sign": "@",
    "plus": "+",
    "slash": "/",
    "comma": ",",
    "exclamation mark": "!",
    "question mark": "?",
    "hash": "#",
    "dollar": "$",
}

BACKSPACE_WORDS: Final = frozenset({"backspace", "delete", "erase", "undo"})

NAMED_LETTERS: Final = {
    "ay": "a", "alpha": "a",
    "bee": "b", "be": "b", "bravo": "b",
    "see": "c", "sea": "c", "cee": "c", "charlie": "c",
    "dee": "d", "delta": "d",
    "ee": "e", "echo": "e",
    "ef": "f", "eff": "f", "foxtrot": "f",
    "gee": "g", "golf": "g",
    "aitch": "h", "hotel": "h",
    "eye": "i", "india": "i",
    "jay": "j", "juliet": "j",
    "kay": "k", "kilo": "k",
    "el": "l", "ell": "l", "lima": "l",
    "em": "m", "mike": "m",
    "en": "n", "november": "n",
    "oh": "o", "oscar": "o",
    "pee": "p", "papa": "p",
    "cue": "q", "queue": "q", "quebec": "q",
    "ar": "r", "are": "r", "romeo": "r",
    "ess": "s", "sierra": "s",
    "tee": "t", "tea": "t", "tango": "t",
    "you": "u", "uniform": "u",
    "vee": "v", "victor": "v",
    "doubleyou": "w", "whiskey": "w",
    "ex": "x", "x-ray": "x", "xray": "x",
    "why": "y", "yankee": "y",
    "zed": "z", "zee": "z", "zulu": "z",
}

CAPITAL_WORDS: Final = frozenset({"capital", "uppercase", "upper", "cap"})

NUMBER_WORDS: Final = {
    "zero": "0",
    "one": "1",
    "two": "2",
    "three": "3",
    "four": "4",
    "five": "5",
    "six": "6",
    "seven": "7",
    "eight": "8",
    "nine": "9",
}

# Loosely worded field names → canonical field. Order matters: "confirm
# password" must be checked before "password".
_FIELD_PATTERNS: Final[tuple[tuple[re.Pattern[str], FieldName], ...]] = (
    (re.compile(r"\bconfirm"), "confirm"),
    (re.compile(r"\buser ?name\b|\buser\b"), "username"),
    (re.compile(r"\bidentifier\b|\blog ?in\b"), "identifier"),
    (re.compile(r"\be-? ?mail\b|\bmail\b"), "email"),
    (re.compile(r"\bpass ?word\b|\bpass\b"), "password"),
)

_START = re.compile(
    r"^(?:(?P<clear>clear and |re-?)spell|(?:start )?spell(?:ing)?|start spelling)"
    r"(?: in| into)?(?: the| my)? (?P<field>.+?)(?: field| box)?$"
)
_STOP = re.compile(
    r"^(?:(?:stop|end|finish|exit|quit)(?: the)? spelling|done(?: spelling)?|i'?m done|finished)$"
)
_CLEAR = re.compile(r"^(?:clear(?: the)?(?: field| all| it)?|start over|erase all)$")

_LEADING_NOISE: Final = frozenset({"hey", "platform", "um", "uh", "er", "erm", "okay", "ok", "please"})

_BARE_TOKEN = re.compile(r"^[a-z0-9@._+-]+$")
_DIGITS = re.compile(r"^\d+$")


def canonical_field(name: str) -> FieldName | None:
    """Map a spoken field name ("e-mail", "confirmed password") to a field."""
    lowered = name.lower()
    for pattern, field_name in _FIELD_PATTERNS:
        if pattern.search(lowered):
            return field_name
    return None


def _prepare(raw: str) -> str:
    text = collapse_whitespace(raw.lower())
    text = re.sub(r"[,!?;:]+", " ", text)
    text = text.rstrip(".").strip()
    # Two-word spellings folded into single tokens before splitting.
    text = re.sub(r"\bdouble (?:u|you)\b", "doubleyou", text)
    for phrase in ("full stop", "at sign", "exclamation mark", "question mark"):
        text = re.sub(rf"\b{phrase}\b", phrase.replace(" ", "_"), text)
    return collapse_whitespace(text)


def parse_spell_command(command: str) -> DictationEdit | None:
    """Recognize only the start/stop phrases of a spelling session."""
    text = collapse_whitespace(command.lower()).rstrip(".")
    start = _START.match(text)
    if start:
        field_name = canonical_field(start.group("field"))
        if field_name is not None:
            return DictationEdit(
                action="start",
                field=field_name,
                clear=True if start.group("clear") else None,
            )
    if _STOP.match(text):
        return DictationEdit(action="stop")
    return None


def parse_dictation(raw: str, active_field: FieldName | None) -> DictationEdit | None:
    """Translate one spelling-mode transcript into a literal edit.

    Returns None only when no token was recognized and no backspaces were
    requested.
    """
    text = _prepare(raw)
    if not text:
        return None

    tokens = text.split(" ")
    while tokens and tokens[0] in _LEADING_NOISE:
        tokens.pop(0)
    bare = " ".join(tokens)
    control = parse_spell_command(bare)
    if control is not None:
        return control
    if _CLEAR.match(bare):
        return DictationEdit(action="clear", field=active_field, clear=True)

    out: list[str] = []
    backspaces = 0
    capitalize = False
    for token in text.split(" "):
        word = token.replace("_", " ")
        if token in FILLER_WORDS:
            continue
        if token in CAPITAL_WORDS:
            capitalize = True
            continue
        if word in PUNCTUATION_WORDS:
            out.append(PUNCTUATION_WORDS[word])
        elif token in BACKSPACE_WORDS:
            backspaces += 1
        elif token in NAMED_LETTERS:
            letter = NAMED_LETTERS[token]
            out.append(letter.upper() if capitalize else letter)
        elif len(token) == 1 and token.isalpha():
            out.append(token.upper() if capitalize else token)
        elif token in NUMBER_WORDS:
            out.append(NUMBER_WORDS[token])
        elif _BARE_TOKEN.match(token) and not _DIGITS.match(token):
            out.append(token[0].upper() + token[1:] if capitalize else token)
        elif _DIGITS.match(token):
            out.append(token)
        else:
            LOGGER.debug("Dictation token not recognised: %r", token)
            continue
        capitalize = False

    value = "".join(out)
    if not value and not backspaces:
        return None
    return DictationEdit(
        action="append",
        field=active_field,
        value=value or None,
        backspaces=backspaces or None,
    )


def apply_edit(current: str, edit: DictationEdit | Intent) -> str:
    """Apply a dictation edit to the text typed so far.

    Clearing happens first, then backspaces, then the appended value.
    """
    if isinstance(edit, Intent):
        clear = bool(edit.get("clear"))
        backspaces = edit.get("backspaces") or 0
        value = edit.get("value") or ""
    else:
        clear = bool(edit.clear)
        backspaces = edit.backspaces or 0
        value = edit.value or ""
    text = "" if clear else current
    if backspaces:
        text = text[: max(0, len(text) - backspaces)]
    return text + value


class FieldBuffer:
    """Reference form controller: owns field text and consumes spell events.

    Subscribe it to a DispatchBus; it claims every ``spell`` intent.
    """

    __slots__ = ("values", "active")

    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.active: str | None = None

    def text(self, field_name: str) -> str:
        return self.values.get(field_name, "")

    def __call__(self, event: VoiceCommandEvent) -> None:
        intent: Intent = event.intent
        if intent.type != "spell":
            return
        event.prevent_default()
        action = intent.get("action")
        if action == "start":
            self.active = intent.get("field") or self.active
            if intent.get("clear") and self.active:
                self.values[self.active] = ""
            return
        if action == "stop":
            self.active = None
            return
        target = intent.get("field") or self.active
        if not target:
            return
        self.active = target
        self.values[target] = apply_edit(self.values.get(target, ""), intent)
