"""Text utilities for recognizer transcripts.

Normalization and wake-word handling shared by the matcher cascade,
the dictation engine and the session controller.
"""

import re

_TERMINAL_PUNCT = re.compile(r"[.,!?;:]+$")
_WHITESPACE = re.compile(r"\s+")

# Leading courtesy phrases the client cascade tolerates. The server-side
# interpreter strips a much longer list.
COURTESY_PREFIXES = (
    "please",
    "could you",
    "can you",
    "would you",
    "will you",
)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def normalize_command(text: str) -> str:
    """Lower-case, collapse whitespace, drop terminal punctuation and courtesy."""
    command = collapse_whitespace(text.lower())
    command = _TERMINAL_PUNCT.sub("", command).strip()
    changed = True
    while changed:
        changed = False
        for prefix in COURTESY_PREFIXES:
            if command == prefix:
                return ""
            if command.startswith(prefix + " "):
                command = command[len(prefix) + 1 :].lstrip(", ")
                changed = True
    if command.endswith(" please"):
        command = command[: -len(" please")].rstrip(", ")
    return command


def contains_wake_word(text: str, wake_word: str) -> bool:
    """Case-insensitive substring test for the wake word."""
    return wake_word.lower() in text.lower()


def strip_wake_word(text: str, wake_word: str) -> str | None:
    """Return the text after the first wake word, or None if it is absent."""
    lower = collapse_whitespace(text.lower())
    index = lower.find(wake_word.lower())
    if index < 0:
        return None
    return lower[index + len(wake_word) :].lstrip(" ,").strip()


def apply_vocab(text: str, vocab: dict[str, str]) -> str:
    """Apply vocabulary corrections to text.

    Each key in *vocab* is matched case-insensitively and replaced with the
    corresponding value. Used to fix recurring recognizer mishearings such
    as ``"hey plat form"``.
    """
    for wrong, correct in vocab.items():
        pattern = re.compile(re.escape(wrong), re.IGNORECASE)
        text = pattern.sub(correct, text)
    return text
