"""Interpretation core: pure functions and static tables, no I/O.

Re-exports key symbols for convenience.
"""

from voxnav.core.dictation import FieldBuffer, apply_edit, canonical_field, parse_dictation
from voxnav.core.matchers import CommandCascade, MatcherFamily, parse_command, resolve
from voxnav.core.registry import DEFAULT_REGISTRY, UtteranceRegistry
from voxnav.core.text import apply_vocab, normalize_command, strip_wake_word
from voxnav.core.types import CommandTableError, DictationEdit, Intent, Transcript

__all__ = [
    "CommandCascade",
    "CommandTableError",
    "DEFAULT_REGISTRY",
    "DictationEdit",
    "FieldBuffer",
    "Intent",
    "MatcherFamily",
    "Transcript",
    "UtteranceRegistry",
    "apply_edit",
    "apply_vocab",
    "canonical_field",
    "normalize_command",
    "parse_command",
    "parse_dictation",
    "resolve",
    "strip_wake_word",
]
