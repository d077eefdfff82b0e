"""Wake-word gated session controller.

SessionController is the single owner of SessionState. Each transcript is
handled synchronously to completion; only the remote fallback is deferred
to a background task, so the next transcript never waits on the network.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

from voxnav.bus import DispatchBus
from voxnav.core.constants import (
    DEFAULT_WAKE_WORD,
    NO_MATCH_TTL_MS,
    RESTART_DELAY_MS,
    STATUS_TTL_MS,
    WAKE_WINDOW_MS,
)
from voxnav.core.dictation import parse_dictation
from voxnav.core.env import LOGGER
from voxnav.core.matchers import DEFAULT_CASCADE, CommandCascade
from voxnav.core.protocols import FeedbackLike, RemoteInterpreterLike, TranscriptSourceLike
from voxnav.core.text import apply_vocab, contains_wake_word, strip_wake_word
from voxnav.core.types import FieldName, Intent, Transcript


def monotonic_ms() -> float:
    return time.monotonic() * 1000


@dataclass(slots=True)
class SessionState:
    """Mutable session fields. Only SessionController writes them."""

    awake_until: float = 0.0
    dictation: FieldName | None = None
    status_timer: asyncio.TimerHandle | None = None
    restart_timer: asyncio.TimerHandle | None = None

    def is_awake(self, now: float) -> bool:
        return now < self.awake_until


def describe_command(intent: Intent) -> str:
    """Status line text for a resolved intent, e.g. ``Command: search "zelda"``."""
    label = f"Command: {intent.type}"
    for key in ("query", "tag", "target", "action"):
        value = intent.get(key)
        if isinstance(value, str):
            label += f' "{value}"'
            break
    tags = intent.get("tags")
    if tags:
        label += " " + ", ".join(f'"{t}"' for t in tags)
    return label


class SessionController:
    """Turns transcripts into dispatched intents.

    Idle: only transcripts containing the wake word are interpreted.
    Awake: for WAKE_WINDOW_MS after the wake word, bare commands are
    accepted too; any resolved command closes the window.
    Dictating: every transcript goes to the dictation engine until a stop
    phrase; wake-word gating is skipped entirely.
    """

    def __init__(
        self,
        bus: DispatchBus,
        feedback: FeedbackLike,
        source: TranscriptSourceLike | None = None,
        remote: RemoteInterpreterLike | None = None,
        cascade: CommandCascade = DEFAULT_CASCADE,
        wake_word: str = DEFAULT_WAKE_WORD,
        wake_window_ms: int = WAKE_WINDOW_MS,
        restart_delay_ms: int = RESTART_DELAY_MS,
        corrections: dict[str, str] | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.bus = bus
        self.feedback = feedback
        self.source = source
        self.remote = remote
        self.cascade = cascade
        self.wake_word = wake_word.lower()
        self.wake_window_ms = wake_window_ms
        self.restart_delay_ms = restart_delay_ms
        self.corrections = corrections or {}
        self.clock = clock
        self.state = SessionState()
        self._pending: set[asyncio.Task[Intent | None]] = set()

    @property
    def idle_prompt(self) -> str:
        return f"Say “{self.wake_word} …”"

    @property
    def dictating(self) -> FieldName | None:
        return self.state.dictation

    # -- collaborator callbacks -------------------------------------------

    def on_transcript(self, transcript: Transcript) -> None:
        self.handle_transcript(transcript.text, now=transcript.at)

    def on_status(self, message: str) -> None:
        self.feedback.update_status(message)

    # -- transitions ------------------------------------------------------

    def handle_transcript(self, raw: str, now: float | None = None) -> Intent | None:
        """Process one transcript; returns the locally resolved intent, if any.

        A remote fallback, when started, resolves later; see drain().
        """
        if now is None:
            now = self.clock()
        text = apply_vocab(raw, self.corrections).strip() if self.corrections else raw.strip()
        if not text:
            return None

        if self.state.dictation is not None:
            return self._handle_dictation(text)

        heard_wake = contains_wake_word(text, self.wake_word)
        if heard_wake:
            self.state.awake_until = now + self.wake_window_ms
            self.set_status("Wake word detected. Listening briefly…", self.wake_window_ms)
            if not strip_wake_word(text, self.wake_word):
                return None

        awake = self.state.is_awake(now)
        if not awake and not heard_wake:
            self.set_status(self.idle_prompt)
            return None

        self.set_status(f"Heard: {text}", STATUS_TTL_MS)
        intent = self.cascade.parse(text, self.wake_word)
        if intent is None and awake:
            intent = self.cascade.parse(f"{self.wake_word} {text}", self.wake_word)

        if intent is not None:
            self._accept(intent)
            return intent

        if awake and self.remote is not None:
            self._start_remote(text)
            return None

        self._report_no_match(text, now)
        return None

    def _handle_dictation(self, text: str) -> Intent | None:
        edit = parse_dictation(text, self.state.dictation)
        if edit is None:
            self.set_status(f'Spelling {self.state.dictation}: didn\'t catch "{text}"', NO_MATCH_TTL_MS)
            return None
        intent = edit.to_intent(utterance=text)
        if edit.action == "start":
            self.state.dictation = edit.field
        elif edit.action == "stop":
            self.state.dictation = None
        self.feedback.announce_command(intent)
        self.bus.dispatch(intent)
        if self.state.dictation is not None:
            self.set_status(f"Spelling {self.state.dictation}…")
        else:
            self.set_status("Spelling finished", STATUS_TTL_MS)
        return intent

    def _accept(self, intent: Intent) -> None:
        self.state.awake_until = 0.0
        LOGGER.info("Command: %s %s", intent.type, dict(intent.fields))
        self.set_status(describe_command(intent), STATUS_TTL_MS)
        self.feedback.announce_command(intent)
        self.bus.dispatch(intent)

        if intent.type == "spell" and intent.get("action") == "start":
            self.state.dictation = intent.get("field")
            if self.state.dictation is not None:
                self.set_status(f"Spelling {self.state.dictation}…")
            return
        if intent.type == "spell" and intent.get("action") == "stop":
            self.state.dictation = None
            return
        self._restart_source()

    def _report_no_match(self, text: str, now: float) -> None:
        LOGGER.debug("No command parsed: %r", text)
        if now >= self.state.awake_until:
            self.set_status(
                f'Heard: "{text}". Wake window expired. {self.idle_prompt}', STATUS_TTL_MS
            )
        else:
            self.set_status(f'Heard: "{text}". No command parsed.', NO_MATCH_TTL_MS)

    # -- remote fallback --------------------------------------------------

    def _start_remote(self, text: str) -> None:
        assert self.remote is not None
        task = asyncio.get_running_loop().create_task(self._interpret_remote(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _interpret_remote(self, text: str) -> Intent | None:
        intent = await self.remote.interpret(text)
        if self.state.dictation is not None:
            LOGGER.debug("Dropping remote result for %r: spelling in progress", text)
            return None
        if intent is None:
            self._report_no_match(text, self.clock())
            return None
        if not intent.utterance:
            intent = intent.with_utterance(text)
        self._accept(intent)
        return intent

    async def drain(self) -> list[Intent | None]:
        """Wait for every in-flight remote fallback to finish."""
        results: list[Intent | None] = []
        while self._pending:
            tasks = list(self._pending)
            self._pending.difference_update(tasks)
            results.extend(await asyncio.gather(*tasks))
        return results

    # -- timers -----------------------------------------------------------

    def set_status(self, message: str, ttl_ms: int = 0) -> None:
        """Show *message*; after *ttl_ms* restore the idle prompt."""
        self.feedback.update_status(message)
        if self.state.status_timer is not None:
            self.state.status_timer.cancel()
            self.state.status_timer = None
        if ttl_ms > 0:
            loop = asyncio.get_running_loop()
            self.state.status_timer = loop.call_later(
                ttl_ms / 1000, self.feedback.update_status, self.idle_prompt
            )

    def _restart_source(self) -> None:
        if self.source is None:
            return
        if self.state.restart_timer is not None:
            self.state.restart_timer.cancel()
        self.source.stop()
        loop = asyncio.get_running_loop()
        self.state.restart_timer = loop.call_later(self.restart_delay_ms / 1000, self._start_source)

    def _start_source(self) -> None:
        self.state.restart_timer = None
        if self.source is not None:
            self.source.start()

    def close(self) -> None:
        """Cancel outstanding timers and remote tasks."""
        for timer in (self.state.status_timer, self.state.restart_timer):
            if timer is not None:
                timer.cancel()
        self.state.status_timer = None
        self.state.restart_timer = None
        for task in list(self._pending):
            task.cancel()
