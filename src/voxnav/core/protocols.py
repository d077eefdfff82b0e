"""Structural type protocols for the pipeline's collaborators."""

from collections.abc import AsyncIterator
from typing import Protocol

from voxnav.core.types import Intent


class RecognizerLike(Protocol):
    """Speech recognizer: each call opens a fresh stream of final transcripts."""

    def __call__(self) -> AsyncIterator[str]: ...


class TranscriptSourceLike(Protocol):
    """Start/stop handle the session controller uses to reset recognition."""

    def start(self) -> None: ...

    def stop(self) -> None: ...


class FeedbackLike(Protocol):
    """Visible status line."""

    def update_status(self, message: str) -> None: ...

    def announce_command(self, intent: Intent) -> None: ...


class NavigatorLike(Protocol):
    """Target of the dispatch bus's built-in navigation and scrolling."""

    viewport_height: int

    def go(self, path: str) -> None: ...

    def back(self) -> None: ...

    def forward(self) -> None: ...

    def scroll_by(self, dy: int) -> None: ...


class RemoteInterpreterLike(Protocol):
    """Best-effort server-side interpretation."""

    async def interpret(self, text: str) -> Intent | None: ...
