"""Transcript source: keeps a recognizer running and forwards its text.

The recognizer itself (microphone capture, ASR) is a black box yielding
finalized transcripts from an async iterator. TranscriptSource owns its
lifetime: start/stop are idempotent, errors are reported and retried.
"""

import asyncio
from collections.abc import AsyncIterator, Callable

from voxnav.core.constants import SOURCE_RETRY_MS
from voxnav.core.env import LOGGER
from voxnav.core.protocols import RecognizerLike
from voxnav.core.types import Transcript
from voxnav.session import monotonic_ms


class QueueRecognizer:
    """In-process recognizer fed with text via feed().

    The queue outlives individual streams, so transcripts fed while the
    source is restarting are delivered once it starts again. ``close()``
    ends the current stream.
    """

    _EOF = object()

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue()

    def feed(self, text: str) -> None:
        self._queue.put_nowait(text)

    def close(self) -> None:
        self._queue.put_nowait(self._EOF)

    async def _stream(self) -> AsyncIterator[str]:
        while True:
            # A stop() issued while the previous item was handled lands
            # here, before anything else is dequeued.
            await asyncio.sleep(0)
            item = await self._queue.get()
            if item is self._EOF:
                return
            yield str(item)

    def __call__(self) -> AsyncIterator[str]:
        return self._stream()


class TranscriptSource:
    """Run *recognizer* in a task, stamping each result as a Transcript."""

    def __init__(
        self,
        recognizer: RecognizerLike,
        on_transcript: Callable[[Transcript], None],
        on_status: Callable[[str], None] | None = None,
        retry_ms: int = SOURCE_RETRY_MS,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.recognizer = recognizer
        self.on_transcript = on_transcript
        self.on_status = on_status or (lambda message: None)
        self.retry_ms = retry_ms
        self.clock = clock
        self._task: asyncio.Task[None] | None = None
        self._retry: asyncio.TimerHandle | None = None
        self.finished = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._cancel_retry()
        self.finished.clear()
        self._task = asyncio.get_running_loop().create_task(self._run())
        self.on_status("Starting mic…")

    def stop(self) -> None:
        self._cancel_retry()
        if not self.running:
            return
        assert self._task is not None
        self._task.cancel()
        self._task = None

    def _cancel_retry(self) -> None:
        if self._retry is not None:
            self._retry.cancel()
            self._retry = None

    async def _run(self) -> None:
        self.on_status("Listening…")
        try:
            async for text in self.recognizer():
                text = text.strip()
                if text:
                    self.on_transcript(Transcript(text=text, at=self.clock()))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            LOGGER.warning("Recognizer failed: %s", exc)
            self.on_status(f"Mic error: {exc}")
            self._retry = asyncio.get_running_loop().call_later(
                self.retry_ms / 1000, self._restart
            )
            return
        self.on_status("Transcript stream ended")
        self.finished.set()

    def _restart(self) -> None:
        self._retry = None
        self._task = None
        self.start()
