"""Cancelable broadcast of resolved intents to page controllers.

Every subscriber sees every intent. A subscriber claims an intent by
calling ``event.prevent_default()``, which suppresses the bus's built-in
navigation and scrolling. Unclaimed intents fall back to those defaults.
"""

from __future__ import annotations

from collections.abc import Callable

from voxnav.core.constants import DEFAULT_VIEWPORT_HEIGHT, ROUTES, SCROLL_VIEWPORT_FRACTION
from voxnav.core.env import LOGGER
from voxnav.core.protocols import NavigatorLike
from voxnav.core.types import Intent


class VoiceCommandEvent:
    """One delivery of an intent; subscribers may claim it."""

    __slots__ = ("intent", "_default_prevented")

    def __init__(self, intent: Intent) -> None:
        self.intent = intent
        self._default_prevented = False

    @property
    def default_prevented(self) -> bool:
        return self._default_prevented

    def prevent_default(self) -> None:
        self._default_prevented = True


Listener = Callable[[VoiceCommandEvent], None]


class HistoryNavigator:
    """In-process navigation target: a path history and a scroll offset."""

    __slots__ = ("history", "index", "scroll_y", "viewport_height")

    def __init__(self, start: str = "/", viewport_height: int = DEFAULT_VIEWPORT_HEIGHT) -> None:
        self.history: list[str] = [start]
        self.index = 0
        self.scroll_y = 0
        self.viewport_height = viewport_height

    @property
    def path(self) -> str:
        return self.history[self.index]

    def go(self, path: str) -> None:
        del self.history[self.index + 1 :]
        self.history.append(path)
        self.index += 1
        self.scroll_y = 0
        LOGGER.info("Navigated to %s", path)

    def back(self) -> None:
        if self.index > 0:
            self.index -= 1
            self.scroll_y = 0
        LOGGER.info("Back to %s", self.path)

    def forward(self) -> None:
        if self.index < len(self.history) - 1:
            self.index += 1
            self.scroll_y = 0
        LOGGER.info("Forward to %s", self.path)

    def scroll_by(self, dy: int) -> None:
        self.scroll_y = max(0, self.scroll_y + dy)
        LOGGER.info("Scrolled to y=%d", self.scroll_y)


class DispatchBus:
    """Publish/subscribe bus returning whether a subscriber claimed the intent."""

    def __init__(
        self,
        navigator: NavigatorLike | None = None,
        scroll_fraction: float = SCROLL_VIEWPORT_FRACTION,
    ) -> None:
        self.navigator: NavigatorLike = navigator if navigator is not None else HistoryNavigator()
        self.scroll_fraction = scroll_fraction
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, intent: Intent) -> bool:
        """Deliver *intent* to every subscriber, then run defaults if unclaimed."""
        event = VoiceCommandEvent(intent)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                LOGGER.exception("Voice command listener failed for %s", intent.type)
        if event.default_prevented:
            LOGGER.debug("Intent %s claimed by a subscriber", intent.type)
            return True
        self._run_default(intent)
        return False

    def _run_default(self, intent: Intent) -> None:
        if intent.type == "navigate":
            target = intent.get("target")
            if target in ROUTES:
                self.navigator.go(ROUTES[target])
            elif target == "back":
                self.navigator.back()
            elif target == "next-page":
                self.navigator.forward()
        elif intent.type == "scroll":
            step = int(self.navigator.viewport_height * self.scroll_fraction)
            direction = intent.get("direction")
            if direction == "up":
                self.navigator.scroll_by(-step)
            elif direction == "down":
                self.navigator.scroll_by(step)
