"""Tests for voxnav.ui — Rich status line and history rendering."""

from __future__ import annotations

import io

from rich.console import Console

from voxnav.core.types import Intent
from voxnav.ui import ConsoleFeedback, UiState, describe_intent, render_history_panel, render_intent


def _console() -> Console:
    return Console(file=io.StringIO(), width=100, color_system=None)


def _render(renderable) -> str:
    console = _console()
    console.print(renderable)
    return console.file.getvalue()


class TestDescribeIntent:
    def test_single_field(self) -> None:
        assert describe_intent(Intent("filter", {"tag": "Motor"})) == "filter tag=Motor"

    def test_tags_are_joined(self) -> None:
        intent = Intent("filter", {"tags": ["Vision", "Hearing"]})
        assert describe_intent(intent) == "filter tags=Vision, Hearing"

    def test_no_fields(self) -> None:
        assert describe_intent(Intent("reset-filters")) == "reset-filters"

    def test_library(self) -> None:
        intent = Intent("library", {"action": "remove", "list": "favourites", "title": "tetris"})
        assert describe_intent(intent) == "library action=remove list=favourites title=tetris"


class TestRenderIntent:
    def test_plain_text(self) -> None:
        line = render_intent(Intent("search", {"query": "zelda"}, "search zelda"))
        assert line.plain == '> search query=zelda  "search zelda"'

    def test_without_utterance(self) -> None:
        assert render_intent(Intent("home", {"action": "next"})).plain == "> home action=next"


class TestHistoryPanel:
    def test_empty(self) -> None:
        assert "No commands yet" in _render(render_history_panel(UiState()))

    def test_lists_commands(self) -> None:
        state = UiState(history=[Intent("navigate", {"target": "search"}), Intent("reset-filters")])
        output = _render(render_history_panel(state))
        assert "navigate" in output
        assert "target=search" in output
        assert "reset-filters" in output


class TestConsoleFeedback:
    def test_prints_status(self) -> None:
        console = _console()
        feedback = ConsoleFeedback(console)
        feedback.update_status("Listening…")
        assert feedback.state.status == "Listening…"
        assert "voice: Listening…" in console.file.getvalue()

    def test_identical_status_is_printed_once(self) -> None:
        console = _console()
        feedback = ConsoleFeedback(console)
        feedback.update_status("Listening…")
        feedback.update_status("Listening…")
        assert console.file.getvalue().count("Listening…") == 1

    def test_announce_records_history(self) -> None:
        feedback = ConsoleFeedback(_console())
        intent = Intent("scroll", {"direction": "down"}, "scroll down")
        feedback.announce_command(intent)
        assert feedback.state.history == [intent]
        assert feedback.state.status == "Heard: scroll down"

    def test_history_is_bounded(self) -> None:
        feedback = ConsoleFeedback(_console())
        feedback.state.max_history = 3
        for n in range(5):
            feedback.announce_command(Intent("search", {"query": f"q{n}"}))
        assert [i["query"] for i in feedback.state.history] == ["q2", "q3", "q4"]
