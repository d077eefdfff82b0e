"""Tests for voxnav.apps.cli — argument parsing and subcommands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from voxnav.apps.cli import build_arg_parser, main


class TestArgParser:
    def test_parse_subcommand(self) -> None:
        args = build_arg_parser().parse_args(["parse", "--no-wake", "scroll down"])
        assert args.subcommand == "parse"
        assert args.transcript == "scroll down"
        assert args.no_wake is True
        assert args.remote is False

    def test_listen_options(self) -> None:
        args = build_arg_parser().parse_args(["listen", "--input", "lines.txt", "--no-remote", "--api-base", "http://x/api"])
        assert args.input == "lines.txt"
        assert args.no_remote is True
        assert args.api_base == "http://x/api"

    def test_no_subcommand(self) -> None:
        assert build_arg_parser().parse_args([]).subcommand is None


class TestParseCommand:
    def test_prints_intent(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", "hey platform filter by motor"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload == {"intent": {"type": "filter", "tag": "Motor", "utterance": "filter by motor"}}

    def test_no_match_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", "hey platform sing me a song"]) == 1
        assert json.loads(capsys.readouterr().out) == {"intent": None}

    def test_wake_word_required(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", "filter by motor"]) == 1

    def test_no_wake(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", "--no-wake", "scroll down"]) == 0
        assert json.loads(capsys.readouterr().out)["intent"]["direction"] == "down"

    def test_custom_wake_word(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["parse", "--wake-word", "Computer", "computer go home"]) == 0
        assert json.loads(capsys.readouterr().out)["intent"]["target"] == "home"

    def test_corrections_from_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        config = tmp_path / "voxnav.json"
        config.write_text(json.dumps({"corrections": {"hey plat form": "hey platform"}}))
        assert main(["parse", "--config-file", str(config), "hey plat form scroll up"]) == 0
        assert json.loads(capsys.readouterr().out)["intent"]["direction"] == "up"


class TestListenCommand:
    def test_runs_transcripts_from_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        lines = tmp_path / "transcripts.txt"
        lines.write_text("hey platform open search\nfilter by motor\nhey platform filter by motor\n")
        assert main(["listen", "--input", str(lines), "--no-remote"]) == 0
        out = capsys.readouterr().out
        assert "navigate target=search" in out
        assert "filter tag=Motor" in out
        assert "Commands" in out

    def test_dictated_fields_are_printed(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        lines = tmp_path / "transcripts.txt"
        lines.write_text("hey platform clear and spell email\nuser\nat example dot com\ndone\n")
        assert main(["listen", "--input", str(lines), "--no-remote"]) == 0
        assert '"email": "user@example.com"' in capsys.readouterr().out


class TestServeCommand:
    def test_builds_app_from_args(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))
        assert main(["serve", "--port", "5050", "--llm-model", "ollama/test"]) == 0
        app, kwargs = calls[0]
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 5050
        assert app.state.llm_config.model == "ollama/test"
