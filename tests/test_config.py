"""Tests for voxnav.apps.config — JSON config loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from voxnav.apps.config import VoxnavConfig, config_dir, load_config
from voxnav.core.constants import DEFAULT_API_BASE, DEFAULT_INTERPRET_PROMPT, DEFAULT_WAKE_WORD, WAKE_WINDOW_MS


def _write(path: Path, data) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return str(path)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "nope.json"))
        assert config == VoxnavConfig()
        assert config.wake.word == DEFAULT_WAKE_WORD
        assert config.wake.window_ms == WAKE_WINDOW_MS
        assert config.remote.api_base == DEFAULT_API_BASE
        assert config.server.llm.model is None
        assert config.server.llm.prompt == DEFAULT_INTERPRET_PROMPT

    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "config.json",
            {
                "wake": {"word": "  Hey Console ", "window_ms": 4000},
                "remote": {"enabled": False, "api_base": "http://example.test/api", "timeout_ms": 800},
                "corrections": {"hey plat form": "hey platform"},
                "server": {
                    "host": "0.0.0.0",
                    "port": 8080,
                    "llm": {"model": "ollama/qwen3:1.7b", "prompt": "be terse", "timeout": 1.5, "max_tokens": 64},
                },
            },
        )
        config = load_config(path)
        assert config.wake.word == "hey console"
        assert config.wake.window_ms == 4000
        assert config.remote.enabled is False
        assert config.remote.api_base == "http://example.test/api"
        assert config.remote.timeout_ms == 800
        assert config.corrections == {"hey plat form": "hey platform"}
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8080
        assert config.server.llm.model == "ollama/qwen3:1.7b"
        assert config.server.llm.prompt == "be terse"
        assert config.server.llm.timeout == 1.5
        assert config.server.llm.max_tokens == 64

    def test_partial_file_keeps_other_defaults(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path / "config.json", {"wake": {"window_ms": 1000}}))
        assert config.wake.word == DEFAULT_WAKE_WORD
        assert config.wake.window_ms == 1000
        assert config.remote.enabled is True

    def test_non_object_json(self, tmp_path: Path) -> None:
        assert load_config(_write(tmp_path / "config.json", ["not", "a", "dict"])) == VoxnavConfig()

    def test_non_object_sections_are_ignored(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path / "config.json", {"wake": "loud", "corrections": []}))
        assert config.wake.word == DEFAULT_WAKE_WORD
        assert config.corrections == {}

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_config(str(path))


class TestPromptResolution:
    def test_prompt_file_relative_to_config_dir(self) -> None:
        base = config_dir()
        base.mkdir(parents=True, exist_ok=True)
        (base / "custom.md").write_text("custom prompt\n")
        _write(base / "config.json", {"server": {"llm": {"prompt": "ignored", "prompt_file": "custom.md"}}})
        assert load_config().server.llm.prompt == "custom prompt"

    def test_default_prompt_file(self) -> None:
        base = config_dir()
        base.mkdir(parents=True, exist_ok=True)
        (base / "interpret_prompt.md").write_text("house prompt")
        assert load_config().server.llm.prompt == "house prompt"

    def test_absolute_prompt_file(self, tmp_path: Path) -> None:
        prompt = tmp_path / "elsewhere.md"
        prompt.write_text("absolute prompt")
        path = _write(tmp_path / "cfg.json", {"server": {"llm": {"prompt_file": str(prompt)}}})
        assert load_config(path).server.llm.prompt == "absolute prompt"


class TestConfigDir:
    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VOXNAV_CONFIG_DIR", str(tmp_path / "elsewhere"))
        assert config_dir() == tmp_path / "elsewhere"

    def test_default_location(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("VOXNAV_CONFIG_DIR", raising=False)
        assert config_dir() == Path("~/.config/voxnav").expanduser()

    def test_reads_config_from_env_dir(self) -> None:
        _write(config_dir() / "config.json", {"wake": {"word": "ok console"}})
        assert load_config().wake.word == "ok console"
