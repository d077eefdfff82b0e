"""Application-level configuration.

One JSON file (``~/.config/voxnav/config.json`` by default) feeds the
listener session and the interpreter server::

    {
      "wake": {"word": "hey platform", "window_ms": 2500},
      "remote": {"enabled": true, "api_base": "http://localhost:5000/api", "timeout_ms": 1200},
      "corrections": {"hey plat form": "hey platform"},
      "server": {
        "host": "127.0.0.1",
        "port": 5000,
        "llm": {"model": "ollama/qwen3:1.7b", "prompt_file": "interpret_prompt.md"}
      }
    }
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from voxnav.core.constants import (
    DEFAULT_API_BASE,
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_DIR_ENV,
    DEFAULT_CONFIG_FILE,
    DEFAULT_INTERPRET_PROMPT,
    DEFAULT_LLM_MAX_TOKENS,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_PROMPT_FILE,
    DEFAULT_REMOTE_TIMEOUT_MS,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    DEFAULT_WAKE_WORD,
    WAKE_WINDOW_MS,
)
from voxnav.core.env import LOGGER
from voxnav.server.interpret import LlmConfig

# ---------------------------------------------------------------------------
# Nested config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WakeConfig:
    """Wake-word gating."""

    word: str = DEFAULT_WAKE_WORD
    window_ms: int = WAKE_WINDOW_MS


@dataclass(frozen=True, slots=True)
class RemoteConfig:
    """Client side of the remote fallback."""

    enabled: bool = True
    api_base: str = DEFAULT_API_BASE
    timeout_ms: int = DEFAULT_REMOTE_TIMEOUT_MS


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Interpreter server settings."""

    host: str = DEFAULT_SERVER_HOST
    port: int = DEFAULT_SERVER_PORT
    llm: LlmConfig = field(default_factory=LlmConfig)


@dataclass(frozen=True, slots=True)
class VoxnavConfig:
    """Top-level configuration loaded from ~/.config/voxnav/config.json."""

    wake: WakeConfig = field(default_factory=WakeConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    corrections: dict[str, str] = field(default_factory=dict)
    server: ServerConfig = field(default_factory=ServerConfig)


# ---------------------------------------------------------------------------
# Config loading helpers
# ---------------------------------------------------------------------------


def config_dir() -> Path:
    """The config directory, honouring ``VOXNAV_CONFIG_DIR``."""
    return Path(os.environ.get(DEFAULT_CONFIG_DIR_ENV, "") or DEFAULT_CONFIG_DIR).expanduser()


def _resolve_config_path(base: Path, path_str: str) -> Path:
    """Resolve a path relative to *base*. Absolute paths used as-is."""
    p = Path(path_str).expanduser()
    if p.is_absolute():
        return p
    return base / p


def _resolve_prompt(base: Path, section: dict[str, Any]) -> str:
    """``prompt_file`` wins over ``prompt``; then the default prompt file."""
    prompt = section.get("prompt")
    prompt_file = section.get("prompt_file")
    if prompt and prompt_file:
        LOGGER.debug("Both 'prompt' and 'prompt_file' in server.llm; using 'prompt_file'")
    if prompt_file:
        return _resolve_config_path(base, str(prompt_file)).read_text().strip()
    if prompt:
        return str(prompt)
    default_file = base / DEFAULT_PROMPT_FILE
    if default_file.exists():
        return default_file.read_text().strip() or DEFAULT_INTERPRET_PROMPT
    return DEFAULT_INTERPRET_PROMPT


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    raw = data.get(name, {})
    return raw if isinstance(raw, dict) else {}


# ---------------------------------------------------------------------------
# Public loader
# ---------------------------------------------------------------------------


def load_config(path: str | None = None) -> VoxnavConfig:
    """Load voxnav configuration from a JSON file.

    Reads ``~/.config/voxnav/config.json`` (or *path*). The directory can
    be overridden with ``VOXNAV_CONFIG_DIR``; relative ``prompt_file``
    paths are resolved against it.

    Falls back to defaults if the file does not exist or is not a JSON
    object; a default ``interpret_prompt.md`` in the config directory is
    still picked up. Invalid JSON raises ``json.JSONDecodeError``.
    """
    base = config_dir()
    config_path = Path(path).expanduser() if path else base / DEFAULT_CONFIG_FILE

    data: Any = {}
    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)
    else:
        LOGGER.debug("No config at %s; using defaults", config_path)

    if not isinstance(data, dict):
        data = {}

    # -- wake --------------------------------------------------------------
    wake_raw = _section(data, "wake")
    wake = WakeConfig(
        word=str(wake_raw.get("word", DEFAULT_WAKE_WORD)).strip().lower() or DEFAULT_WAKE_WORD,
        window_ms=int(wake_raw.get("window_ms", WAKE_WINDOW_MS)),
    )

    # -- remote ------------------------------------------------------------
    remote_raw = _section(data, "remote")
    remote = RemoteConfig(
        enabled=bool(remote_raw.get("enabled", True)),
        api_base=str(remote_raw.get("api_base", DEFAULT_API_BASE)),
        timeout_ms=int(remote_raw.get("timeout_ms", DEFAULT_REMOTE_TIMEOUT_MS)),
    )

    # -- corrections -------------------------------------------------------
    corrections = {str(k): str(v) for k, v in _section(data, "corrections").items()}

    # -- server ------------------------------------------------------------
    server_raw = _section(data, "server")
    llm_raw = _section(server_raw, "llm")
    llm = LlmConfig(
        model=llm_raw.get("model") or None,
        prompt=_resolve_prompt(base, llm_raw),
        timeout=float(llm_raw.get("timeout", DEFAULT_LLM_TIMEOUT)),
        max_tokens=int(llm_raw.get("max_tokens", DEFAULT_LLM_MAX_TOKENS)),
    )
    server = ServerConfig(
        host=str(server_raw.get("host", DEFAULT_SERVER_HOST)),
        port=int(server_raw.get("port", DEFAULT_SERVER_PORT)),
        llm=llm,
    )

    return VoxnavConfig(wake=wake, remote=remote, corrections=corrections, server=server)
