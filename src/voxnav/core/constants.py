"""Default configuration values for voxnav."""

from typing import Final

# Wake word gating
DEFAULT_WAKE_WORD: Final = "hey platform"
WAKE_WINDOW_MS: Final = 2500

# Session timers
RESTART_DELAY_MS: Final = 200
SOURCE_RETRY_MS: Final = 400
STATUS_TTL_MS: Final = 2500
NO_MATCH_TTL_MS: Final = 2000

# Remote fallback
DEFAULT_API_BASE: Final = "http://localhost:5000/api"
DEFAULT_REMOTE_TIMEOUT_MS: Final = 1200
INTERPRET_PATH: Final = "/voice/interpret"

# Dispatch bus defaults
DEFAULT_VIEWPORT_HEIGHT: Final = 800
SCROLL_VIEWPORT_FRACTION: Final = 0.5
ROUTES: Final = {
    "home": "/",
    "search": "/search",
    "settings": "/settings",
    "profile": "/profile",
    "login": "/login",
    "signup": "/signup",
}

# Config file
DEFAULT_CONFIG_DIR: Final = "~/.config/voxnav"
DEFAULT_CONFIG_DIR_ENV: Final = "VOXNAV_CONFIG_DIR"
DEFAULT_CONFIG_FILE: Final = "config.json"
DEFAULT_PROMPT_FILE: Final = "interpret_prompt.md"

# Interpreter server
DEFAULT_SERVER_HOST: Final = "127.0.0.1"
DEFAULT_SERVER_PORT: Final = 5000
DEFAULT_LLM_TIMEOUT: Final = 2.5
DEFAULT_LLM_MAX_TOKENS: Final = 256
DEFAULT_INTERPRET_PROMPT: Final = (
    "You are an intent parser for a game catalog. Return ONLY a JSON object "
    'with a "type" field (navigate, search, filter, reset-filters, ui, '
    "scroll, game, library) and the fields relevant to it: target, query, "
    "tag or tags, action, direction, list, title. "
    '"reset/clear filters" is reset-filters; "go to/open search" is navigate '
    'with target "search"; "scroll up/down" is scroll with a direction; '
    '"search/find/look for ..." is search with the query text; '
    '"filter/apply filters ..." is filter with tags split on "and" or commas. '
    "If the request matches none of these, return null."
)

# Catalog vocabulary
ACCESSIBILITY_CATEGORIES: Final = ("Vision", "Hearing", "Motor", "Speech", "Cognitive")
GENRES: Final = (
    "Action",
    "Adventure",
    "Puzzle",
    "Strategy",
    "Simulation",
    "Casual",
    "RPG",
    "Platformer",
    "Sports",
    "Kids",
)
