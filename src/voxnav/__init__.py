__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy re-exports of the pipeline pieces for convenience."""
    _lazy = {
        "DispatchBus": "voxnav.bus",
        "HistoryNavigator": "voxnav.bus",
        "VoiceCommandEvent": "voxnav.bus",
        "RemoteInterpreter": "voxnav.remote",
        "SessionController": "voxnav.session",
        "TranscriptSource": "voxnav.listener",
        "QueueRecognizer": "voxnav.listener",
        "ConsoleFeedback": "voxnav.ui",
        "Intent": "voxnav.core.types",
        "parse_command": "voxnav.core.matchers",
        "resolve": "voxnav.core.matchers",
        "parse_dictation": "voxnav.core.dictation",
    }
    if name in _lazy:
        import importlib

        return getattr(importlib.import_module(_lazy[name]), name)
    raise AttributeError(f"module 'voxnav' has no attribute {name!r}")
