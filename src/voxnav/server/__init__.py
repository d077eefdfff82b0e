"""Server-side heuristic interpreter and its HTTP endpoint."""

from voxnav.server.interpret import LlmConfig, heuristic_interpret, interpret_transcript, strip_fillers

__all__ = ["LlmConfig", "heuristic_interpret", "interpret_transcript", "strip_fillers"]
