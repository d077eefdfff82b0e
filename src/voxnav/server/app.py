"""FastAPI application exposing the heuristic interpreter.

Start with::

    voxnav serve --port 5000

Or::

    uvicorn voxnav.server.app:app --port 5000
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from voxnav import __version__
from voxnav.core.env import LOGGER
from voxnav.server.interpret import LlmConfig, interpret_transcript

router = APIRouter(prefix="/api/voice", tags=["voice"])


class InterpretRequest(BaseModel):
    transcript: str | None = None


@router.post("/interpret")
async def interpret(request: Request, body: InterpretRequest | None = None):
    """Interpret one transcript into ``{"intent": Intent | null}``."""
    transcript = (body.transcript if body is not None else None) or ""
    transcript = transcript.strip()
    if not transcript:
        return JSONResponse(status_code=400, content={"error": "transcript is required"})

    llm_config: LlmConfig | None = request.app.state.llm_config
    intent = await asyncio.to_thread(interpret_transcript, transcript, llm_config)
    LOGGER.debug("Interpret %r -> %s", transcript, intent.type if intent else None)
    return {"intent": intent.to_dict() if intent is not None else None}


def create_app(llm_config: LlmConfig | None = None) -> FastAPI:
    """Build the interpreter app; *llm_config* enables the optional LLM pass."""
    app = FastAPI(
        title="voxnav interpreter",
        description="Server-side heuristic interpretation of voice transcripts.",
        version=__version__,
    )
    app.state.llm_config = llm_config if llm_config is not None and llm_config.model else None
    app.include_router(router)

    @app.get("/api/health")
    async def health():
        """Simple health-check endpoint."""
        return {"status": "ok", "llm_enabled": app.state.llm_config is not None}

    return app


app = create_app()
