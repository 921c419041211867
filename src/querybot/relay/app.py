"""HTTP boundary for the completion relay.

Hides the web framework: one multipart chat endpoint and a health probe.
"""

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import CHAT_ENDPOINT, HEALTH_ENDPOINT
from .service import CompletionRelay


def create_app(relay: CompletionRelay | None = None) -> FastAPI:
    """Create the relay web application.

    Args:
        relay: Relay service to serve (default: Groq-backed relay)

    Returns:
        FastAPI application exposing POST /api/chat and GET /health
    """
    service = relay or CompletionRelay()
    app = FastAPI(title="QueryBot Relay", version=__version__)
    app.state.relay = service

    @app.post(CHAT_ENDPOINT)
    async def chat(
        messages: str | None = Form(None),
        image: UploadFile | None = File(None),
    ) -> JSONResponse:
        image_data = None
        if image is not None:
            image_data = await image.read()
        reply = await service.handle(messages, image_data)
        return JSONResponse(status_code=reply.status_code, content=reply.body)

    @app.get(HEALTH_ENDPOINT)
    async def health() -> dict:
        return {"status": "ok", "configured": service.is_configured()}

    return app
