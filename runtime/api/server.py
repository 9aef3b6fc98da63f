"""
FastAPI application entry point for the Anon Relay runtime.

Responsibilities:
- create the FastAPI app
- construct shared singletons (SessionSigner, TokenCodec, SessionStore,
  MessageQueueStore, SessionRelay)
- include the relay routes under /api
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from configs.settings import settings
from core.security.signature import SessionSigner
from core.security.token_codec import TokenCodec
from runtime.relay.session_relay import SessionRelay
from runtime.store.message_queue import MessageQueueStore
from runtime.store.session_store import SessionStore
from . import session_routes


logger = logging.getLogger(__name__)


def build_relay(secret: Optional[str] = None) -> SessionRelay:
    """Wire the stores together around a signer for ``secret``."""
    if secret is None:
        if settings.uses_default_secret:
            logger.warning(
                "[RELAY] ANON_RELAY_SESSION_SECRET is not set; using the "
                "built-in development secret. Tokens are forgeable."
            )
        secret = settings.session_secret

    codec = TokenCodec(SessionSigner(secret))
    return SessionRelay(
        session_store=SessionStore(codec=codec),
        queue_store=MessageQueueStore(),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies are client errors like any other missing field.
    fields = [".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()]
    fields = [f for f in fields if f]
    if fields:
        detail = "Invalid request: " + ", ".join(fields)
    else:
        detail = "Invalid request body"
    logger.warning("[RELAY] HTTP 400 on %s %s reason=%r", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"detail": detail})


def create_app(relay: Optional[SessionRelay] = None) -> FastAPI:
    """Build the FastAPI app around ``relay`` (a fresh one by default)."""
    app = FastAPI(title="Anon Relay")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    # Initialize the router module with our shared relay, then include it.
    session_routes.init_routes(relay=relay or build_relay())
    app.include_router(session_routes.router, prefix="/api")
    return app


app = create_app()
