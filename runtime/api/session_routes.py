"""HTTP routes for the Anon Relay runtime.

Exposes endpoints like:

- POST /api/session/create         -> issues a token for (sessionId, groupJid)
- POST /api/session/end            -> ends a session
- GET  /api/session/status         -> reports the session behind a token
- POST /api/message/submit         -> queues an anonymous message
- GET  /api/messages/poll/{id}     -> drains the session's queue (bot side)
- GET  /api/health
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from exceptions.exceptions import RelayException

from ..models.api_models import (
    CreateSessionRequest,
    CreateSessionResponse,
    EndSessionRequest,
    HealthResponse,
    PollMessagesResponse,
    SessionStatusResponse,
    SubmitMessageRequest,
    SubmitMessageResponse,
    SuccessResponse,
)
from ..relay.session_relay import SessionRelay
from ..store.session_store import now_millis


logger = logging.getLogger(__name__)

# Router for all relay endpoints
router = APIRouter()


# Module-level reference, to be initialized by the server.
_RELAY: Optional[SessionRelay] = None


def init_routes(relay: SessionRelay) -> None:
    """Initialize the module-level relay used by the route handlers."""
    global _RELAY
    _RELAY = relay


def _require_relay() -> SessionRelay:
    if _RELAY is None:
        raise HTTPException(
            status_code=500,
            detail="SessionRelay is not configured on the server.",
        )
    return _RELAY


def _to_http(exc: RelayException, operation: str, session_id: Optional[str]) -> HTTPException:
    logger.warning(
        "[RELAY] HTTP %s on %s for session_id=%s reason=%r",
        exc.status_code,
        operation,
        session_id,
        exc.reason,
    )
    return HTTPException(status_code=exc.status_code, detail=exc.reason)


@router.post("/session/create", response_model=CreateSessionResponse)
async def create_session(request: CreateSessionRequest) -> CreateSessionResponse:
    """Start a session for a group and return its signed token.

    Called by the bot when someone opens an anonymous session in a group.
    """
    relay = _require_relay()
    try:
        session, token = relay.create_session(
            session_id=request.session_id,
            group_jid=request.group_jid,
            created_at=request.created_at,
        )
    except RelayException as e:
        raise _to_http(e, "create", request.session_id) from e
    except Exception:
        # Log unexpected errors with a full traceback for debugging.
        logger.exception(
            "[RELAY] Unexpected error on create for session_id=%s group_jid=%s",
            request.session_id,
            request.group_jid,
        )
        raise
    return CreateSessionResponse(session_id=session.session_id, token=token)


@router.post("/session/end", response_model=SuccessResponse)
async def end_session(request: EndSessionRequest) -> SuccessResponse:
    relay = _require_relay()
    try:
        relay.end_session(request.session_id)
    except RelayException as e:
        raise _to_http(e, "end", request.session_id) from e
    return SuccessResponse()


@router.get(
    "/session/status",
    response_model=SessionStatusResponse,
    response_model_exclude_none=True,
)
async def session_status(token: Optional[str] = None) -> SessionStatusResponse:
    """Report whether the token's session exists and is active.

    Never fails: unusable tokens are reported as `exists: false`.
    """
    relay = _require_relay()
    return relay.session_status(token)


@router.post("/message/submit", response_model=SubmitMessageResponse)
async def submit_message(request: SubmitMessageRequest) -> SubmitMessageResponse:
    """Queue an anonymous message for the session behind the token."""
    relay = _require_relay()
    try:
        number = relay.submit_message(token=request.token, message=request.message)
    except RelayException as e:
        # Only the token's own session id is worth logging, and only if valid.
        data = relay.session_store.codec.decode(request.token)
        raise _to_http(e, "submit", data.session_id if data else None) from e
    except Exception:
        # Log unexpected errors with a full traceback; the message text is
        # never logged.
        logger.exception("[RELAY] Unexpected error on submit")
        raise
    return SubmitMessageResponse(message_number=number)


@router.get("/messages/poll/{session_id}", response_model=PollMessagesResponse)
async def poll_messages(session_id: str) -> PollMessagesResponse:
    """Return and clear every queued message for a session (bot side)."""
    relay = _require_relay()
    return PollMessagesResponse(messages=relay.poll_messages(session_id))


# --------------------------------------------------------
# Endpoint: GET /api/health
# --------------------------------------------------------
@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Simple health check endpoint for uptime monitoring.
    """
    return HealthResponse(timestamp=now_millis())
