"""SessionRelay implementation.

Responsible for:
- issuing session tokens and initializing session + queue state
- ending sessions
- reporting session status for a token
- accepting anonymous messages for a valid, active session
- handing queued messages to the polling bot

Validation failures are raised as the exceptions in
exceptions/exceptions.py; the API layer turns them into HTTP errors.
"""

import logging
from typing import List, Optional, Tuple

from core.security.token_codec import TOKEN_DELIMITER
from exceptions.exceptions import (
    MalformedRequestException,
    SessionInvalidException,
)

from ..models.api_models import SessionStatusResponse
from ..models.session_models import Message, Session
from ..store.message_queue import MessageQueueStore
from ..store.session_store import SessionStore


logger = logging.getLogger(__name__)


class SessionRelay:
    """Request orchestration for the relay.

    Parameters
    ----------
    session_store:
        Store used to create, validate, reconcile and end sessions. Its
        clock is also used to timestamp messages.
    queue_store:
        Store holding the per-session message queues.
    """

    def __init__(self, session_store: SessionStore, queue_store: MessageQueueStore):
        self.session_store = session_store
        self.queue_store = queue_store

    def create_session(
        self,
        session_id: Optional[str],
        group_jid: Optional[str],
        created_at: Optional[int] = None,
    ) -> Tuple[Session, str]:
        """Issue a token for the session and start it with an empty queue."""
        if not session_id:
            raise MalformedRequestException("sessionId")
        if not group_jid:
            raise MalformedRequestException("groupJid")
        if TOKEN_DELIMITER in session_id:
            raise MalformedRequestException(
                "sessionId",
                f"sessionId must not contain {TOKEN_DELIMITER!r}",
            )
        if created_at is None:
            created_at = self.session_store.clock()
        elif created_at < 0:
            raise MalformedRequestException(
                "createdAt", "createdAt must be a non-negative epoch millis value"
            )

        token = self.session_store.codec.issue(session_id, group_jid, created_at)
        session = self.session_store.create_session(session_id, group_jid, created_at)
        self.queue_store.reset(session_id)

        logger.info("[RELAY] created session_id=%s group_jid=%s", session_id, group_jid)
        return session, token

    def end_session(self, session_id: Optional[str]) -> None:
        if not session_id:
            raise MalformedRequestException("sessionId")
        self.session_store.end_session(session_id)

    def session_status(self, token: Optional[str]) -> SessionStatusResponse:
        """Report the state of the session a token refers to.

        Never raises: a missing, invalid, expired or ended token is
        reported as a session that does not exist.
        """
        data = self.session_store.validate(token) if token else None
        if data is None:
            return SessionStatusResponse(active=False, exists=False)

        session = self.session_store.reconcile(data)
        return SessionStatusResponse(
            active=session.active,
            exists=True,
            message_count=session.message_count,
        )

    def submit_message(self, token: Optional[str], message: Optional[str]) -> int:
        """Queue a message for the token's session and return its number."""
        if not token:
            raise MalformedRequestException("token")
        if message is None:
            raise MalformedRequestException("message")

        data = self.session_store.validate(token)
        if data is None:
            raise SessionInvalidException()

        session = self.session_store.reconcile(data)
        if not session.active:
            raise SessionInvalidException()

        return self.queue_store.submit(session, message, now=self.session_store.clock())

    def poll_messages(self, session_id: str) -> List[Message]:
        return self.queue_store.poll(session_id)
