"""Session storage and token validation for Anon Relay.

This is an in-memory dict of session_id -> Session plus the set of
explicitly ended session ids. Nothing is written to disk.

The design is intentionally simple:
- In-memory access is the only source of truth during a run.
- After a restart the store is empty; a still-valid token carries the
  facts needed to rebuild its session record (see `reconcile`).
- Ended session ids are remembered for the lifetime of the process, so
  no token bearing such an id validates again.
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Set

from core.security.models import SessionData
from core.security.token_codec import TokenCodec

from ..models.session_models import Session


logger = logging.getLogger(__name__)

# Tokens are valid for 20 minutes after the session's creation time.
SESSION_TTL_MS = 20 * 60 * 1000


def now_millis() -> int:
    return int(time.time() * 1000)


class SessionStore:
    """In-memory session store with token validation.

    Parameters
    ----------
    codec:
        TokenCodec used to issue and decode session tokens.
    clock:
        Callable returning the current time in epoch milliseconds.
        Defaults to wall-clock time; tests pass a controllable clock.
    """

    def __init__(
        self,
        codec: TokenCodec,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.codec = codec
        self.clock = clock or now_millis

        self._sessions: Dict[str, Session] = {}
        self._ended: Set[str] = set()
        self._lock = threading.Lock()

    def create_session(self, session_id: str, group_jid: str, created_at: int) -> Session:
        """Create (or re-create) the session record and return it.

        A re-created session starts over with a zero message count. An id
        that has already been ended stays inactive.
        """
        with self._lock:
            session = Session(
                session_id=session_id,
                group_jid=group_jid,
                active=session_id not in self._ended,
                created_at=created_at,
                last_activity=self.clock(),
            )
            self._sessions[session_id] = session

        if not session.active:
            logger.warning("[SESSION] created session_id=%s which was already ended", session_id)
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def is_ended(self, session_id: str) -> bool:
        return session_id in self._ended

    def validate(self, token) -> Optional[SessionData]:
        """Return the token's SessionData if it is usable right now.

        A token is usable when its signature verifies, its session id has
        not been ended, and it is no older than SESSION_TTL_MS. Returns None
        otherwise; never raises.
        """
        data = self.codec.decode(token)
        if data is None:
            logger.debug("[SESSION] rejected token: bad signature or format")
            return None

        if self.is_ended(data.session_id):
            logger.debug("[SESSION] rejected token: session_id=%s ended", data.session_id)
            return None

        age = self.clock() - data.created_at
        if age > SESSION_TTL_MS:
            logger.debug(
                "[SESSION] rejected token: session_id=%s expired (age=%sms)",
                data.session_id,
                age,
            )
            return None

        return data

    def reconcile(self, data: SessionData) -> Session:
        """Return the session for validated token data, rebuilding it if absent.

        The store loses everything on restart, while the token survives on
        the client. The rebuilt record takes its creation facts from the
        token and restarts its message count at zero.
        """
        with self._lock:
            session = self._sessions.get(data.session_id)
            if session is None:
                session = Session(
                    session_id=data.session_id,
                    group_jid=data.group_jid,
                    active=data.session_id not in self._ended,
                    created_at=data.created_at,
                    last_activity=self.clock(),
                )
                self._sessions[data.session_id] = session
                logger.info("[SESSION] reconciled session_id=%s from token", data.session_id)
        return session

    def end_session(self, session_id: str) -> None:
        """Mark a session as ended. Idempotent.

        The id is recorded even if no session with it was ever created,
        which blocks any token bearing it from then on.
        """
        with self._lock:
            self._ended.add(session_id)
            session = self._sessions.get(session_id)
            if session is not None:
                session.active = False

        logger.info(
            "[SESSION] ended session_id=%s (known=%s)",
            session_id,
            session is not None,
        )
