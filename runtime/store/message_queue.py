"""Per-session FIFO queues of anonymous messages.

The bot polls a session's queue over HTTP; every poll drains it. A message
is therefore delivered at most once, and never redelivered even if the
bot fails to process a poll result.
"""

import logging
from typing import Dict, List

from exceptions.exceptions import MessageValidationException

from ..models.session_models import Message, Session
from .locks import KeyedLocks


logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1000


def message_length(text: str) -> int:
    """Length in UTF-16 code units, the way browsers count characters."""
    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


def validate_message_text(text: str) -> str:
    """Return the trimmed text, or raise MessageValidationException."""
    trimmed = text.strip()
    if not trimmed:
        raise MessageValidationException("Message cannot be empty")
    if message_length(text) > MAX_MESSAGE_LENGTH:
        raise MessageValidationException(
            f"Message too long (max {MAX_MESSAGE_LENGTH} characters)"
        )
    return trimmed


class MessageQueueStore:
    """In-memory message queues keyed by session id.

    Numbering a message and appending it happen under the same per-session
    lock as draining, so ordinals are unique and queue order always equals
    ordinal order.
    """

    def __init__(self) -> None:
        self._queues: Dict[str, List[Message]] = {}
        self._locks = KeyedLocks()

    def reset(self, session_id: str) -> None:
        """Replace the session's queue with an empty one."""
        with self._locks.hold(session_id):
            self._queues[session_id] = []

    def submit(self, session: Session, text: str, now: int) -> int:
        """Validate ``text``, number it and enqueue it. Returns the ordinal."""
        trimmed = validate_message_text(text)

        with self._locks.hold(session.session_id):
            session.message_count += 1
            session.last_activity = now
            number = session.message_count
            self._queues.setdefault(session.session_id, []).append(
                Message(number=number, message=trimmed, timestamp=now)
            )

        logger.info(
            "[QUEUE] queued message #%s (%s chars) for session_id=%s",
            number,
            len(trimmed),
            session.session_id,
        )
        return number

    def poll(self, session_id: str) -> List[Message]:
        """Return all queued messages in order and leave the queue empty.

        Ids without a queue return [] without creating a lock for them.
        """
        if session_id not in self._queues:
            return []

        with self._locks.hold(session_id):
            messages = self._queues[session_id]
            self._queues[session_id] = []

        if messages:
            logger.info("[QUEUE] drained %s message(s) for session_id=%s", len(messages), session_id)
        return messages

    def pending(self, session_id: str) -> int:
        """Number of queued messages; an unlocked snapshot for diagnostics."""
        return len(self._queues.get(session_id, []))
