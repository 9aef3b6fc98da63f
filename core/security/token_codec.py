"""Self-describing session tokens.

Token layout (four fields joined by ``:``)::

    <session_id>:<base64url(group_jid)>:<created_at_ms>:<signature>

The group identifier is base64-encoded because group identifiers may
themselves contain the delimiter. Tokens are not stored anywhere; a token
is verified by recomputing its signature from its own fields.
"""

import base64
import logging
from typing import Optional

from .models import SessionData
from .signature import SessionSigner


logger = logging.getLogger(__name__)

TOKEN_DELIMITER = ":"


def _encode_group(group_jid: str) -> str:
    return base64.urlsafe_b64encode(group_jid.encode("utf-8")).decode("ascii")


def _decode_group(field: str) -> str:
    # validate=True rejects characters outside the alphabet instead of
    # silently discarding them.
    raw = base64.b64decode(field, altchars=b"-_", validate=True)
    return raw.decode("utf-8")


def _parse_millis(field: str) -> int:
    if not (field.isascii() and field.isdigit()):
        raise ValueError(f"not a decimal timestamp: {field!r}")
    return int(field)


class TokenCodec:
    """Encode session facts into tokens and decode/verify tokens.

    Parameters
    ----------
    signer:
        SessionSigner holding the process-wide secret.
    """

    def __init__(self, signer: SessionSigner) -> None:
        self.signer = signer

    def encode(
        self, session_id: str, group_jid: str, created_at: int, signature: str
    ) -> str:
        """Join the token fields; raises ValueError for undecodable input."""
        if not session_id or TOKEN_DELIMITER in session_id:
            raise ValueError(
                f"session_id must be non-empty and must not contain {TOKEN_DELIMITER!r}"
            )
        if created_at < 0:
            raise ValueError("created_at must be a non-negative epoch millis value")
        return TOKEN_DELIMITER.join(
            [session_id, _encode_group(group_jid), str(int(created_at)), signature]
        )

    def issue(self, session_id: str, group_jid: str, created_at: int) -> str:
        """Sign the session facts and return the resulting token."""
        signature = self.signer.sign(session_id, group_jid, created_at)
        return self.encode(session_id, group_jid, created_at, signature)

    def decode(self, token) -> Optional[SessionData]:
        """Decode and verify a token.

        Returns the SessionData it carries, or None when the token is
        malformed or its signature does not match. Any input is accepted;
        this never raises.
        """
        if not isinstance(token, str):
            return None

        parts = token.split(TOKEN_DELIMITER)
        if len(parts) != 4 or not all(parts):
            return None
        session_id, group_field, created_field, signature = parts

        try:
            group_jid = _decode_group(group_field)
            created_at = _parse_millis(created_field)
        except ValueError:
            # binascii.Error and UnicodeDecodeError are both ValueErrors.
            logger.debug("[TOKEN] undecodable token fields for session_id=%r", session_id)
            return None

        # Only the exact encoding `encode` produces is accepted, so no
        # altered byte (padding bits, alphabet, leading zeros) verifies.
        if _encode_group(group_jid) != group_field or str(created_at) != created_field:
            logger.debug("[TOKEN] non-canonical token fields for session_id=%r", session_id)
            return None

        if not self.signer.verify(session_id, group_jid, created_at, signature):
            logger.debug("[TOKEN] signature mismatch for session_id=%r", session_id)
            return None

        return SessionData(
            session_id=session_id,
            group_jid=group_jid,
            created_at=created_at,
        )
