"""HMAC signatures over session parameters.

A signature is the first 16 hex characters of
HMAC-SHA256(secret, "<session_id>:<group_jid>:<created_at>").
"""

import hashlib
import hmac

SIGNATURE_LENGTH = 16


class SessionSigner:
    """Signs and verifies session parameters with a process-wide secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("SessionSigner requires a non-empty secret")
        self._key = secret.encode("utf-8")

    def sign(self, session_id: str, group_jid: str, created_at: int) -> str:
        message = f"{session_id}:{group_jid}:{created_at}".encode("utf-8")
        digest = hmac.new(self._key, message, hashlib.sha256).hexdigest()
        return digest[:SIGNATURE_LENGTH]

    def verify(
        self, session_id: str, group_jid: str, created_at: int, signature: str
    ) -> bool:
        """Return True if ``signature`` matches the recomputed one.

        Never raises: signatures that cannot even be encoded are just
        non-matching.
        """
        try:
            expected = self.sign(session_id, group_jid, created_at)
            return hmac.compare_digest(
                signature.encode("utf-8"), expected.encode("utf-8")
            )
        except (AttributeError, ValueError):
            return False
