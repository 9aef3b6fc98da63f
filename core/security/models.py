from pydantic import BaseModel, ConfigDict


class SessionData(BaseModel):
    """
    The facts a session token carries about its session.

    These are the canonical creation facts: a store that has lost its
    in-memory state rebuilds the session record from them.
    """
    model_config = ConfigDict(frozen=True)

    session_id: str
    group_jid: str
    created_at: int  # epoch millis
