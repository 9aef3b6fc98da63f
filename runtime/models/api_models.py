"""
HTTP request/response models for the Anon Relay API.

Request fields are optional at the schema level so that missing values
are reported as 400 "Missing <field>" by the relay, not as schema errors.
"""

from typing import List, Optional

from .session_models import Message, RelayModel


class CreateSessionRequest(RelayModel):
    session_id: Optional[str] = None
    group_jid: Optional[str] = None
    created_at: Optional[int] = None


class CreateSessionResponse(RelayModel):
    success: bool = True
    session_id: str
    token: str


class EndSessionRequest(RelayModel):
    session_id: Optional[str] = None


class SuccessResponse(RelayModel):
    success: bool = True


class SessionStatusResponse(RelayModel):
    active: bool
    exists: bool
    message_count: Optional[int] = None


class SubmitMessageRequest(RelayModel):
    token: Optional[str] = None
    message: Optional[str] = None


class SubmitMessageResponse(RelayModel):
    success: bool = True
    message_number: int


class PollMessagesResponse(RelayModel):
    messages: List[Message]


class HealthResponse(RelayModel):
    status: str = "ok"
    timestamp: int
