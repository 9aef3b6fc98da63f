"""
Session-related models for the Anon Relay runtime.

These describe:
- a Session record (group binding, active flag, counters)
- Message entries queued for the bot
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RelayModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Session(RelayModel):
    session_id: str
    group_jid: str
    active: bool = True
    created_at: int                 # epoch millis, fixed at creation
    message_count: int = 0          # only ever increases
    last_activity: int              # epoch millis


class Message(RelayModel):
    number: int                     # 1-based, per session
    message: str = Field(min_length=1)  # trimmed text
    timestamp: int                  # epoch millis
