"""
Schemas for message endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SendMessageRequest(BaseModel):
    """
    Request schema for POST /api/messages/send/{user_id}.

    clientMessageId is the client's correlation id for the optimistic
    entry; it is echoed back in the response and status events.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = Field(default=None)
    image: Optional[str] = Field(default=None, description="Image reference")
    client_message_id: Optional[str] = Field(
        default=None, alias="clientMessageId", max_length=128
    )


class ReactionRequest(BaseModel):
    """Request schema for POST /api/messages/{message_id}/reactions."""

    emoji: str = Field(default="")
