"""
Message API routes.
"""

from fastapi import APIRouter, Depends, Query, status

from messager.di import Container
from messager.domain.auth import AuthenticatedUser
from messager.presentation.api.dependencies import get_container, get_current_user
from messager.presentation.schemas import ReactionRequest, SendMessageRequest

router = APIRouter(prefix="/api/messages", tags=["messages"])


@router.get("/contacts")
async def get_contacts(
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """All users except the caller."""
    users = await container.get_list_contacts_use_case().all_contacts(auth.user_id)
    return [u.to_public_dict() for u in users]


@router.get("/chats")
async def get_chat_partners(
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Users the caller has exchanged messages with, most recent first."""
    users = await container.get_list_contacts_use_case().chat_partners(auth.user_id)
    return [u.to_public_dict() for u in users]


@router.get("/{user_id}")
async def get_conversation(
    user_id: str,
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """
    Conversation between the caller and user_id.

    Messages addressed to the caller that were still "sent" become
    "delivered" and their sender is notified.
    """
    messages = await container.get_conversation_use_case().execute(
        auth.user_id, user_id
    )
    return [m.to_dict() for m in messages]


@router.post("/send/{user_id}", status_code=status.HTTP_201_CREATED)
async def send_message(
    user_id: str,
    request: SendMessageRequest,
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """
    Send a message to user_id.

    Returns:
        {message, status, clientMessageId}; status is "delivered" when
        the recipient had a live connection, "sent" otherwise

    Errors:
        400: Empty message or text too long
        404: Recipient not found
        413: Image too large
        503: Message could not be stored
    """
    receipt = await container.get_send_message_use_case().execute(
        sender_id=auth.user_id,
        recipient_id=user_id,
        text=request.text,
        image=request.image,
        client_message_id=request.client_message_id,
    )
    container.increment_stat("total_messages_sent")
    return receipt.to_dict()


@router.delete("/{message_id}")
async def delete_message(
    message_id: str,
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Delete a message. Only its sender may do so (403 otherwise)."""
    deleted_id = await container.get_delete_message_use_case().execute(
        message_id, auth.user_id
    )
    return {"messageId": deleted_id}


@router.post("/{message_id}/reactions")
async def add_reaction(
    message_id: str,
    request: ReactionRequest,
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """React to a message in a conversation the caller is part of."""
    message = await container.get_manage_reactions_use_case().add(
        message_id, auth.user_id, request.emoji
    )
    return message.to_dict()


@router.delete("/{message_id}/reactions")
async def remove_reaction(
    message_id: str,
    emoji: str = Query(...),
    auth: AuthenticatedUser = Depends(get_current_user),
    container: Container = Depends(get_container),
):
    """Remove the caller's own reaction."""
    message = await container.get_manage_reactions_use_case().remove(
        message_id, auth.user_id, emoji
    )
    return message.to_dict()
