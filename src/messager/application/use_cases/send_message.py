"""
Use case for sending a message: validate, persist, push, report.
"""

import asyncio
import weakref
from typing import List, Optional, Tuple

from messager.application.dto import (
    DeliveryReceipt,
    message_status_event,
    new_message_event,
)
from messager.domain.entities import Message
from messager.domain.exceptions import NotFoundError, PersistenceError, ValidationError
from messager.domain.repositories import IMessageRepository, IUserRepository
from messager.domain.value_objects import DeliveryState, MessagePayload, MessageStatus
from messager.infrastructure.presence import PresenceRegistry
from messager.reporter import Emoji, SystemReporter

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_TEXT_LENGTH = 5000


class SendMessageUseCase:
    """
    Message delivery engine.

    Persist and fan-out for one sender -> recipient pair run under a
    per-pair lock, and each connection writes events in enqueue order,
    so a recipient observes a sender's messages in persistence order.
    Pushes are enqueued only; the sender never waits on recipient
    sockets.
    """

    def __init__(
        self,
        message_repository: IMessageRepository,
        user_repository: IUserRepository,
        presence_registry: PresenceRegistry,
        max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
        reporter: Optional[SystemReporter] = None,
    ):
        self.message_repository = message_repository
        self.user_repository = user_repository
        self.presence_registry = presence_registry
        self.max_image_bytes = max_image_bytes
        self.max_text_length = max_text_length
        self.reporter = reporter
        self._pair_locks: "weakref.WeakValueDictionary[Tuple[str, str], asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, sender_id: str, recipient_id: str) -> asyncio.Lock:
        key = (sender_id, recipient_id)
        lock = self._pair_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._pair_locks[key] = lock
        return lock

    async def execute(
        self,
        sender_id: str,
        recipient_id: str,
        text: Optional[str] = None,
        image: Optional[str] = None,
        client_message_id: Optional[str] = None,
    ) -> DeliveryReceipt:
        """
        Send a message.

        Args:
            sender_id: Authenticated sender identity
            recipient_id: Recipient identity
            text: Optional text body
            image: Optional image reference
            client_message_id: Client correlation id, echoed back

        Returns:
            DeliveryReceipt with status SENT (recipient offline) or
            DELIVERED (pushed to at least one live connection)

        Raises:
            ValidationError: Empty payload, text too long or self-send
            PayloadTooLargeError: Image exceeds max_image_bytes
            NotFoundError: Recipient does not exist
            PersistenceError: Store failed; nothing was pushed
        """
        payload = MessagePayload(text=text, image=image)
        payload.check_limits(self.max_text_length, self.max_image_bytes)

        if recipient_id == sender_id:
            raise ValidationError("Cannot send messages to yourself")

        if await self.user_repository.get_by_id(recipient_id) is None:
            raise NotFoundError("User", recipient_id)

        trace = [DeliveryState.PENDING]
        message = Message(
            sender_id=sender_id,
            recipient_id=recipient_id,
            text=payload.text,
            image=payload.image,
            client_message_id=client_message_id,
        )

        async with self._lock_for(sender_id, recipient_id):
            message = await self._persist(message, trace)

            connections = self.presence_registry.get_connections(recipient_id)
            if connections:
                message.mark_delivered()

            event = new_message_event(message)
            reached = sum(1 for conn in connections if conn.push(event))

            if reached:
                state = DeliveryState.PUSHED_LIVE
            else:
                message.status = MessageStatus.SENT
                state = DeliveryState.QUEUED_OFFLINE
            self._advance(trace, state, message)

        if message.status == MessageStatus.DELIVERED:
            await self._store_status(message)

        self.presence_registry.push_to_user(sender_id, new_message_event(message))
        self.presence_registry.push_to_user(sender_id, message_status_event(message))

        if self.reporter:
            marker = (
                Emoji.MESSAGE.DELIVERED
                if state == DeliveryState.PUSHED_LIVE
                else Emoji.MESSAGE.QUEUED
            )
            self.reporter.info(
                f"{marker} Message {message.id} {sender_id}->{recipient_id}: "
                f"state={state.value}, recipient_conns={reached}",
                context="SendMessage",
                verbose_level=2,
            )

        return DeliveryReceipt(
            message=message,
            status=message.status,
            state=state,
            recipient_connections=reached,
            trace=tuple(trace),
        )

    def _advance(
        self, trace: List[DeliveryState], state: DeliveryState, message: Message
    ) -> None:
        current = trace[-1]
        if not current.can_advance_to(state):
            raise RuntimeError(
                f"Illegal delivery transition {current.value} -> {state.value}"
            )
        trace.append(state)
        if self.reporter:
            self.reporter.debug(
                f"Message {message.id}: {current.value} -> {state.value}"
                + (" (final)" if state.is_terminal else ""),
                context="SendMessage",
            )

    async def _persist(self, message: Message, trace: List[DeliveryState]) -> Message:
        self._advance(trace, DeliveryState.PERSISTING, message)
        try:
            stored = await self.message_repository.create(message)
        except PersistenceError:
            self._advance(trace, DeliveryState.FAILED, message)
            self._log_failure(message)
            raise
        except Exception as e:
            self._advance(trace, DeliveryState.FAILED, message)
            self._log_failure(message, e)
            raise PersistenceError("Failed to save message") from e
        self._advance(trace, DeliveryState.PERSISTED, stored)
        return stored

    async def _store_status(self, message: Message) -> None:
        try:
            await self.message_repository.update(message)
        except Exception as e:
            # Recipient already has the message; history fetch re-marks it
            if self.reporter:
                self.reporter.warning(
                    f"Could not store delivered status for {message.id}: {e}",
                    context="SendMessage",
                )

    def _log_failure(self, message: Message, error: Optional[Exception] = None) -> None:
        if self.reporter:
            detail = f": {type(error).__name__}: {error}" if error else ""
            self.reporter.error(
                f"{Emoji.ERROR.ERROR} Persist failed "
                f"{message.sender_id}->{message.recipient_id} "
                f"state={DeliveryState.FAILED.value}{detail}",
                context="SendMessage",
            )
