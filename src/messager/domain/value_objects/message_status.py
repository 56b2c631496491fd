"""
Message status and delivery state enums.
"""

from enum import Enum


class MessageStatus(str, Enum):
    """
    Status of a message as seen by its sender.

    SENDING only exists client-side for optimistic entries. SEEN is
    reserved for a future read-receipt feature and never produced.
    """

    SENDING = "sending"
    SENT = "sent"
    DELIVERED = "delivered"
    SEEN = "seen"


class DeliveryState(str, Enum):
    """
    Server-side delivery state machine for a single send.

    PENDING -> PERSISTING -> PERSISTED -> PUSHED_LIVE | QUEUED_OFFLINE,
    with PERSISTING -> FAILED when the store rejects the write.
    """

    PENDING = "pending"
    PERSISTING = "persisting"
    PERSISTED = "persisted"
    PUSHED_LIVE = "pushed_live"
    QUEUED_OFFLINE = "queued_offline"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Check whether no further transition can happen."""
        return not _NEXT_STATES[self]

    def can_advance_to(self, state: "DeliveryState") -> bool:
        return state in _NEXT_STATES[self]


_NEXT_STATES = {
    DeliveryState.PENDING: (DeliveryState.PERSISTING,),
    DeliveryState.PERSISTING: (DeliveryState.PERSISTED, DeliveryState.FAILED),
    DeliveryState.PERSISTED: (
        DeliveryState.PUSHED_LIVE,
        DeliveryState.QUEUED_OFFLINE,
    ),
    DeliveryState.PUSHED_LIVE: (),
    DeliveryState.QUEUED_OFFLINE: (),
    DeliveryState.FAILED: (),
}
