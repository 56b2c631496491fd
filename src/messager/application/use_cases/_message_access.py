"""
Shared message lookup for mutating use cases.
"""

from messager.domain.entities import Message
from messager.domain.exceptions import NotFoundError, PersistenceError
from messager.domain.repositories import IMessageRepository


async def load_message(repository: IMessageRepository, message_id: str) -> Message:
    """
    Fetch a message or raise NotFoundError.
    """
    message = await repository.get_by_id(message_id)
    if message is None:
        raise NotFoundError("Message", message_id)
    return message


async def save_message(repository: IMessageRepository, message: Message) -> Message:
    """
    Store a mutated message, translating store failures.

    Raises:
        NotFoundError: Message was deleted concurrently
        PersistenceError: Store failed
    """
    try:
        return await repository.update(message)
    except (NotFoundError, PersistenceError):
        raise
    except Exception as e:
        raise PersistenceError("Failed to update message") from e
