"""Grouping of conversation messages into threads."""

from __future__ import annotations

from collections.abc import Iterator

from .models import Message, MessageDirection, Thread


class ThreadAggregator:
    """
    Groups messages into threads as they arrive.

    A thread is a series of sequential messages from one sender in one
    direction, drawn with a single instance of the sender's avatar. Messages
    can only be appended; arrivals are assumed to be delivered in order.
    """

    def __init__(self) -> None:
        self._threads: list[Thread] = []

    def append_message(
        self,
        sender_key: str,
        direction: MessageDirection | int,
        body: str,
    ) -> tuple[Thread, bool]:
        """
        Add a message, starting a new thread if necessary.

        Returns:
            The thread the message was placed in, and whether that thread
            was created for it.
        """
        direction = MessageDirection(direction)
        message = Message(sender_key=sender_key, body=body, direction=direction)

        current = self._threads[-1] if self._threads else None
        if current is not None and current.accepts(sender_key, direction):
            current.messages.append(message)
            return current, False

        thread = Thread(sender_key=sender_key, direction=direction, messages=[message])
        self._threads.append(thread)
        return thread, True

    @property
    def threads(self) -> list[Thread]:
        return list(self._threads)

    @property
    def last_thread(self) -> Thread | None:
        return self._threads[-1] if self._threads else None

    @property
    def messages(self) -> list[Message]:
        """Get every message in arrival order."""
        return [message for thread in self._threads for message in thread.messages]

    def __iter__(self) -> Iterator[Thread]:
        return iter(self._threads)

    def __len__(self) -> int:
        return len(self._threads)
