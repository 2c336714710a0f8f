"""The set of active participants in a conversation."""

from __future__ import annotations

import random
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..utils.phone import normalize_number
from .models import CONTACT_COLORS, Contact, Recipient


class InvalidNumberError(ValueError):
    """Raised for phone numbers that contain no digits."""

    def __init__(self, number: str) -> None:
        super().__init__(f"Not a phone number: {number!r}")
        self.number = number


class ChangeKind(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


@dataclass(frozen=True)
class RecipientChange:
    """Describes a single change to a RecipientRegistry."""
    kind: ChangeKind
    key: str
    recipient: Recipient


class ColorPalette:
    """
    Hands out display colors for new recipients.

    Colors cycle through the palette in order, starting from a random
    offset chosen once per palette, so consecutive recipients never share
    a color until the palette wraps around.
    """

    def __init__(
        self,
        colors: Sequence[str] = CONTACT_COLORS,
        rng: random.Random | None = None,
    ) -> None:
        if not colors:
            raise ValueError("Palette needs at least one color")
        self.colors = tuple(colors)
        self._next = (rng or random.Random()).randrange(len(self.colors))

    def next_color(self) -> str:
        color = self.colors[self._next]
        self._next = (self._next + 1) % len(self.colors)
        return color


class RecipientRegistry:
    """Active conversation participants keyed by normalized number."""

    def __init__(self, palette: ColorPalette | None = None) -> None:
        self._palette = palette or ColorPalette()
        self._recipients: dict[str, Recipient] = {}
        self._listeners: list[Callable[[RecipientChange], Any]] = []

    def connect(self, callback: Callable[[RecipientChange], Any]) -> None:
        """Call `callback(change)` after every change."""
        self._listeners.append(callback)

    def disconnect(self, callback: Callable[[RecipientChange], Any]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, change: RecipientChange) -> None:
        for callback in list(self._listeners):
            callback(change)

    def add(self, contact: Contact | dict[str, Any]) -> Recipient:
        """
        Add a contact as a recipient, merging it into an existing entry.

        Raises:
            InvalidNumberError: if the number has no digits.
        """
        if isinstance(contact, dict):
            contact = Contact.model_validate(contact)

        key = normalize_number(contact.number)
        if not key:
            raise InvalidNumberError(contact.number)

        existing = self._recipients.get(key)
        if existing is not None:
            recipient = existing.merged(contact)
            kind = ChangeKind.UPDATED
        else:
            # Only do this once per recipient
            recipient = Recipient(
                name=contact.name,
                number=contact.number,
                type=contact.type,
                avatarPath=contact.avatar_path,
                color=self._palette.next_color(),
            )
            kind = ChangeKind.ADDED

        self._recipients[key] = recipient
        self._emit(RecipientChange(kind, key, recipient))
        return recipient

    def remove(self, number: Contact | str) -> Recipient | None:
        """Remove a recipient by number. Does nothing if it isn't present."""
        if isinstance(number, Contact):
            number = number.number
        key = normalize_number(number)
        recipient = self._recipients.pop(key, None)
        if recipient is not None:
            self._emit(RecipientChange(ChangeKind.REMOVED, key, recipient))
        return recipient

    def get(self, number: str) -> Recipient | None:
        return self._recipients.get(normalize_number(number))

    def list(self) -> list[Recipient]:
        return list(self._recipients.values())

    @property
    def numbers(self) -> list[str]:
        """Get the normalized numbers of all recipients."""
        return list(self._recipients)

    def clear(self) -> None:
        """Remove every recipient."""
        for key in list(self._recipients):
            self.remove(key)

    def __contains__(self, number: object) -> bool:
        if isinstance(number, Contact):
            number = number.number
        if not isinstance(number, str):
            return False
        return normalize_number(number) in self._recipients

    def __iter__(self) -> Iterator[Recipient]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._recipients)

    def __bool__(self) -> bool:
        return bool(self._recipients)
