"""Pydantic models for conversation participants and messages."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..utils.phone import normalize_number

SELF_KEY = "self"
UNKNOWN_CONTACT = "Unknown Contact"
UNKNOWN_NUMBER = "Unknown Number"
OUTGOING_COLOR = "contact-color-outgoing"

# Message bubble colours, see the Tango palette
CONTACT_COLORS = (
    "contact-color-red",
    "contact-color-orange",
    "contact-color-yellow",
    "contact-color-green",
    "contact-color-blue",
    "contact-color-purple",
    "contact-color-brown",
    "contact-color-grey",
)


class MessageDirection(int, Enum):
    """SMS message direction."""
    OUT = 0
    IN = 1


class Contact(BaseModel):
    """Represents a contact from the address book, or a typed-in number."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    number: str = ""
    type: str | None = None
    color: str | None = None
    avatar_path: str | None = Field(default=None, alias="avatarPath")

    @field_validator("name", "type", "color", "avatar_path", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> str | None:
        """Treat empty strings like missing values."""
        if v is None or v == "":
            return None
        return v

    @field_validator("number", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @property
    def key(self) -> str:
        """Get the normalized number identifying this contact."""
        return normalize_number(self.number)

    @property
    def display_name(self) -> str:
        """Get the best display name for this contact."""
        return self.name or self.number or UNKNOWN_CONTACT


class Recipient(Contact):
    """An active conversation participant with a fixed display color."""

    color: str

    def merged(self, contact: Contact) -> Recipient:
        """Get a copy updated with the non-empty fields of a newer record.

        The color is never changed and a name is never replaced by nothing.
        """
        updates: dict[str, Any] = {}
        if contact.name:
            updates["name"] = contact.name
        if contact.number:
            updates["number"] = contact.number
        if contact.type:
            updates["type"] = contact.type
        if contact.avatar_path:
            updates["avatar_path"] = contact.avatar_path
        return self.model_copy(update=updates)


class Message(BaseModel):
    """Represents an SMS message in a conversation."""

    model_config = ConfigDict(populate_by_name=True)

    sender_key: str = Field(alias="senderKey")
    body: str = ""
    direction: MessageDirection

    @property
    def is_from_me(self) -> bool:
        return self.direction == MessageDirection.OUT


class Thread(BaseModel):
    """A run of consecutive messages from one sender in one direction."""

    model_config = ConfigDict(populate_by_name=True)

    sender_key: str = Field(alias="senderKey")
    direction: MessageDirection
    messages: list[Message] = Field(default_factory=list)

    def accepts(self, sender_key: str, direction: MessageDirection) -> bool:
        """Check if a message with this sender and direction continues the thread."""
        return self.sender_key == sender_key and self.direction == direction

    def __len__(self) -> int:
        return len(self.messages)


class Avatar(BaseModel):
    """What a presentation layer needs to draw a participant's avatar."""

    path: str | None = None
    color: str
    placeholder: bool = True
    tooltip: str = ""


def bubble_style(direction: MessageDirection, color: str | None) -> str:
    """Get the style class for a message bubble."""
    if direction == MessageDirection.OUT:
        return OUTGOING_COLOR
    return color or CONTACT_COLORS[-1]


def resolve_avatar(contact: Contact) -> Avatar:
    """Get the avatar for a contact, falling back to a placeholder."""
    color = contact.color or CONTACT_COLORS[-1]
    tooltip = contact.name or contact.number
    path = contact.avatar_path

    if path:
        try:
            with open(path, "rb") as f:
                if f.read(1):
                    return Avatar(path=path, color=color, placeholder=False, tooltip=tooltip)
            print(f"Avatar {path} is empty, using placeholder")
        except OSError as e:
            print(f"Error loading avatar {path}: {e}")

    return Avatar(color=color, tooltip=tooltip)
