"""Conversation window state, independent of any widget toolkit."""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from ..utils.config import AllowFlags, PluginSettings, Settings
from ..utils.links import linkify
from .contact_list import ComposeChange, ContactList, ContactRow
from .contacts import ContactBook
from .models import (
    SELF_KEY,
    Avatar,
    Contact,
    MessageDirection,
    Recipient,
    Thread,
    bubble_style,
    resolve_avatar,
)
from .recipients import InvalidNumberError, RecipientChange, RecipientRegistry
from .threads import ThreadAggregator

TELEPHONY_PLUGIN = "telephony"


class Transport(Protocol):
    """The device plugin that actually sends texts."""

    def send_sms(self, number: str, text: str) -> Any: ...


class ViewKind(str, Enum):
    RECIPIENTS = "recipients"
    CONTACTS = "contacts"
    THREAD = "thread"
    MESSAGE = "message"


@dataclass
class ViewUpdate:
    """Tells the presentation layer what to redraw."""
    kind: ViewKind
    payload: Any = None


@dataclass
class HeaderInfo:
    title: str
    subtitle: str | None = None
    tooltip: str = ""


@dataclass
class MessageBubble:
    """A message ready to be drawn inside its thread."""
    thread: Thread
    new_thread: bool
    markup: str
    style: str
    avatar: Avatar | None = None


class ConversationWindow:
    """
    Glue between the conversation UI and the recipient/thread models.

    The window owns the recipients, the contact picker and the message
    threads. UI events call the methods here; changes are reported back to
    listeners as ViewUpdate descriptors.
    """

    def __init__(
        self,
        contacts: ContactBook | Iterable[Contact],
        transport: Transport,
        settings: Settings,
        registry: RecipientRegistry | None = None,
    ) -> None:
        self.contacts = contacts if isinstance(contacts, ContactBook) else ContactBook(contacts)
        self.transport = transport
        self.settings: PluginSettings = settings.plugin(TELEPHONY_PLUGIN)
        self.registry = registry if registry is not None else RecipientRegistry()
        self.contact_list = ContactList(self.contacts, self.registry)
        self.threads = ThreadAggregator()

        self._listeners: list[Callable[[ViewUpdate], Any]] = []
        self._notifications: list[str] = []
        self._notification_ids = itertools.count(1)

        self.registry.connect(self._on_recipients_changed)

    def connect(self, callback: Callable[[ViewUpdate], Any]) -> None:
        self._listeners.append(callback)

    def _emit(self, kind: ViewKind, payload: Any = None) -> None:
        update = ViewUpdate(kind, payload)
        for callback in list(self._listeners):
            callback(update)

    def _on_recipients_changed(self, change: RecipientChange) -> None:
        self._emit(ViewKind.RECIPIENTS, change)

    # Recipients

    @property
    def recipients(self) -> list[str]:
        return self.registry.numbers

    def add_recipient(self, contact: Contact | dict[str, Any]) -> Recipient:
        """Add a recipient, filling in what the address book knows about it."""
        if isinstance(contact, dict):
            contact = Contact.model_validate(contact)
        return self.registry.add(self.contacts.enrich(contact))

    def remove_recipient(self, number: str) -> None:
        self.registry.remove(number)

    def search(self, text: str) -> ComposeChange:
        """Handle a change of the contact entry text."""
        change = self.contact_list.set_text(text)
        self._emit(ViewKind.CONTACTS, change)
        return change

    def toggle(self, row: ContactRow, active: bool) -> Recipient | None:
        """Handle a contact row's checkbox being toggled."""
        try:
            recipient = self.contact_list.toggle(row, active)
        except InvalidNumberError as e:
            print(f"Error adding recipient: {e}")
            row.active = False
            recipient = None
        self._emit(ViewKind.CONTACTS, ComposeChange.NONE)
        return recipient

    # Messages

    def receive(self, phone_number: str, contact_name: str | None, body: str) -> MessageBubble | None:
        """Log an incoming message."""
        if not self.settings.is_allowed(AllowFlags.RECEIVE):
            print(f"Ignoring message from {phone_number}: receiving is disabled")
            return None

        try:
            recipient = self.add_recipient(Contact(number=phone_number, name=contact_name))
        except InvalidNumberError as e:
            print(f"Error receiving message: {e}")
            return None

        bubble = self._append(recipient.key, MessageDirection.IN, body, recipient)
        self._notifications.append(f"sms-{recipient.key}-{next(self._notification_ids)}")
        return bubble

    def send(self, text: str) -> bool:
        """Send text to every recipient and log it as one outgoing message."""
        if not text:
            return False
        if not self.registry:
            print("Not sending message: no recipients")
            return False
        if not self.settings.is_allowed(AllowFlags.SEND):
            print("Not sending message: sending is disabled")
            return False

        for recipient in self.registry.list():
            self.transport.send_sms(recipient.number, text)

        self._append(SELF_KEY, MessageDirection.OUT, text, None)
        return True

    def _append(
        self,
        sender_key: str,
        direction: MessageDirection,
        body: str,
        recipient: Recipient | None,
    ) -> MessageBubble:
        thread, is_new = self.threads.append_message(sender_key, direction, body)
        avatar = None
        if is_new and recipient is not None:
            avatar = resolve_avatar(recipient)
        bubble = MessageBubble(
            thread=thread,
            new_thread=is_new,
            markup=linkify(body),
            style=bubble_style(direction, recipient.color if recipient else None),
            avatar=avatar,
        )
        self._emit(ViewKind.THREAD if is_new else ViewKind.MESSAGE, bubble)
        return bubble

    # Notifications

    @property
    def pending_notifications(self) -> list[str]:
        return list(self._notifications)

    def withdraw_notifications(self) -> list[str]:
        """Clear pending notifications, e.g. when the message entry is focused."""
        withdrawn = self._notifications
        self._notifications = []
        return withdrawn

    # Header

    @property
    def page(self) -> str:
        return "messages" if self.registry else "contacts"

    @property
    def header(self) -> HeaderInfo:
        recipients = self.registry.list()
        if not recipients:
            return HeaderInfo(title="New SMS Conversation")

        first = recipients[0]
        if first.name:
            title, subtitle = first.name, first.number
        else:
            title, subtitle = first.number, None

        others = len(recipients) - 1
        if others == 1:
            subtitle = "And one other person"
        elif others > 1:
            subtitle = f"And {others} other people"

        people = ", ".join(r.name or r.number for r in recipients)
        return HeaderInfo(title=title, subtitle=subtitle, tooltip=f"SMS Conversation with {people}")
