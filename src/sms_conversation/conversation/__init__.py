"""Conversation participants, message threads and the contact picker."""

from .contact_list import ComposeChange, ComposeState, ContactList, ContactRow
from .contacts import ContactBook
from .models import Contact, Message, MessageDirection, Recipient, Thread
from .recipients import InvalidNumberError, RecipientChange, RecipientRegistry
from .threads import ThreadAggregator
from .window import ConversationWindow, HeaderInfo, ViewUpdate

__all__ = [
    "ComposeChange",
    "ComposeState",
    "Contact",
    "ContactBook",
    "ContactList",
    "ContactRow",
    "ConversationWindow",
    "HeaderInfo",
    "InvalidNumberError",
    "Message",
    "MessageDirection",
    "Recipient",
    "RecipientChange",
    "RecipientRegistry",
    "Thread",
    "ThreadAggregator",
    "ViewUpdate",
]
