"""Address book lookups for the conversation window."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from ..utils.phone import is_sms_capable, normalize_number, number_variants
from .models import Contact


class ContactBook:
    """Contacts supplied by the contact source when a conversation opens."""

    def __init__(self, contacts: Iterable[Contact | dict[str, Any]] = ()) -> None:
        self._contacts: list[Contact] = []
        self._by_number: dict[str, Contact] = {}

        for item in contacts:
            contact = item if isinstance(item, Contact) else Contact.model_validate(item)
            if not is_sms_capable(contact.type):
                continue
            self._contacts.append(contact)

            # Map all normalized variants to this contact, first one wins
            for variant in number_variants(contact.number):
                self._by_number.setdefault(variant, contact)

    def lookup(self, number: str) -> Contact | None:
        """Find the contact for a number, tolerating country code differences."""
        key = normalize_number(number)
        if not key:
            return None
        if key in self._by_number:
            return self._by_number[key]
        for variant in number_variants(number):
            if variant in self._by_number:
                return self._by_number[variant]
        return None

    def enrich(self, contact: Contact) -> Contact:
        """Fill in what the address book knows about a contact.

        The book's number replaces the incoming one, so a number written
        with or without a country code maps to the same recipient. A
        non-empty name on the incoming contact is kept.
        """
        known = self.lookup(contact.number)
        if known is None:
            return contact
        return contact.model_copy(update={
            "number": known.number,
            "name": contact.name or known.name,
            "type": contact.type or known.type,
            "avatar_path": contact.avatar_path or known.avatar_path,
        })

    def __iter__(self) -> Iterator[Contact]:
        return iter(self._contacts)

    def __len__(self) -> int:
        return len(self._contacts)
