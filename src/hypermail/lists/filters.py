"""Search predicates for each list item type.

Each predicate receives an already lower-cased, non-empty query.
"""

from __future__ import annotations

from hypermail.models import Contact, Draft, RemoteMessage


def message_matches(message: RemoteMessage, query: str) -> bool:
    return (
        query in message.sender.lower()
        or query in message.subject.lower()
        or any(query in addr.lower() for addr in message.to)
    )


def contact_matches(contact: Contact, query: str) -> bool:
    return query in contact.name.lower() or query in contact.email.lower()


def draft_matches(draft: Draft, query: str) -> bool:
    return query in draft.to.lower() or query in draft.subject.lower()
