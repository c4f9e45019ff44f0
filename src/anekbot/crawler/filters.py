from typing import Iterable, List, Optional

from anekbot.datatypes.content_datatypes import FetchedMessage

MENTION_MARKER = "@"


def is_eligible_text(text: Optional[str]) -> bool:
    """Return True when text may be stored as an item.

    Rejects missing and whitespace-only text and anything containing a mention marker.
    """
    if not text or not text.strip():
        return False
    return MENTION_MARKER not in text


def is_eligible_message(message: Optional[FetchedMessage]) -> bool:
    """Return True for existing plain-text messages whose text is eligible."""
    if message is None:
        return False
    if message.is_service or message.has_media:
        return False
    return is_eligible_text(message.text)


def select_items(messages: Iterable[Optional[FetchedMessage]]) -> List[str]:
    """Return the texts of all eligible messages, in fetch order."""
    return [message.text for message in messages if is_eligible_message(message)]  # type: ignore[union-attr]
