import pytest

from anekbot.crawler.filters import is_eligible_message, is_eligible_text, select_items
from anekbot.datatypes.content_datatypes import FetchedMessage


def test_filter_policy_keeps_plain_texts_only() -> None:
    candidates = [FetchedMessage(text) for text in ["hello", "@spam", "  ", "ok"]]

    assert select_items(candidates) == ["hello", "ok"]


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a joke", True),
        ("  padded joke  ", True),
        ("mail me at joke@example.com", False),
        ("", False),
        ("\n\t ", False),
        (None, False),
    ],
)
def test_is_eligible_text(text, expected) -> None:
    assert is_eligible_text(text) is expected


def test_missing_message_is_rejected() -> None:
    assert is_eligible_message(None) is False


def test_service_message_is_rejected() -> None:
    assert is_eligible_message(FetchedMessage("pinned a message", is_service=True)) is False


def test_media_message_is_rejected_even_with_caption() -> None:
    assert is_eligible_message(FetchedMessage("look at this", has_media=True)) is False


def test_select_items_skips_gaps_and_keeps_order() -> None:
    messages = [None, FetchedMessage("b"), None, FetchedMessage("a")]

    assert select_items(messages) == ["b", "a"]
