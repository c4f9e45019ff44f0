from anekbot.util.format_utils import clip_message, clip_text, option_label


def test_clip_text_leaves_short_text_alone() -> None:
    assert clip_text("short", 10) == "short"


def test_clip_text_adds_ellipsis_within_limit() -> None:
    clipped = clip_text("abcdefghij", 5)

    assert clipped == "abcd…"
    assert len(clipped) == 5


def test_clip_text_with_zero_limit() -> None:
    assert clip_text("abc", 0) == ""


def test_clip_message_respects_discord_limit() -> None:
    assert len(clip_message("z" * 2500)) == 2000


def test_option_label_never_empty() -> None:
    assert option_label("   ") == "…"
