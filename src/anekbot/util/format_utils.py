MESSAGE_CHAR_LIMIT = 2000
OPTION_LABEL_LIMIT = 100
ELLIPSIS = "…"


def clip_text(text: str, limit: int) -> str:
    """Return ``text`` shortened to at most ``limit`` characters.

    Args:
        text: Text to clip.
        limit: Maximum length of the result, ellipsis included.

    Returns:
        The original text when it fits, otherwise its prefix followed by an ellipsis.
    """
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)].rstrip() + ELLIPSIS


def clip_message(text: str) -> str:
    """Clip text to the Discord message length limit."""
    return clip_text(text, MESSAGE_CHAR_LIMIT)


def option_label(text: str) -> str:
    """Collapse whitespace and clip text so it fits a select option label."""
    flat = " ".join(text.split())
    return clip_text(flat, OPTION_LABEL_LIMIT) or "…"
