"""Text helpers shared across contexts."""


def truncate(text: str, max_chars: int, marker: str = "...") -> str:
    """Cut text to max_chars and append marker when anything was dropped."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + marker
