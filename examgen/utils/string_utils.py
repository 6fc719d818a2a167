def preview(text: str, length: int) -> str:
    """First length characters followed by an ellipsis, always."""
    return (text or "")[:length] + "..."
