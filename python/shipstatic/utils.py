_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(num_bytes: int, decimals: int = 1) -> str:
    """Format a byte count with 1024-based units, e.g. 5_000_000 -> "4.8 MB"."""
    if num_bytes <= 0:
        return "0 Bytes"
    i = 0
    while num_bytes >= 1024 ** (i + 1) and i < len(_SIZE_UNITS) - 1:
        i += 1
    value = num_bytes / (1024 ** i)
    text = f"{value:.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[i]}"


def pluralize(count: int, singular: str, plural: str, include_count: bool = True) -> str:
    word = singular if count == 1 else plural
    return f"{count} {word}" if include_count else word
