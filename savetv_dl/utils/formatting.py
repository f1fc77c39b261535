"""
Human-readable sizes, durations and display names for the console output.
"""

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_size(num_bytes: float) -> str:
    """Formats a byte count, e.g. 1_523_000_000 -> '1.4 GB'."""
    if num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    for unit in SIZE_UNITS[:-1]:
        if value < 1024:
            return f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} {SIZE_UNITS[-1]}"


def format_duration(seconds: float) -> str:
    """Formats elapsed seconds as e.g. '1h 5m 3s'; zero units are left out."""
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    units = [(hours, "h"), (minutes, "m"), (secs, "s")]
    text = " ".join(f"{amount}{suffix}" for amount, suffix in units if amount)
    return text or "0s"


def shorten(text: str, width: int = 55) -> str:
    """Cuts a display name down to `width` characters for the progress bar."""
    if len(text) <= width:
        return text
    return text[: width - 1] + "…"
