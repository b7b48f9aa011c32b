"""
Helper functions for formatting data into human-readable strings.
"""

from datetime import timedelta


def format_duration(duration: float | timedelta) -> str:
    """
    Formats a duration in seconds (or a timedelta) into a human-readable string,
    e.g. '2d 3h', '2h 34m 12s'. Seconds are dropped once the duration spans days.
    """
    if isinstance(duration, timedelta):
        duration = duration.total_seconds()
    days, remainder = divmod(max(0, int(duration)), 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)

    if days:
        return f"{days}d {hours}h" if hours else f"{days}d"
    parts = [f"{value}{unit}" for value, unit in ((hours, "h"), (minutes, "m")) if value]
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


def format_watermark(watermark: str) -> str:
    """Shows an empty watermark as 'never' rather than a blank."""
    return watermark or "never"
