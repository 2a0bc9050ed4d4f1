"""
Time utility functions.
"""

from datetime import datetime
from typing import Optional

# Written into the database file in place of an empty scan date.
NO_SCAN_DATE = "N/A"


def format_scan_timestamp(dt: datetime) -> str:
    """Format a scan time as ``day/month/year-hour:minute:second``, unpadded."""
    return f"{dt.day}/{dt.month}/{dt.year}-{dt.hour}:{dt.minute}:{dt.second}"


def parse_scan_timestamp(text: str) -> Optional[datetime]:
    """
    Parse a scan time written by format_scan_timestamp.

    Returns None when the ticket was never scanned or the text is not in that
    format; loaded files may hold any string here.
    """
    if not text or text == NO_SCAN_DATE:
        return None
    try:
        date_part, time_part = text.split("-", 1)
        day, month, year = (int(p) for p in date_part.split("/"))
        hour, minute, second = (int(p) for p in time_part.split(":"))
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None
