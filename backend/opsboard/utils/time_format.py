"""Human-readable timestamps for the dashboard."""
from datetime import datetime
from typing import Optional


def format_time_ago(when: datetime, now: Optional[datetime] = None) -> str:
    """Describe how long ago `when` was.

    Under a minute is "Just now", then minutes and hours; anything a day or
    older falls back to a short date such as "Mar 4, 3:07 PM".
    """
    now = now or datetime.utcnow()
    diff_seconds = (now - when).total_seconds()
    diff_mins = int(diff_seconds // 60)
    diff_hours = int(diff_seconds // 3600)

    if diff_mins < 1:
        return "Just now"
    if diff_mins < 60:
        return f"{diff_mins} minute{'s' if diff_mins > 1 else ''} ago"
    if diff_hours < 24:
        return f"{diff_hours} hour{'s' if diff_hours > 1 else ''} ago"

    hour = when.hour % 12 or 12
    meridiem = "AM" if when.hour < 12 else "PM"
    return f"{when.strftime('%b')} {when.day}, {hour}:{when.minute:02d} {meridiem}"
