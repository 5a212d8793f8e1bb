"""
Time utilities for the presence bot
Centralizes timestamp handling so log lines and channel messages agree
"""

from datetime import datetime

def now_local():
    """Get current time as an aware datetime in the local timezone"""
    return datetime.now().astimezone()

def format_rfc3339(dt=None):
    """Format time as RFC 3339 with a numeric UTC offset, e.g. 2024-05-01T09:30:00+01:00"""
    if dt is None:
        dt = now_local()
    elif dt.tzinfo is None:
        # Assume naive datetime is local time
        dt = dt.astimezone()
    
    return dt.isoformat(timespec='seconds')

def rfc3339_timestamp():
    """Get current local time as an RFC 3339 string"""
    return format_rfc3339()
