"""Customer-relationship building blocks: content metadata, notifications, user stats queries and campaigns."""

__version__ = "0.1.0"

__all__ = [
    "common",
    "config",
    "messages",
    "metadata",
    "notification",
    "crm_messages",
    "user_stats",
    "crm",
]