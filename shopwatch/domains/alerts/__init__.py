"""Alerts domain package.

Users watch shop items; a scheduled cycle checks every user's shop and posts
a message in the channel each alert was created in.
"""

__all__ = [
    "models",
    "repository",
    "registry",
    "prioritizer",
    "reporter",
    "senders",
    "engine",
    "service",
    "tasks",
]
