"""Shop item alerts for a chat bot."""

__version__ = "0.1.0"
