"""
Concrete clients for external services.
"""

from .discord_client import DiscordRestClient

__all__ = ['DiscordRestClient']
