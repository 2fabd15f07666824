"""
Pytest configuration and shared fixtures.

Provides in-memory collaborators for the alert subsystem: a user store, a
mocked chat client with a fixed set of channels, an item catalog and the
real string catalog.
"""

import os
import pytest
from unittest.mock import AsyncMock
from typing import Dict

# Configure test environment before importing shopwatch modules
os.environ.setdefault('TESTING', '1')
os.environ.setdefault('LOG_DIR', '')

from shopwatch.core.throttle import NoThrottle
from shopwatch.domains.alerts.models import Alert, Channel, ChatUser, ItemMetadata, User
from shopwatch.domains.alerts.repository import InMemoryUserStore
from shopwatch.domains.alerts.senders import AlertSender
from shopwatch.shared.exceptions import ChatNotFoundError
from shopwatch.shared.exceptions.chat_exceptions import UNKNOWN_CHANNEL
from shopwatch.shared.strings import StringCatalog


@pytest.fixture
def channels() -> Dict[str, Channel]:
    """Channels the chat client can see"""
    return {
        "c-alerts": Channel(id="c-alerts", name="alerts", guild_id="g1"),
        "c-general": Channel(id="c-general", name="general", guild_id="g1"),
        "c-other": Channel(id="c-other", name="elsewhere", guild_id="g2"),
        "c-dm": Channel(id="c-dm", name="", guild_id=None),
    }


@pytest.fixture
def chat(channels):
    """Mock chat client backed by the channels fixture"""
    async def fetch_channel(channel_id):
        if channel_id not in channels:
            raise ChatNotFoundError(f"Unknown channel {channel_id}", error_code=UNKNOWN_CHANNEL)
        return channels[channel_id]

    client = AsyncMock()
    client.fetch_channel = AsyncMock(side_effect=fetch_channel)
    client.channel_guild_id = AsyncMock(side_effect=fetch_channel)
    client.fetch_user = AsyncMock(
        side_effect=lambda user_id: ChatUser(id=user_id, username=f"player{user_id}", discriminator="0420")
    )
    client.fetch_member = AsyncMock(return_value={"user": {"id": "member"}})
    client.send_message = AsyncMock(return_value={"id": "message-1"})
    return client


@pytest.fixture
def items():
    """Mock item catalog"""
    catalog = AsyncMock()
    catalog.get_item = AsyncMock(
        side_effect=lambda item_id: ItemMetadata(
            item_id=item_id,
            display_name=f"Skin {item_id}",
            icon_url=f"https://media.example.com/{item_id}.png",
        )
    )
    return catalog


@pytest.fixture
def translator():
    """Real string catalog"""
    return StringCatalog()


@pytest.fixture
def store():
    """Empty in-memory user store"""
    return InMemoryUserStore()


@pytest.fixture
def sample_user():
    """User with alerts in three different channels"""
    return User(
        id="u1",
        username="player",
        alerts=[
            Alert(item_id="vandal", channel_id="c-other"),
            Alert(item_id="phantom", channel_id="c-alerts"),
            Alert(item_id="knife", channel_id="c-general"),
        ],
    )


@pytest.fixture
def sender(store, chat, items, translator):
    """AlertSender wired to the mocks"""
    return AlertSender(store, chat, items, translator)


@pytest.fixture
def no_throttle():
    """Throttle that never sleeps but counts waits"""
    return NoThrottle()
