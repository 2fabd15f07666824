import pytest
import pytest_asyncio

from shopwatch.domains.alerts.models import Alert, OriginContext, User
from shopwatch.domains.alerts.prioritizer import (
    ELSEWHERE,
    SAME_CHANNEL,
    SAME_GUILD,
    AlertPrioritizer,
)
from shopwatch.domains.alerts.registry import AlertRegistry
from shopwatch.shared.exceptions import UserNotFoundError


@pytest_asyncio.fixture
async def prioritizer(store, chat, sample_user):
    await store.save_user(sample_user)
    return AlertPrioritizer(AlertRegistry(store), chat)


class TestAlertPrioritizer:
    """Test ordering of a user's alerts by proximity to the command origin"""

    @pytest.mark.asyncio
    async def test_same_channel_then_same_guild_then_rest(self, prioritizer):
        origin = OriginContext(user_id="u1", channel_id="c-alerts", guild_id="g1")

        ordered = await prioritizer.prioritize("u1", origin)

        assert [a.item_id for a in ordered] == ["phantom", "knife", "vandal"]

    @pytest.mark.asyncio
    async def test_ties_keep_stored_order(self, store, chat):
        await store.save_user(User(id="u2", alerts=[
            Alert(item_id="a", channel_id="c-other"),
            Alert(item_id="b", channel_id="c-general"),
            Alert(item_id="c", channel_id="c-dm"),
            Alert(item_id="d", channel_id="c-alerts"),
        ]))
        prioritizer = AlertPrioritizer(AlertRegistry(store), chat)
        origin = OriginContext(user_id="u2", channel_id="c-general", guild_id="g1")

        ordered = await prioritizer.prioritize("u2", origin)

        assert [a.item_id for a in ordered] == ["b", "d", "a", "c"]

    @pytest.mark.asyncio
    async def test_dm_origin_only_matches_channel(self, prioritizer):
        origin = OriginContext(user_id="u1", channel_id="c-general", guild_id=None)

        ordered = await prioritizer.prioritize("u1", origin)

        assert [a.item_id for a in ordered] == ["knife", "vandal", "phantom"]

    @pytest.mark.asyncio
    async def test_unresolvable_channel_scores_lowest(self, store, chat):
        await store.save_user(User(id="u3", alerts=[
            Alert(item_id="gone", channel_id="c-deleted"),
            Alert(item_id="here", channel_id="c-general"),
        ]))
        prioritizer = AlertPrioritizer(AlertRegistry(store), chat)
        origin = OriginContext(user_id="u3", channel_id="c-alerts", guild_id="g1")

        assert await prioritizer.score(Alert(item_id="gone", channel_id="c-deleted"), origin) == ELSEWHERE
        ordered = await prioritizer.prioritize("u3", origin)
        assert [a.item_id for a in ordered] == ["here", "gone"]

    @pytest.mark.asyncio
    async def test_score_values(self, prioritizer):
        origin = OriginContext(user_id="u1", channel_id="c-alerts", guild_id="g1")

        assert await prioritizer.score(Alert(item_id="x", channel_id="c-alerts"), origin) == SAME_CHANNEL
        assert await prioritizer.score(Alert(item_id="x", channel_id="c-general"), origin) == SAME_GUILD
        assert await prioritizer.score(Alert(item_id="x", channel_id="c-other"), origin) == ELSEWHERE

    @pytest.mark.asyncio
    async def test_same_channel_needs_no_lookup(self, prioritizer, chat):
        origin = OriginContext(user_id="u1", channel_id="c-alerts", guild_id="g1")

        await prioritizer.score(Alert(item_id="x", channel_id="c-alerts"), origin)

        chat.channel_guild_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_user_raises(self, prioritizer):
        origin = OriginContext(user_id="ghost", channel_id="c-alerts", guild_id="g1")
        with pytest.raises(UserNotFoundError):
            await prioritizer.prioritize("ghost", origin)
