import pytest
import pytest_asyncio

from shopwatch.domains.alerts.models import Alert, User
from shopwatch.domains.alerts.registry import AlertRegistry
from shopwatch.shared.exceptions import UserNotFoundError


@pytest_asyncio.fixture
async def registry(store, sample_user):
    """Registry over a store holding sample_user"""
    await store.save_user(sample_user)
    return AlertRegistry(store)


class TestAlertRegistry:
    """Test alert CRUD"""

    @pytest.mark.asyncio
    async def test_add_alert_appends_and_persists(self, store, registry):
        await registry.add_alert("u1", Alert(item_id="operator", channel_id="c-dm"))

        user = await store.get_user("u1")
        assert [a.item_id for a in user.alerts] == ["vandal", "phantom", "knife", "operator"]
        assert user.alerts[-1].channel_id == "c-dm"

    @pytest.mark.asyncio
    async def test_add_alert_unknown_user_is_noop(self, store, registry):
        await registry.add_alert("ghost", Alert(item_id="operator", channel_id="c-dm"))

        assert await store.get_user("ghost") is None
        assert await store.get_user_list() == ["u1"]

    @pytest.mark.asyncio
    async def test_add_alert_does_not_deduplicate(self, store, registry):
        await registry.add_alert("u1", Alert(item_id="vandal", channel_id="c-alerts"))

        alerts = await registry.alerts_for_user("u1")
        assert [a.item_id for a in alerts].count("vandal") == 2

    @pytest.mark.asyncio
    async def test_alerts_for_user_keeps_stored_order(self, registry):
        alerts = await registry.alerts_for_user("u1")
        assert [a.item_id for a in alerts] == ["vandal", "phantom", "knife"]

    @pytest.mark.asyncio
    async def test_alerts_for_user_missing_user_raises(self, registry):
        with pytest.raises(UserNotFoundError) as exc_info:
            await registry.alerts_for_user("ghost")
        assert exc_info.value.user_id == "ghost"

    @pytest.mark.asyncio
    async def test_alert_exists_returns_alert(self, registry):
        alert = await registry.alert_exists("u1", "phantom")
        assert alert == Alert(item_id="phantom", channel_id="c-alerts")

    @pytest.mark.asyncio
    async def test_alert_exists_returns_false(self, registry):
        assert await registry.alert_exists("u1", "operator") is False

    @pytest.mark.asyncio
    async def test_remove_alert(self, store, registry):
        assert await registry.remove_alert("u1", "phantom") is True
        assert await registry.remove_alert("u1", "phantom") is False
        assert await registry.alert_exists("u1", "phantom") is False

        user = await store.get_user("u1")
        assert [a.item_id for a in user.alerts] == ["vandal", "knife"]

    @pytest.mark.asyncio
    async def test_remove_alert_not_present(self, store, registry):
        assert await registry.remove_alert("u1", "operator") is False

        user = await store.get_user("u1")
        assert len(user.alerts) == 3

    @pytest.mark.asyncio
    async def test_remove_alert_removes_every_match(self, store):
        await store.save_user(User(id="u2", alerts=[
            Alert(item_id="vandal", channel_id="c-alerts"),
            Alert(item_id="vandal", channel_id="c-other"),
        ]))
        registry = AlertRegistry(store)

        assert await registry.remove_alert("u2", "vandal") is True
        assert await registry.alerts_for_user("u2") == []

    @pytest.mark.asyncio
    async def test_remove_alert_missing_user_raises(self, registry):
        with pytest.raises(UserNotFoundError):
            await registry.remove_alert("ghost", "vandal")
