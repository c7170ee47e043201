"""
Tests for session persistence backends.
"""

from unittest.mock import Mock

import pytest

from lesson_planner.agents.models import Session
from lesson_planner.services.session_store import InMemorySessionStore, SupabaseSessionStore


class TestInMemorySessionStore:
    @pytest.mark.asyncio
    async def test_create_get_update(self):
        store = InMemorySessionStore()
        await store.create(Session(id="s1", user_id="u1"))

        await store.update("s1", {"subject": "วิทยาศาสตร์", "config_step": 1})
        session = await store.get("s1")

        assert session.subject == "วิทยาศาสตร์"
        assert session.config_step == 1
        assert session.user_id == "u1"

    @pytest.mark.asyncio
    async def test_get_returns_copy(self):
        store = InMemorySessionStore()
        await store.create(Session(id="s1", user_id="u1", reflections=[{"a": 1}]))

        session = await store.get("s1")
        session.reflections.append({"b": 2})

        assert (await store.get("s1")).reflections == [{"a": 1}]

    @pytest.mark.asyncio
    async def test_absent_session(self):
        assert await InMemorySessionStore().get("nope") is None

    @pytest.mark.asyncio
    async def test_update_missing_session_raises(self):
        with pytest.raises(KeyError):
            await InMemorySessionStore().update("nope", {"subject": "x"})

    @pytest.mark.asyncio
    async def test_unknown_and_identity_fields_rejected(self):
        store = InMemorySessionStore()
        await store.create(Session(id="s1", user_id="u1"))

        with pytest.raises(ValueError, match="Unknown"):
            await store.update("s1", {"not_a_field": 1})
        with pytest.raises(ValueError, match="identity"):
            await store.update("s1", {"user_id": "u2"})

    @pytest.mark.asyncio
    async def test_invalid_update_is_not_committed(self):
        store = InMemorySessionStore()
        await store.create(Session(id="s1", user_id="u1"))

        with pytest.raises(ValueError):
            await store.update("s1", {"config_step": -1})

        assert (await store.get("s1")).config_step == 0


class TestSupabaseSessionStore:
    def _client(self, rows):
        chain = Mock()
        chain.select = Mock(return_value=chain)
        chain.insert = Mock(return_value=chain)
        chain.update = Mock(return_value=chain)
        chain.eq = Mock(return_value=chain)
        chain.execute = Mock(return_value=Mock(data=rows))
        client = Mock()
        client.table = Mock(return_value=chain)
        return client, chain

    @pytest.mark.asyncio
    async def test_get_validates_row(self):
        client, chain = self._client([{"id": "s1", "user_id": "u1", "config_step": 1}])
        store = SupabaseSessionStore(client, table="lesson_sessions")

        session = await store.get("s1")

        client.table.assert_called_with("lesson_sessions")
        chain.eq.assert_called_with("id", "s1")
        assert session.config_step == 1

    @pytest.mark.asyncio
    async def test_update_sends_only_changed_fields(self):
        client, chain = self._client([{"id": "s1", "user_id": "u1"}])
        store = SupabaseSessionStore(client, table="lesson_sessions")

        await store.update("s1", {"config_step": 2})

        patch = chain.update.call_args.args[0]
        assert patch["config_step"] == 2
        assert set(patch) == {"config_step", "updated_at"}

    @pytest.mark.asyncio
    async def test_missing_row(self):
        client, _chain = self._client([])
        store = SupabaseSessionStore(client, table="lesson_sessions")

        assert await store.get("s1") is None
        with pytest.raises(KeyError):
            await store.update("s1", {"config_step": 1})
