"""
Session persistence.

The pipeline talks to a SessionStore through get/create/update with partial
field updates. Documents are validated into Session at this boundary.
"""

import asyncio
import copy
import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Protocol

from supabase import Client

from lesson_planner.agents.models import SESSION_FIELDS, Session
from lesson_planner.config import settings

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    async def get(self, session_id: str) -> Session | None: ...

    async def create(self, session: Session) -> str: ...

    async def update(self, session_id: str, fields: dict[str, Any]) -> None: ...


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - SESSION_FIELDS
    if unknown:
        raise ValueError(f"Unknown session fields: {', '.join(sorted(unknown))}")
    if "id" in fields or "user_id" in fields:
        raise ValueError("Session identity fields cannot be updated")


class InMemorySessionStore:
    """Process-local store for development and tests."""

    def __init__(self):
        self._documents: dict[str, dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str) -> Session | None:
        document = self._documents.get(session_id)
        if document is None:
            return None
        return Session.model_validate(copy.deepcopy(document))

    async def create(self, session: Session) -> str:
        async with self._lock:
            session_id = session.id or str(uuid.uuid4())
            self._documents[session_id] = session.model_dump(mode="json") | {"id": session_id}
        logger.info(f"🆕 Created session {session_id}")
        return session_id

    async def update(self, session_id: str, fields: dict[str, Any]) -> None:
        _check_fields(fields)
        async with self._lock:
            document = self._documents.get(session_id)
            if document is None:
                raise KeyError(session_id)
            merged = {**document, **fields, "updated_at": datetime.now(UTC)}
            # Validate before committing so a bad update never lands
            self._documents[session_id] = Session.model_validate(merged).model_dump(mode="json")
        logger.debug(f"   Updated session {session_id}: {sorted(fields)}")


class SupabaseSessionStore:
    """Sessions stored as rows of a Supabase table, one column per field."""

    def __init__(self, client: Client, table: str | None = None):
        self.client = client
        self.table = table or settings.sessions_table

    async def get(self, session_id: str) -> Session | None:
        def _select():
            return self.client.table(self.table).select("*").eq("id", session_id).execute()

        response = await asyncio.to_thread(_select)
        if not response.data:
            return None
        return Session.model_validate(response.data[0])

    async def create(self, session: Session) -> str:
        document = session.model_dump(mode="json")

        def _insert():
            return self.client.table(self.table).insert(document).execute()

        await asyncio.to_thread(_insert)
        logger.info(f"🆕 Created session {session.id}")
        return session.id

    async def update(self, session_id: str, fields: dict[str, Any]) -> None:
        _check_fields(fields)
        # Round-trip through the model so nested values are JSON-ready
        current = await self.get(session_id)
        if current is None:
            raise KeyError(session_id)
        merged = Session.model_validate({**current.model_dump(), **fields, "updated_at": datetime.now(UTC)})
        patch = merged.model_dump(mode="json", include=set(fields) | {"updated_at"})

        def _update():
            return self.client.table(self.table).update(patch).eq("id", session_id).execute()

        await asyncio.to_thread(_update)
        logger.debug(f"   Updated session {session_id}: {sorted(fields)}")


def build_session_store() -> SessionStore:
    """Construct the store selected by SESSION_STORE_BACKEND."""
    if settings.session_store_backend == "supabase":
        from lesson_planner.core.supabase_client import get_supabase_client

        logger.info(f"💾 Using Supabase session store (table: {settings.sessions_table})")
        return SupabaseSessionStore(get_supabase_client())

    logger.info("💾 Using in-memory session store")
    return InMemorySessionStore()
