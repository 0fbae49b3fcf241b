"""Cookie-identified session store for transient form state."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pagecomments.core.config import get_settings
from pagecomments.models.form_session import FormSession, FormSessionEntry


def form_data_key(form_id: str) -> str:
    """Session key holding a form's last rejected field values."""
    return f"FormInfo.{form_id}.data"


def form_message_key(form_id: str) -> str:
    """Session key holding a form's pending {message, severity}."""
    return f"FormInfo.{form_id}.message"


class FormSessionService:
    """Get/set/clear of session values, plus session lifecycle.

    Expired sessions behave as if they did not exist; `purge_expired`
    removes them for good.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.settings = get_settings()

    def _expiry(self) -> datetime:
        return datetime.now(UTC) + timedelta(hours=self.settings.form_session_ttl_hours)

    async def load(self, token: str | None) -> FormSession | None:
        """Return the live session for a cookie token, or None."""
        if not token:
            return None
        query = (
            select(FormSession)
            .where(FormSession.token == token)
            .where(FormSession.expires_at > datetime.now(UTC))
        )
        return await self.db.scalar(query)

    async def ensure(self, token: str | None) -> FormSession:
        """Return the live session for `token`, creating a new one if needed.

        Either way the expiry slides forward by the configured TTL.
        """
        session = await self.load(token)
        if session is None:
            session = FormSession(token=secrets.token_urlsafe(32), expires_at=self._expiry())
            self.db.add(session)
        else:
            session.expires_at = self._expiry()
        await self.db.flush()
        return session

    async def _entry(self, session: FormSession, key: str) -> FormSessionEntry | None:
        query = (
            select(FormSessionEntry)
            .where(FormSessionEntry.session_id == session.id)
            .where(FormSessionEntry.key == key)
        )
        return await self.db.scalar(query)

    async def get(self, session: FormSession | None, key: str) -> Any | None:
        if session is None:
            return None
        entry = await self._entry(session, key)
        return entry.value if entry else None

    async def set(self, session: FormSession, key: str, value: Any) -> None:
        """Store `value` under `key`, replacing any previous value."""
        entry = await self._entry(session, key)
        if entry is None:
            self.db.add(FormSessionEntry(session_id=session.id, key=key, value=value))
        else:
            entry.value = value
        await self.db.flush()

    async def clear(self, session: FormSession | None, key: str) -> bool:
        """Delete `key`; returns whether anything was removed."""
        if session is None:
            return False
        result = await self.db.execute(
            delete(FormSessionEntry)
            .where(FormSessionEntry.session_id == session.id)
            .where(FormSessionEntry.key == key)
        )
        await self.db.flush()
        return bool(result.rowcount)

    async def pop(self, session: FormSession | None, key: str) -> Any | None:
        value = await self.get(session, key)
        if value is not None:
            await self.clear(session, key)
        return value

    async def purge_expired(self, now: datetime | None = None) -> int:
        """Delete expired sessions and their entries; returns sessions removed."""
        cutoff = now or datetime.now(UTC)
        expired_ids = select(FormSession.id).where(FormSession.expires_at <= cutoff)

        count_query = select(func.count()).select_from(FormSession).where(
            FormSession.expires_at <= cutoff
        )
        count = int((await self.db.scalar(count_query)) or 0)
        if not count:
            return 0

        await self.db.execute(
            delete(FormSessionEntry)
            .where(FormSessionEntry.session_id.in_(expired_ids))
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            delete(FormSession)
            .where(FormSession.expires_at <= cutoff)
            .execution_options(synchronize_session=False)
        )
        await self.db.flush()
        return count
