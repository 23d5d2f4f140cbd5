"""
Redirect Store

Owns the lifecycle of Redirect rows: lookup, creation, deletion,
enable/disable and the access counter.

Design Decisions:
- Every write is a single statement committed on its own, so the storage
  engine's atomicity is the only concurrency control
- A write that does not touch the expected number of rows raises
  PersistenceError; callers check existence first, so this signals a race
  or a storage fault rather than bad client input
- RedirectStore is an interface so the service can run against an
  in-memory implementation in tests
"""

from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import delete, insert, select, update

from shortener.db.models import Redirect, now_ms
from shortener.services.sql_store import SQLStore


class RedirectStore(ABC):
    """Persistent set of redirects keyed by identifier and by URL."""

    @abstractmethod
    async def find_by_id(self, redirect_id: str) -> Optional[Redirect]:
        ...

    @abstractmethod
    async def find_by_url(self, url: str) -> Optional[Redirect]:
        """Exact string match on the stored URL."""

    @abstractmethod
    async def create(self, redirect_id: str, url: str, source_ip: str) -> Redirect:
        ...

    @abstractmethod
    async def delete(self, redirect_id: str) -> None:
        ...

    @abstractmethod
    async def increment_access(self, redirect_id: str) -> None:
        ...

    @abstractmethod
    async def enable(self, redirect_id: str) -> None:
        ...

    @abstractmethod
    async def disable(self, redirect_id: str) -> None:
        ...

    @abstractmethod
    async def list_all(self) -> list[dict]:
        """Summaries of every redirect: {id, url, enabled}."""

    @abstractmethod
    async def list_enabled(self) -> list[dict]:
        """Summaries of enabled redirects: {id, url}."""

    @abstractmethod
    async def list_disabled(self) -> list[dict]:
        """Summaries of disabled redirects: {id, url}."""


class SQLRedirectStore(SQLStore, RedirectStore):
    """RedirectStore backed by the `redirects` table."""

    async def _fetch_one(self, statement) -> Optional[Redirect]:
        # populate_existing: rows changed by bulk UPDATEs must not be served
        # from the identity map
        result = await self.session.execute(
            statement.execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def find_by_id(self, redirect_id: str) -> Optional[Redirect]:
        return await self._fetch_one(select(Redirect).where(Redirect.id == redirect_id))

    async def find_by_url(self, url: str) -> Optional[Redirect]:
        return await self._fetch_one(select(Redirect).where(Redirect.url == url).limit(1))

    async def create(self, redirect_id: str, url: str, source_ip: str) -> Redirect:
        redirect = Redirect(id=redirect_id, url=url, ip=source_ip)
        statement = insert(Redirect.__table__).values(
            id=redirect.id,
            url=redirect.url,
            enabled=True,
            ip=redirect.ip,
            creation_timestamp=redirect.creation_timestamp,
            access_count=0,
        )
        await self._write(statement, f'Could not add a redirect for "{url}"', expected=1)
        return redirect

    async def delete(self, redirect_id: str) -> None:
        await self._write(
            delete(Redirect).where(Redirect.id == redirect_id),
            f'Could not delete redirect with ID "{redirect_id}"',
        )

    async def increment_access(self, redirect_id: str) -> None:
        statement = (
            update(Redirect)
            .where(Redirect.id == redirect_id)
            .values(
                access_count=Redirect.access_count + 1,
                last_access_timestamp=now_ms(),
            )
        )
        await self._write(
            statement,
            f'Could not increase access count for redirect with ID "{redirect_id}"',
        )

    async def _set_enabled(self, redirect_id: str, enabled: bool) -> None:
        verb = "enable" if enabled else "disable"
        await self._write(
            update(Redirect).where(Redirect.id == redirect_id).values(enabled=enabled),
            f'Could not {verb} redirect for "{redirect_id}"',
        )

    async def enable(self, redirect_id: str) -> None:
        await self._set_enabled(redirect_id, True)

    async def disable(self, redirect_id: str) -> None:
        await self._set_enabled(redirect_id, False)

    async def list_all(self) -> list[dict]:
        result = await self.session.execute(
            select(Redirect.id, Redirect.url, Redirect.enabled)
        )
        return [
            {"id": row.id, "url": row.url, "enabled": bool(row.enabled)}
            for row in result.all()
        ]

    async def _list_by_state(self, enabled: bool) -> list[dict]:
        result = await self.session.execute(
            select(Redirect.id, Redirect.url).where(Redirect.enabled == enabled)
        )
        return [{"id": row.id, "url": row.url} for row in result.all()]

    async def list_enabled(self) -> list[dict]:
        return await self._list_by_state(True)

    async def list_disabled(self) -> list[dict]:
        return await self._list_by_state(False)
