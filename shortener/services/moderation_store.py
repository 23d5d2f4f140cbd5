"""
Moderation Store

Owns the two blacklists: forbidden domains and forbidden identifier
substrings ("words").

Membership semantics:
- Domains and words are toggled by exact value
- A candidate identifier is blocked when any stored word occurs inside it;
  that containment test runs in SQL through the dialect adapter
"""

from abc import ABC, abstractmethod

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.db.interface import DatabaseAdapter
from shortener.db.models import BlacklistedDomain, BlacklistedWord, now_ms
from shortener.services.sql_store import SQLStore


class ModerationStore(ABC):
    """Persistent domain and word blacklists."""

    @abstractmethod
    async def is_domain_blacklisted(self, domain: str) -> bool:
        ...

    @abstractmethod
    async def is_word_blacklisted(self, word: str) -> bool:
        """Exact membership of ``word`` in the word blacklist."""

    @abstractmethod
    async def contains_blacklisted_word(self, candidate: str) -> bool:
        """True if any blacklisted word is a substring of ``candidate``."""

    @abstractmethod
    async def add_domain(self, domain: str) -> None:
        ...

    @abstractmethod
    async def remove_domain(self, domain: str) -> None:
        ...

    @abstractmethod
    async def add_word(self, word: str) -> None:
        ...

    @abstractmethod
    async def remove_word(self, word: str) -> None:
        ...

    @abstractmethod
    async def list_domains(self) -> list[str]:
        ...

    @abstractmethod
    async def list_words(self) -> list[str]:
        ...


class SQLModerationStore(SQLStore, ModerationStore):
    """ModerationStore backed by the `domains_blacklist` and `words_blacklist` tables."""

    def __init__(self, session: AsyncSession, adapter: DatabaseAdapter):
        super().__init__(session)
        self.adapter = adapter

    async def _exists(self, statement) -> bool:
        result = await self.session.execute(statement.limit(1))
        return result.first() is not None

    async def is_domain_blacklisted(self, domain: str) -> bool:
        return await self._exists(
            select(BlacklistedDomain.domain).where(BlacklistedDomain.domain == domain)
        )

    async def is_word_blacklisted(self, word: str) -> bool:
        return await self._exists(
            select(BlacklistedWord.word).where(BlacklistedWord.word == word)
        )

    async def contains_blacklisted_word(self, candidate: str) -> bool:
        return await self._exists(
            select(BlacklistedWord.word).where(
                self.adapter.substring_match(candidate, BlacklistedWord.word)
            )
        )

    async def add_domain(self, domain: str) -> None:
        await self._write(
            insert(BlacklistedDomain.__table__).values(
                domain=domain, blacklisted_timestamp=now_ms()
            ),
            f'Could not add "{domain}" to the domain blacklist',
            expected=1,
        )

    async def remove_domain(self, domain: str) -> None:
        await self._write(
            delete(BlacklistedDomain).where(BlacklistedDomain.domain == domain),
            f'Could not remove "{domain}" from the domain blacklist',
        )

    async def add_word(self, word: str) -> None:
        await self._write(
            insert(BlacklistedWord.__table__).values(
                word=word, blacklisted_timestamp=now_ms()
            ),
            f'Could not add "{word}" to the word blacklist',
            expected=1,
        )

    async def remove_word(self, word: str) -> None:
        await self._write(
            delete(BlacklistedWord).where(BlacklistedWord.word == word),
            f'Could not remove "{word}" from the word blacklist',
        )

    async def list_domains(self) -> list[str]:
        result = await self.session.execute(
            select(BlacklistedDomain.domain).order_by(BlacklistedDomain.blacklisted_timestamp)
        )
        return list(result.scalars().all())

    async def list_words(self) -> list[str]:
        result = await self.session.execute(
            select(BlacklistedWord.word).order_by(BlacklistedWord.blacklisted_timestamp)
        )
        return list(result.scalars().all())
