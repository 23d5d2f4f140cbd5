"""
Redirect Service

This service holds the moderation and resolution rules of the shortener:
- Accepting or rejecting submitted URLs
- Allocating identifiers that are free and contain no blacklisted word
- Gating resolution on the enabled flag and the domain blacklist
- Toggling redirect state and blacklist membership

Design Decisions:
- No state of its own: both stores are passed in, so tests can swap in
  in-memory implementations
- Configuration arrives as a frozen Settings object, never read from the
  environment here
- Identifier allocation is a bounded loop; a lost insert race is logged and
  retried with a fresh candidate
"""

import logging
from typing import Optional

from shortener.core.exceptions import (
    ConflictError,
    ExhaustedError,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from shortener.core.setting import Settings
from shortener.core.validators import (
    decode_url,
    extract_domain,
    is_fqdn,
    is_valid_id,
    is_valid_url,
    strip_www,
)
from shortener.db.models import Redirect
from shortener.services.identifier_generator import IdentifierGenerator
from shortener.services.moderation_store import ModerationStore
from shortener.services.redirect_store import RedirectStore

logger = logging.getLogger(__name__)


class RedirectService:
    """
    Orchestrates RedirectStore and ModerationStore.

    Every public method either returns its result or raises one of the
    exceptions from shortener.core.exceptions; nothing is swallowed except
    the identifier collision retry in submit().
    """

    def __init__(
        self,
        redirects: RedirectStore,
        moderation: ModerationStore,
        config: Settings,
        generator: Optional[IdentifierGenerator] = None,
    ):
        self.redirects = redirects
        self.moderation = moderation
        self.config = config
        self.generator = generator or IdentifierGenerator()

    def short_url(self, redirect_id: str) -> str:
        return f"{self.config.BASE_URL}{redirect_id}"

    async def submit(self, raw_url: Optional[str], source_ip: Optional[str] = None) -> str:
        """
        Shorten a URL, or return the existing short URL for it.

        Args:
            raw_url: URL text as submitted (may be percent-encoded)
            source_ip: Address of the submitting client

        Returns:
            The complete short URL

        Raises:
            ValidationError: Empty, undecodable or malformed URL
            ConflictError: The URL's domain is blacklisted
            ForbiddenError: The URL exists as a disabled redirect
            ExhaustedError: No free identifier within MAX_ID_ATTEMPTS draws
        """
        url = (raw_url or "").strip()
        if not url:
            raise ValidationError("No URL submitted!")

        try:
            url = decode_url(url)
        except ValueError:
            raise ValidationError("Malformed URL!")

        if not is_valid_url(url):
            raise ValidationError("Not a valid URL!")

        if await self.moderation.is_domain_blacklisted(extract_domain(url)):
            raise ConflictError("This domain is blacklisted!")

        existing = await self.redirects.find_by_url(url)
        if existing:
            return self._existing_short_url(existing)

        # A redirect created concurrently for the same URL may come back here
        redirect = await self._allocate(url, source_ip or "unknown")
        return self._existing_short_url(redirect)

    def _existing_short_url(self, redirect: Redirect) -> str:
        if not redirect.enabled:
            raise ForbiddenError("This URL is blacklisted!")
        return self.short_url(redirect.id)

    async def _is_usable_id(self, candidate: str) -> bool:
        if await self.redirects.find_by_id(candidate):
            return False
        return not await self.moderation.contains_blacklisted_word(candidate)

    async def _allocate(self, url: str, source_ip: str) -> Redirect:
        attempts = self.config.MAX_ID_ATTEMPTS
        for attempt in range(1, attempts + 1):
            candidate = self.generator.generate()
            if not await self._is_usable_id(candidate):
                continue

            try:
                redirect = await self.redirects.create(candidate, url, source_ip)
            except PersistenceError as e:
                logger.warning(
                    f"Insert of redirect {candidate} failed "
                    f"(attempt {attempt}/{attempts}): {e}"
                )
                concurrent = await self.redirects.find_by_url(url)
                if concurrent:
                    return concurrent
                continue

            logger.info(f"Created a new redirect: {redirect.id} -> {url} (from {source_ip})")
            return redirect

        logger.error(f"No free ID found for {url} after {attempts} attempts")
        raise ExhaustedError(attempts)

    def _checked_id(self, redirect_id: Optional[str]) -> str:
        redirect_id = (redirect_id or "").strip()
        if not redirect_id:
            raise ValidationError("No ID provided!")
        if not is_valid_id(redirect_id):
            raise ValidationError("Not a valid ID!")
        return redirect_id

    async def _existing(self, redirect_id: Optional[str]) -> Redirect:
        redirect_id = self._checked_id(redirect_id)
        redirect = await self.redirects.find_by_id(redirect_id)
        if not redirect:
            raise NotFoundError(redirect_id)
        return redirect

    async def resolve(self, redirect_id: Optional[str]) -> str:
        """
        Resolve an identifier to its target URL and count the access.

        The domain blacklist is checked against the stored URL on every
        resolution, so blacklisting a domain also blocks older redirects.

        Raises:
            ValidationError: Missing or malformed identifier
            NotFoundError: No redirect with this identifier
            ForbiddenError: Redirect disabled or its domain blacklisted
        """
        redirect = await self._existing(redirect_id)

        if not redirect.enabled:
            raise ForbiddenError("This redirect has been disabled!")

        if await self.moderation.is_domain_blacklisted(extract_domain(redirect.url)):
            raise ForbiddenError("This redirect's domain is blacklisted!")

        await self.redirects.increment_access(redirect.id)
        return redirect.url

    async def toggle_enabled(self, redirect_id: Optional[str], actor_ip: str = "unknown") -> str:
        """Flip a redirect between enabled and disabled; returns the new state."""
        redirect = await self._existing(redirect_id)

        if redirect.enabled:
            await self.redirects.disable(redirect.id)
            logger.info(f"Disabled a redirect: {redirect.id} -> {redirect.url} (from {actor_ip})")
            return "disabled"

        await self.redirects.enable(redirect.id)
        logger.info(f"Enabled a redirect: {redirect.id} -> {redirect.url} (from {actor_ip})")
        return "enabled"

    @staticmethod
    def _checked_value(value: Optional[str]) -> str:
        value = (value or "").strip()
        if not value:
            raise ValidationError("No value submitted!")
        return value

    async def toggle_domain_blacklist(self, domain: Optional[str], actor_ip: str = "unknown") -> str:
        """Add the domain to the blacklist, or remove it if already present."""
        domain = strip_www(self._checked_value(domain).lower())
        if not is_fqdn(domain):
            raise ValidationError("Not a valid domain!")

        if await self.moderation.is_domain_blacklisted(domain):
            await self.moderation.remove_domain(domain)
            logger.info(f"Removed a domain from the blacklist: {domain} (from {actor_ip})")
            return "removed"

        await self.moderation.add_domain(domain)
        logger.info(f"Added a domain to the blacklist: {domain} (from {actor_ip})")
        return "added"

    async def toggle_word_blacklist(self, word: Optional[str], actor_ip: str = "unknown") -> str:
        """Add the word to the blacklist, or remove it if exactly present."""
        word = self._checked_value(word)

        if await self.moderation.is_word_blacklisted(word):
            await self.moderation.remove_word(word)
            logger.info(f"Removed a word from the blacklist: {word} (from {actor_ip})")
            return "removed"

        await self.moderation.add_word(word)
        logger.info(f"Added a word to the blacklist: {word} (from {actor_ip})")
        return "added"

    async def delete(self, redirect_id: Optional[str], actor_ip: str = "unknown") -> None:
        """
        Delete an existing redirect.

        Raises:
            ValidationError: Missing or malformed identifier
            NotFoundError: No redirect with this identifier
        """
        redirect = await self._existing(redirect_id)
        await self.redirects.delete(redirect.id)
        logger.info(f"Deleted a redirect: {redirect.id} -> {redirect.url} (from {actor_ip})")

    async def list_all(self) -> list[dict]:
        return await self.redirects.list_all()

    async def list_enabled(self) -> list[dict]:
        return await self.redirects.list_enabled()

    async def list_disabled(self) -> list[dict]:
        return await self.redirects.list_disabled()

    async def list_blacklisted_domains(self) -> list[str]:
        return await self.moderation.list_domains()

    async def list_blacklisted_words(self) -> list[str]:
        return await self.moderation.list_words()

    async def list_by_type(self, list_type: Optional[str]) -> list:
        """Dispatch a listing by its type tag (enabled, disabled, domains, words)."""
        list_type = (list_type or "").strip().lower()
        if not list_type:
            raise ValidationError("No type supplied!")

        listings = {
            "enabled": self.list_enabled,
            "disabled": self.list_disabled,
            "domains": self.list_blacklisted_domains,
            "words": self.list_blacklisted_words,
        }
        if list_type not in listings:
            raise ValidationError("Not a valid type!")
        return await listings[list_type]()
