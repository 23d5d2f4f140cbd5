"""
Tests for RedirectService against the SQLite stores.

Covers submission, resolution, moderation toggles and deletion, including
the access-counting side effect and the blacklist gating on resolution.
"""

import pytest

from shortener.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from shortener.core.validators import is_valid_id
from shortener.services.redirect_service import RedirectService
from tests.fakes import ScriptedGenerator

URL = "https://example.com/page"


def id_of(short_url: str) -> str:
    return short_url.rsplit("/", 1)[-1]


class TestSubmit:

    async def test_returns_short_url_with_valid_id(self, service):
        short_url = await service.submit(URL, "10.0.0.1")

        assert short_url.startswith("http://sho.rt/")
        assert is_valid_id(id_of(short_url))

    async def test_resubmission_is_idempotent(self, service, redirect_store):
        first = await service.submit(URL, "10.0.0.1")
        second = await service.submit(URL, "10.0.0.2")

        assert first == second
        assert len(await redirect_store.list_all()) == 1

    async def test_input_is_trimmed_and_decoded(self, service, redirect_store):
        short_url = await service.submit("  https%3A%2F%2Fexample.com%2Fpage  ", "ip")

        redirect = await redirect_store.find_by_id(id_of(short_url))
        assert redirect.url == URL
        assert await service.submit(URL) == short_url

    async def test_records_source_ip(self, service, redirect_store):
        short_url = await service.submit(URL, "203.0.113.9")
        assert (await redirect_store.find_by_id(id_of(short_url))).ip == "203.0.113.9"

    async def test_missing_ip_is_recorded_as_unknown(self, service, redirect_store):
        short_url = await service.submit(URL)
        assert (await redirect_store.find_by_id(id_of(short_url))).ip == "unknown"

    @pytest.mark.parametrize("raw, message", [
        (None, "No URL submitted!"),
        ("", "No URL submitted!"),
        ("   ", "No URL submitted!"),
        ("https://example.com/%zz", "Malformed URL!"),
        ("not a url", "Not a valid URL!"),
        ("example.com/page", "Not a valid URL!"),
    ])
    async def test_rejects_bad_input(self, service, redirect_store, raw, message):
        with pytest.raises(ValidationError) as exc_info:
            await service.submit(raw, "ip")

        assert exc_info.value.message == message
        assert await redirect_store.list_all() == []

    async def test_blacklisted_domain_conflicts(self, service, moderation_store):
        await moderation_store.add_domain("example.com")

        with pytest.raises(ConflictError):
            await service.submit("https://www.example.com/page", "ip")

    async def test_only_exact_domain_is_blocked(self, service, moderation_store):
        await moderation_store.add_domain("example.com")

        short_url = await service.submit("https://docs.example.com/page", "ip")
        assert is_valid_id(id_of(short_url))

    async def test_disabled_url_is_forbidden(self, service):
        short_url = await service.submit(URL, "ip")
        await service.toggle_enabled(id_of(short_url))

        with pytest.raises(ForbiddenError):
            await service.submit(URL, "ip")

    async def test_never_allocates_id_containing_blacklisted_word(
        self, redirect_store, moderation_store, config
    ):
        await moderation_store.add_word("abcde")
        await moderation_store.add_word("bad")
        generator = ScriptedGenerator(["abcde", "xbadx", "Zz123"])
        service = RedirectService(redirect_store, moderation_store, config, generator)

        short_url = await service.submit(URL, "ip")

        assert id_of(short_url) == "Zz123"
        assert generator.drawn == ["abcde", "xbadx", "Zz123"]
        assert await redirect_store.find_by_id("abcde") is None
        assert await redirect_store.find_by_id("xbadx") is None

    async def test_skips_ids_already_taken(self, redirect_store, moderation_store, config):
        await redirect_store.create("taken", "https://other.example.com/", "ip")
        service = RedirectService(
            redirect_store, moderation_store, config, ScriptedGenerator(["taken", "fresh"])
        )

        assert id_of(await service.submit(URL, "ip")) == "fresh"


class TestResolve:

    async def test_returns_target_and_counts_access(self, service, redirect_store):
        redirect_id = id_of(await service.submit(URL, "ip"))

        assert await service.resolve(redirect_id) == URL
        redirect = await redirect_store.find_by_id(redirect_id)
        assert redirect.access_count == 1
        assert redirect.last_access_timestamp is not None

        await service.resolve(redirect_id)
        assert (await redirect_store.find_by_id(redirect_id)).access_count == 2

    @pytest.mark.parametrize("redirect_id, message", [
        (None, "No ID provided!"),
        ("", "No ID provided!"),
        ("abc", "Not a valid ID!"),
        ("abcdef", "Not a valid ID!"),
        ("ab-de", "Not a valid ID!"),
    ])
    async def test_rejects_bad_ids(self, service, redirect_id, message):
        with pytest.raises(ValidationError) as exc_info:
            await service.resolve(redirect_id)
        assert exc_info.value.message == message

    async def test_unknown_id(self, service):
        with pytest.raises(NotFoundError):
            await service.resolve("nope1")

    async def test_disabled_redirect_is_forbidden_and_not_counted(self, service, redirect_store):
        redirect_id = id_of(await service.submit(URL, "ip"))
        await service.toggle_enabled(redirect_id)

        with pytest.raises(ForbiddenError) as exc_info:
            await service.resolve(redirect_id)

        assert exc_info.value.message == "This redirect has been disabled!"
        assert (await redirect_store.find_by_id(redirect_id)).access_count == 0

    async def test_domain_blacklist_applies_retroactively(self, service, redirect_store):
        redirect_id = id_of(await service.submit(URL, "ip"))
        assert await service.resolve(redirect_id) == URL

        assert await service.toggle_domain_blacklist("example.com") == "added"
        with pytest.raises(ForbiddenError) as exc_info:
            await service.resolve(redirect_id)
        assert exc_info.value.message == "This redirect's domain is blacklisted!"

        redirect = await redirect_store.find_by_id(redirect_id)
        assert redirect.enabled is True
        assert redirect.access_count == 1

        assert await service.toggle_domain_blacklist("example.com") == "removed"
        assert await service.resolve(redirect_id) == URL
        assert (await redirect_store.find_by_id(redirect_id)).access_count == 2

    async def test_www_prefix_is_ignored_for_blacklist(self, service, moderation_store):
        redirect_id = id_of(await service.submit("https://www.example.com/", "ip"))
        await moderation_store.add_domain("example.com")

        with pytest.raises(ForbiddenError):
            await service.resolve(redirect_id)


class TestToggles:

    async def test_toggle_enabled_flips_state(self, service, redirect_store):
        redirect_id = id_of(await service.submit(URL, "ip"))

        assert await service.toggle_enabled(redirect_id) == "disabled"
        assert (await redirect_store.find_by_id(redirect_id)).enabled is False
        assert await service.toggle_enabled(redirect_id) == "enabled"
        assert await service.resolve(redirect_id) == URL

    async def test_toggle_enabled_requires_existing_redirect(self, service):
        with pytest.raises(NotFoundError):
            await service.toggle_enabled("nope1")
        with pytest.raises(ValidationError):
            await service.toggle_enabled("bad id")

    async def test_domain_toggle_twice_restores_membership(self, service, moderation_store):
        assert await service.toggle_domain_blacklist("www.example.com") == "added"
        assert await moderation_store.list_domains() == ["example.com"]

        assert await service.toggle_domain_blacklist("example.com") == "removed"
        assert await moderation_store.list_domains() == []

    async def test_domain_toggle_lowercases_input(self, service, moderation_store):
        redirect_id = id_of(await service.submit(URL, "ip"))

        assert await service.toggle_domain_blacklist("Example.COM") == "added"
        assert await moderation_store.list_domains() == ["example.com"]
        with pytest.raises(ForbiddenError):
            await service.resolve(redirect_id)

    async def test_domain_toggle_strips_uppercase_www(self, service, moderation_store):
        assert await service.toggle_domain_blacklist("WWW.example.com") == "added"
        assert await moderation_store.list_domains() == ["example.com"]

        with pytest.raises(ConflictError):
            await service.submit("https://www.example.com/x", "ip")
        assert await service.toggle_domain_blacklist("www.EXAMPLE.com") == "removed"

    @pytest.mark.parametrize("domain", ["localhost", "not a domain", "example", "http://example.com"])
    async def test_domain_toggle_validates_shape(self, service, domain):
        with pytest.raises(ValidationError):
            await service.toggle_domain_blacklist(domain)

    async def test_word_toggle(self, service, moderation_store):
        assert await service.toggle_word_blacklist(" abc ") == "added"
        assert await moderation_store.list_words() == ["abc"]

        # Exact membership: a longer word containing "abc" is a new entry
        assert await service.toggle_word_blacklist("abcde") == "added"
        assert await service.toggle_word_blacklist("abc") == "removed"
        assert await moderation_store.list_words() == ["abcde"]

    @pytest.mark.parametrize("value", [None, "", "   "])
    async def test_toggles_require_a_value(self, service, value):
        with pytest.raises(ValidationError):
            await service.toggle_word_blacklist(value)
        with pytest.raises(ValidationError):
            await service.toggle_domain_blacklist(value)


class TestDelete:

    async def test_delete_existing(self, service, redirect_store):
        redirect_id = id_of(await service.submit(URL, "ip"))

        await service.delete(redirect_id)

        assert await redirect_store.find_by_id(redirect_id) is None
        with pytest.raises(NotFoundError):
            await service.resolve(redirect_id)

    async def test_delete_missing_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.delete("nope1")

    async def test_resubmission_after_delete_creates_new_redirect(self, service):
        first = await service.submit(URL, "ip")
        await service.delete(id_of(first))

        second = await service.submit(URL, "ip")
        assert is_valid_id(id_of(second))


class TestListings:

    async def test_list_by_type(self, service):
        kept = id_of(await service.submit("https://a.example.com/", "ip"))
        disabled = id_of(await service.submit("https://b.example.com/", "ip"))
        await service.toggle_enabled(disabled)
        await service.toggle_domain_blacklist("evil.com")
        await service.toggle_word_blacklist("abc")

        assert await service.list_by_type(" Enabled ") == [{"id": kept, "url": "https://a.example.com/"}]
        assert await service.list_by_type("disabled") == [{"id": disabled, "url": "https://b.example.com/"}]
        assert await service.list_by_type("domains") == ["evil.com"]
        assert await service.list_by_type("words") == ["abc"]
        assert len(await service.list_all()) == 2

    @pytest.mark.parametrize("list_type, message", [
        (None, "No type supplied!"),
        ("  ", "No type supplied!"),
        ("everything", "Not a valid type!"),
    ])
    async def test_list_by_type_rejects_bad_tags(self, service, list_type, message):
        with pytest.raises(ValidationError) as exc_info:
            await service.list_by_type(list_type)
        assert exc_info.value.message == message
