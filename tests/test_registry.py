"""Tests for the link registry."""

import asyncio

import pytest

from shortlinks.common.validators import SHORT_CODE_PATTERN
from shortlinks.database.memory import MemoryLinkStore
from shortlinks.database.models import NewLink
from shortlinks.errors import NotFoundOrUnauthorizedError, SlugTakenError, ValidationError
from shortlinks.registry import LinkRegistry


@pytest.mark.asyncio
class TestCreate:
    """Test link creation."""

    async def test_create_with_generated_code(self, registry, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0])

        assert link.owner_id == owner
        assert link.original_url == sample_urls[0]
        assert len(link.short_code) == 8
        assert SHORT_CODE_PATTERN.fullmatch(link.short_code)
        assert link.id is not None
        assert link.created_at == link.updated_at

    async def test_create_with_custom_slug(self, registry, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0], custom_slug="my-repo")

        assert link.short_code == "my-repo"

    async def test_custom_slug_is_stripped(self, registry, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0], custom_slug="  padded ")

        assert link.short_code == "padded"

    @pytest.mark.parametrize("blank", [None, "", "   "])
    async def test_blank_slug_generates_code(self, registry, sample_urls, blank, owner):
        link = await registry.create(owner, sample_urls[0], custom_slug=blank)

        assert len(link.short_code) == 8

    async def test_duplicate_custom_slug(self, registry, sample_urls, owner, other_owner):
        await registry.create(owner, sample_urls[0], custom_slug="duplicate")

        with pytest.raises(SlugTakenError) as exc_info:
            await registry.create(other_owner, sample_urls[1], custom_slug="duplicate")

        assert str(exc_info.value) == "This custom slug is already taken"

    async def test_concurrent_same_slug(self, registry, sample_urls, owner, other_owner):
        """Two racing creates with the same slug: exactly one succeeds."""
        results = await asyncio.gather(
            registry.create(owner, sample_urls[0], custom_slug="contested"),
            registry.create(other_owner, sample_urls[1], custom_slug="contested"),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, SlugTakenError)]
        assert len(successes) == 1
        assert len(failures) == 1

    @pytest.mark.parametrize(
        "url,message",
        [
            ("not-a-url", "Please enter a valid URL"),
            ("", "Please enter a valid URL"),
            ("https://example.com/" + "a" * 2040, "URL must be at most 2048 characters"),
        ],
    )
    async def test_invalid_url(self, registry, url, message, owner):
        with pytest.raises(ValidationError) as exc_info:
            await registry.create(owner, url)

        assert exc_info.value.message == message

    @pytest.mark.parametrize(
        "slug,message",
        [
            ("ab", "Custom slug must be at least 3 characters"),
            ("a" * 21, "Custom slug must be at most 20 characters"),
            ("has space", "Only letters, numbers, hyphens, and underscores allowed"),
            ("has/slash", "Only letters, numbers, hyphens, and underscores allowed"),
        ],
    )
    async def test_invalid_slug(self, registry, sample_urls, slug, message, owner):
        with pytest.raises(ValidationError) as exc_info:
            await registry.create(owner, sample_urls[0], custom_slug=slug)

        assert exc_info.value.message == message

    @pytest.mark.parametrize("slug", ["abc", "a" * 20])
    async def test_slug_length_bounds_accepted(self, registry, sample_urls, slug, owner):
        link = await registry.create(owner, sample_urls[0], custom_slug=slug)

        assert link.short_code == slug

    async def test_invalid_input_writes_nothing(self, registry, store, owner):
        with pytest.raises(ValidationError):
            await registry.create(owner, "not-a-url", custom_slug="nothing")

        assert await store.find_by_short_code("nothing") is None

    async def test_other_schemes_stored_by_default(self, registry, owner):
        link = await registry.create(owner, "javascript:alert(1)")

        assert link.original_url == "javascript:alert(1)"

    async def test_scheme_enforced_on_write_when_enabled(self, store, logger, owner):
        registry = LinkRegistry(store=store, logger=logger, enforce_scheme_on_write=True)

        with pytest.raises(ValidationError) as exc_info:
            await registry.create(owner, "javascript:alert(1)")

        assert exc_info.value.message == "URL must use http or https protocol"


@pytest.mark.asyncio
class TestGeneratedCodeCollisions:
    """Test the bounded retry on generated code collisions."""

    async def test_retries_after_collision(self, store, logger, owner, other_owner, sequence_generator):
        await store.insert(NewLink(other_owner, "https://example.com", "collide1"))
        generator = sequence_generator(["collide1", "fresh001"])
        registry = LinkRegistry(store=store, short_code_generator=generator, logger=logger)

        link = await registry.create(owner, "https://example.org")

        assert link.short_code == "fresh001"
        assert generator.calls == 2

    async def test_gives_up_after_max_attempts(self, store, logger, owner, other_owner, sequence_generator):
        await store.insert(NewLink(other_owner, "https://example.com", "always01"))
        generator = sequence_generator(["always01"])
        registry = LinkRegistry(
            store=store,
            short_code_generator=generator,
            logger=logger,
            max_collision_retries=3,
        )

        with pytest.raises(SlugTakenError) as exc_info:
            await registry.create(owner, "https://example.org")

        assert generator.calls == 3
        assert str(exc_info.value) == "This custom slug is already taken"


def test_registry_requires_at_least_one_attempt():
    with pytest.raises(ValueError):
        LinkRegistry(store=MemoryLinkStore(), max_collision_retries=0)


@pytest.mark.asyncio
class TestUpdate:
    """Test link updates."""

    async def test_update_url_keeps_code(self, registry, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0], custom_slug="keepme")

        updated = await registry.update(link.id, owner, sample_urls[1])

        assert updated.short_code == "keepme"
        assert updated.original_url == sample_urls[1]
        assert updated.updated_at > link.updated_at

    @pytest.mark.parametrize("blank", [None, "", "  "])
    async def test_blank_slug_keeps_code(self, registry, sample_urls, blank, owner):
        link = await registry.create(owner, sample_urls[0], custom_slug="steady")

        updated = await registry.update(link.id, owner, sample_urls[1], custom_slug=blank)

        assert updated.short_code == "steady"

    async def test_update_slug(self, registry, store, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0], custom_slug="before")

        updated = await registry.update(link.id, owner, sample_urls[0], custom_slug="after")

        assert updated.short_code == "after"
        assert await store.find_by_short_code("before") is None

    async def test_update_to_taken_slug(self, registry, sample_urls, owner, other_owner):
        await registry.create(other_owner, sample_urls[0], custom_slug="claimed")
        link = await registry.create(owner, sample_urls[1], custom_slug="mine")

        with pytest.raises(SlugTakenError):
            await registry.update(link.id, owner, sample_urls[1], custom_slug="claimed")

    async def test_non_owner_update_leaves_link_unchanged(self, registry, store, sample_urls, owner, other_owner):
        link = await registry.create(owner, sample_urls[0], custom_slug="private")

        with pytest.raises(NotFoundOrUnauthorizedError):
            await registry.update(link.id, other_owner, "https://evil.test", custom_slug="hijack")

        assert await store.find_by_id(link.id) == link
        assert await store.find_by_short_code("hijack") is None

    async def test_update_missing_link(self, registry, sample_urls, owner):
        with pytest.raises(NotFoundOrUnauthorizedError):
            await registry.update(9999, owner, sample_urls[0])

    async def test_update_validates_input(self, registry, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0])

        with pytest.raises(ValidationError):
            await registry.update(link.id, owner, "not-a-url")

        with pytest.raises(ValidationError):
            await registry.update(link.id, owner, sample_urls[0], custom_slug="x/y")


@pytest.mark.asyncio
class TestDeleteAndList:
    """Test deletion and listing."""

    async def test_delete(self, registry, store, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0])

        assert await registry.delete(link.id, owner) is True
        assert await store.find_by_id(link.id) is None

    async def test_delete_is_idempotent(self, registry, sample_urls, owner):
        link = await registry.create(owner, sample_urls[0])
        keep = await registry.create(owner, sample_urls[1])

        assert await registry.delete(link.id, owner) is True
        assert await registry.delete(link.id, owner) is False
        assert await registry.delete(424242, owner) is False
        assert [l.id for l in await registry.list_by_owner(owner)] == [keep.id]

    async def test_non_owner_delete(self, registry, store, sample_urls, owner, other_owner):
        link = await registry.create(owner, sample_urls[0])

        assert await registry.delete(link.id, other_owner) is False
        assert await store.find_by_id(link.id) == link

    async def test_list_by_owner_ordering(self, registry, sample_urls, owner, other_owner):
        first = await registry.create(owner, sample_urls[0])
        second = await registry.create(owner, sample_urls[1])
        third = await registry.create(owner, sample_urls[2])
        await registry.create(other_owner, sample_urls[0])

        links = await registry.list_by_owner(owner)
        assert [l.id for l in links] == [third.id, second.id, first.id]

        await registry.update(first.id, owner, "https://example.com/edited")

        links = await registry.list_by_owner(owner)
        assert [l.id for l in links] == [first.id, third.id, second.id]
        assert all(a.updated_at > b.updated_at for a, b in zip(links, links[1:]))

    async def test_list_empty(self, registry):
        assert await registry.list_by_owner("nobody") == []
