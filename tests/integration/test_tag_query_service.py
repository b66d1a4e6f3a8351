"""
别名解析与标签查询服务测试（SQLite）
"""
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from conftest import make_alias, make_tag
from exceptions import StorageError
from routers.services.alias_resolver import AliasResolver
from routers.services.tag_query_service import TagQueryService
from storage.repositories.tag_alias_repository import TagAliasRepository
from storage.repositories.tag_repository import TagRepository


@pytest.fixture
async def taxonomy(seed):
    await seed(
        make_tag(1, "Python"),
        make_tag(2, "Pythonista", status="unreviewed"),
        make_tag(3, "Snakes", icon="🐍", legacy_icon_path="/icons/snakes.png"),
        make_tag(4, "Old Python", slug="old-python"),
        make_tag(5, "Rust", featured=True),
    )
    await seed(
        make_tag(6, "Py", redirect_to_tag_id=1),
        make_alias(1, 3, "Serpents"),
        make_alias(2, 1, "py3"),
    )


class TestAliasResolver:
    async def test_union_of_direct_and_alias_matches(self, session_factory, taxonomy):
        resolver = AliasResolver(session_factory)
        assert await resolver.resolve("serp") == [3]
        assert set(await resolver.resolve("py")) == {1, 2, 4}

    async def test_redirected_tags_excluded_from_direct_match(self, session_factory, seed):
        await seed(make_tag(1, "Canonical"), make_tag(2, "Legacy", redirect_to_tag_id=1))
        assert await AliasResolver(session_factory).resolve("legacy") == []

    async def test_deduplicates(self, session_factory, taxonomy):
        # "py3" 别名和名称 "Python" 都指向 1
        ids = await AliasResolver(session_factory).resolve("py")
        assert ids.count(1) == 1

    async def test_blank_query(self, session_factory):
        assert await AliasResolver(session_factory).resolve("   ") == []

    async def test_one_failing_lookup_fails_the_whole_resolution(self, session_factory, taxonomy, monkeypatch):
        failure = OperationalError("SELECT", {}, Exception("database is locked"))
        monkeypatch.setattr(TagAliasRepository, "find_tag_ids_containing", AsyncMock(side_effect=failure))

        with pytest.raises(StorageError) as exc_info:
            await AliasResolver(session_factory).resolve("python")

        assert exc_info.value.message == "database is locked"

    async def test_direct_lookup_failure_also_fails(self, session_factory, taxonomy, monkeypatch):
        failure = OperationalError("SELECT", {}, Exception("disk I/O error"))
        monkeypatch.setattr(TagRepository, "search_ids_by_name_or_slug", AsyncMock(side_effect=failure))

        with pytest.raises(StorageError):
            await AliasResolver(session_factory).resolve("serp")


class TestSearchTags:
    async def test_non_approved_status_skips_lookup(self, session, session_factory, taxonomy, monkeypatch):
        resolve = AsyncMock(return_value=[1])
        monkeypatch.setattr(AliasResolver, "resolve", resolve)

        service = TagQueryService(session, session_factory)
        assert await service.search_tags(status="hidden", query="py", limit=20) == []
        resolve.assert_not_called()

    async def test_lists_only_approved_canonical_tags_by_name(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        tags = await service.search_tags(status=None, query="", limit=20)
        assert [tag.name for tag in tags] == ["Old Python", "Python", "Rust", "Snakes"]

    async def test_query_matches_alias(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        tags = await service.search_tags(status="approved", query="serpents", limit=20)
        assert [tag.id for tag in tags] == [3]

    async def test_no_match_returns_empty(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        assert await service.search_tags(status=None, query="haskell", limit=20) == []

    async def test_limit_applied_after_resolution(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        tags = await service.search_tags(status=None, query="py", limit=1)
        # 2 未审核被过滤后，按名称排序取第一个
        assert [tag.name for tag in tags] == ["Old Python"]

    async def test_featured_filter(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        tags = await service.search_tags(status=None, query="", limit=20, featured=True)
        assert [tag.id for tag in tags] == [5]

    async def test_ids_restriction_intersects_with_query(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        tags = await service.search_tags(status=None, query="py", limit=20, ids=[4, 5])
        assert [tag.id for tag in tags] == [4]
        assert await service.search_tags(status=None, query="py", limit=20, ids=[5]) == []


class TestResolveFilter:
    async def test_redirect_is_followed_one_level(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        resolved = await service.resolve_filter([6], "any")
        assert resolved.tag_ids == [1]

    async def test_unknown_and_unapproved_ids_dropped(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        resolved = await service.resolve_filter([99, 2, 3], "all")
        assert resolved.tag_ids == [3]
        assert resolved.match == "all"

    async def test_dedupes_after_redirect_preserving_order(self, session, session_factory, taxonomy):
        service = TagQueryService(session, session_factory)
        resolved = await service.resolve_filter([5, 6, 1], "any")
        assert resolved.tag_ids == [5, 1]

    async def test_chained_redirect_is_not_followed(self, session, session_factory, seed):
        await seed(make_tag(1, "Final"))
        await seed(make_tag(2, "Middle", redirect_to_tag_id=1))
        await seed(make_tag(3, "Start", redirect_to_tag_id=2))

        service = TagQueryService(session, session_factory)
        resolved = await service.resolve_filter([3], "any")
        assert resolved.tag_ids == []

    async def test_empty_request(self, session, session_factory):
        service = TagQueryService(session, session_factory)
        resolved = await service.resolve_filter([], "any")
        assert resolved.tag_ids == []


async def test_icon_preferences_default_for_anonymous(session, session_factory):
    service = TagQueryService(session, session_factory)
    preferences = await service.get_icon_preferences(None)
    assert preferences.legacy_icons_enabled is True
