"""
筛选条件修正器测试
"""
import asyncio
from unittest.mock import AsyncMock, MagicMock, call

import pytest

from client.filter_reconciler import FilterReconciler, ReconcilerState, TopicFilter, build_filter_url
from client.transport import TopicListingError


def _payload(tag_ids, match="any", topics=None, total_count=None):
    topics = topics or []
    return {
        "topics": topics,
        "page": 1,
        "page_size": 25,
        "total_count": len(topics) if total_count is None else total_count,
        "filter": {"tag_ids": tag_ids, "match": match},
    }


class TestTopicFilter:
    def test_from_url(self):
        topic_filter = TopicFilter.from_url("/forum?tags=1,2,foo,2,-1&match=all")
        assert topic_filter.tag_ids == (1, 2)
        assert topic_filter.match == "all"

    def test_from_url_without_query(self):
        assert TopicFilter.from_url("/forum") == TopicFilter()

    def test_from_response_missing_filter(self):
        assert TopicFilter.from_response(None) == TopicFilter()

    def test_same_as_ignores_order(self):
        assert TopicFilter(tag_ids=(1, 2)).same_as(TopicFilter(tag_ids=(2, 1)))

    def test_same_as_compares_match(self):
        assert not TopicFilter(tag_ids=(1, 2), match="all").same_as(TopicFilter(tag_ids=(1, 2)))


class TestBuildFilterUrl:
    def test_drops_page_and_keeps_other_params(self):
        url = build_filter_url("/forum?page=3&tags=1&unread=1", [3], "any")
        assert url == "/forum?unread=1&tags=3"

    def test_match_only_written_for_all_with_multiple_tags(self):
        assert build_filter_url("/forum", [1, 2], "all") == "/forum?tags=1,2&match=all"
        assert build_filter_url("/forum?match=all", [1], "all") == "/forum?tags=1"
        assert build_filter_url("/forum", [1, 2], "any") == "/forum?tags=1,2"

    def test_no_tags(self):
        assert build_filter_url("/forum?tags=9&match=all", [], "any") == "/forum"

    def test_root_path(self):
        assert build_filter_url("?tags=1", [3], "any") == "/?tags=3"


class TestFilterReconciler:
    async def test_sends_requested_filter(self):
        fetch_topics = AsyncMock(return_value=_payload([1, 2], "all"))
        replace_url = MagicMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        await reconciler.on_url_change("/forum?tags=1,2,foo,2,-1&match=all")

        fetch_topics.assert_awaited_once_with([1, 2], "all")
        replace_url.assert_not_called()
        assert reconciler.state == ReconcilerState.IDLE

    async def test_rewrites_url_to_resolved_filter_exactly_once(self):
        fetch_topics = AsyncMock(return_value=_payload([3]))
        replace_url = MagicMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        await reconciler.on_url_change("/forum?tags=1")
        replace_url.assert_called_once_with("/forum?tags=3")

        # 修正后的URL再次触发渲染，解析结果一致，不再导航
        await reconciler.on_url_change("/forum?tags=3")
        assert replace_url.call_count == 1

    async def test_same_correction_is_not_repeated(self):
        fetch_topics = AsyncMock(return_value=_payload([3]))
        replace_url = MagicMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        await reconciler.on_url_change("/forum?tags=1")
        await reconciler.on_url_change("/forum?tags=1")

        replace_url.assert_called_once_with("/forum?tags=3")

    async def test_equal_sets_do_not_navigate(self):
        fetch_topics = AsyncMock(return_value=_payload([2, 1]))
        replace_url = MagicMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        await reconciler.on_url_change("/forum?tags=1,2")

        replace_url.assert_not_called()
        assert reconciler.resolved.tag_ids == (2, 1)

    async def test_async_replace_url(self):
        fetch_topics = AsyncMock(return_value=_payload([]))
        replace_url = AsyncMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        await reconciler.on_url_change("/forum?tags=8&page=2")

        replace_url.assert_awaited_once_with("/forum")

    async def test_rows_are_normalized(self):
        rows = [{"id": 10, "title": "Pipeline test", "messages_count": 5, "has_new": True}]
        reconciler = FilterReconciler(AsyncMock(return_value=_payload([], topics=rows)), MagicMock())

        await reconciler.on_url_change("/forum")

        assert reconciler.topics[0]["replies_count"] == 4
        assert reconciler.topics[0]["unread_count"] == 1
        assert reconciler.total_count == 1

    async def test_failure_keeps_previous_state(self):
        rows = [{"id": 10, "title": "kept", "messages_count": 2}]
        fetch_topics = AsyncMock(side_effect=[
            _payload([1], topics=rows),
            TopicListingError("database is locked", status_code=400),
        ])
        replace_url = MagicMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        assert await reconciler.on_url_change("/forum?tags=1") is True
        assert await reconciler.on_url_change("/forum?tags=5") is False

        assert reconciler.error == "database is locked"
        assert reconciler.resolved.tag_ids == (1,)
        assert [row["title"] for row in reconciler.topics] == ["kept"]
        assert reconciler.state == ReconcilerState.IDLE
        replace_url.assert_not_called()

    async def test_retry_reruns_current_url(self):
        fetch_topics = AsyncMock(side_effect=[
            TopicListingError("timeout"),
            _payload([5]),
        ])
        reconciler = FilterReconciler(fetch_topics, MagicMock())

        await reconciler.on_url_change("/forum?tags=5")
        assert reconciler.error == "timeout"

        assert await reconciler.retry() is True
        assert reconciler.error is None
        assert fetch_topics.await_args_list[1].args == ([5], "any")

    async def test_retry_without_url(self):
        reconciler = FilterReconciler(AsyncMock(), MagicMock())
        assert await reconciler.retry() is False

    async def test_stale_response_is_discarded(self):
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()

        async def fetch_topics(tag_ids, match):
            if tag_ids == [1]:
                slow_started.set()
                await release_slow.wait()
                return _payload([1], topics=[{"id": 1, "title": "stale"}])
            return _payload([2], topics=[{"id": 2, "title": "fresh"}])

        replace_url = MagicMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        slow = asyncio.create_task(reconciler.on_url_change("/forum?tags=1"))
        await slow_started.wait()
        assert reconciler.state == ReconcilerState.FETCHING
        assert reconciler.loading is True

        assert await reconciler.on_url_change("/forum?tags=2") is True
        release_slow.set()
        assert await slow is False

        assert reconciler.resolved.tag_ids == (2,)
        assert [row["title"] for row in reconciler.topics] == ["fresh"]
        assert reconciler.url == "/forum?tags=2"
        replace_url.assert_not_called()

    async def test_stale_failure_is_discarded(self):
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()

        async def fetch_topics(tag_ids, match):
            if tag_ids == [1]:
                slow_started.set()
                await release_slow.wait()
                raise TopicListingError("old request failed")
            return _payload([2])

        reconciler = FilterReconciler(fetch_topics, MagicMock())

        slow = asyncio.create_task(reconciler.on_url_change("/forum?tags=1"))
        await slow_started.wait()
        await reconciler.on_url_change("/forum?tags=2")
        release_slow.set()
        await slow

        assert reconciler.error is None
        assert reconciler.resolved.tag_ids == (2,)

    async def test_drift_is_corrected_again_after_failed_visit_to_target(self):
        fetch_topics = AsyncMock(side_effect=[
            _payload([3]),
            TopicListingError("database is locked", status_code=400),
            _payload([3]),
        ])
        replace_url = MagicMock()
        reconciler = FilterReconciler(fetch_topics, replace_url)

        await reconciler.on_url_change("/forum?tags=1")
        assert await reconciler.on_url_change("/forum?tags=3") is False
        await reconciler.on_url_change("/forum?tags=1")

        assert replace_url.call_args_list == [call("/forum?tags=3"), call("/forum?tags=3")]

    async def test_navigation_failure_returns_to_idle(self):
        fetch_topics = AsyncMock(return_value=_payload([3]))
        replace_url = MagicMock(side_effect=RuntimeError("navigation aborted"))
        reconciler = FilterReconciler(fetch_topics, replace_url)

        with pytest.raises(RuntimeError):
            await reconciler.on_url_change("/forum?tags=1")

        assert reconciler.state == ReconcilerState.IDLE

    async def test_unexpected_fetch_error_returns_to_idle(self):
        reconciler = FilterReconciler(AsyncMock(side_effect=KeyError("filter")), MagicMock())

        with pytest.raises(KeyError):
            await reconciler.on_url_change("/forum?tags=1")

        assert reconciler.state == ReconcilerState.IDLE
        assert reconciler.loading is False


@pytest.mark.parametrize("url,expected", [
    ("/forum?tags=1,2&match=all", ((1, 2), "all")),
    ("/forum?tags=1&match=any", ((1,), "any")),
    ("/forum?match=all", ((), "all")),
])
def test_filter_parsing_from_url(url, expected):
    topic_filter = TopicFilter.from_url(url)
    assert (topic_filter.tag_ids, topic_filter.match) == expected
