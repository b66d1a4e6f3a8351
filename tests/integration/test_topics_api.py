"""
按标签筛选主题列表接口测试
"""
from datetime import timedelta

import pytest

from conftest import BASE_TIME, make_tag, make_topic, make_topic_tag
from storage.models import TopicRead


@pytest.fixture
async def forum(seed):
    await seed(
        make_tag(1, "Python"),
        make_tag(2, "Rust"),
        make_tag(3, "Go"),
        make_tag(4, "Draft", status="unreviewed"),
        make_topic(10, "Python only", minutes=1, messages_count=5),
        make_topic(11, "Python and Rust", minutes=2, messages_count=1),
        make_topic(12, "Rust only", minutes=3, messages_count=0),
        make_topic(13, "Untagged", minutes=4),
    )
    await seed(
        make_tag(5, "Py", redirect_to_tag_id=1),
        make_topic_tag(10, 1),
        make_topic_tag(11, 1),
        make_topic_tag(11, 2),
        make_topic_tag(12, 2),
    )


def _ids(response):
    return [topic["id"] for topic in response.json()["topics"]]


async def test_unfiltered_listing_newest_first(client, forum):
    response = await client.get("/api/topics")
    assert response.status_code == 200
    body = response.json()
    assert _ids(response) == [13, 12, 11, 10]
    assert body["total_count"] == 4
    assert body["page"] == 1
    assert body["page_size"] == 25
    assert body["filter"] == {"tag_ids": [], "match": "any"}


async def test_match_any(client, forum):
    response = await client.get("/api/topics", params={"tag_ids": "1,2"})
    assert _ids(response) == [12, 11, 10]
    assert response.json()["filter"] == {"tag_ids": [1, 2], "match": "any"}


async def test_match_all_requires_every_tag(client, forum):
    response = await client.get("/api/topics", params={"tag_ids": "1,2", "match": "all"})
    assert _ids(response) == [11]
    assert response.json()["total_count"] == 1
    assert response.json()["filter"] == {"tag_ids": [1, 2], "match": "all"}


async def test_invalid_and_unapproved_ids_are_dropped_from_filter(client, forum):
    response = await client.get("/api/topics", params={"tag_ids": "2,foo,99,4,-1"})
    assert response.json()["filter"]["tag_ids"] == [2]
    assert _ids(response) == [12, 11]


async def test_redirected_id_resolves_to_target(client, forum):
    response = await client.get("/api/topics", params={"tag_ids": "5"})
    assert response.json()["filter"]["tag_ids"] == [1]
    assert _ids(response) == [11, 10]


async def test_rows_tagged_with_redirected_tag_match_canonical_filter(client, forum, seed):
    await seed(make_topic(14, "Tagged via old tag", minutes=5), make_topic_tag(14, 5))
    response = await client.get("/api/topics", params={"tag_ids": "1"})
    assert _ids(response) == [14, 11, 10]


async def test_nothing_resolved_lists_unfiltered(client, forum):
    response = await client.get("/api/topics", params={"tag_ids": "99"})
    assert response.json()["filter"]["tag_ids"] == []
    assert response.json()["total_count"] == 4


async def test_paging(client, forum):
    response = await client.get("/api/topics", params={"page": "2", "page_size": "3"})
    body = response.json()
    assert _ids(response) == [10]
    assert body["page"] == 2
    assert body["page_size"] == 3
    assert body["total_count"] == 4


async def test_page_size_is_clamped(client, forum):
    response = await client.get("/api/topics", params={"page_size": "1000", "page": "zero"})
    assert response.json()["page_size"] == 100
    assert response.json()["page"] == 1


async def test_has_new_for_user(client, forum, seed):
    await seed(
        # 读过最新帖子
        TopicRead(user_id="reader", topic_id=10, last_read_at=BASE_TIME + timedelta(minutes=1)),
        # 读过之后有新回复
        TopicRead(user_id="reader", topic_id=11, last_read_at=BASE_TIME),
    )

    response = await client.get("/api/topics", headers={"X-User-Id": "reader"})
    has_new = {topic["id"]: topic["has_new"] for topic in response.json()["topics"]}
    assert has_new == {13: True, 12: True, 11: True, 10: False}


async def test_has_new_false_for_anonymous(client, forum):
    response = await client.get("/api/topics")
    assert all(topic["has_new"] is False for topic in response.json()["topics"])


async def test_rows_carry_messages_count(client, forum):
    response = await client.get("/api/topics", params={"tag_ids": "1", "match": "all"})
    counts = {topic["id"]: topic["messages_count"] for topic in response.json()["topics"]}
    assert counts == {11: 1, 10: 5}


async def test_oversized_ids_and_page_degrade_instead_of_failing(client, forum):
    response = await client.get("/api/topics", params={"tag_ids": "1,99999999999999999999"})
    assert response.status_code == 200
    assert response.json()["filter"]["tag_ids"] == [1]
    assert _ids(response) == [11, 10]

    response = await client.get("/api/topics", params={"page": "99999999999999999999"})
    assert response.status_code == 200
    assert response.json()["topics"] == []
    assert response.json()["total_count"] == 4
