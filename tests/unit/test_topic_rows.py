"""
主题行规范化测试
"""
from client.topic_rows import normalize_topic_row, normalize_topic_rows


def test_replies_exclude_opening_post():
    assert normalize_topic_row({"id": 1, "messages_count": 5})["replies_count"] == 4


def test_replies_never_negative():
    assert normalize_topic_row({"id": 1, "messages_count": 0})["replies_count"] == 0


def test_missing_fields_default_to_zero_and_false():
    row = normalize_topic_row({"id": 1})
    assert row["replies_count"] == 0
    assert row["messages_count"] == 0
    assert row["unread"] is False
    assert row["unread_count"] == 0
    assert row["has_new"] is False


def test_null_fields():
    row = normalize_topic_row({"id": 1, "messages_count": None, "has_new": None})
    assert row["replies_count"] == 0
    assert row["unread"] is False


def test_unread_derived_from_has_new():
    row = normalize_topic_row({"id": 1, "messages_count": 3, "has_new": True})
    assert row["unread"] is True
    assert row["unread_count"] == 1


def test_explicit_counts_are_used():
    row = normalize_topic_row({"id": 1, "messages_count": 5, "replies_count": 7, "unread_count": -2})
    assert row["replies_count"] == 7
    assert row["unread_count"] == 0


def test_original_row_is_not_modified():
    raw = {"id": 1, "messages_count": 2}
    normalize_topic_row(raw)
    assert raw == {"id": 1, "messages_count": 2}


def test_normalize_rows_skips_non_objects():
    assert normalize_topic_rows(None) == []
    rows = normalize_topic_rows([{"id": 1, "messages_count": 2}, "junk", None])
    assert [row["id"] for row in rows] == [1]
    assert rows[0]["replies_count"] == 1
