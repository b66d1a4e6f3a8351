"""
主题行数据规范化

接口返回的主题行字段可能缺失或为null，展示用的回复数、未读数在这里统一推导，
不直接信任存储层的原始值。
"""
# 标准库导包
from typing import Any, Dict, Iterable, List, Optional


def _as_count(value: Any) -> Optional[int]:
    """数值字段取整数，bool 和非数值视为缺失"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


def normalize_topic_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """
    规范化单个主题行

    - replies_count：接口给出时直接使用，否则为 max(messages_count - 1, 0)，首帖不计入回复
    - unread：由 has_new 推导，缺失为False
    - unread_count：接口给出时取非负值，否则 has_new 为真时为1

    Args:
        row: 接口返回的原始主题行

    Returns:
        新的字典，原始行不被修改
    """
    messages_count = _as_count(row.get("messages_count")) or 0
    has_new = bool(row.get("has_new"))

    replies_count = _as_count(row.get("replies_count"))
    if replies_count is None:
        replies_count = max(messages_count - 1, 0)

    unread_count = _as_count(row.get("unread_count"))
    if unread_count is None:
        unread_count = 1 if has_new else 0

    normalized = dict(row)
    normalized.update(
        messages_count=messages_count,
        views=_as_count(row.get("views")) or 0,
        has_new=has_new,
        unread=has_new,
        replies_count=replies_count,
        unread_count=max(unread_count, 0),
    )
    return normalized


def normalize_topic_rows(rows: Optional[Iterable[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """批量规范化，非字典的行直接丢弃"""
    if not rows:
        return []
    return [normalize_topic_row(row) for row in rows if isinstance(row, dict)]
