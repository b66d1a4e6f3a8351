"""
Client layer
主题列表客户端：请求传输、行数据规范化、URL筛选条件修正
"""

from .filter_reconciler import FilterReconciler, ReconcilerState, TopicFilter, build_filter_url
from .topic_rows import normalize_topic_row, normalize_topic_rows
from .transport import TopicListingClient, TopicListingError

__all__ = [
    "FilterReconciler",
    "ReconcilerState",
    "TopicFilter",
    "build_filter_url",
    "normalize_topic_row",
    "normalize_topic_rows",
    "TopicListingClient",
    "TopicListingError",
]
