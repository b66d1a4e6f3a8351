"""
筛选条件修正器

URL 上的 tags/match 是可分享的筛选状态。每次 URL 变化时按URL请求主题列表，
再把服务端解析后的筛选条件（无效ID已剔除、重定向已解析）与请求的条件比较，
不一致时用替换导航（不新增历史记录）把 URL 改成服务端的结果。

状态流转：idle -> fetching -> reconciling -> idle
新的 URL 变化会取代尚未返回的请求，过期响应通过代数计数直接丢弃。
"""
# 标准库导包
import enum
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# 第三方库导包
from pydantic import BaseModel, ConfigDict

# 项目内部导包
from client.topic_rows import normalize_topic_rows
from client.transport import TopicListingError
from utils.identifiers import MATCH_ALL, MATCH_ANY, parse_id_list, parse_id_values, parse_match_mode

# 配置日志
logger = logging.getLogger(__name__)

FetchTopics = Callable[[List[int], str], Awaitable[Dict[str, Any]]]
ReplaceUrl = Callable[[str], Any]


class ReconcilerState(str, enum.Enum):
    """修正器状态"""
    IDLE = "idle"
    FETCHING = "fetching"
    RECONCILING = "reconciling"


class TopicFilter(BaseModel):
    """标签筛选条件：有序ID元组 + 匹配模式"""
    model_config = ConfigDict(frozen=True)

    tag_ids: Tuple[int, ...] = ()
    match: str = MATCH_ANY

    @classmethod
    def from_url(cls, url: str) -> "TopicFilter":
        """从 URL 的 tags/match 参数解析"""
        query = dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
        return cls(
            tag_ids=tuple(parse_id_list(query.get("tags"))),
            match=parse_match_mode(query.get("match"))
        )

    @classmethod
    def from_response(cls, payload: Any) -> "TopicFilter":
        """从接口返回的 filter 字段解析，缺失时视为无筛选"""
        if not isinstance(payload, dict):
            payload = {}
        match = payload.get("match")
        return cls(
            tag_ids=tuple(parse_id_values(payload.get("tag_ids"))),
            match=parse_match_mode(match if isinstance(match, str) else None)
        )

    def same_as(self, other: "TopicFilter") -> bool:
        """ID按集合比较（与顺序无关），匹配模式需一致"""
        return set(self.tag_ids) == set(other.tag_ids) and self.match == other.match


def build_filter_url(current_url: str, tag_ids: List[int], match: str) -> str:
    """
    生成带新筛选条件的 URL

    保留其他查询参数；去掉 page；没有标签时去掉 tags；
    只有 match 为 all 且标签多于一个时才写入 match。

    Args:
        current_url: 当前 URL（可以是相对路径，例如 "/forum?tags=1"）
        tag_ids: 新的标签ID
        match: 新的匹配模式

    Returns:
        新 URL
    """
    parts = urlsplit(current_url)
    params = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in ("page", "tags", "match")
    ]
    if tag_ids:
        params.append(("tags", ",".join(str(tag_id) for tag_id in tag_ids)))
    if match == MATCH_ALL and len(tag_ids) > 1:
        params.append(("match", MATCH_ALL))

    path = parts.path or "/"
    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(params, safe=","), parts.fragment))


class FilterReconciler:
    """
    按 URL 拉取主题列表并修正 URL 中的筛选条件

    请求失败时保留上一次的解析结果和主题列表，记录可重试的 error，跳过修正步骤。
    """

    def __init__(self, fetch_topics: FetchTopics, replace_url: ReplaceUrl):
        """
        Args:
            fetch_topics: 请求函数 (tag_ids, match) -> 接口JSON，失败时抛出 TopicListingError
            replace_url: 替换导航函数，可以是普通函数或协程函数
        """
        self.fetch_topics = fetch_topics
        self.replace_url = replace_url

        self.state = ReconcilerState.IDLE
        self.url: Optional[str] = None
        self.requested: TopicFilter = TopicFilter()
        self.resolved: Optional[TopicFilter] = None
        self.topics: List[Dict[str, Any]] = []
        self.total_count = 0
        self.error: Optional[str] = None

        self._generation = 0
        self._last_correction: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.state == ReconcilerState.FETCHING

    async def on_url_change(self, url: str) -> bool:
        """
        处理一次 URL 变化

        Args:
            url: 新的 URL

        Returns:
            本次响应是否被应用（过期响应或请求失败返回False）
        """
        self._generation += 1
        generation = self._generation

        # 只有停留在同一个 URL 上（重复渲染、重试）时才抑制重复修正
        if url != self.url:
            self._last_correction = None

        requested = TopicFilter.from_url(url)
        self.url = url
        self.requested = requested
        self.state = ReconcilerState.FETCHING

        try:
            try:
                payload = await self.fetch_topics(list(requested.tag_ids), requested.match)
            except TopicListingError as e:
                if generation != self._generation:
                    logger.debug(f"丢弃过期的失败响应: generation={generation}")
                    return False
                self.error = e.message
                logger.warning(f"主题列表加载失败，保留上一次结果: {e.message}")
                return False

            if generation != self._generation:
                logger.debug(f"丢弃过期响应: generation={generation}, current={self._generation}")
                return False

            self.state = ReconcilerState.RECONCILING
            resolved = TopicFilter.from_response(payload.get("filter"))
            self.resolved = resolved
            self.topics = normalize_topic_rows(payload.get("topics"))
            self.total_count = int(payload.get("total_count") or 0)
            self.error = None

            await self._reconcile(url, requested, resolved)
            return True
        finally:
            if generation == self._generation:
                self.state = ReconcilerState.IDLE

    async def retry(self) -> bool:
        """重新请求当前 URL"""
        if self.url is None:
            return False
        return await self.on_url_change(self.url)

    async def _reconcile(self, url: str, requested: TopicFilter, resolved: TopicFilter) -> None:
        """请求与解析结果不一致时替换 URL，同一个修正不会连续发出两次"""
        if requested.same_as(resolved):
            self._last_correction = None
            return

        target = build_filter_url(url, list(resolved.tag_ids), resolved.match)
        if target == url or target == self._last_correction:
            return

        self._last_correction = target
        logger.info(
            f"修正筛选条件: requested={list(requested.tag_ids)}/{requested.match}, "
            f"resolved={list(resolved.tag_ids)}/{resolved.match}"
        )
        result = self.replace_url(target)
        if inspect.isawaitable(result):
            await result
