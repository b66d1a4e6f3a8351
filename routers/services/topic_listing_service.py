"""
主题列表服务
按解析后的标签筛选条件列出主题，并返回规范化的筛选条件供客户端对账
"""
# 标准库导包
import logging
from typing import Any, Dict, Optional, Sequence

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# 项目内部导包
from storage.repositories.topic_repository import TopicRepository
from routers.services.tag_query_service import TagQueryService
from utils.identifiers import MATCH_ALL

# 配置日志
logger = logging.getLogger(__name__)


class TopicListingService:
    """主题列表服务类"""

    def __init__(self, session: AsyncSession, session_factory: async_sessionmaker):
        self.session = session
        self.topic_repo = TopicRepository(session)
        self.tag_query_service = TagQueryService(session, session_factory)

    async def list_topics(
        self,
        tag_ids: Sequence[int],
        match: str,
        page: int,
        page_size: int,
        user_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        按标签筛选列出主题

        先解析筛选条件（丢弃不存在/未审核的ID，重定向映射到目标标签），
        解析结果为空时不做筛选。

        Args:
            tag_ids: 请求的标签ID
            match: 匹配模式 any/all
            page: 页码
            page_size: 每页数量
            user_id: 当前用户ID

        Returns:
            包含 topics、page、page_size、total_count、filter 的字典
        """
        resolved = await self.tag_query_service.resolve_filter(tag_ids, match)
        match_all = resolved.match == MATCH_ALL

        topics = await self.topic_repo.list_filtered(
            tag_ids=resolved.tag_ids,
            match_all=match_all,
            page=page,
            page_size=page_size,
            user_id=user_id
        )
        total_count = await self.topic_repo.count_filtered(resolved.tag_ids, match_all)

        return {
            "topics": topics,
            "page": page,
            "page_size": page_size,
            "total_count": total_count,
            "filter": {
                "tag_ids": resolved.tag_ids,
                "match": resolved.match,
            },
        }
