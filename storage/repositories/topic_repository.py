"""
TopicRepository - 主题Repository（按标签筛选的列表查询）
"""
# 标准库导包
from typing import Optional, List, Sequence, Any

# 第三方库导包
from sqlalchemy import select, and_, case, func, literal
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.tag import Tag
from storage.models.topic import Topic, TopicRead
from storage.models.topic_tag import TopicTag
from storage.repositories.base import BaseRepository


class TopicRepository(BaseRepository[Topic]):
    """主题Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Topic)

    def _matching_topic_ids(self, tag_ids: Sequence[int], match_all: bool):
        """
        构建匹配标签筛选的主题ID子查询

        关联行可能仍指向已重定向的标签，这里按规范ID（coalesce(redirect_to_tag_id, id)）比较
        """
        canonical_id = func.coalesce(Tag.redirect_to_tag_id, Tag.id)
        stmt = (
            select(TopicTag.topic_id)
            .join(Tag, Tag.id == TopicTag.tag_id)
            .where(canonical_id.in_(list(tag_ids)))
            .group_by(TopicTag.topic_id)
        )
        if match_all:
            stmt = stmt.having(func.count(func.distinct(canonical_id)) == len(tag_ids))
        return stmt

    async def list_filtered(
        self,
        tag_ids: Sequence[int],
        match_all: bool,
        page: int,
        page_size: int,
        user_id: Optional[str] = None
    ) -> List[dict[str, Any]]:
        """
        按标签筛选分页列出主题

        Args:
            tag_ids: 已解析的规范标签ID，空列表表示不筛选
            match_all: True 要求包含全部标签，False 包含任一即可
            page: 页码（从1开始）
            page_size: 每页数量
            user_id: 当前用户ID，用于计算 has_new

        Returns:
            主题行字典列表
        """
        if user_id:
            has_new = case(
                (TopicRead.id.is_(None), True),
                (TopicRead.last_read_at < Topic.last_post_at, True),
                else_=False
            )
            stmt = select(Topic, has_new).outerjoin(
                TopicRead,
                and_(TopicRead.topic_id == Topic.id, TopicRead.user_id == user_id)
            )
        else:
            stmt = select(Topic, literal(False))

        if tag_ids:
            stmt = stmt.where(Topic.id.in_(self._matching_topic_ids(tag_ids, match_all)))

        stmt = (
            stmt.order_by(Topic.last_post_at.desc(), Topic.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(stmt)

        rows = []
        for topic, topic_has_new in result.all():
            rows.append({
                "id": topic.id,
                "title": topic.title,
                "author_id": topic.author_id,
                "views": topic.views,
                "messages_count": topic.messages_count,
                "created_at": topic.created_at,
                "last_post_at": topic.last_post_at,
                "has_new": bool(topic_has_new),
            })
        return rows

    async def count_filtered(self, tag_ids: Sequence[int], match_all: bool) -> int:
        """统计匹配标签筛选的主题数量"""
        stmt = select(func.count(Topic.id))
        if tag_ids:
            stmt = stmt.where(Topic.id.in_(self._matching_topic_ids(tag_ids, match_all)))
        result = await self.session.execute(stmt)
        return int(result.scalar_one() or 0)
