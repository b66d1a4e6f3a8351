"""
TopicTagRepository - 主题标签关联Repository
"""
# 标准库导包
from datetime import datetime
from typing import List, Optional, Sequence

# 第三方库导包
from sqlalchemy import select, delete, insert, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

# 项目内部导包
from storage.models.tag import Tag
from storage.models.topic_tag import TopicTag
from storage.repositories.base import BaseRepository
from utils.joins import first_or_none


class TopicTagRepository(BaseRepository[TopicTag]):
    """主题标签关联Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, TopicTag)

    async def get_tags_by_topic_id(self, topic_id: int) -> List[Tag]:
        """
        根据主题ID获取所有标签

        按关联创建时间升序（最早关联的在前），时间相同时按关联行ID

        Args:
            topic_id: 主题ID

        Returns:
            标签列表
        """
        query = (
            select(TopicTag)
            .where(TopicTag.topic_id == topic_id)
            .options(selectinload(TopicTag.tag))
            .order_by(TopicTag.created_at.asc(), TopicTag.id.asc())
        )

        result = await self.session.execute(query)
        topic_tags = list(result.scalars().all())

        tags = []
        for topic_tag in topic_tags:
            tag = first_or_none(topic_tag.tag)
            if tag is not None:
                tags.append(tag)
        return tags

    async def insert_ignore(
        self,
        topic_id: int,
        tag_ids: Sequence[int],
        created_by: Optional[str]
    ) -> None:
        """
        幂等插入关联行，(topic_id, tag_id) 已存在的行被静默忽略

        依赖唯一约束 uq_topic_tag；MySQL 使用 INSERT IGNORE，SQLite 使用 INSERT OR IGNORE

        Args:
            topic_id: 主题ID
            tag_ids: 标签ID列表
            created_by: 操作用户ID
        """
        if not tag_ids:
            return

        now = datetime.utcnow()
        rows = [
            {
                "topic_id": topic_id,
                "tag_id": tag_id,
                "created_by": created_by,
                "created_at": now,
            }
            for tag_id in tag_ids
        ]
        stmt = (
            insert(TopicTag.__table__)
            .prefix_with("IGNORE", dialect="mysql")
            .prefix_with("OR IGNORE", dialect="sqlite")
        )
        await self.session.execute(stmt, rows)

    async def remove_tag_from_topic(self, topic_id: int, tag_id: int) -> bool:
        """
        从主题移除标签

        Returns:
            是否删除了记录
        """
        result = await self.session.execute(
            delete(TopicTag).where(
                and_(
                    TopicTag.topic_id == topic_id,
                    TopicTag.tag_id == tag_id
                )
            )
        )
        return result.rowcount > 0

    async def count_for_pair(self, topic_id: int, tag_id: int) -> int:
        """统计某个 (topic_id, tag_id) 的关联行数"""
        return await self.count(topic_id=topic_id, tag_id=tag_id)
