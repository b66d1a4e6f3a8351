"""
TagGroupRepository - 标签分组Repository
"""
# 标准库导包
from typing import Optional, List, Sequence

# 第三方库导包
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

# 项目内部导包
from storage.models.tag_group import TagGroup, TagGroupMember
from storage.repositories.base import BaseRepository


class TagGroupRepository(BaseRepository[TagGroup]):
    """标签分组Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, TagGroup)

    async def list_groups(
        self,
        kind: Optional[str] = None,
        searchable: Optional[bool] = None
    ) -> List[TagGroup]:
        """
        列出分组及其成员，按 arrangement_order、名称排序

        Args:
            kind: 分组类型筛选，search/arrangement 同时匹配 both
            searchable: 是否可搜索筛选

        Returns:
            分组列表（成员已预加载）
        """
        stmt = select(TagGroup).options(selectinload(TagGroup.members))
        if kind is not None:
            stmt = stmt.where(TagGroup.kind.in_([kind, "both"]))
        if searchable is not None:
            stmt = stmt.where(TagGroup.searchable == searchable)
        stmt = stmt.order_by(TagGroup.arrangement_order.asc(), TagGroup.name.asc(), TagGroup.id.asc())

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_with_members(self, group_id: int) -> Optional[TagGroup]:
        """获取分组及成员"""
        stmt = (
            select(TagGroup)
            .where(TagGroup.id == group_id)
            .options(selectinload(TagGroup.members))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[TagGroup]:
        """根据slug获取分组"""
        results = await self.query_by_filters(filters={"slug": slug}, limit=1)
        return results[0] if results else None

    async def replace_members(self, group_id: int, tag_ids: Sequence[int]) -> None:
        """
        按给定顺序替换分组成员

        Args:
            group_id: 分组ID
            tag_ids: 已去重的标签ID列表，顺序即展示顺序
        """
        await self.session.execute(
            delete(TagGroupMember).where(TagGroupMember.group_id == group_id)
        )
        for position, tag_id in enumerate(tag_ids):
            self.session.add(TagGroupMember(group_id=group_id, tag_id=tag_id, position=position))
        await self.session.flush()
