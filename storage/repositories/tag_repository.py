"""
TagRepository - 标签Repository
"""
# 标准库导包
from typing import Optional, List, Sequence

# 第三方库导包
from sqlalchemy import select, update, and_, or_, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

# 项目内部导包
from storage.models.tag import Tag
from storage.models.tag_alias import TagAlias
from storage.models.tag_group import TagGroupMember
from storage.models.topic_tag import TopicTag
from storage.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """标签Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Tag)

    async def search_ids_by_name_or_slug(self, query: str) -> List[int]:
        """
        按名称或slug做不区分大小写的子串匹配，排除已重定向的标签

        Args:
            query: 已去除首尾空白的非空查询词

        Returns:
            匹配的标签ID列表
        """
        stmt = (
            select(Tag.id)
            .where(
                and_(
                    Tag.redirect_to_tag_id.is_(None),
                    or_(
                        Tag.name.icontains(query, autoescape=True),
                        Tag.slug.icontains(query, autoescape=True)
                    )
                )
            )
            .order_by(Tag.id.asc())
        )
        result = await self.session.execute(stmt)
        return [row[0] for row in result.all()]

    async def list_visible(
        self,
        limit: int,
        featured: Optional[bool] = None,
        restrict_ids: Optional[Sequence[int]] = None
    ) -> List[Tag]:
        """
        列出对外可见的标签：已审核通过且未重定向，按名称升序

        Args:
            limit: 返回数量上限，在最终ID集合确定后才应用
            featured: 是否推荐，None表示不筛选
            restrict_ids: 限定在这些ID内，None表示不限定

        Returns:
            标签列表
        """
        conditions = [
            Tag.status == "approved",
            Tag.redirect_to_tag_id.is_(None)
        ]
        if featured is not None:
            conditions.append(Tag.featured == featured)
        if restrict_ids is not None:
            conditions.append(Tag.id.in_(list(restrict_ids)))

        stmt = (
            select(Tag)
            .where(and_(*conditions))
            .order_by(Tag.name.asc(), Tag.id.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_slug(self, slug: str) -> Optional[Tag]:
        """根据slug获取标签"""
        results = await self.query_by_filters(filters={"slug": slug}, limit=1)
        return results[0] if results else None

    async def repoint_redirects(self, source_tag_id: int, target_tag_id: int) -> int:
        """
        把指向 source 的重定向改为指向 target，保证重定向链深度为1

        Returns:
            更新的行数
        """
        result = await self.session.execute(
            update(Tag)
            .where(Tag.redirect_to_tag_id == source_tag_id)
            .values(redirect_to_tag_id=target_tag_id)
        )
        return result.rowcount

    async def list_with_usage(self, status: Optional[str] = None) -> List[tuple[Tag, int]]:
        """
        列出未重定向的标签及其使用次数

        Args:
            status: 按状态筛选（可选）

        Returns:
            (标签, 使用次数) 列表，按名称升序
        """
        usage_count = (
            select(func.count(TopicTag.id))
            .where(TopicTag.tag_id == Tag.id)
            .correlate(Tag)
            .scalar_subquery()
        )
        stmt = select(Tag, usage_count).where(Tag.redirect_to_tag_id.is_(None))
        if status is not None:
            stmt = stmt.where(Tag.status == status)
        stmt = stmt.order_by(Tag.name.asc(), Tag.id.asc())

        result = await self.session.execute(stmt)
        return [(row[0], int(row[1] or 0)) for row in result.all()]

    async def list_canonical_options(self) -> List[dict]:
        """
        列出规范标签及其引用统计，用于合并/删除前的影响提示

        Returns:
            字典列表，包含标签与 usage/alias/group/redirect 计数
        """
        redirect_source = aliased(Tag)

        usage_count = (
            select(func.count(TopicTag.id))
            .where(TopicTag.tag_id == Tag.id)
            .correlate(Tag)
            .scalar_subquery()
        )
        alias_count = (
            select(func.count(TagAlias.id))
            .where(TagAlias.tag_id == Tag.id)
            .correlate(Tag)
            .scalar_subquery()
        )
        group_membership_count = (
            select(func.count(TagGroupMember.id))
            .where(TagGroupMember.tag_id == Tag.id)
            .correlate(Tag)
            .scalar_subquery()
        )
        redirect_reference_count = (
            select(func.count(redirect_source.id))
            .where(redirect_source.redirect_to_tag_id == Tag.id)
            .correlate(Tag)
            .scalar_subquery()
        )

        stmt = (
            select(Tag, usage_count, alias_count, group_membership_count, redirect_reference_count)
            .where(Tag.redirect_to_tag_id.is_(None))
            .order_by(Tag.name.asc(), Tag.id.asc())
        )
        result = await self.session.execute(stmt)

        options = []
        for tag, usage, aliases, groups, redirects in result.all():
            options.append({
                "tag": tag,
                "usage_count": int(usage or 0),
                "alias_count": int(aliases or 0),
                "group_membership_count": int(groups or 0),
                "redirect_reference_count": int(redirects or 0),
            })
        return options
