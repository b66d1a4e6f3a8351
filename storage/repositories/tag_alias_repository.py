"""
TagAliasRepository - 标签别名Repository
"""
# 标准库导包
from typing import Optional, List

# 第三方库导包
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.tag_alias import TagAlias, normalize_alias
from storage.repositories.base import BaseRepository


class TagAliasRepository(BaseRepository[TagAlias]):
    """标签别名Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, TagAlias)

    async def find_tag_ids_containing(self, query: str) -> List[int]:
        """
        查找别名文本包含查询词（不区分大小写）的标签ID

        Args:
            query: 非空查询词

        Returns:
            别名所属的标签ID列表（可能重复，由调用方去重）
        """
        stmt = (
            select(TagAlias.tag_id)
            .where(TagAlias.normalized_alias.contains(normalize_alias(query), autoescape=True))
            .order_by(TagAlias.tag_id.asc())
        )
        result = await self.session.execute(stmt)
        return [row[0] for row in result.all()]

    async def list_by_tag_id(self, tag_id: int) -> List[TagAlias]:
        """获取标签的所有别名，按创建顺序"""
        stmt = (
            select(TagAlias)
            .where(TagAlias.tag_id == tag_id)
            .order_by(TagAlias.created_at.asc(), TagAlias.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_normalized(self, alias: str) -> Optional[TagAlias]:
        """根据规范化别名获取记录"""
        results = await self.query_by_filters(
            filters={"normalized_alias": normalize_alias(alias)},
            limit=1
        )
        return results[0] if results else None

    async def add_alias(self, tag_id: int, alias: str) -> TagAlias:
        """创建别名，规范化形式在这里统一计算"""
        return await self.create(
            tag_id=tag_id,
            alias=alias.strip(),
            normalized_alias=normalize_alias(alias)
        )

    async def reassign(self, source_tag_id: int, target_tag_id: int) -> int:
        """
        把 source 的别名转移给 target

        Returns:
            转移的别名数量
        """
        result = await self.session.execute(
            update(TagAlias)
            .where(TagAlias.tag_id == source_tag_id)
            .values(tag_id=target_tag_id)
        )
        return result.rowcount
