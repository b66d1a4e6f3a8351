"""
基础Repository类
"""
# 标准库导包
from typing import TypeVar, Generic, Optional, List, Dict, Any, Sequence
from abc import ABC

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_
from sqlalchemy.sql import func

# 项目内部导包
from storage.database import Base

# 泛型类型
ModelType = TypeVar('ModelType', bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """基础Repository类，封装按主键读写和简单条件查询"""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        """
        Args:
            session: 当前请求的数据库会话
            model: 数据库模型类
        """
        self.session = session
        self.model = model

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """按主键获取，不存在返回None"""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def get_by_ids(self, ids: Sequence[Any]) -> List[ModelType]:
        """
        按主键批量获取

        结果不保证与 ids 顺序一致，不存在的ID直接缺席
        """
        if not ids:
            return []
        result = await self.session.execute(
            select(self.model).where(self.model.id.in_(list(ids)))
        )
        return list(result.scalars().all())

    async def create(self, **kwargs) -> ModelType:
        """
        插入一条记录并刷新，返回带数据库默认值（ID、创建时间）的实例

        Args:
            **kwargs: 模型字段值
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update_by_id(self, id: Any, **kwargs) -> Optional[ModelType]:
        """
        按主键更新

        Returns:
            刷新后的实例，记录不存在时返回None
        """
        # MySQL没有RETURNING，更新后刷新已加载的实例
        instance = await self.get_by_id(id)
        if instance is None:
            return None

        await self.session.execute(
            update(self.model).where(self.model.id == id).values(**kwargs)
        )
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete_by_id(self, id: Any) -> bool:
        """按主键删除，返回是否删除了记录"""
        result = await self.session.execute(
            delete(self.model).where(self.model.id == id)
        )
        return result.rowcount > 0

    async def count(self, **filters) -> int:
        """按等值条件计数"""
        stmt = select(func.count(self.model.id))
        conditions = self._build_filter_conditions(filters)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        result = await self.session.execute(stmt)
        return int(result.scalar_one() or 0)

    def _build_filter_conditions(self, filters: Dict[str, Any]) -> List:
        """
        把过滤字典转换为条件列表

        值为None时生成 IS NULL，列表/元组生成 IN，其余为等值比较；模型上不存在的字段忽略
        """
        conditions = []
        for key, value in filters.items():
            column = getattr(self.model, key, None)
            if column is None:
                continue
            if value is None:
                conditions.append(column.is_(None))
            elif isinstance(value, (list, tuple)):
                conditions.append(column.in_(value))
            else:
                conditions.append(column == value)
        return conditions

    async def query_by_filters(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """
        按过滤条件查询

        Args:
            filters: 过滤条件字典
            limit: 返回数量上限
            order_by: 升序排序字段，未指定时按主键

        Returns:
            模型实例列表
        """
        stmt = select(self.model)
        conditions = self._build_filter_conditions(filters)
        if conditions:
            stmt = stmt.where(and_(*conditions))

        column = getattr(self.model, order_by, None) if order_by else None
        stmt = stmt.order_by((column if column is not None else self.model.id).asc())

        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())
