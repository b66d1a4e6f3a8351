"""
别名解析服务
把自由文本查询映射为匹配的规范标签ID集合
"""
# 标准库导包
import asyncio
import logging
from typing import List

# 第三方库导包
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

# 项目内部导包
from exceptions import StorageError
from storage.repositories.tag_repository import TagRepository
from storage.repositories.tag_alias_repository import TagAliasRepository
from utils.identifiers import parse_id_values

# 配置日志
logger = logging.getLogger(__name__)


class AliasResolver:
    """别名解析服务"""

    def __init__(self, session_factory: async_sessionmaker):
        """
        初始化别名解析服务

        Args:
            session_factory: 会话工厂，两路查询各自使用独立会话并发执行
        """
        self.session_factory = session_factory

    async def _match_tags(self, query: str) -> List[int]:
        """名称/slug直接匹配（排除已重定向标签）"""
        async with self.session_factory() as session:
            return await TagRepository(session).search_ids_by_name_or_slug(query)

    async def _match_aliases(self, query: str) -> List[int]:
        """别名匹配，返回别名所属标签ID"""
        async with self.session_factory() as session:
            return await TagAliasRepository(session).find_tag_ids_containing(query)

    async def resolve(self, query: str) -> List[int]:
        """
        解析查询词

        两路查询并发执行，全部完成后再取并集；任意一路失败则整个解析失败，
        不返回部分结果。空列表是合法的"无结果"信号，调用方应直接返回空结果。

        Args:
            query: 已去除首尾空白的查询词

        Returns:
            去重后的标签ID列表（直接匹配在前）

        Raises:
            StorageError: 任意一路查询失败
        """
        query = (query or "").strip()
        if not query:
            return []

        results = await asyncio.gather(
            self._match_tags(query),
            self._match_aliases(query),
            return_exceptions=True
        )

        for result in results:
            if isinstance(result, BaseException):
                logger.error(f"别名解析查询失败: query={query}, error={str(result)}")
                if isinstance(result, SQLAlchemyError):
                    raise StorageError(str(getattr(result, "orig", None) or result)) from result
                raise result

        direct_ids, alias_ids = results
        return parse_id_values(list(direct_ids) + list(alias_ids))
