"""
标签查询服务
处理标签列表/搜索以及主题筛选条件的解析
"""
# 标准库导包
import logging
from dataclasses import dataclass, field
from typing import Optional, List, Sequence

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# 项目内部导包
from config import settings
from storage.models.tag import Tag
from storage.repositories.tag_repository import TagRepository
from storage.repositories.profile_repository import ProfileRepository
from routers.services.alias_resolver import AliasResolver
from utils.icons import IconPreferences, describe_icon, resolve_tag_icon
from utils.identifiers import MATCH_ANY

# 配置日志
logger = logging.getLogger(__name__)


@dataclass
class ResolvedFilter:
    """服务端解析后的标签筛选条件"""
    tag_ids: List[int] = field(default_factory=list)
    match: str = MATCH_ANY


class TagQueryService:
    """标签查询服务类"""

    def __init__(self, session: AsyncSession, session_factory: async_sessionmaker):
        """
        初始化标签查询服务

        Args:
            session: 数据库会话
            session_factory: 会话工厂（别名解析并发查询使用）
        """
        self.session = session
        self.tag_repo = TagRepository(session)
        self.profile_repo = ProfileRepository(session)
        self.alias_resolver = AliasResolver(session_factory)

    async def search_tags(
        self,
        status: Optional[str],
        query: str,
        limit: int,
        featured: Optional[bool] = None,
        ids: Optional[Sequence[int]] = None
    ) -> List[Tag]:
        """
        列出/搜索对外可见的标签

        只有 approved 的标签会通过这里暴露：status 存在且不是 approved 时直接返回空列表，不做任何查询。
        limit 在最终ID集合确定后才应用，别名匹配阶段不截断。

        Args:
            status: 状态参数（可选）
            query: 已去除首尾空白的查询词
            limit: 返回数量
            featured: 是否推荐，None表示不筛选
            ids: 限定的标签ID，空表示不限定

        Returns:
            标签列表，按名称升序
        """
        if status and status != "approved":
            return []

        restrict_ids: Optional[List[int]] = list(ids) if ids else None

        if query:
            matched_ids = await self.alias_resolver.resolve(query)
            if not matched_ids:
                return []
            if restrict_ids is not None:
                allowed = set(restrict_ids)
                matched_ids = [tag_id for tag_id in matched_ids if tag_id in allowed]
                if not matched_ids:
                    return []
            restrict_ids = matched_ids

        return await self.tag_repo.list_visible(
            limit=limit,
            featured=featured,
            restrict_ids=restrict_ids
        )

    async def get_icon_preferences(self, user_id: Optional[str]) -> IconPreferences:
        """
        构建用户的图标偏好

        未登录或没有资料记录时默认启用旧版图标
        """
        legacy_icons_enabled = True
        if user_id:
            legacy_icons_enabled = await self.profile_repo.legacy_icons_enabled(user_id)
        return IconPreferences(
            legacy_icons_enabled=legacy_icons_enabled,
            default_icon=settings.DEFAULT_TAG_ICON
        )

    @staticmethod
    def resolve_icons(tags: Sequence[Tag], preferences: IconPreferences) -> List[dict]:
        """把标签转换为带展示图标的选项"""
        options = []
        for tag in tags:
            display = describe_icon(resolve_tag_icon(tag, preferences), preferences.default_icon)
            options.append({
                "id": tag.id,
                "name": tag.name,
                "slug": tag.slug,
                "icon": display.value,
                "icon_kind": display.kind,
            })
        return options

    async def resolve_filter(self, tag_ids: Sequence[int], match: str) -> ResolvedFilter:
        """
        解析主题筛选条件

        每个请求的ID先按一层重定向映射到目标标签，只有存在、已审核通过且未重定向的标签会保留；
        结果去重并保持请求顺序。

        Args:
            tag_ids: 请求的标签ID（已规范化）
            match: 匹配模式 any/all

        Returns:
            解析后的筛选条件
        """
        if not tag_ids:
            return ResolvedFilter(tag_ids=[], match=match)

        requested = {tag.id: tag for tag in await self.tag_repo.get_by_ids(tag_ids)}

        redirect_targets = [
            tag.redirect_to_tag_id
            for tag in requested.values()
            if tag.redirect_to_tag_id is not None and tag.redirect_to_tag_id not in requested
        ]
        targets = {tag.id: tag for tag in await self.tag_repo.get_by_ids(redirect_targets)}
        known = {**targets, **requested}

        resolved: List[int] = []
        for tag_id in tag_ids:
            tag = known.get(tag_id)
            if tag is None:
                continue
            if tag.is_redirected:
                tag = known.get(tag.redirect_to_tag_id)
            if tag is None or tag.is_redirected or tag.status != "approved":
                continue
            if tag.id not in resolved:
                resolved.append(tag.id)

        if resolved != list(tag_ids):
            logger.info(f"标签筛选已修正: requested={list(tag_ids)}, resolved={resolved}")

        return ResolvedFilter(tag_ids=resolved, match=match)
