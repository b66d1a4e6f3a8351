"""
标签管理服务
处理标签创建、审核、合并（重定向）、别名维护以及规范标签统计
"""
# 标准库导包
import logging
from typing import Any, Dict, List, Optional

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError
)
from models import UserInfo
from storage.models.tag import Tag
from storage.models.tag_alias import TagAlias, normalize_alias
from storage.repositories.profile_repository import ProfileRepository
from storage.repositories.tag_alias_repository import TagAliasRepository
from storage.repositories.tag_repository import TagRepository
from utils.slugs import slugify

# 配置日志
logger = logging.getLogger(__name__)

# 审核动作 -> 要更新的字段
MODERATION_ACTIONS: Dict[str, Dict[str, Any]] = {
    "approve": {"status": "approved"},
    "reject": {"status": "rejected"},
    "hide": {"status": "hidden"},
    "feature": {"featured": True},
    "unfeature": {"featured": False},
}


class TagAdminService:
    """标签管理服务类"""

    def __init__(self, session: AsyncSession):
        """
        初始化标签管理服务

        Args:
            session: 数据库会话
        """
        self.session = session
        self.tag_repo = TagRepository(session)
        self.alias_repo = TagAliasRepository(session)
        self.profile_repo = ProfileRepository(session)

    async def require_admin(self, user_info: Optional[UserInfo]) -> UserInfo:
        """
        校验管理员身份

        Raises:
            AuthenticationError: 未登录
            PermissionDeniedError: 不是管理员
        """
        if user_info is None:
            raise AuthenticationError()
        if not await self.profile_repo.is_admin(user_info.user_id):
            raise PermissionDeniedError()
        return user_info

    async def _get_tag_or_404(self, tag_id: int) -> Tag:
        tag = await self.tag_repo.get_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        return tag

    async def _unique_slug(self, name: str) -> str:
        """根据名称生成未被占用的slug，冲突时追加数字后缀"""
        base = slugify(name) or "tag"
        candidate = base
        suffix = 2
        while await self.tag_repo.get_by_slug(candidate) is not None:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def create_tag(self, name: str, slug: Optional[str] = None, icon: Optional[str] = None) -> Tag:
        """
        创建标签，新标签状态为 unreviewed

        Args:
            name: 标签名称
            slug: 指定slug（可选），已被占用时报错
            icon: 图标（可选）

        Returns:
            创建的标签
        """
        normalized_name = (name or "").strip()
        if not normalized_name:
            raise ValidationError("Tag name is required")

        if slug and slug.strip():
            normalized_slug = slugify(slug)
            if not normalized_slug:
                raise ValidationError("Invalid slug")
            if await self.tag_repo.get_by_slug(normalized_slug) is not None:
                raise ValidationError(f"Slug already in use: {normalized_slug}")
        else:
            normalized_slug = await self._unique_slug(normalized_name)

        tag = await self.tag_repo.create(
            name=normalized_name,
            slug=normalized_slug,
            status="unreviewed",
            featured=False,
            icon=(icon or "").strip()
        )
        logger.info(f"创建标签: tag_id={tag.id}, slug={tag.slug}")
        return tag

    async def moderate_tag(self, tag_id: int, action: str) -> Tag:
        """
        审核标签

        Args:
            tag_id: 标签ID
            action: approve/reject/hide/feature/unfeature

        Returns:
            更新后的标签
        """
        changes = MODERATION_ACTIONS.get((action or "").strip().lower())
        if changes is None:
            raise ValidationError(f"Unknown moderation action: {action}")

        await self._get_tag_or_404(tag_id)
        tag = await self.tag_repo.update_by_id(tag_id, **changes)
        logger.info(f"审核标签: tag_id={tag_id}, action={action}")
        return tag

    async def merge_tags(self, source_tag_id: int, target_tag_id: int) -> Tag:
        """
        合并标签：source 重定向到 target

        保持重定向链深度为1：target 不能是已重定向的标签，原本指向 source 的重定向改为指向 target。
        source 的别名转移给 target，source 的名称作为 target 的新别名（未被占用时）。
        已有的主题关联行不回填。

        Args:
            source_tag_id: 被合并的标签ID
            target_tag_id: 目标标签ID

        Returns:
            更新后的 source 标签
        """
        if source_tag_id == target_tag_id:
            raise ValidationError("Cannot merge a tag into itself")

        source = await self._get_tag_or_404(source_tag_id)
        target = await self._get_tag_or_404(target_tag_id)
        if target.redirect_to_tag_id is not None:
            raise ValidationError("Merge target is itself redirected")

        await self.tag_repo.repoint_redirects(source.id, target.id)
        moved_aliases = await self.alias_repo.reassign(source.id, target.id)

        if await self.alias_repo.get_by_normalized(source.name) is None:
            await self.alias_repo.add_alias(target.id, source.name)

        source = await self.tag_repo.update_by_id(source.id, redirect_to_tag_id=target.id)
        logger.info(
            f"合并标签: source={source_tag_id}, target={target_tag_id}, moved_aliases={moved_aliases}"
        )
        return source

    async def list_aliases(self, tag_id: int) -> List[TagAlias]:
        """获取标签的别名列表"""
        await self._get_tag_or_404(tag_id)
        return await self.alias_repo.list_by_tag_id(tag_id)

    async def add_alias(self, tag_id: int, alias: str) -> TagAlias:
        """
        为标签添加别名

        空白别名、与已有别名（规范化后）重复时报错
        """
        if not normalize_alias(alias):
            raise ValidationError("Alias is required")

        await self._get_tag_or_404(tag_id)

        existing = await self.alias_repo.get_by_normalized(alias)
        if existing is not None:
            raise ValidationError(f"Alias already exists: {existing.alias}")

        created = await self.alias_repo.add_alias(tag_id, alias)
        logger.info(f"添加别名: tag_id={tag_id}, alias={created.alias}")
        return created

    async def delete_alias(self, alias_id: int) -> bool:
        """删除别名"""
        deleted = await self.alias_repo.delete_by_id(alias_id)
        if not deleted:
            raise NotFoundError("Alias not found")
        logger.info(f"删除别名: alias_id={alias_id}")
        return deleted

    async def list_canonical_options(self) -> List[dict]:
        """列出规范标签及引用统计"""
        return await self.tag_repo.list_canonical_options()

    async def list_unreviewed(self) -> List[tuple[Tag, int]]:
        """列出待审核标签及使用次数"""
        return await self.tag_repo.list_with_usage(status="unreviewed")
