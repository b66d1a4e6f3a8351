"""
标签分组服务
"""
# 标准库导包
import logging
from typing import Any, List, Optional

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import NotFoundError, ValidationError
from storage.models.tag_group import TagGroup, TAG_GROUP_KINDS
from storage.repositories.tag_group_repository import TagGroupRepository
from storage.repositories.tag_repository import TagRepository
from utils.identifiers import parse_id_values
from utils.slugs import slugify

# 配置日志
logger = logging.getLogger(__name__)


def group_to_dict(group: TagGroup) -> dict:
    """分组转换为响应字典，成员按 position 排序"""
    members = sorted(group.members, key=lambda member: (member.position, member.id))
    return {
        "group_id": group.id,
        "name": group.name,
        "slug": group.slug,
        "description": group.description,
        "searchable": group.searchable,
        "kind": group.kind,
        "arrangement_order": group.arrangement_order,
        "member_tag_ids": [member.tag_id for member in members],
    }


class TagGroupService:
    """标签分组服务类"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.group_repo = TagGroupRepository(session)
        self.tag_repo = TagRepository(session)

    async def list_groups(self, kind: Optional[str] = None, searchable: Optional[bool] = None) -> List[TagGroup]:
        """列出分组，kind 非法时忽略该筛选"""
        if kind not in TAG_GROUP_KINDS:
            kind = None
        return await self.group_repo.list_groups(kind=kind, searchable=searchable)

    async def upsert_group(
        self,
        name: str,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        searchable: bool = True,
        kind: str = "both",
        arrangement_order: int = 0,
        group_id: Optional[int] = None
    ) -> TagGroup:
        """
        创建或更新分组

        Args:
            group_id: 指定时更新该分组，否则创建

        Returns:
            分组（成员已加载）
        """
        normalized_name = (name or "").strip()
        if not normalized_name:
            raise ValidationError("Group name is required")
        if kind not in TAG_GROUP_KINDS:
            raise ValidationError(f"Invalid group kind: {kind}")

        normalized_slug = slugify(slug or normalized_name)
        if not normalized_slug:
            raise ValidationError("Invalid slug")

        conflict = await self.group_repo.get_by_slug(normalized_slug)
        if conflict is not None and conflict.id != group_id:
            raise ValidationError(f"Slug already in use: {normalized_slug}")

        values = {
            "name": normalized_name,
            "slug": normalized_slug,
            "description": (description or "").strip() or None,
            "searchable": searchable,
            "kind": kind,
            "arrangement_order": arrangement_order,
        }

        if group_id is not None:
            if await self.group_repo.update_by_id(group_id, **values) is None:
                raise NotFoundError("Tag group not found")
            logger.info(f"更新标签分组: group_id={group_id}")
        else:
            group = await self.group_repo.create(**values)
            group_id = group.id
            logger.info(f"创建标签分组: group_id={group_id}, slug={normalized_slug}")

        return await self.group_repo.get_with_members(group_id)

    async def set_members(self, group_id: int, raw_tag_ids: Any) -> TagGroup:
        """
        按顺序设置分组成员

        成员关系不改变标签的状态或重定向；不存在的标签ID报错
        """
        if await self.group_repo.get_by_id(group_id) is None:
            raise NotFoundError("Tag group not found")

        tag_ids = parse_id_values(raw_tag_ids)
        existing_ids = {tag.id for tag in await self.tag_repo.get_by_ids(tag_ids)}
        unknown_ids = [tag_id for tag_id in tag_ids if tag_id not in existing_ids]
        if unknown_ids:
            raise ValidationError(f"Unknown tag ids: {', '.join(str(tag_id) for tag_id in unknown_ids)}")

        await self.group_repo.replace_members(group_id, tag_ids)
        logger.info(f"设置分组成员: group_id={group_id}, tag_ids={tag_ids}")
        return await self.group_repo.get_with_members(group_id)

    async def delete_group(self, group_id: int) -> bool:
        """删除分组（成员随之删除）"""
        group = await self.group_repo.get_with_members(group_id)
        if group is None:
            raise NotFoundError("Tag group not found")
        await self.session.delete(group)
        await self.session.flush()
        logger.info(f"删除标签分组: group_id={group_id}")
        return True
