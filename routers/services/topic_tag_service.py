"""
主题标签关联服务
读写主题与标签的多对多关联，保证插入幂等、结果顺序稳定
"""
# 标准库导包
import logging
from typing import Any, Optional, List

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from exceptions import AuthenticationError, NotFoundError, ValidationError
from models import UserInfo
from storage.models.tag import Tag
from storage.repositories.tag_repository import TagRepository
from storage.repositories.topic_repository import TopicRepository
from storage.repositories.topic_tag_repository import TopicTagRepository
from utils.identifiers import parse_id_values, parse_positive_int

# 配置日志
logger = logging.getLogger(__name__)


def parse_topic_id(raw: Any) -> int:
    """解析路径中的主题ID，非法时抛出校验异常"""
    topic_id = parse_positive_int(raw)
    if topic_id is None:
        raise ValidationError("Invalid topic id")
    return topic_id


def parse_tag_ids_payload(payload: Any) -> List[int]:
    """
    从请求体解析 tag_ids

    请求体不是对象、没有 tag_ids 字段或解析后为空时抛出校验异常
    """
    raw_ids = payload.get("tag_ids") if isinstance(payload, dict) else None
    tag_ids = parse_id_values(raw_ids)
    if not tag_ids:
        raise ValidationError("tag_ids must contain at least one id")
    return tag_ids


class TopicTagService:
    """主题标签关联服务类"""

    def __init__(self, session: AsyncSession):
        """
        初始化主题标签关联服务

        Args:
            session: 数据库会话
        """
        self.session = session
        self.tag_repo = TagRepository(session)
        self.topic_repo = TopicRepository(session)
        self.topic_tag_repo = TopicTagRepository(session)

    async def list_tags(self, topic_id: int) -> List[Tag]:
        """
        获取主题当前关联的标签，按关联创建时间升序

        Args:
            topic_id: 主题ID

        Returns:
            标签列表
        """
        return await self.topic_tag_repo.get_tags_by_topic_id(topic_id)

    async def attach_tags(
        self,
        raw_topic_id: Any,
        payload: Any,
        user_info: Optional[UserInfo]
    ) -> tuple[int, List[Tag]]:
        """
        为主题添加标签

        校验顺序：主题ID -> tag_ids -> 登录状态，全部在访问存储之前完成。
        重复添加已关联的标签是无操作；插入后重新读取并返回完整的当前关联列表。

        Args:
            raw_topic_id: 路径中的原始主题ID
            payload: 请求体JSON
            user_info: 当前用户

        Returns:
            (主题ID, 当前标签列表)
        """
        topic_id = parse_topic_id(raw_topic_id)
        tag_ids = parse_tag_ids_payload(payload)
        if user_info is None:
            raise AuthenticationError()

        if await self.topic_repo.get_by_id(topic_id) is None:
            raise NotFoundError("Topic not found")

        existing_ids = {tag.id for tag in await self.tag_repo.get_by_ids(tag_ids)}
        unknown_ids = [tag_id for tag_id in tag_ids if tag_id not in existing_ids]
        if unknown_ids:
            raise ValidationError(f"Unknown tag ids: {', '.join(str(tag_id) for tag_id in unknown_ids)}")

        await self.topic_tag_repo.insert_ignore(topic_id, tag_ids, created_by=user_info.user_id)
        await self.session.flush()

        logger.info(f"主题添加标签: topic_id={topic_id}, tag_ids={tag_ids}, user_id={user_info.user_id}")

        return topic_id, await self.list_tags(topic_id)

    async def detach_tag(
        self,
        raw_topic_id: Any,
        raw_tag_id: Any,
        user_info: Optional[UserInfo]
    ) -> tuple[int, List[Tag]]:
        """
        从主题移除标签，不存在的关联视为已移除

        Returns:
            (主题ID, 当前标签列表)
        """
        topic_id = parse_topic_id(raw_topic_id)
        tag_id = parse_positive_int(raw_tag_id)
        if tag_id is None:
            raise ValidationError("Invalid tag id")
        if user_info is None:
            raise AuthenticationError()

        removed = await self.topic_tag_repo.remove_tag_from_topic(topic_id, tag_id)
        if removed:
            logger.info(f"主题移除标签: topic_id={topic_id}, tag_id={tag_id}, user_id={user_info.user_id}")

        return topic_id, await self.list_tags(topic_id)
