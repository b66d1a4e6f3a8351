"""
主题标签路由
提供主题标签的查询、添加、移除接口
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from models import UserInfo, TopicTagListResponse, TagChipResponse
from storage.database import get_session
from routers.services.topic_tag_service import TopicTagService, parse_topic_id
from routers.utils import to_http_exception
from utils import get_current_user

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/api/topics",
    tags=["主题标签"]
)


def _to_response(topic_id: int, tags) -> TopicTagListResponse:
    """转换为响应格式"""
    return TopicTagListResponse(
        topic_id=topic_id,
        tags=[TagChipResponse(id=tag.id, name=tag.name, slug=tag.slug) for tag in tags]
    )


@router.get("/{topic_id}/tags", response_model=TopicTagListResponse, summary="获取主题标签")
async def get_topic_tags(
    topic_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    获取主题当前关联的标签，按关联创建时间升序
    """
    try:
        parsed_topic_id = parse_topic_id(topic_id)

        topic_tag_service = TopicTagService(session)
        tags = await topic_tag_service.list_tags(parsed_topic_id)
        return _to_response(parsed_topic_id, tags)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取主题标签失败")


@router.post("/{topic_id}/tags", response_model=TopicTagListResponse, summary="为主题添加标签")
async def attach_topic_tags(
    topic_id: str,
    request: Request,
    user_info: Optional[UserInfo] = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """
    为主题添加标签

    请求体 {"tag_ids": [...]}；重复添加已关联的标签不会报错，返回完整的当前标签列表
    """
    try:
        try:
            payload = await request.json()
        except ValueError:
            payload = None

        topic_tag_service = TopicTagService(session)
        parsed_topic_id, tags = await topic_tag_service.attach_tags(topic_id, payload, user_info)
        return _to_response(parsed_topic_id, tags)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "添加主题标签失败")


@router.delete("/{topic_id}/tags/{tag_id}", response_model=TopicTagListResponse, summary="移除主题标签")
async def detach_topic_tag(
    topic_id: str,
    tag_id: str,
    user_info: Optional[UserInfo] = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """
    从主题移除标签，返回完整的当前标签列表
    """
    try:
        topic_tag_service = TopicTagService(session)
        parsed_topic_id, tags = await topic_tag_service.detach_tag(topic_id, tag_id, user_info)
        return _to_response(parsed_topic_id, tags)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "移除主题标签失败")
