"""
主题列表路由
按标签筛选列出主题，响应中携带服务端解析后的筛选条件
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# 项目内部导包
from config import settings
from models import UserInfo, TopicListResponse
from storage.database import get_session, get_session_factory
from routers.services.topic_listing_service import TopicListingService
from routers.utils import to_http_exception
from utils import get_current_user
from utils.identifiers import parse_id_list, parse_limit, parse_match_mode, parse_page

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/api/topics",
    tags=["主题列表"]
)


@router.get("", response_model=TopicListResponse, summary="按标签筛选主题列表")
async def list_topics(
    page: Optional[str] = Query(None, description="页码，从1开始"),
    page_size: Optional[str] = Query(None, description="每页数量"),
    tag_ids: Optional[str] = Query(None, description="标签ID，逗号分隔"),
    match: Optional[str] = Query(None, description="匹配模式：any/all"),
    user_info: Optional[UserInfo] = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    session_factory: async_sessionmaker = Depends(get_session_factory)
):
    """
    按标签筛选主题

    filter 字段是服务端解析后的规范筛选条件，客户端据此修正URL
    """
    try:
        topic_listing_service = TopicListingService(session, session_factory)
        result = await topic_listing_service.list_topics(
            tag_ids=parse_id_list(tag_ids),
            match=parse_match_mode(match),
            page=parse_page(page),
            page_size=parse_limit(
                page_size,
                fallback=settings.TOPIC_PAGE_SIZE,
                maximum=settings.TOPIC_MAX_PAGE_SIZE
            ),
            user_id=user_info.user_id if user_info else None
        )
        return TopicListResponse(**result)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取主题列表失败")
