"""
标签查询路由
提供筛选标签（即搜即得）和自动补全两种标签列表接口
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# 项目内部导包
from config import settings
from models import (
    UserInfo,
    TagChipListResponse,
    TagChipResponse,
    TagOptionListResponse,
    TagOptionResponse
)
from storage.database import get_session, get_session_factory
from routers.services.tag_query_service import TagQueryService
from routers.utils import to_http_exception
from utils import get_current_user
from utils.identifiers import parse_boolean, parse_id_list, parse_limit

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    tags=["标签查询"]
)


@router.get("/tags", response_model=TagChipListResponse, summary="筛选标签列表")
async def get_tag_chips(
    status: Optional[str] = Query(None, description="状态，只有approved会返回数据"),
    query: Optional[str] = Query(None, description="名称/slug/别名查询词"),
    featured: Optional[str] = Query(None, description="是否推荐：true/false/1/0"),
    session: AsyncSession = Depends(get_session),
    session_factory: async_sessionmaker = Depends(get_session_factory)
):
    """
    筛选标签/即搜即得接口，固定页大小
    """
    try:
        tag_query_service = TagQueryService(session, session_factory)
        tags = await tag_query_service.search_tags(
            status=status,
            query=(query or "").strip(),
            limit=settings.TAG_CHIP_PAGE_SIZE,
            featured=parse_boolean(featured)
        )

        return TagChipListResponse(
            tags=[TagChipResponse(id=tag.id, name=tag.name, slug=tag.slug) for tag in tags]
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取筛选标签失败")


@router.get("/api/tags", response_model=TagOptionListResponse, summary="标签自动补全")
async def get_tag_options(
    status: Optional[str] = Query(None, description="状态，只有approved会返回数据"),
    query: Optional[str] = Query(None, description="名称/slug/别名查询词"),
    limit: Optional[str] = Query(None, description="返回数量，默认20，最大100"),
    featured: Optional[str] = Query(None, description="是否推荐：true/false/1/0"),
    ids: Optional[str] = Query(None, description="限定的标签ID，逗号分隔"),
    user_info: Optional[UserInfo] = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    session_factory: async_sessionmaker = Depends(get_session_factory)
):
    """
    自动补全接口，图标按当前用户的旧版图标偏好解析
    """
    try:
        tag_query_service = TagQueryService(session, session_factory)
        tags = await tag_query_service.search_tags(
            status=status,
            query=(query or "").strip(),
            limit=parse_limit(
                limit,
                fallback=settings.TAG_LOOKUP_DEFAULT_LIMIT,
                maximum=settings.TAG_LOOKUP_MAX_LIMIT
            ),
            featured=parse_boolean(featured),
            ids=parse_id_list(ids)
        )
        if not tags:
            return TagOptionListResponse(tags=[])

        preferences = await tag_query_service.get_icon_preferences(
            user_info.user_id if user_info else None
        )
        options = tag_query_service.resolve_icons(tags, preferences)

        return TagOptionListResponse(
            tags=[TagOptionResponse(**option) for option in options]
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取标签选项失败")
