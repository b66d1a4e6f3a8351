"""
标签分组路由
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from models import TagGroupListResponse, TagGroupResponse
from storage.database import get_session
from routers.services.tag_group_service import TagGroupService, group_to_dict
from routers.utils import to_http_exception
from utils.identifiers import parse_boolean

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/api/tag-groups",
    tags=["标签分组"]
)


@router.get("", response_model=TagGroupListResponse, summary="获取标签分组")
async def list_tag_groups(
    kind: Optional[str] = Query(None, description="类型：search/arrangement"),
    searchable: Optional[str] = Query(None, description="是否可搜索：true/false/1/0"),
    session: AsyncSession = Depends(get_session)
):
    """
    获取标签分组，按 arrangement_order 排序，成员ID有序
    """
    try:
        tag_group_service = TagGroupService(session)
        groups = await tag_group_service.list_groups(
            kind=kind,
            searchable=parse_boolean(searchable)
        )
        return TagGroupListResponse(
            groups=[TagGroupResponse(**group_to_dict(group)) for group in groups]
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取标签分组失败")
