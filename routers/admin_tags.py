"""
标签管理路由
提供标签审核、合并、别名、分组维护等管理端接口，仅管理员可用
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from models import (
    UserInfo,
    AdminTagResponse,
    AdminTagListResponse,
    CanonicalTagOptionResponse,
    CanonicalTagOptionListResponse,
    CreateTagRequest,
    ModerateTagRequest,
    MergeTagRequest,
    TagAliasResponse,
    TagAliasListResponse,
    AddAliasRequest,
    DeleteResponse,
    TagGroupResponse,
    UpsertTagGroupRequest
)
from storage.database import get_session
from routers.services.tag_admin_service import TagAdminService
from routers.services.tag_group_service import TagGroupService, group_to_dict
from routers.utils import to_http_exception
from utils import get_current_user

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/api/admin",
    tags=["标签管理"]
)


async def get_admin_user(
    user_info: Optional[UserInfo] = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
) -> UserInfo:
    """管理员校验依赖：未登录401，非管理员403"""
    try:
        return await TagAdminService(session).require_admin(user_info)
    except Exception as e:
        raise to_http_exception(e, "管理员校验失败")


def _tag_to_response(tag, usage_count: int = 0) -> AdminTagResponse:
    """将Tag模型转换为AdminTagResponse"""
    return AdminTagResponse(
        id=tag.id,
        name=tag.name,
        slug=tag.slug,
        status=tag.status,
        featured=tag.featured,
        icon=tag.icon or "",
        legacy_icon_path=tag.legacy_icon_path,
        redirect_to_tag_id=tag.redirect_to_tag_id,
        usage_count=usage_count,
        created_at=tag.created_at
    )


def _alias_to_response(alias) -> TagAliasResponse:
    """将TagAlias模型转换为TagAliasResponse"""
    return TagAliasResponse(
        alias_id=alias.id,
        tag_id=alias.tag_id,
        alias=alias.alias,
        normalized_alias=alias.normalized_alias,
        created_at=alias.created_at
    )


@router.get("/tags/canonical", response_model=CanonicalTagOptionListResponse, summary="规范标签及引用统计")
async def list_canonical_tags(
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """获取规范标签列表，附带使用次数、别名数、分组数、重定向引用数"""
    try:
        options = await TagAdminService(session).list_canonical_options()
        return CanonicalTagOptionListResponse(
            tags=[
                CanonicalTagOptionResponse(
                    id=option["tag"].id,
                    name=option["tag"].name,
                    slug=option["tag"].slug,
                    legacy_icon_path=option["tag"].legacy_icon_path,
                    usage_count=option["usage_count"],
                    alias_count=option["alias_count"],
                    group_membership_count=option["group_membership_count"],
                    redirect_reference_count=option["redirect_reference_count"]
                )
                for option in options
            ]
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取规范标签失败")


@router.get("/tags/unreviewed", response_model=AdminTagListResponse, summary="待审核标签")
async def list_unreviewed_tags(
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """获取待审核标签及使用次数"""
    try:
        rows = await TagAdminService(session).list_unreviewed()
        return AdminTagListResponse(
            tags=[_tag_to_response(tag, usage_count) for tag, usage_count in rows]
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取待审核标签失败")


@router.post("/tags", response_model=AdminTagResponse, summary="创建标签")
async def create_tag(
    request: CreateTagRequest,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """创建标签，新标签为待审核状态"""
    try:
        tag = await TagAdminService(session).create_tag(
            name=request.name,
            slug=request.slug,
            icon=request.icon
        )
        return _tag_to_response(tag)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "创建标签失败")


@router.post("/tags/{tag_id}/moderate", response_model=AdminTagResponse, summary="审核标签")
async def moderate_tag(
    tag_id: int,
    request: ModerateTagRequest,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """审核动作：approve/reject/hide/feature/unfeature"""
    try:
        tag = await TagAdminService(session).moderate_tag(tag_id, request.action)
        return _tag_to_response(tag)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "审核标签失败")


@router.post("/tags/{tag_id}/merge", response_model=AdminTagResponse, summary="合并标签")
async def merge_tag(
    tag_id: int,
    request: MergeTagRequest,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """把标签合并到目标标签（设置重定向）"""
    try:
        tag = await TagAdminService(session).merge_tags(tag_id, request.target_tag_id)
        return _tag_to_response(tag)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "合并标签失败")


@router.get("/tags/{tag_id}/aliases", response_model=TagAliasListResponse, summary="获取标签别名")
async def list_tag_aliases(
    tag_id: int,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """获取标签的别名列表"""
    try:
        aliases = await TagAdminService(session).list_aliases(tag_id)
        return TagAliasListResponse(
            tag_id=tag_id,
            aliases=[_alias_to_response(alias) for alias in aliases]
        )

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "获取标签别名失败")


@router.post("/tags/{tag_id}/aliases", response_model=TagAliasResponse, summary="添加标签别名")
async def add_tag_alias(
    tag_id: int,
    request: AddAliasRequest,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """为标签添加别名"""
    try:
        alias = await TagAdminService(session).add_alias(tag_id, request.alias)
        return _alias_to_response(alias)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "添加标签别名失败")


@router.delete("/aliases/{alias_id}", response_model=DeleteResponse, summary="删除标签别名")
async def delete_tag_alias(
    alias_id: int,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """删除别名"""
    try:
        deleted = await TagAdminService(session).delete_alias(alias_id)
        return DeleteResponse(deleted=deleted)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "删除标签别名失败")


@router.post("/tag-groups", response_model=TagGroupResponse, summary="创建/更新标签分组")
async def upsert_tag_group(
    request: UpsertTagGroupRequest,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """创建或更新标签分组（传入 group_id 时更新）"""
    try:
        group = await TagGroupService(session).upsert_group(
            name=request.name,
            slug=request.slug,
            description=request.description,
            searchable=request.searchable,
            kind=request.kind,
            arrangement_order=request.arrangement_order,
            group_id=request.group_id
        )
        return TagGroupResponse(**group_to_dict(group))

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "保存标签分组失败")


@router.put("/tag-groups/{group_id}/members", response_model=TagGroupResponse, summary="设置分组成员")
async def set_tag_group_members(
    group_id: int,
    request: Request,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """按顺序设置分组成员，请求体 {"tag_ids": [...]}，非法请求体视为空列表"""
    try:
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        raw_tag_ids = payload.get("tag_ids") if isinstance(payload, dict) else None

        group = await TagGroupService(session).set_members(group_id, raw_tag_ids)
        return TagGroupResponse(**group_to_dict(group))

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "设置分组成员失败")


@router.delete("/tag-groups/{group_id}", response_model=DeleteResponse, summary="删除标签分组")
async def delete_tag_group(
    group_id: int,
    admin: UserInfo = Depends(get_admin_user),
    session: AsyncSession = Depends(get_session)
):
    """删除标签分组"""
    try:
        deleted = await TagGroupService(session).delete_group(group_id)
        return DeleteResponse(deleted=deleted)

    except HTTPException:
        raise
    except Exception as e:
        raise to_http_exception(e, "删除标签分组失败")
