"""
数据模型定义
"""
# 标准库导包
from typing import Optional, List
from datetime import datetime

# 第三方库导包
from pydantic import BaseModel, Field


class UserInfo(BaseModel):
    """用户信息模型"""
    user_id: str
    name: Optional[str] = None


# ========== Tag模块相关模型 ==========

class TagChipResponse(BaseModel):
    """筛选标签响应模型"""
    id: int
    name: str
    slug: str


class TagChipListResponse(BaseModel):
    """筛选标签列表响应模型"""
    tags: List[TagChipResponse]


class TagOptionResponse(BaseModel):
    """自动补全标签响应模型，icon 已按用户偏好解析"""
    id: int
    name: str
    slug: str
    icon: str
    icon_kind: str = Field("text", description="image：按图片渲染；text：按文字/emoji渲染")


class TagOptionListResponse(BaseModel):
    """自动补全标签列表响应模型"""
    tags: List[TagOptionResponse]


class TopicTagListResponse(BaseModel):
    """主题标签列表响应模型"""
    topic_id: int
    tags: List[TagChipResponse]


# ========== Topic模块相关模型 ==========

class TopicFilterResponse(BaseModel):
    """服务端解析后的标签筛选条件"""
    tag_ids: List[int]
    match: str


class TopicRowResponse(BaseModel):
    """主题列表行响应模型"""
    id: int
    title: str
    author_id: Optional[str] = None
    views: int
    messages_count: int
    created_at: datetime
    last_post_at: datetime
    has_new: bool


class TopicListResponse(BaseModel):
    """主题列表响应模型"""
    topics: List[TopicRowResponse]
    page: int
    page_size: int
    total_count: int
    filter: TopicFilterResponse


# ========== Tag Group模块相关模型 ==========

class TagGroupResponse(BaseModel):
    """标签分组响应模型"""
    group_id: int
    name: str
    slug: str
    description: Optional[str] = None
    searchable: bool
    kind: str
    arrangement_order: int
    member_tag_ids: List[int] = Field(default_factory=list)


class TagGroupListResponse(BaseModel):
    """标签分组列表响应模型"""
    groups: List[TagGroupResponse]


class UpsertTagGroupRequest(BaseModel):
    """创建/更新标签分组请求模型"""
    group_id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)
    description: Optional[str] = Field(None, max_length=500)
    searchable: bool = True
    kind: str = Field("both", description="类型：search/arrangement/both")
    arrangement_order: int = 0


# ========== Tag Admin模块相关模型 ==========

class AdminTagResponse(BaseModel):
    """管理端标签响应模型"""
    id: int
    name: str
    slug: str
    status: str
    featured: bool
    icon: str
    legacy_icon_path: Optional[str] = None
    redirect_to_tag_id: Optional[int] = None
    usage_count: int = 0
    created_at: datetime


class AdminTagListResponse(BaseModel):
    """管理端标签列表响应模型"""
    tags: List[AdminTagResponse]


class CanonicalTagOptionResponse(BaseModel):
    """规范标签选项：用于合并/删除前的影响提示"""
    id: int
    name: str
    slug: str
    legacy_icon_path: Optional[str] = None
    usage_count: int
    alias_count: int
    group_membership_count: int
    redirect_reference_count: int


class CanonicalTagOptionListResponse(BaseModel):
    """规范标签选项列表响应模型"""
    tags: List[CanonicalTagOptionResponse]


class CreateTagRequest(BaseModel):
    """创建标签请求模型"""
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)
    icon: Optional[str] = Field(None, max_length=255)


class ModerateTagRequest(BaseModel):
    """审核标签请求模型"""
    action: str = Field(..., description="approve/reject/hide/feature/unfeature")


class MergeTagRequest(BaseModel):
    """合并标签请求模型"""
    target_tag_id: int


class TagAliasResponse(BaseModel):
    """标签别名响应模型"""
    alias_id: int
    tag_id: int
    alias: str
    normalized_alias: str
    created_at: datetime


class TagAliasListResponse(BaseModel):
    """标签别名列表响应模型"""
    tag_id: int
    aliases: List[TagAliasResponse]


class AddAliasRequest(BaseModel):
    """添加别名请求模型"""
    alias: str = Field("", max_length=100)


class DeleteResponse(BaseModel):
    """删除响应模型"""
    deleted: bool
