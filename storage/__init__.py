"""
Storage层包
提供数据库连接、模型和Repository的统一访问接口
"""
# 项目内部导包
from .database import (
    get_session,
    get_session_factory,
    init_db,
    cleanup_db,
    Base,
    engine,
    async_session_factory
)
from .models import (
    Tag,
    TagAlias,
    TagGroup,
    TagGroupMember,
    Topic,
    TopicRead,
    TopicTag,
    Profile
)
from .repositories import (
    BaseRepository,
    TagRepository,
    TagAliasRepository,
    TagGroupRepository,
    TopicRepository,
    TopicTagRepository,
    ProfileRepository
)

__all__ = [
    # 数据库连接相关
    "get_session",
    "get_session_factory",
    "init_db",
    "cleanup_db",
    "Base",
    "engine",
    "async_session_factory",

    # 模型相关
    "Tag",
    "TagAlias",
    "TagGroup",
    "TagGroupMember",
    "Topic",
    "TopicRead",
    "TopicTag",
    "Profile",

    # Repository相关
    "BaseRepository",
    "TagRepository",
    "TagAliasRepository",
    "TagGroupRepository",
    "TopicRepository",
    "TopicTagRepository",
    "ProfileRepository",
]
