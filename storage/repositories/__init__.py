"""
Storage repositories package.
"""
# 项目内部导包
from .base import BaseRepository
from .tag_repository import TagRepository
from .tag_alias_repository import TagAliasRepository
from .tag_group_repository import TagGroupRepository
from .topic_repository import TopicRepository
from .topic_tag_repository import TopicTagRepository
from .profile_repository import ProfileRepository

__all__ = [
    "BaseRepository",
    "TagRepository",
    "TagAliasRepository",
    "TagGroupRepository",
    "TopicRepository",
    "TopicTagRepository",
    "ProfileRepository",
]
