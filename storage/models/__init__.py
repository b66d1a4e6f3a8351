"""
Storage models package.
"""
# 项目内部导包
from .tag import Tag
from .tag_alias import TagAlias, normalize_alias
from .tag_group import TagGroup, TagGroupMember, TAG_GROUP_KINDS
from .topic import Topic, TopicRead
from .topic_tag import TopicTag
from .profile import Profile

__all__ = [
    "Tag",
    "TagAlias",
    "normalize_alias",
    "TagGroup",
    "TagGroupMember",
    "TAG_GROUP_KINDS",
    "Topic",
    "TopicRead",
    "TopicTag",
    "Profile",
]
