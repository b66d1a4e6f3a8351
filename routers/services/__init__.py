"""
Services layer
业务逻辑层
"""

from .alias_resolver import AliasResolver
from .tag_query_service import TagQueryService, ResolvedFilter
from .topic_tag_service import TopicTagService
from .topic_listing_service import TopicListingService
from .tag_admin_service import TagAdminService
from .tag_group_service import TagGroupService

__all__ = [
    "AliasResolver",
    "TagQueryService",
    "ResolvedFilter",
    "TopicTagService",
    "TopicListingService",
    "TagAdminService",
    "TagGroupService"
]
