"""
ProfileRepository - 用户资料Repository
"""
# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.profile import Profile
from storage.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """用户资料Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Profile)

    async def legacy_icons_enabled(self, user_id: str) -> bool:
        """
        读取用户的旧版图标偏好

        没有资料记录时默认启用，只有显式关闭才返回False
        """
        profile = await self.get_by_id(user_id)
        if profile is None:
            return True
        return profile.legacy_tag_icons_enabled is not False

    async def is_admin(self, user_id: str) -> bool:
        """是否为管理员"""
        profile = await self.get_by_id(user_id)
        return bool(profile and profile.is_admin)
