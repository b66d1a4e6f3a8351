"""
Profile模型 - 用户资料偏好表
"""
# 标准库导包
from typing import Optional

# 第三方库导包
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

# 项目内部导包
from storage.database import Base


class Profile(Base):
    """用户资料表，这里只关心标签相关的偏好与管理员标识"""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(100), primary_key=True, comment="用户ID")
    username: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    legacy_tag_icons_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, comment="是否显示旧版标签图标")
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<Profile(id={self.id}, is_admin={self.is_admin})>"
