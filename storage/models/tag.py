"""
Tag模型 - 标签表
"""
# 标准库导包
from datetime import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class Tag(Base):
    """标签表"""

    __tablename__ = "tags"

    # 核心字段
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="标签名称")
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True, comment="URL安全的唯一标识")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="unreviewed", index=True, comment="状态：unreviewed/approved/rejected/hidden")
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, comment="是否推荐")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    # 图标字段
    icon: Mapped[str] = mapped_column(String(255), nullable=False, default="", comment="标签图标：emoji或图片路径")
    legacy_icon_path: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, comment="旧版图标路径")

    # 重定向：设置后该标签为非规范标签，不再出现在搜索和列表中
    redirect_to_tag_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("tags.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="合并后重定向到的标签ID"
    )

    # 关系定义
    aliases: Mapped[list["TagAlias"]] = relationship("TagAlias", back_populates="tag", cascade="all, delete-orphan")

    @property
    def is_redirected(self) -> bool:
        return self.redirect_to_tag_id is not None

    def __repr__(self):
        return f"<Tag(id={self.id}, slug={self.slug}, status={self.status})>"
