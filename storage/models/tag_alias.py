"""
TagAlias模型 - 标签别名表
"""
# 标准库导包
from datetime import datetime

# 第三方库导包
from sqlalchemy import String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


def normalize_alias(alias: str) -> str:
    """别名匹配使用的规范形式：去除首尾空白并转小写"""
    return (alias or "").strip().lower()


class TagAlias(Base):
    """标签别名表，别名没有独立的状态"""

    __tablename__ = "tag_aliases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tag_id: Mapped[int] = mapped_column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    alias: Mapped[str] = mapped_column(String(100), nullable=False, comment="别名原文")
    normalized_alias: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, comment="小写去空白后的别名")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    # 关系定义
    tag: Mapped["Tag"] = relationship("Tag", back_populates="aliases")

    def __repr__(self):
        return f"<TagAlias(id={self.id}, tag_id={self.tag_id}, alias={self.alias})>"
