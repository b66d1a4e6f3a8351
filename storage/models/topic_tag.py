"""
TopicTag模型 - 主题标签关联表
"""
# 标准库导包
from datetime import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import String, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class TopicTag(Base):
    """主题标签关联表"""

    __tablename__ = "topic_tags"

    # 核心字段
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    topic_id: Mapped[int] = mapped_column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id: Mapped[int] = mapped_column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, comment="关联创建者用户ID")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    # 关系定义
    tag: Mapped["Tag"] = relationship("Tag")

    # 唯一索引
    __table_args__ = (
        UniqueConstraint("topic_id", "tag_id", name="uq_topic_tag"),
    )

    def __repr__(self):
        return f"<TopicTag(id={self.id}, topic_id={self.topic_id}, tag_id={self.tag_id})>"
