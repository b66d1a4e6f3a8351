"""
Topic模型 - 主题表及阅读记录表
"""
# 标准库导包
from datetime import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import String, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

# 项目内部导包
from storage.database import Base


class Topic(Base):
    """主题表（由论坛主体维护，这里只读取用于标签筛选列表）"""

    __tablename__ = "topics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    author_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    messages_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, comment="帖子总数，含首帖")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    last_post_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<Topic(id={self.id}, title={self.title})>"


class TopicRead(Base):
    """主题阅读记录表，用于计算has_new"""

    __tablename__ = "topic_reads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    topic_id: Mapped[int] = mapped_column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    last_read_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "topic_id", name="uq_topic_read"),
    )
