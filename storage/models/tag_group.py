"""
TagGroup模型 - 标签分组表及成员表
"""
# 标准库导包
from datetime import datetime
from typing import Optional

# 第三方库导包
from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base

# 分组类型
TAG_GROUP_KINDS = ("search", "arrangement", "both")


class TagGroup(Base):
    """标签分组表：有名称、有顺序的一组标签，成员关系不影响标签的重定向或状态"""

    __tablename__ = "tag_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="分组名称")
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    searchable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, comment="分组本身是否出现在搜索中")
    kind: Mapped[str] = mapped_column(String(20), nullable=False, default="both", comment="类型：search/arrangement/both")
    arrangement_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, comment="展示顺序")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    # 关系定义
    members: Mapped[list["TagGroupMember"]] = relationship(
        "TagGroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="TagGroupMember.position"
    )

    def __repr__(self):
        return f"<TagGroup(id={self.id}, slug={self.slug}, kind={self.kind})>"


class TagGroupMember(Base):
    """标签分组成员表"""

    __tablename__ = "tag_group_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(Integer, ForeignKey("tag_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    tag_id: Mapped[int] = mapped_column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # 关系定义
    group: Mapped["TagGroup"] = relationship("TagGroup", back_populates="members")

    __table_args__ = (
        UniqueConstraint("group_id", "tag_id", name="uq_tag_group_member"),
    )

    def __repr__(self):
        return f"<TagGroupMember(group_id={self.group_id}, tag_id={self.tag_id}, position={self.position})>"
