from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from taskboard.core.database import Base
from taskboard.models.base import utcnow

class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    created_by = relationship("User", lazy="joined")
    members = relationship(
        "ProjectMember",
        order_by="ProjectMember.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def team_member_ids(self) -> list[int]:
        return [m.user_id for m in self.members]

    @property
    def team_members(self):
        return [m.user for m in self.members]


class ProjectMember(Base):
    """Ordered membership row; ``position`` keeps the order members were given in."""
    __tablename__ = "project_members"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    user = relationship("User", lazy="joined")
