from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from taskboard.core.database import Base
from taskboard.models.base import utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, default="member")  # admin, manager, member
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
