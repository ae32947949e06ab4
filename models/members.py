from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class Member(Base, CreatedAtMixin):
    __tablename__ = "members"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    roles = relationship("MemberRole", back_populates="member", cascade="all, delete-orphan")
    refresh_tokens = relationship("RefreshToken", back_populates="member")

    email = Column(String, unique=True, nullable=False)
    nickname = Column(String, default="USER")
    hashed_password = Column(String, nullable=False)
    social = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
