from core.database import Base
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship


class MemberRole(Base):
    """
    One granted role per row. Known roles: USER, ADMIN, SUPER_ADMIN.
    """
    __tablename__ = "member_roles"
    __table_args__ = (UniqueConstraint("member_id", "role", name="uq_member_role"),)

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    member_id = Column(Integer, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    member = relationship("Member", back_populates="roles")

    role = Column(String(32), nullable=False)
