from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class Cart(Base, CreatedAtMixin):
    __tablename__ = "carts"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    # unique: concurrent lazy creation for one member must collide here
    owner_user_id = Column(Integer, ForeignKey("members.id"), unique=True, nullable=False)

    #relationships
    items = relationship("CartItem", back_populates="cart")
