from core.database import Base
from sqlalchemy import (Column, Integer, String, Boolean, Numeric)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin, UpdatedAtMixin

class Product(Base, CreatedAtMixin, UpdatedAtMixin):
    __tablename__ = "products"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #relationships
    images = relationship("ProductImage", back_populates="product", order_by="ProductImage.ord")

    name = Column(String, nullable=False)
    description = Column(String)
    price = Column(Numeric(10, 2), nullable=False)
    # Soft delete: the row stays so existing cart lines can be reconciled
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
