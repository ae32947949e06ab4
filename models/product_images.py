from core.database import Base
from sqlalchemy import (Column, Integer, String, ForeignKey)
from sqlalchemy.orm import relationship

class ProductImage(Base):
    __tablename__ = "product_images"

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)

    #relationships
    product = relationship("Product", back_populates="images")

    bucket = Column(String, nullable=False)
    path = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    # Display order; 0 is the representative image
    ord = Column(Integer, nullable=False, default=0)
