from core.database import Base
from sqlalchemy import (Column, Integer, ForeignKey, UniqueConstraint, CheckConstraint)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class CartItem(Base, CreatedAtMixin):
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("cart_id", "product_id", name="uq_cart_item_cart_product"),
        CheckConstraint("quantity > 0", name="ck_cart_item_quantity_positive"),
    )

    #pk
    id = Column(Integer, primary_key=True, index=True)

    #fk
    cart_id = Column(Integer, ForeignKey("carts.id"), nullable=False, index=True)
    # Weak reference: the product may be soft-deleted later
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)

    #relationships
    cart = relationship("Cart", back_populates="items")
    product = relationship("Product")

    quantity = Column(Integer, nullable=False)
