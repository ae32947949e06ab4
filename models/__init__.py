from models.members import Member
from models.member_roles import MemberRole
from models.refresh_tokens import RefreshToken
from models.products import Product
from models.product_images import ProductImage
from models.carts import Cart
from models.cart_items import CartItem
from models.todos import Todo

__all__ = ["Member", "MemberRole", "RefreshToken", "Product", "ProductImage", "Cart", "CartItem", "Todo"]
