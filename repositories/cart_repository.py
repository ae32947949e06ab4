"""
Row-level access to carts, cart items, products and product images.

Every function returns ORM records or plain scalars. SQLAlchemy failures are
re-raised as StorageError with the driver exception chained, except the
IntegrityError from `insert_cart` and `insert_cart_item`, which the cart
service handles as a lost creation race.
"""
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from models.carts import Cart
from models.cart_items import CartItem
from models.products import Product
from models.product_images import ProductImage
from repositories.base import storage_call

# Duplicate-owner and duplicate-line inserts are handled by the cart service
_storage_call = storage_call(passthrough=(IntegrityError,))


class CartRepository:

    @staticmethod
    @_storage_call
    async def get_cart_by_owner(db: AsyncSession, user_id: int) -> Cart | None:
        result = await db.execute(select(Cart).where(Cart.owner_user_id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    @_storage_call
    async def get_cart_by_id(db: AsyncSession, cart_id: int) -> Cart | None:
        result = await db.execute(select(Cart).where(Cart.id == cart_id))
        return result.scalar_one_or_none()

    @staticmethod
    @_storage_call
    async def insert_cart(db: AsyncSession, user_id: int) -> Cart:
        cart = Cart(owner_user_id=user_id)
        db.add(cart)
        await db.commit()
        return cart

    @staticmethod
    @_storage_call
    async def get_cart_item(db: AsyncSession, item_id: int) -> CartItem | None:
        result = await db.execute(select(CartItem).where(CartItem.id == item_id))
        return result.scalar_one_or_none()

    @staticmethod
    @_storage_call
    async def get_cart_item_for_product(db: AsyncSession, cart_id: int, product_id: int) -> CartItem | None:
        result = await db.execute(
            select(CartItem).where(CartItem.cart_id == cart_id, CartItem.product_id == product_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    @_storage_call
    async def list_cart_items(db: AsyncSession, cart_id: int) -> list[CartItem]:
        # Most recently added first
        result = await db.execute(
            select(CartItem)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.id.desc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @staticmethod
    @_storage_call
    async def insert_cart_item(db: AsyncSession, cart_id: int, product_id: int, quantity: int) -> CartItem:
        item = CartItem(cart_id=cart_id, product_id=product_id, quantity=quantity)
        db.add(item)
        await db.commit()
        return item

    @staticmethod
    @_storage_call
    async def update_cart_item_quantity(db: AsyncSession, cart_id: int, item_id: int, quantity: int) -> int:
        result = await db.execute(
            update(CartItem)
            .where(CartItem.id == item_id, CartItem.cart_id == cart_id)
            .values(quantity=quantity)
        )
        await db.commit()
        return result.rowcount

    @staticmethod
    @_storage_call
    async def delete_cart_items(db: AsyncSession, cart_id: int, item_ids: list[int]) -> int:
        if not item_ids:
            return 0
        result = await db.execute(
            delete(CartItem)
            .where(CartItem.id.in_(item_ids), CartItem.cart_id == cart_id)
        )
        await db.commit()
        return result.rowcount

    @staticmethod
    @_storage_call
    async def get_product(db: AsyncSession, product_id: int) -> Product | None:
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalar_one_or_none()

    @staticmethod
    @_storage_call
    async def get_products(db: AsyncSession, product_ids: list[int]) -> list[Product]:
        if not product_ids:
            return []
        result = await db.execute(
            select(Product)
            .where(Product.id.in_(product_ids))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @staticmethod
    @_storage_call
    async def get_first_images(db: AsyncSession, product_ids: list[int]) -> dict[int, str]:
        """
        Representative image path per product: the one with the lowest `ord`.
        """
        if not product_ids:
            return {}
        result = await db.execute(
            select(ProductImage.product_id, ProductImage.path)
            .where(ProductImage.product_id.in_(product_ids))
            .order_by(ProductImage.product_id, ProductImage.ord, ProductImage.id)
        )
        images: dict[int, str] = {}
        for product_id, path in result.all():
            if path and product_id not in images:
                images[product_id] = path
        return images
