from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import ValidationError, NotFoundError
from models.carts import Cart
from models.cart_items import CartItem
from models.products import Product
from repositories.cart_repository import CartRepository
from schemas.cart_schemas import ChangeCartItemRequest, CartItemView
from services.ownership_guard import assert_cart_item_owner
from utils.storage import storage_public_url
from utils.logger import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Applies quantity changes to a member's cart and returns the reconciled
    list of lines joined with live product data.

    Quantities are always absolute. Every public operation ends by re-reading
    the cart through `list_items`, which also purges lines whose product has
    been soft-deleted.
    """

    @staticmethod
    async def get_or_create_cart(db: AsyncSession, user_id: int) -> Cart:
        cart = await CartRepository.get_cart_by_owner(db, user_id)
        if cart:
            return cart

        try:
            cart = await CartRepository.insert_cart(db, user_id)
        except IntegrityError:
            # Another request created the cart first; owner_user_id is unique
            await db.rollback()
            logger.info("Cart creation race lost, reusing existing cart", extra={"user_id": user_id})
            cart = await CartRepository.get_cart_by_owner(db, user_id)
            if cart is None:
                raise
            return cart

        logger.info("Cart created", extra={"user_id": user_id, "cart_id": cart.id})
        return cart

    @staticmethod
    async def list_items(db: AsyncSession, user_id: int) -> list[CartItemView]:
        """
        Current cart lines, most recently added first.

        Reading never creates a cart. Lines pointing at soft-deleted (or
        vanished) products are deleted from storage and left out of the result.
        """
        cart = await CartRepository.get_cart_by_owner(db, user_id)
        if cart is None:
            return []

        items = await CartRepository.list_cart_items(db, cart.id)
        if not items:
            return []

        products = await CartService._products_by_id(db, items)
        live, stale = CartService._partition(items, products)

        if stale:
            await CartService._prune(db, cart.id, stale)

        images = await CartRepository.get_first_images(db, sorted({item.product_id for item in live}))

        return [
            CartService._to_view(item, products[item.product_id], images.get(item.product_id))
            for item in live
        ]

    @staticmethod
    async def prune_deleted_items(db: AsyncSession, user_id: int) -> int:
        """
        Delete every line of the member's cart whose product is gone.
        Returns the number of lines removed.
        """
        cart = await CartRepository.get_cart_by_owner(db, user_id)
        if cart is None:
            return 0

        items = await CartRepository.list_cart_items(db, cart.id)
        products = await CartService._products_by_id(db, items)
        _, stale = CartService._partition(items, products)

        if not stale:
            return 0
        return await CartService._prune(db, cart.id, stale)

    @staticmethod
    async def change_item(db: AsyncSession, user_id: int, request: ChangeCartItemRequest) -> list[CartItemView]:
        if request.quantity <= 0:
            if request.cart_item_id is None:
                raise ValidationError("cart_item_id is required when quantity <= 0")
            return await CartService.remove_item(db, user_id, request.cart_item_id)

        if request.cart_item_id is not None:
            await assert_cart_item_owner(db, user_id, request.cart_item_id)
            cart = await CartService.get_or_create_cart(db, user_id)
            await CartRepository.update_cart_item_quantity(db, cart.id, request.cart_item_id, request.quantity)
            logger.info(
                "Cart item quantity set",
                extra={"user_id": user_id, "cart_item_id": request.cart_item_id, "quantity": request.quantity}
            )
            return await CartService.list_items(db, user_id)

        if request.product_id is None:
            raise ValidationError("product_id is required when cart_item_id is not provided")

        product = await CartRepository.get_product(db, request.product_id)
        if product is None or product.is_deleted:
            raise NotFoundError(f"Product not found: product_id={request.product_id}", code="PRODUCT_NOT_FOUND")

        cart = await CartService.get_or_create_cart(db, user_id)
        await CartService._upsert_line(db, cart.id, request.product_id, request.quantity)

        return await CartService.list_items(db, user_id)

    @staticmethod
    async def remove_item(db: AsyncSession, user_id: int, cart_item_id: int) -> list[CartItemView]:
        await assert_cart_item_owner(db, user_id, cart_item_id)

        cart = await CartRepository.get_cart_by_owner(db, user_id)
        if cart is None:
            return []

        await CartRepository.delete_cart_items(db, cart.id, [cart_item_id])
        logger.info("Cart item removed", extra={"user_id": user_id, "cart_item_id": cart_item_id})

        return await CartService.list_items(db, user_id)

    @staticmethod
    async def _upsert_line(db: AsyncSession, cart_id: int, product_id: int, quantity: int) -> None:
        existing = await CartRepository.get_cart_item_for_product(db, cart_id, product_id)
        if existing:
            await CartRepository.update_cart_item_quantity(db, cart_id, existing.id, quantity)
            logger.info(
                "Cart item quantity set",
                extra={"cart_id": cart_id, "cart_item_id": existing.id, "quantity": quantity}
            )
            return

        try:
            item = await CartRepository.insert_cart_item(db, cart_id, product_id, quantity)
        except IntegrityError:
            # Concurrent insert for the same (cart, product): fall back to a set
            await db.rollback()
            existing = await CartRepository.get_cart_item_for_product(db, cart_id, product_id)
            if existing is None:
                raise
            await CartRepository.update_cart_item_quantity(db, cart_id, existing.id, quantity)
            return

        logger.info(
            "Cart item added",
            extra={"cart_id": cart_id, "cart_item_id": item.id, "product_id": product_id, "quantity": quantity}
        )

    @staticmethod
    async def _products_by_id(db: AsyncSession, items: list[CartItem]) -> dict[int, Product]:
        product_ids = sorted({item.product_id for item in items})
        products = await CartRepository.get_products(db, product_ids)
        return {product.id: product for product in products}

    @staticmethod
    def _partition(items: list[CartItem], products: dict[int, Product]) -> tuple[list[CartItem], list[CartItem]]:
        live, stale = [], []
        for item in items:
            product = products.get(item.product_id)
            if product is None or product.is_deleted:
                stale.append(item)
            else:
                live.append(item)
        return live, stale

    @staticmethod
    async def _prune(db: AsyncSession, cart_id: int, stale: list[CartItem]) -> int:
        item_ids = [item.id for item in stale]
        removed = await CartRepository.delete_cart_items(db, cart_id, item_ids)
        logger.info(
            "Pruned cart items referencing deleted products",
            extra={"cart_id": cart_id, "cart_item_ids": item_ids, "removed": removed}
        )
        return removed

    @staticmethod
    def _to_view(item: CartItem, product: Product, image_path: str | None) -> CartItemView:
        return CartItemView(
            cart_item_id=item.id,
            product_id=item.product_id,
            product_name=product.name or "",
            price=float(product.price or 0),
            quantity=item.quantity,
            image_path=image_path,
            image_url=storage_public_url(image_path),
        )
