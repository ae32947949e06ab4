import enum
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import NotFoundError, ForbiddenError
from repositories.cart_repository import CartRepository
from utils.logger import get_logger

logger = get_logger(__name__)


class OwnershipResult(enum.Enum):
    AUTHORIZED = "authorized"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


async def check_cart_item_owner(db: AsyncSession, user_id: int, item_id: int) -> OwnershipResult:
    """
    Classify whether `item_id` belongs to a cart owned by `user_id`.

    Item and parent cart are looked up separately so a missing item
    (NOT_FOUND) is never reported as someone else's item (FORBIDDEN).
    Read-only; storage errors propagate.
    """
    item = await CartRepository.get_cart_item(db, item_id)
    if item is None:
        return OwnershipResult.NOT_FOUND

    cart = await CartRepository.get_cart_by_id(db, item.cart_id)
    if cart is None:
        return OwnershipResult.NOT_FOUND

    if str(cart.owner_user_id) != str(user_id):
        return OwnershipResult.FORBIDDEN

    return OwnershipResult.AUTHORIZED


async def assert_cart_item_owner(db: AsyncSession, user_id: int, item_id: int) -> None:
    """
    Raise NotFoundError / ForbiddenError unless the caller owns the item.
    """
    result = await check_cart_item_owner(db, user_id, item_id)

    if result is OwnershipResult.NOT_FOUND:
        logger.info("Cart item not found", extra={"user_id": user_id, "cart_item_id": item_id})
        raise NotFoundError("Cart item not found", code="CART_ITEM_NOT_FOUND")

    if result is OwnershipResult.FORBIDDEN:
        logger.warning(
            "Cart item ownership check failed",
            extra={"user_id": user_id, "cart_item_id": item_id}
        )
        raise ForbiddenError("Not owner of cart item", code="NOT_OWNER_OF_CART_ITEM")
