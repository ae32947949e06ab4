import pytest
from core.exceptions import NotFoundError, ForbiddenError
from models.carts import Cart
from models.cart_items import CartItem
from services.ownership_guard import OwnershipResult, check_cart_item_owner, assert_cart_item_owner


async def create_line(session, owner_id, product_id, quantity=1):
    cart = Cart(owner_user_id=owner_id)
    session.add(cart)
    await session.flush()
    item = CartItem(cart_id=cart.id, product_id=product_id, quantity=quantity)
    session.add(item)
    await session.commit()
    return item


async def test_owner_is_authorized(session, member, product_factory):
    product = await product_factory()
    item = await create_line(session, member.id, product.id)

    assert await check_cart_item_owner(session, member.id, item.id) is OwnershipResult.AUTHORIZED
    await assert_cart_item_owner(session, member.id, item.id)


async def test_missing_item_is_not_found(session, member):
    assert await check_cart_item_owner(session, member.id, 9999) is OwnershipResult.NOT_FOUND

    with pytest.raises(NotFoundError) as exc_info:
        await assert_cart_item_owner(session, member.id, 9999)
    assert exc_info.value.code == "CART_ITEM_NOT_FOUND"
    assert exc_info.value.status_code == 404


async def test_item_of_another_member_is_forbidden(session, member, other_member, product_factory):
    product = await product_factory()
    item = await create_line(session, other_member.id, product.id)

    assert await check_cart_item_owner(session, member.id, item.id) is OwnershipResult.FORBIDDEN

    with pytest.raises(ForbiddenError) as exc_info:
        await assert_cart_item_owner(session, member.id, item.id)
    assert exc_info.value.code == "NOT_OWNER_OF_CART_ITEM"
    assert exc_info.value.status_code == 403


async def test_orphan_item_is_not_found(session, member, product_factory):
    """An item whose parent cart row is gone is reported as missing, not forbidden."""
    product = await product_factory()
    item = CartItem(cart_id=777, product_id=product.id, quantity=1)
    session.add(item)
    await session.commit()

    assert await check_cart_item_owner(session, member.id, item.id) is OwnershipResult.NOT_FOUND
