import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from core.exceptions import StorageError
from models.carts import Cart
from repositories.cart_repository import CartRepository
from services.ownership_guard import check_cart_item_owner


async def fail_execute(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))


async def test_storage_failure_becomes_storage_error(session, member, monkeypatch):
    monkeypatch.setattr(session, "execute", fail_execute)

    with pytest.raises(StorageError) as exc_info:
        await CartRepository.get_cart_by_owner(session, member.id)

    assert exc_info.value.code == "STORAGE_ERROR"
    assert "database is locked" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, OperationalError)


async def test_ownership_check_propagates_storage_error(session, member, monkeypatch):
    monkeypatch.setattr(session, "execute", fail_execute)

    with pytest.raises(StorageError):
        await check_cart_item_owner(session, member.id, 1)


async def test_scoped_update_ignores_other_carts(session, member, other_member, product_factory):
    product = await product_factory()
    mine = await CartRepository.insert_cart(session, member.id)
    theirs = await CartRepository.insert_cart(session, other_member.id)
    item = await CartRepository.insert_cart_item(session, theirs.id, product.id, 2)

    assert await CartRepository.update_cart_item_quantity(session, mine.id, item.id, 9) == 0
    assert await CartRepository.delete_cart_items(session, mine.id, [item.id]) == 0

    reloaded = await CartRepository.get_cart_item(session, item.id)
    assert reloaded.quantity == 2


async def test_first_images_take_lowest_ord(session, product_factory):
    with_images = await product_factory(name="Pics", images=["a/0.png", "a/1.png", "a/2.png"])
    without = await product_factory(name="NoPics")

    images = await CartRepository.get_first_images(session, [with_images.id, without.id])

    assert images == {with_images.id: "a/0.png"}


async def test_duplicate_owner_is_not_wrapped(session, member):
    session.add(Cart(owner_user_id=member.id))
    await session.commit()

    with pytest.raises(IntegrityError):
        await CartRepository.insert_cart(session, member.id)
    await session.rollback()
