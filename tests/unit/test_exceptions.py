from core.exceptions import AppError, ValidationError, AuthError, ForbiddenError, NotFoundError, StorageError


def test_status_and_default_codes():
    assert (ValidationError("x").status_code, ValidationError("x").code) == (400, "VALIDATION_ERROR")
    assert (AuthError("x").status_code, AuthError("x").code) == (401, "UNAUTHORIZED")
    assert (ForbiddenError("x").status_code, ForbiddenError("x").code) == (403, "FORBIDDEN")
    assert (NotFoundError("x").status_code, NotFoundError("x").code) == (404, "NOT_FOUND")
    assert (StorageError("x").status_code, StorageError("x").code) == (500, "STORAGE_ERROR")


def test_explicit_code_and_body():
    error = NotFoundError("Cart item not found", code="CART_ITEM_NOT_FOUND")

    assert isinstance(error, AppError)
    assert error.to_dict() == {"message": "Cart item not found", "code": "CART_ITEM_NOT_FOUND"}
