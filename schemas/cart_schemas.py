from pydantic import BaseModel, Field, StrictInt
from schemas.common_schemas import INT32_MAX


class ChangeCartItemRequest(BaseModel):
    """
    One quantity change against the caller's cart.

    quantity is the new absolute value; <= 0 removes the line named by
    cart_item_id. With no cart_item_id the line is located by product_id.
    """
    product_id: int | None = Field(default=None, gt=0, le=INT32_MAX)
    cart_item_id: int | None = Field(default=None, gt=0, le=INT32_MAX)
    quantity: StrictInt = Field(le=INT32_MAX)


class CartItemView(BaseModel):
    cart_item_id: int
    product_id: int
    product_name: str
    price: float
    quantity: int
    image_path: str | None = None
    image_url: str | None = None
