from fastapi import APIRouter, Request, Path
from starlette import status
from utils.deps import db_dependency, user_role_dependency
from schemas.cart_schemas import ChangeCartItemRequest, CartItemView
from schemas.common_schemas import INT32_MAX
from services.cart_service import CartService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/cart",
    tags=["cart"]
)


@router.get("/items", response_model=list[CartItemView], status_code=status.HTTP_200_OK)
@limiter.limit("60/minute")
async def get_cart_items(request: Request, member: user_role_dependency, db: db_dependency):
    return await CartService.list_items(db, member.user_id)


@router.post("/change", response_model=list[CartItemView], status_code=status.HTTP_200_OK)
@limiter.limit("60/minute")
async def change_cart_item(request: Request, body: ChangeCartItemRequest,
    member: user_role_dependency, db: db_dependency):
    """
    Add, re-quantify or (quantity <= 0) remove one cart line.
    """
    logger.debug(
        "Cart change requested",
        extra={"user_id": member.user_id, **body.model_dump()}
    )
    return await CartService.change_item(db, member.user_id, body)


@router.delete("/{cart_item_id}", response_model=list[CartItemView], status_code=status.HTTP_200_OK)
@limiter.limit("60/minute")
async def remove_cart_item(request: Request, member: user_role_dependency, db: db_dependency,
    cart_item_id: int = Path(gt=0, le=INT32_MAX)):
    return await CartService.remove_item(db, member.user_id, cart_item_id)
