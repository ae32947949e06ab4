from fastapi import APIRouter, Request, Path, Query
from utils.deps import db_dependency, admin_role_dependency
from schemas.product_schemas import ProductRequest, ProductResponse, ProductRegisterResponse
from schemas.common_schemas import PageResponse, INT32_MAX, parse_positive_int
from services.product_service import ProductService
from middleware.rate_limiter import limiter
from utils.logger import get_logger

logger = get_logger(__name__)


router = APIRouter(
    prefix="/api/product",
    tags=["product"]
)


@router.get("/list", response_model=PageResponse[ProductResponse])
async def list_products(request: Request, db: db_dependency,
    page: str | None = Query(default=None), size: str | None = Query(default=None)):
    return await ProductService.list_products(db, parse_positive_int(page, 1), parse_positive_int(size, 10))


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(request: Request, db: db_dependency, product_id: int = Path(gt=0, le=INT32_MAX)):
    return await ProductService.get(db, product_id)


@router.post("", response_model=ProductRegisterResponse)
@limiter.limit("30/minute")
async def register_product(request: Request, body: ProductRequest,
    member: admin_role_dependency, db: db_dependency):
    product_id = await ProductService.register(db, body)
    return {"result": product_id}


@router.put("/{product_id}")
@limiter.limit("30/minute")
async def modify_product(request: Request, body: ProductRequest,
    member: admin_role_dependency, db: db_dependency, product_id: int = Path(gt=0, le=INT32_MAX)):
    await ProductService.modify(db, product_id, body)
    return {"result": "SUCCESS"}


@router.delete("/{product_id}")
@limiter.limit("30/minute")
async def remove_product(request: Request, member: admin_role_dependency, db: db_dependency,
    product_id: int = Path(gt=0, le=INT32_MAX)):
    await ProductService.remove(db, product_id)

    logger.info("Product removed by admin", extra={"user_id": member.user_id, "product_id": product_id})

    return {"result": "SUCCESS"}
