from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from core.config import settings
from core.exceptions import NotFoundError
from models.products import Product
from models.product_images import ProductImage
from schemas.product_schemas import ProductRequest, ProductResponse
from schemas.common_schemas import build_page_response
from repositories.base import storage_call
from utils.storage import file_name_from_path
from utils.logger import get_logger

logger = get_logger(__name__)


def _not_found(product_id: int) -> NotFoundError:
    return NotFoundError(f"Product not found: product_id={product_id}", code="PRODUCT_NOT_FOUND")


def _to_response(product: Product, upload_file_names: list[str]) -> ProductResponse:
    return ProductResponse(
        product_id=product.id,
        name=product.name,
        description=product.description,
        price=float(product.price),
        is_deleted=product.is_deleted,
        upload_file_names=upload_file_names,
    )


def _image_rows(product_id: int, paths: list[str]) -> list[ProductImage]:
    return [
        ProductImage(
            product_id=product_id,
            bucket=settings.PRODUCT_BUCKET,
            path=path,
            file_name=file_name_from_path(path),
            ord=index,
        )
        for index, path in enumerate(paths)
    ]


class ProductService:

    @staticmethod
    @storage_call()
    async def register(db: AsyncSession, request: ProductRequest) -> int:
        product = Product(
            name=request.name,
            description=request.description,
            price=request.price,
            is_deleted=False,
        )
        db.add(product)
        await db.flush()

        db.add_all(_image_rows(product.id, request.upload_file_names))
        await db.commit()

        logger.info(
            "Product registered",
            extra={"product_id": product.id, "images": len(request.upload_file_names)}
        )
        return product.id

    @staticmethod
    @storage_call()
    async def get(db: AsyncSession, product_id: int) -> ProductResponse:
        product = await ProductService._get_live(db, product_id)

        result = await db.execute(
            select(ProductImage.path)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.ord)
        )
        return _to_response(product, list(result.scalars().all()))

    @staticmethod
    @storage_call()
    async def list_products(db: AsyncSession, page: int = 1, size: int = 10) -> dict:
        """
        Page of live products, newest first, each with its first image only.
        """
        page = page if page and page > 0 else 1
        size = size if size and size > 0 else 10

        total_count = await db.scalar(
            select(func.count()).select_from(Product).where(Product.is_deleted == False)
        )

        result = await db.execute(
            select(Product)
            .where(Product.is_deleted == False)
            .order_by(Product.id.desc())
            .offset((page - 1) * size)
            .limit(size)
        )
        products = list(result.scalars().all())

        thumbs: dict[int, str] = {}
        if products:
            images = await db.execute(
                select(ProductImage.product_id, ProductImage.path)
                .where(ProductImage.product_id.in_([p.id for p in products]), ProductImage.ord == 0)
            )
            thumbs = {product_id: path for product_id, path in images.all()}

        dto_list = [
            _to_response(p, [thumbs[p.id]] if p.id in thumbs else [])
            for p in products
        ]
        return build_page_response(dto_list, page, size, total_count or 0)

    @staticmethod
    @storage_call()
    async def modify(db: AsyncSession, product_id: int, request: ProductRequest) -> None:
        """
        Update product fields and replace its whole image list.
        """
        product = await ProductService._get_live(db, product_id)

        product.name = request.name
        product.description = request.description
        product.price = request.price

        await db.execute(delete(ProductImage).where(ProductImage.product_id == product_id))
        db.add_all(_image_rows(product_id, request.upload_file_names))
        await db.commit()

        logger.info("Product modified", extra={"product_id": product_id})

    @staticmethod
    @storage_call()
    async def remove(db: AsyncSession, product_id: int) -> None:
        """
        Soft delete. Cart lines referencing the product are purged when
        their cart is next read.
        """
        result = await db.execute(select(Product).where(Product.id == product_id))
        product = result.scalar_one_or_none()
        if product is None:
            raise _not_found(product_id)

        product.is_deleted = True
        await db.commit()

        logger.info("Product soft-deleted", extra={"product_id": product_id})

    @staticmethod
    @storage_call()
    async def _get_live(db: AsyncSession, product_id: int) -> Product:
        result = await db.execute(select(Product).where(Product.id == product_id))
        product = result.scalar_one_or_none()
        if product is None or product.is_deleted:
            raise _not_found(product_id)
        return product
