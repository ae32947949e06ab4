from core.config import settings


def storage_public_url(path: str | None, bucket: str | None = None) -> str | None:
    """
    Public URL of an object stored under `path` in the product bucket.
    """
    if not path:
        return None
    base = settings.STORAGE_PUBLIC_URL.rstrip("/")
    return f"{base}/{bucket or settings.PRODUCT_BUCKET}/{path.lstrip('/')}"


def file_name_from_path(path: str) -> str:
    return path.rsplit("/", 1)[-1]
