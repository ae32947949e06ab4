from core.config import settings
from utils.storage import storage_public_url, file_name_from_path


def test_public_url_uses_product_bucket():
    url = storage_public_url("products/chair.png")

    assert url == f"{settings.STORAGE_PUBLIC_URL.rstrip('/')}/product/products/chair.png"


def test_public_url_with_explicit_bucket():
    url = storage_public_url("/banner.png", bucket="events")

    assert url.endswith("/events/banner.png")


def test_public_url_for_missing_path():
    assert storage_public_url(None) is None
    assert storage_public_url("") is None


def test_file_name_from_path():
    assert file_name_from_path("products/2024/chair.png") == "chair.png"
    assert file_name_from_path("chair.png") == "chair.png"
