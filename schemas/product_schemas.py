from pydantic import BaseModel, Field, field_validator


class ProductRequest(BaseModel):
    name: str
    description: str | None = None
    # Numeric(10, 2)
    price: float = Field(ge=0, le=99_999_999.99)
    upload_file_names: list[str] = []

    @field_validator('name')
    @classmethod
    def validate_name(cls, value):
        if not value or not value.strip():
            raise ValueError('Product name cannot be empty')
        return value.strip()


class ProductResponse(BaseModel):
    product_id: int
    name: str
    description: str | None
    price: float
    is_deleted: bool
    upload_file_names: list[str]


class ProductRegisterResponse(BaseModel):
    result: int
