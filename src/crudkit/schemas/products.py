from pydantic import Field, field_validator

from .base import InputSchema, PartialUpdateSchema

SKU_PATTERN = r"^[A-Za-z0-9_-]{3,64}$"


class ProductCreate(InputSchema):
    name: str = Field(min_length=1, max_length=200)
    sku: str = Field(pattern=SKU_PATTERN)
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    description: str | None = Field(default=None, max_length=2000)
    category: str | None = Field(default=None, max_length=100)


class ProductUpdate(PartialUpdateSchema):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    sku: str | None = Field(default=None, pattern=SKU_PATTERN)
    price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    description: str | None = Field(default=None, max_length=2000)
    category: str | None = Field(default=None, max_length=100)


class StockAdjustment(InputSchema):
    delta: int

    @field_validator("delta")
    @classmethod
    def non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("delta must not be zero")
        return v


class ProductListQuery(InputSchema):
    # out-of-range page/limit are normalized by the pagination layer, not rejected
    page: int | None = None
    limit: int | None = None
    category: str | None = Field(default=None, max_length=100)
