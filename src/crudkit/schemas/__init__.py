from .base import InputSchema, PartialUpdateSchema
from .pagination import (
    PageOptions,
    PaginationMeta,
    PaginationResult,
    build_pagination_meta,
    normalize_page_options,
)
from .products import ProductCreate, ProductListQuery, ProductUpdate, StockAdjustment
from .responses import ApiResponse, ErrorBody, ErrorResponse, error_response, respond
from .users import UserLogin, UserRegister, UserUpdate

__all__ = [
    "InputSchema",
    "PartialUpdateSchema",
    "PageOptions",
    "PaginationMeta",
    "PaginationResult",
    "build_pagination_meta",
    "normalize_page_options",
    "ProductCreate",
    "ProductListQuery",
    "ProductUpdate",
    "StockAdjustment",
    "ApiResponse",
    "ErrorBody",
    "ErrorResponse",
    "error_response",
    "respond",
    "UserLogin",
    "UserRegister",
    "UserUpdate",
]
