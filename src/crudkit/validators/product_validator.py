from crudkit.schemas.products import ProductCreate, ProductListQuery, ProductUpdate, StockAdjustment

from .base_validator import BaseValidator


class ProductValidator(BaseValidator):
    entity_name = "Product"
    schemas = {
        "create": ProductCreate,
        "update": ProductUpdate,
        "adjust_stock": StockAdjustment,
        "list_query": ProductListQuery,
    }
