from .base_service import CrudService
from .product_service import ProductService
from .user_service import UserService

__all__ = ["CrudService", "ProductService", "UserService"]
