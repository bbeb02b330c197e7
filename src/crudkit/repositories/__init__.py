from .base_repository import CrudRepository, DocumentRepository, serialize_document, to_object_id
from .product_repository import ProductRepository
from .user_repository import UserRepository

__all__ = [
    "CrudRepository",
    "DocumentRepository",
    "ProductRepository",
    "UserRepository",
    "serialize_document",
    "to_object_id",
]
