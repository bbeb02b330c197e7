from .base_validator import BaseValidator, issues_to_details
from .product_validator import ProductValidator
from .user_validator import UserValidator

__all__ = ["BaseValidator", "ProductValidator", "UserValidator", "issues_to_details"]
