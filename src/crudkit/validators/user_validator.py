from crudkit.schemas.users import UserLogin, UserRegister, UserUpdate

from .base_validator import BaseValidator


class UserValidator(BaseValidator):
    entity_name = "User"
    schemas = {
        "register": UserRegister,
        "login": UserLogin,
        "update": UserUpdate,
    }
