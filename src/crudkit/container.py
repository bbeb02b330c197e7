"""
Explicit wiring of repositories, services and validators.

Built once per application by `crudkit.main.create_app` and stored on
`app.state.container`; routes get at it through `crudkit.api.v1.dependencies`.
"""

from dataclasses import dataclass
from typing import Any

from crudkit.config.settings import Settings
from crudkit.repositories import ProductRepository, UserRepository
from crudkit.services import ProductService, UserService
from crudkit.validators import ProductValidator, UserValidator


@dataclass(frozen=True)
class Container:
    settings: Settings
    database: Any
    users: UserService
    products: ProductService
    user_validator: UserValidator
    product_validator: ProductValidator


def build_container(settings: Settings, database) -> Container:
    return Container(
        settings=settings,
        database=database,
        users=UserService(UserRepository(database, settings), settings),
        products=ProductService(ProductRepository(database, settings)),
        user_validator=UserValidator(),
        product_validator=ProductValidator(),
    )
