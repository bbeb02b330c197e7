"""Fixtures for repository, service and API tests."""

import pytest
from faker import Faker

from crudkit.config.settings import Settings
from crudkit.repositories.base_repository import DocumentRepository
from crudkit.repositories.product_repository import ProductRepository
from crudkit.repositories.user_repository import UserRepository
from crudkit.services.product_service import ProductService
from crudkit.services.user_service import UserService

# NOTE: All store-backed fixtures in this file depend on the `database` fixture
# (tests/test_fixtures/store_fixtures.py): a fresh in-memory database per test.

fake = Faker()


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings for tests: explicit values, never read from the developer's .env.
    """
    return Settings(
        _env_file=None,
        ENV="testing",
        TESTING=True,
        MONGO_DB="crudkit",
        TEST_MONGO_DB="crudkit_test",
        JWT_SECRET_KEY="test-secret-key",
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="text",
        LOG_TO_STDOUT=True,
    )


@pytest.fixture
def item_repo(database, test_settings) -> DocumentRepository:
    """
    A bare DocumentRepository over an `items` collection with no indexes.

    Used by the generic repository tests so they do not depend on any entity.
    """
    return DocumentRepository(database["items"], "Item", test_settings)


@pytest.fixture
def user_repository(database, test_settings) -> UserRepository:
    return UserRepository(database, test_settings)


@pytest.fixture
def product_repository(database, test_settings) -> ProductRepository:
    return ProductRepository(database, test_settings)


@pytest.fixture
def user_service(user_repository, test_settings) -> UserService:
    return UserService(user_repository, test_settings)


@pytest.fixture
def product_service(product_repository) -> ProductService:
    return ProductService(product_repository)


@pytest.fixture
def sample_user_data() -> dict[str, str]:
    """
    A valid `register` payload. The password is long enough for the schema.
    """
    return {
        "name": fake.name(),
        "email": fake.unique.email(),
        "password": "s3cret-passw0rd",
    }


@pytest.fixture
def sample_product_data() -> dict:
    return {
        "name": fake.catch_phrase(),
        "sku": fake.unique.bothify("SKU-####-????").upper(),
        "price": 19.99,
        "stock": 5,
        "category": "tools",
    }


@pytest.fixture
def create_item(item_repo: DocumentRepository):
    """
    Factory for generic items.

    Usage:
        item = await create_item(name="bolt", qty=3)
    """
    async def _create(**overrides):
        data = {"name": fake.word(), "qty": fake.random_int(min=0, max=50)}
        data.update(overrides)
        return await item_repo.create(data)

    return _create


@pytest.fixture
async def many_items(create_item) -> list[dict]:
    """45 items numbered 0..44, enough for five pages of ten."""
    return [await create_item(name=f"item-{idx}", position=idx) for idx in range(45)]


@pytest.fixture
async def created_product(product_repository, sample_product_data) -> dict:
    return await product_repository.create(sample_product_data)
