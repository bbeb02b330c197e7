"""
In-memory stand-in for the async pymongo database/collection API.

Only the calls the repositories make are implemented (insert_one, find_one,
find().sort().skip().limit().to_list(), count_documents, find_one_and_update,
find_one_and_delete, create_index, command("ping")). Unique indexes are
enforced and violations raise the real `pymongo.errors.DuplicateKeyError`
with the same `details` shape a server sends, so the whole error pipeline
runs exactly as it does against MongoDB.

`collection.fail_next(exc)` makes the next operation raise `exc`, for
simulating outages and other driver failures.
"""

import copy
from typing import Any

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError


def _matches(document: dict, filter: dict) -> bool:
    for key, condition in filter.items():
        value = document.get(key)
        if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
            for op, operand in condition.items():
                if op == "$eq" and value != operand:
                    return False
                if op == "$ne" and value == operand:
                    return False
                if op == "$in" and value not in operand:
                    return False
                if op == "$lt" and not (value is not None and value < operand):
                    return False
                if op == "$lte" and not (value is not None and value <= operand):
                    return False
                if op == "$gt" and not (value is not None and value > operand):
                    return False
                if op == "$gte" and not (value is not None and value >= operand):
                    return False
        elif value != condition:
            return False
    return True


class InsertOneResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class InMemoryCursor:
    def __init__(self, documents: list[dict]):
        self._documents = documents
        self._sort: list[tuple[str, int]] = []
        self._skip = 0
        self._limit = 0

    def sort(self, key_or_list, direction=None):
        if isinstance(key_or_list, str):
            self._sort = [(key_or_list, direction or 1)]
        else:
            self._sort = list(key_or_list)
        return self

    def skip(self, n: int):
        # the server command encodes skip as a BSON int64
        if not -(2**63) <= n < 2**63:
            raise OverflowError("MongoDB can only handle up to 8-byte ints")
        self._skip = n
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    async def to_list(self, length=None) -> list[dict]:
        documents = list(self._documents)
        # stable sorts, least significant key first
        for key, direction in reversed(self._sort):
            documents.sort(
                key=lambda d: (d.get(key) is not None, d.get(key)),
                reverse=direction < 0,
            )
        documents = documents[self._skip:]
        if self._limit:
            documents = documents[: self._limit]
        if length:
            documents = documents[:length]
        return [copy.deepcopy(d) for d in documents]


class InMemoryCollection:
    def __init__(self, name: str):
        self.name = name
        self.documents: list[dict] = []
        self.unique_indexes: dict[str, list[str]] = {}
        self.indexes: dict[str, list[tuple[str, int]]] = {}
        self._pending_error: BaseException | None = None

    def fail_next(self, exc: BaseException) -> None:
        self._pending_error = exc

    def _maybe_fail(self) -> None:
        if self._pending_error is not None:
            exc, self._pending_error = self._pending_error, None
            raise exc

    def _check_unique(self, candidate: dict, ignore_id=None) -> None:
        for index_name, fields in self.unique_indexes.items():
            key_value = {f: candidate.get(f) for f in fields}
            for existing in self.documents:
                if existing["_id"] == ignore_id:
                    continue
                if all(existing.get(f) == key_value[f] for f in fields):
                    rendered = ", ".join(f"{f}: {key_value[f]!r}" for f in fields)
                    message = (
                        f"E11000 duplicate key error collection: test.{self.name} "
                        f"index: {index_name} dup key: {{ {rendered} }}"
                    )
                    raise DuplicateKeyError(
                        message,
                        code=11000,
                        details={
                            "index": 0,
                            "code": 11000,
                            "errmsg": message,
                            "keyPattern": {f: 1 for f in fields},
                            "keyValue": key_value,
                        },
                    )

    async def create_index(self, keys, unique: bool = False, name: str | None = None, **kwargs) -> str:
        self._maybe_fail()
        keys = list(keys)
        index_name = name or "_".join(f"{k}_{d}" for k, d in keys)
        self.indexes[index_name] = keys
        if unique:
            self.unique_indexes[index_name] = [k for k, _ in keys]
        return index_name

    async def insert_one(self, document: dict) -> InsertOneResult:
        self._maybe_fail()
        document.setdefault("_id", ObjectId())
        self._check_unique(document)
        self.documents.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"])

    async def find_one(self, filter: dict | None = None, projection: dict | None = None) -> dict | None:
        self._maybe_fail()
        for document in self.documents:
            if _matches(document, filter or {}):
                if projection:
                    return {k: v for k, v in document.items() if k == "_id" or projection.get(k)}
                return copy.deepcopy(document)
        return None

    def find(self, filter: dict | None = None) -> InMemoryCursor:
        self._maybe_fail()
        return InMemoryCursor([d for d in self.documents if _matches(d, filter or {})])

    async def count_documents(self, filter: dict) -> int:
        self._maybe_fail()
        return sum(1 for d in self.documents if _matches(d, filter))

    async def find_one_and_update(self, filter: dict, update: dict, return_document=ReturnDocument.BEFORE) -> dict | None:
        self._maybe_fail()
        for position, document in enumerate(self.documents):
            if not _matches(document, filter):
                continue
            updated = copy.deepcopy(document)
            updated.update(update.get("$set", {}))
            for field, amount in update.get("$inc", {}).items():
                updated[field] = updated.get(field, 0) + amount
            self._check_unique(updated, ignore_id=document["_id"])
            self.documents[position] = updated
            chosen = updated if return_document == ReturnDocument.AFTER else document
            return copy.deepcopy(chosen)
        return None

    async def find_one_and_delete(self, filter: dict) -> dict | None:
        self._maybe_fail()
        for position, document in enumerate(self.documents):
            if _matches(document, filter):
                return self.documents.pop(position)
        return None


class InMemoryDatabase:
    def __init__(self, name: str = "crudkit_test"):
        self.name = name
        self.collections: dict[str, InMemoryCollection] = {}
        self._pending_error: BaseException | None = None

    def __getitem__(self, name: str) -> InMemoryCollection:
        if name not in self.collections:
            self.collections[name] = InMemoryCollection(name)
        return self.collections[name]

    def fail_next(self, exc: BaseException) -> None:
        self._pending_error = exc

    async def command(self, name: str, *args: Any, **kwargs: Any) -> dict:
        if self._pending_error is not None:
            exc, self._pending_error = self._pending_error, None
            raise exc
        return {"ok": 1.0}


@pytest.fixture
async def database() -> InMemoryDatabase:
    """
    A fresh in-memory database per test, with the application's indexes
    (users.email and products.sku unique) already created.
    """
    from crudkit.database.client import ensure_indexes

    db = InMemoryDatabase()
    await ensure_indexes(db)
    return db
