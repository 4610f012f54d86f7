"""
Shared fixtures: an in-memory stand-in for the async Firestore client.

FakeFirestore implements just the surface the dispatcher uses:
collection().add(), query chaining (where/order_by/start_after/limit/get),
document().get() and collections().
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any

import pytest

from core.dispatcher import Dispatcher
from core.firebase import FirestoreHandle


def _compare(op: str, actual: Any, expected: Any) -> bool:
    if op == "==":
        return actual == expected
    if op == "!=":
        return actual != expected
    if op == "in":
        return actual in expected
    if op == "not-in":
        return actual not in expected
    if op == "array_contains":
        return isinstance(actual, list) and expected in actual
    if op == "array_contains_any":
        return isinstance(actual, list) and any(item in actual for item in expected)
    if actual is None:
        return False
    if op == "<":
        return actual < expected
    if op == "<=":
        return actual <= expected
    if op == ">":
        return actual > expected
    if op == ">=":
        return actual >= expected
    raise ValueError(f"unsupported operator {op}")


@dataclass
class FakeSnapshot:
    reference: "FakeDocumentReference"
    data: dict | None

    @property
    def id(self) -> str:
        return self.reference.id

    @property
    def exists(self) -> bool:
        return self.data is not None

    def to_dict(self) -> dict | None:
        return None if self.data is None else dict(self.data)


class FakeDocumentReference:
    def __init__(self, store: "FakeFirestore", collection: str, doc_id: str) -> None:
        self._store = store
        self.collection_id = collection
        self.id = doc_id

    @property
    def path(self) -> str:
        return f"{self.collection_id}/{self.id}"

    async def get(self) -> FakeSnapshot:
        data = self._store.data.get(self.collection_id, {}).get(self.id)
        return FakeSnapshot(reference=self, data=data)


@dataclass
class FakeQuery:
    store: "FakeFirestore"
    collection_id: str
    filters: list = field(default_factory=list)
    orders: list = field(default_factory=list)
    cursor: FakeSnapshot | None = None
    max_results: int | None = None

    def _copy(self, **changes) -> "FakeQuery":
        values = {
            "store": self.store,
            "collection_id": self.collection_id,
            "filters": list(self.filters),
            "orders": list(self.orders),
            "cursor": self.cursor,
            "max_results": self.max_results,
        }
        values.update(changes)
        return FakeQuery(**values)

    def where(self, *, filter) -> "FakeQuery":
        return self._copy(filters=self.filters + [filter])

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> "FakeQuery":
        return self._copy(orders=self.orders + [(field_path, direction)])

    def start_after(self, snapshot: FakeSnapshot) -> "FakeQuery":
        return self._copy(cursor=snapshot)

    def limit(self, count: int) -> "FakeQuery":
        return self._copy(max_results=count)

    async def get(self) -> list[FakeSnapshot]:
        self.store.queries.append(self)
        if self.store.query_error is not None:
            raise self.store.query_error

        docs = self.store.data.get(self.collection_id, {})
        rows = [
            (doc_id, data)
            for doc_id, data in sorted(docs.items())
            if all(_compare(f.op_string, data.get(f.field_path), f.value) for f in self.filters)
        ]
        for field_path, direction in reversed(self.orders):
            rows.sort(key=lambda row: row[1].get(field_path), reverse=direction == "DESCENDING")

        if self.cursor is not None:
            ids = [doc_id for doc_id, _ in rows]
            if self.cursor.id in ids:
                rows = rows[ids.index(self.cursor.id) + 1:]

        if self.max_results is not None:
            rows = rows[: self.max_results]

        return [
            FakeSnapshot(
                reference=FakeDocumentReference(self.store, self.collection_id, doc_id),
                data=data,
            )
            for doc_id, data in rows
        ]


class FakeCollection(FakeQuery):
    @property
    def id(self) -> str:
        return self.collection_id

    async def add(self, data: dict) -> tuple[None, FakeDocumentReference]:
        doc_id = f"doc{next(self.store.ids):04d}"
        self.store.data.setdefault(self.collection_id, {})[doc_id] = dict(data)
        return None, FakeDocumentReference(self.store, self.collection_id, doc_id)


class FakeFirestore:
    def __init__(self) -> None:
        self.data: dict[str, dict[str, dict]] = {}
        self.ids = itertools.count(1)
        self.queries: list[FakeQuery] = []
        self.query_error: Exception | None = None
        self.calls = 0

    def collection(self, name: str) -> FakeCollection:
        self.calls += 1
        return FakeCollection(store=self, collection_id=name)

    def document(self, path: str) -> FakeDocumentReference:
        self.calls += 1
        parts = path.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"A document must have an even number of path elements: {path}")
        return FakeDocumentReference(self, parts[0], parts[1])

    async def collections(self):
        self.calls += 1
        for name in sorted(self.data):
            yield FakeCollection(store=self, collection_id=name)

    def seed(self, collection: str, doc_id: str, data: dict) -> None:
        self.data.setdefault(collection, {})[doc_id] = data


@pytest.fixture
def fake_store() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
def dispatcher(fake_store) -> Dispatcher:
    return Dispatcher(FirestoreHandle(client=fake_store))


@pytest.fixture
def degraded_dispatcher() -> Dispatcher:
    return Dispatcher(None)
