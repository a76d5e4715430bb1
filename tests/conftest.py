"""Shared fixtures: an in-memory stand-in for the Supabase client."""

from __future__ import annotations

import itertools
from typing import Any, Dict, List, Optional

import pytest

from registry.data import ProfileStore


class FakeResponse:
    def __init__(self, data: List[Dict[str, Any]], count: Optional[int] = None) -> None:
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query builder that records every call and evaluates simple filters."""

    def __init__(self, client: "FakeSupabase", table: str) -> None:
        self.client = client
        self.table = table
        self.ops: List[tuple] = []
        self._negate = False

    def _record(self, *op: Any) -> "FakeQuery":
        self.ops.append(op)
        return self

    def select(self, *columns: str, count: Optional[str] = None) -> "FakeQuery":
        return self._record("select", columns, count)

    def insert(self, payload: Dict[str, Any]) -> "FakeQuery":
        return self._record("insert", payload)

    def update(self, changes: Dict[str, Any]) -> "FakeQuery":
        return self._record("update", changes)

    def delete(self) -> "FakeQuery":
        return self._record("delete")

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        return self._record("order", column, desc)

    def or_(self, expr: str) -> "FakeQuery":
        return self._record("or", expr)

    def eq(self, column: str, value: Any) -> "FakeQuery":
        return self._record("eq", column, value)

    def limit(self, n: int) -> "FakeQuery":
        return self._record("limit", n)

    @property
    def not_(self) -> "FakeQuery":
        self._negate = True
        return self

    def is_(self, column: str, value: Any) -> "FakeQuery":
        op = ("not_is" if self._negate else "is", column, value)
        self._negate = False
        return self._record(*op)

    def op_names(self) -> List[str]:
        return [op[0] for op in self.ops]

    def execute(self) -> FakeResponse:
        self.client.queries.append(self)
        kind = self.ops[0][0]
        if kind in self.client.fail_on:
            raise RuntimeError(f"{kind} failed")

        rows = self.client.rows
        if kind == "insert":
            row = dict(self.ops[0][1])
            row.setdefault("id", str(next(self.client.ids)))
            row.setdefault("created_at", "2026-10-17T00:00:00+00:00")
            rows.append(row)
            return FakeResponse([row])

        matched = [r for r in rows if self._matches(r)]
        if kind == "update":
            for r in matched:
                r.update(self.ops[0][1])
            return FakeResponse([dict(r) for r in matched])
        if kind == "delete":
            self.client.rows = [r for r in rows if r not in matched]
            return FakeResponse([dict(r) for r in matched])

        for op in self.ops:
            if op[0] == "limit":
                matched = matched[: op[1]]
        count = len(matched) if self.ops[0][2] == "exact" else None
        return FakeResponse([dict(r) for r in matched], count)

    def _matches(self, row: Dict[str, Any]) -> bool:
        for op in self.ops:
            if op[0] == "eq" and str(row.get(op[1])) != str(op[2]):
                return False
            if op[0] == "not_is" and row.get(op[1]) is None:
                return False
        return True


class FakeBucket:
    def __init__(self, client: "FakeSupabase", name: str) -> None:
        self.client = client
        self.name = name

    def upload(self, path: str, content: bytes, options: Dict[str, str]) -> Dict[str, str]:
        if "upload" in self.client.fail_on:
            raise RuntimeError("upload failed")
        self.client.uploads.append((path, content, options))
        return {"path": path}

    def get_public_url(self, path: str) -> str:
        return f"https://cdn.test/{self.name}/{path}"

    def remove(self, paths: List[str]) -> None:
        if "remove" in self.client.fail_on:
            raise RuntimeError("remove failed")
        self.client.removed.extend(paths)


class FakeStorage:
    def __init__(self, client: "FakeSupabase") -> None:
        self.client = client

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self.client, bucket)


class FakeSupabase:
    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        self.rows: List[Dict[str, Any]] = [dict(r) for r in (rows or [])]
        self.queries: List[FakeQuery] = []
        self.uploads: List[tuple] = []
        self.removed: List[str] = []
        self.fail_on: set = set()
        self.ids = itertools.count(100)
        self.storage = FakeStorage(self)
        self.tables: List[str] = []

    def table(self, name: str) -> FakeQuery:
        self.tables.append(name)
        return FakeQuery(self, name)


SAMPLE_PROFILES = [
    {
        "id": "1",
        "created_at": "2026-10-15T09:00:00+00:00",
        "name": "Rahim Khan",
        "gender": "Male",
        "age": 34,
        "date_of_birth": "1992-03-04",
        "current_location": "Kolkata",
        "current_occupation": "Driver",
        "date_of_entry": "2026-10-01",
        "embassy_contacted": False,
    },
    {
        "id": "2",
        "created_at": "2026-10-16T09:00:00+00:00",
        "name": "Fatima Begum",
        "gender": "Female",
        "age": 28,
        "date_of_birth": "1998-01-20",
        "current_location": "Delhi",
        "current_occupation": "Tailor",
        "date_of_entry": "2026-06-11",
        "embassy_contacted": True,
    },
    {
        "id": "3",
        "created_at": "2026-10-14T09:00:00+00:00",
        "name": "Jon Doe",
        "gender": "Other",
        "age": 45,
        "date_of_birth": "1981-07-07",
        "current_location": "Kolkata",
        "current_occupation": None,
        "date_of_entry": None,
        "embassy_contacted": False,
    },
]


@pytest.fixture
def fake_client() -> FakeSupabase:
    return FakeSupabase(SAMPLE_PROFILES)


@pytest.fixture
def store(fake_client: FakeSupabase) -> ProfileStore:
    return ProfileStore(fake_client, table="profiles", bucket="profile-photos")
