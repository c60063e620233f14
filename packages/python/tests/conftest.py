from typing import Any, Callable, Dict, List, Optional

import pytest

from evrec_catalog.item_repo import InMemoryItemRepo
from evrec_catalog.schemas import GeoPoint, Item
from evrec_corpus.corpus_store import InMemoryCorpusStore
from evrec_ranking.scoring import RecommenderEngine
from evrec_user.interactions.interactions_repo import InMemoryInteractionLedger


class _Resp:
    def __init__(self, data):
        self.data = data


class _FakeQuery:
    """Supports the subset of the postgrest query builder the repos use."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._op = "select"
        self._cols: Optional[List[str]] = None
        self._filters: List[Callable[[Dict[str, Any]], bool]] = []
        self._order: Optional[str] = None
        self._range: Optional[tuple] = None
        self._limit: Optional[int] = None
        self._payload: List[Dict[str, Any]] = []

    # Select chain
    def select(self, cols: str = "*"):
        self._op = "select"
        if cols.strip() != "*":
            self._cols = [c.strip() for c in cols.split(",")]
        return self

    def eq(self, col: str, value):
        self._filters.append(lambda r: r.get(col) == value)
        return self

    def neq(self, col: str, value):
        self._filters.append(lambda r: r.get(col) != value)
        return self

    def in_(self, col: str, values):
        wanted = set(values)
        self._filters.append(lambda r: r.get(col) in wanted)
        return self

    def order(self, col: str, desc: bool = False):
        self._order = col
        return self

    def range(self, start: int, end: int):
        self._range = (start, end)
        return self

    def limit(self, n: int):
        self._limit = n
        return self

    # Insert chain
    def insert(self, rows, returning: str = "representation"):
        self._op = "insert"
        self._payload = rows if isinstance(rows, list) else [rows]
        return self

    # Delete chain
    def delete(self):
        self._op = "delete"
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self):
        self._client.calls.append((self._table, self._op))
        if self._client.fail_with is not None:
            raise self._client.fail_with

        rows = self._client.tables.setdefault(self._table, [])
        if self._op == "insert":
            inserted = [dict(r) for r in self._payload]
            rows.extend(inserted)
            return _Resp([dict(r) for r in inserted])

        if self._op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self._client.tables[self._table] = [r for r in rows if not self._matches(r)]
            return _Resp(removed)

        out = [r for r in rows if self._matches(r)]
        if self._order:
            out.sort(key=lambda r: r.get(self._order))
        if self._range:
            out = out[self._range[0] : self._range[1] + 1]
        if self._limit is not None:
            out = out[: self._limit]
        if self._cols:
            out = [{c: r.get(c) for c in self._cols} for r in out]
        return _Resp([dict(r) for r in out])


class FakeSupabaseClient:
    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(r) for r in rows] for name, rows in (tables or {}).items()
        }
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    def table(self, name: str):
        # Return a new chain object per call to keep state separate
        return _FakeQuery(self, name)


def make_item(
    item_id: str,
    text: str = "",
    *,
    description: str = "",
    tags=(),
    categories=(),
    host_id: Optional[str] = None,
    at: Optional[tuple] = None,
    **extra,
) -> Item:
    return Item(
        id=item_id,
        name=text,
        description=description,
        tags=list(tags),
        categories=list(categories),
        host_id=host_id,
        location=GeoPoint(latitude=at[0], longitude=at[1]) if at else None,
        **extra,
    )


def split_tokenizer(text: str) -> List[str]:
    return text.lower().split()


@pytest.fixture()
def fake_client():
    return FakeSupabaseClient()


@pytest.fixture()
def corpus_store():
    return InMemoryCorpusStore()


@pytest.fixture()
def ledger():
    return InMemoryInteractionLedger()


@pytest.fixture()
def make_engine(corpus_store, ledger):
    """Build an engine over the given items and rebuild its corpus."""

    def _make(items, *, tokenizer=split_tokenizer) -> RecommenderEngine:
        engine = RecommenderEngine(
            InMemoryItemRepo(items), corpus_store, ledger, tokenizer=tokenizer
        )
        engine.force_recalculate()
        return engine

    return _make
