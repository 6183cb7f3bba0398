"""
Shared fixtures: in-memory Supabase stand-in, deterministic embeddings,
fake chat models.
"""

import hashlib
import math
import os
import uuid

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("LLM_API_KEY", "test-llm-key")
os.environ.setdefault("EMBEDDING_DIMENSIONS", "16")
os.environ.setdefault("EMBEDDING_DELAY_SECONDS", "0")

import pytest
from langchain_core.embeddings import Embeddings
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from app.features.query.generator import AnswerGenerator


# ── Fake Supabase ────────────────────────────────────────

class FakeResponse:
    def __init__(self, data):
        self.data = data
        self.count = len(data) if isinstance(data, list) else None


class FakeQuery:
    """Records one chained PostgREST call and applies it on execute()."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.on_conflict = None
        self.filters: list[tuple[str, object]] = []
        self.order_by: tuple[str, bool] | None = None
        self.limit_to: int | None = None

    def select(self, columns: str = "*", count: str | None = None):
        self.op, self.columns = "select", columns
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def upsert(self, data, on_conflict: str = "id"):
        self.op, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, n: int):
        self.limit_to = n
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(col) == val for col, val in self.filters)

    def _project(self, row: dict) -> dict:
        if self.columns.strip() == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in self.columns.split(",")}

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table_name, self.op))
        if self.db.should_fail(self.table_name, self.op, self.payload):
            raise RuntimeError(f"simulated {self.op} failure on {self.table_name}")

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "insert":
            new_rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for data in new_rows:
                row = {"id": str(uuid.uuid4()), **data}
                rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "upsert":
            key = self.on_conflict
            for row in rows:
                if row.get(key) == self.payload.get(key):
                    row.update(self.payload)
                    return FakeResponse([dict(row)])
            row = {"id": str(uuid.uuid4()), **self.payload}
            rows.append(row)
            return FakeResponse([dict(row)])

        selected = [r for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            selected.sort(key=lambda r: r.get(column), reverse=desc)
        if self.limit_to is not None:
            selected = selected[:self.limit_to]
        return FakeResponse([self._project(r) for r in selected])


class FakeRPC:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db, self.name, self.params = db, name, params

    def execute(self) -> FakeResponse:
        self.db.rpc_calls.append((self.name, self.params))
        if ("rpc", self.name) in self.db.failures:
            raise RuntimeError(f"simulated rpc failure: {self.name}")
        handler = getattr(self, f"_rpc_{self.name}")
        return FakeResponse(handler(**self.params))

    def _rpc_match_chunks(self, query_embedding, match_count, filter_course):
        docs = {
            d["id"] for d in self.db.tables.get("documents", [])
            if d.get("course_name") == filter_course and d.get("status") == "completed"
        }
        scored = [
            {
                "content": c["content"],
                "chunk_index": c["chunk_index"],
                "similarity": _cosine(query_embedding, c["embedding"]),
            }
            for c in self.db.tables.get("chunks", [])
            if c["document_id"] in docs
        ]
        scored.sort(key=lambda m: m["similarity"], reverse=True)
        return scored[:match_count]


class FakeBucket:
    def __init__(self, db: "FakeSupabase", name: str):
        self.db, self.name = db, name

    def upload(self, file, path, file_options=None):
        if ("storage", "upload") in self.db.failures:
            raise RuntimeError("simulated storage failure")
        self.db.objects[f"{self.name}/{path}"] = file
        return {"path": path}


class FakeStorage:
    def __init__(self, db: "FakeSupabase"):
        self.db = db

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self.db, bucket)


class FakeSupabase:
    """Just enough of supabase.Client for the services under test."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple[str, str]] = []
        self.rpc_calls: list[tuple[str, dict]] = []
        self.failures: set[tuple[str, str]] = set()
        self.payload_failures: list[tuple[str, str, object]] = []
        self.storage = FakeStorage(self)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: dict) -> FakeRPC:
        return FakeRPC(self, name, params)

    def fail(self, table: str, op: str) -> None:
        self.failures.add((table, op))

    def fail_if(self, table: str, op: str, predicate) -> None:
        """Fail only the calls whose payload satisfies `predicate`."""
        self.payload_failures.append((table, op, predicate))

    def should_fail(self, table: str, op: str, payload) -> bool:
        if (table, op) in self.failures:
            return True
        return any(
            t == table and o == op and predicate(payload)
            for t, o, predicate in self.payload_failures
        )


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


# ── Fake models ──────────────────────────────────────────

class HashEmbeddings(Embeddings):
    """Deterministic embeddings derived from a SHA-256 of the text."""

    def __init__(self, size: int = 16):
        self.size = size
        self.calls: list[str] = []

    def _vector(self, text: str) -> list[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(digest[i % len(digest)] - 127.5) / 127.5 for i in range(self.size)]

    def embed_query(self, text: str) -> list[float]:
        self.calls.append(text)
        return self._vector(text)

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_query(t) for t in texts]


class CountingFactory:
    """Chat model factory that counts how many times a model was requested."""

    def __init__(self, responses: list[str] | None = None, error: Exception | None = None):
        self.responses = responses or ["ok"]
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.error:
            raise self.error
        return FakeListChatModel(responses=self.responses)


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def embeddings() -> HashEmbeddings:
    return HashEmbeddings(size=16)


@pytest.fixture
def primary_llm() -> CountingFactory:
    return CountingFactory(responses=["Process scheduling decides which process runs next on the CPU."])


@pytest.fixture
def fallback_llm() -> CountingFactory:
    return CountingFactory(responses=["Fallback answer."])


@pytest.fixture
def generator(primary_llm, fallback_llm) -> AnswerGenerator:
    return AnswerGenerator(primary=primary_llm, fallback=fallback_llm)


def make_syllabus_text(pages: int = 50) -> str:
    """Multi-paragraph text shaped like an extracted operating-systems syllabus."""
    topics = [
        "Process scheduling selects which ready process runs on the CPU next.",
        "Round robin scheduling gives each process a fixed time quantum.",
        "Memory management maps logical addresses to physical frames.",
        "Deadlock requires mutual exclusion, hold and wait, no preemption and circular wait.",
        "File systems organise data into directories, inodes and blocks.",
    ]
    paragraphs = []
    for page in range(1, pages + 1):
        topic = topics[page % len(topics)]
        paragraphs.append(
            f"Unit {page}. {topic} Students should be able to explain the concept, "
            f"compare the trade-offs and solve numerical problems for page {page}."
        )
    return "\n\n".join(paragraphs)


@pytest.fixture
def syllabus_text() -> str:
    return make_syllabus_text()
