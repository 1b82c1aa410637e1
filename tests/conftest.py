import re
import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.friendships.routes import get_friendship_service
from app.modules.friendships.service import FriendshipService


class FakeAPIError(Exception):
    """Shape of postgrest.exceptions.APIError that the services look at."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, data):
        self.data = data


def _split_top_level(expr: str) -> list[str]:
    parts, depth, current = [], 0, ""
    for ch in expr:
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        current += ch
    if current:
        parts.append(current)
    return parts


# Columns typed uuid in the migration
UUID_COLUMNS = {"id", "user_a_id", "user_b_id"}


def _uuid_text(value) -> str:
    """Postgres' uuid input: any case accepted, canonical lowercase stored."""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise FakeAPIError(f'invalid input syntax for type uuid: "{value}"', code="22P02") from None


def _canonical(row: dict) -> dict:
    for column in UUID_COLUMNS & row.keys():
        if row[column] is not None:
            row[column] = _uuid_text(row[column])
    return row


def _condition(column: str, op: str, value):
    if column in UUID_COLUMNS and op == "eq":
        value = _uuid_text(value)
    elif column in UUID_COLUMNS and op == "in":
        value = [_uuid_text(v) for v in value]

    def check(row: dict) -> bool:
        actual = row.get(column)
        if column in UUID_COLUMNS and actual is not None:
            actual = str(actual).lower()
        if op == "eq":
            return actual is not None and str(actual) == str(value)
        if op == "is":
            return actual is None if value == "null" else actual is value
        if op == "in":
            return actual is not None and str(actual) in {str(v) for v in value}
        if op == "ilike":
            pattern = re.escape(value).replace(r"\*", ".*")
            return actual is not None and re.fullmatch(pattern, str(actual), re.IGNORECASE) is not None
        raise NotImplementedError(op)

    return check


def _parse_or(expr: str):
    groups = []
    for term in _split_top_level(expr):
        if term.startswith("and(") and term.endswith(")"):
            conditions = [_parse_condition(c) for c in _split_top_level(term[4:-1])]
            groups.append(lambda row, cs=conditions: all(c(row) for c in cs))
        else:
            groups.append(_parse_condition(term))
    return lambda row: any(g(row) for g in groups)


def _parse_condition(text: str):
    column, op, value = text.split(".", 2)
    return _condition(column, op, value)


class FakeQuery:
    """The slice of the postgrest request builder the services use."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.orders = []
        self._limit = None
        self.error = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    def _filter(self, build, *args):
        # Bad literals only fail once the request reaches the server
        try:
            self.filters.append(build(*args))
        except FakeAPIError as e:
            self.error = self.error or e
        return self

    def eq(self, column, value):
        return self._filter(_condition, column, "eq", value)

    def is_(self, column, value):
        return self._filter(_condition, column, "is", value)

    def in_(self, column, values):
        return self._filter(_condition, column, "in", list(values))

    def or_(self, expr):
        return self._filter(_parse_or, expr)

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self):
        self.db.calls.append((self.table, self.op))
        failure = self.db.failures.pop((self.table, self.op), None)
        if failure is not None:
            raise failure
        if self.error is not None:
            raise self.error
        return FakeResponse(getattr(self, f"_{self.op}")())

    def _matching(self):
        return [row for row in self.db.tables[self.table] if all(f(row) for f in self.filters)]

    def _select(self):
        if self.table in self.db.stale_reads:
            self.db.stale_reads.discard(self.table)
            return []
        rows = [dict(row) for row in self._matching()]
        for column, desc in reversed(self.orders):
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: str(r[column]), reverse=desc)
            rows = present + missing
        if self._limit is not None:
            rows = rows[: self._limit]
        return rows

    def _insert(self):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for data in payload:
            row = self.db.with_defaults(self.table, _canonical(dict(data)))
            self.db.check_constraints(self.table, row)
            self.db.tables[self.table].append(row)
            inserted.append(dict(row))
        return inserted

    def _update(self):
        payload = _canonical(dict(self.payload))
        updated = []
        for row in self._matching():
            candidate = {**row, **payload}
            self.db.check_constraints(self.table, candidate, ignore_id=row["id"])
            row.update(payload)
            updated.append(dict(row))
        return updated

    def _delete(self):
        doomed = self._matching()
        self.db.tables[self.table] = [r for r in self.db.tables[self.table] if r not in doomed]
        return [dict(r) for r in doomed]


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail_uploads:
            raise FakeAPIError("storage unavailable")
        self.storage.objects[(self.name, path)] = (file, dict(file_options or {}))
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path):
        return f"https://fake.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.fail_uploads = False

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """In-memory stand-in for supabase.Client with the schema's constraints."""

    def __init__(self):
        self.tables = {"profiles": [], "friendships": [], "friendship_logs": []}
        self.calls = []
        self.failures = {}
        self.stale_reads = set()
        self.storage = FakeStorage()

    def table(self, name):
        return FakeQuery(self, name)

    def fail(self, table, op, code=None):
        """Make the next `op` on `table` raise."""
        self.failures[(table, op)] = FakeAPIError(f"{op} on {table} failed", code=code)

    def with_defaults(self, table, row):
        now = datetime.now(timezone.utc).isoformat()
        row.setdefault("id", str(uuid.uuid4()))
        if table == "profiles":
            row.setdefault("created_at", now)
            row.setdefault("updated_at", now)
        elif table == "friendships":
            row.setdefault("started_at", now)
            row.setdefault("ended_at", None)
        elif table == "friendship_logs":
            row.setdefault("created_at", now)
        return row

    def check_constraints(self, table, row, ignore_id=None):
        others = [r for r in self.tables[table] if r["id"] != ignore_id]
        if table == "profiles":
            if any(r["email"] == row.get("email") for r in others):
                raise FakeAPIError("duplicate key value violates unique constraint", code="23505")
            return
        profile_ids = {p["id"] for p in self.tables["profiles"]}
        if row["user_a_id"] not in profile_ids or row["user_b_id"] not in profile_ids:
            raise FakeAPIError("violates foreign key constraint", code="23503")
        if table == "friendships":
            if row["user_a_id"] == row["user_b_id"]:
                raise FakeAPIError("violates check constraint", code="23514")
            pair = {row["user_a_id"], row["user_b_id"]}
            if any({r["user_a_id"], r["user_b_id"]} == pair for r in others):
                raise FakeAPIError("duplicate key value violates unique constraint", code="23505")

    def add_profile(self, full_name, email, **fields):
        row = self.with_defaults("profiles", _canonical({"full_name": full_name, "email": email, **fields}))
        self.tables["profiles"].append(row)
        return row


class TickingClock:
    """One second later on every call."""

    def __init__(self, start=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def friendship_service(supabase, clock) -> FriendshipService:
    return FriendshipService(supabase, clock=clock)


@pytest.fixture
def alice(supabase) -> dict:
    return supabase.add_profile("Ahmet Yılmaz", "ahmet@example.com", birth_date="1990-05-15", height=175, weight=70)


@pytest.fixture
def bob(supabase) -> dict:
    return supabase.add_profile("Ayşe Demir", "ayse@example.com")


@pytest.fixture
def carol(supabase) -> dict:
    return supabase.add_profile("Mehmet Kaya", "mehmet@example.com")


@pytest.fixture
async def client(supabase, friendship_service) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_friendship_service] = lambda: friendship_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
