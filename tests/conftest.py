"""
Shared fixtures: an in-memory stand-in for the Supabase client and a
TestClient wired to it through FastAPI dependency overrides.
"""

import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from shapely import wkb, wkt
from shapely.geometry import box

from app.core.cache import cache
from app.core.database import get_supabase
from app.main import app
from app.models.initiative import SOCIAL_FIELDS


# --------------------------------------------------
# Fake query builder
# --------------------------------------------------

class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.filters = []
        self.action = "select"
        self.payload = None
        self.count_mode = None
        self.order_by = None
        self.window = None
        self.max_rows = None

    # actions
    def select(self, columns="*", count=None):
        self.count_mode = count
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda r: r.get(column) in values)
        return self

    def ilike(self, column, pattern):
        regex = re.compile(
            "^" + ".*".join(re.escape(p) for p in pattern.split("%")) + "$",
            re.IGNORECASE,
        )
        self.filters.append(lambda r: r.get(column) is not None and bool(regex.match(r[column])))
        return self

    def gte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r[column] >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r[column] <= value)
        return self

    # modifiers
    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def range(self, start, end):
        self.window = (start, end)
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matching(self):
        return [r for r in self.db.tables[self.table] if all(f(r) for f in self.filters)]

    def execute(self):
        if self.db.fail_on == (self.table, self.action):
            raise RuntimeError("Database error")

        if self.action == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = [self.db.add(self.table, dict(r)) for r in rows]
            return SimpleNamespace(data=[dict(r) for r in inserted], count=None)

        if self.action == "update":
            matched = self._matching()
            for row in matched:
                row.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        if self.action == "delete":
            matched = self._matching()
            self.db.tables[self.table] = [r for r in self.db.tables[self.table] if r not in matched]
            return SimpleNamespace(data=[dict(r) for r in matched], count=None)

        rows = self._matching()
        count = len(rows) if self.count_mode == "exact" else None

        if self.order_by:
            column, desc = self.order_by
            rows = sorted(rows, key=lambda r: r.get(column) or "", reverse=desc)
        if self.window:
            start, end = self.window
            rows = rows[start:end + 1]
        if self.max_rows is not None:
            rows = rows[:self.max_rows]

        return SimpleNamespace(data=[dict(r) for r in rows], count=count)


class FakeRPC:
    def __init__(self, result):
        self.result = result

    def execute(self):
        return SimpleNamespace(data=self.result)


class FakeAuth:
    def __init__(self, tokens):
        self.tokens = tokens

    def get_user(self, jwt):
        if jwt not in self.tokens:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=self.tokens[jwt]))


class FakeSupabase:
    def __init__(self):
        self.tables = {"initiatives": [], "users_profiles": []}
        self.tokens = {"token-alice": "user-alice", "token-bob": "user-bob"}
        self.auth = FakeAuth(self.tokens)
        self.rpc_calls = []
        self.fail_on = None
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def add(self, table, row):
        if table == "initiatives":
            self._clock += timedelta(minutes=1)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("verified", False)
            row.setdefault("created_at", self._clock.isoformat())
            row.setdefault("updated_at", self._clock.isoformat())
            # PostgREST hands geography columns back as EWKB hex
            geom = wkt.loads(row["location"])
            row["location"] = wkb.dumps(geom, hex=True, srid=4326)
        self.tables[table].append(row)
        return row

    def add_initiative(self, name, type, lng, lat, **extra):
        row = {"name": name, "type": type, "location": f"POINT({lng} {lat})", **extra}
        return self.add("initiatives", row)

    def rpc(self, name, params):
        self.rpc_calls.append((name, params))

        if name == "get_initiatives_in_bounds":
            envelope = box(params["p_west"], params["p_south"], params["p_east"], params["p_north"])
            result = []
            for row in self.tables["initiatives"]:
                point = wkb.loads(row["location"], hex=True)
                if not envelope.contains(point):
                    continue
                if params["p_types"] and row["type"] not in params["p_types"]:
                    continue
                if params["p_verified_only"] and not row.get("verified"):
                    continue
                out = {k: v for k, v in row.items() if k != "location"}
                out["location_text"] = point.wkt
                result.append(out)
            return FakeRPC(result[:params["p_limit"]])

        if name == "insert_initiative":
            row = self.add("initiatives", {
                "name": params["p_name"],
                "type": params["p_type"],
                "location": params["p_location_text"],
                "description": params["p_description"],
                "address": params["p_address"],
                "verified": params["p_verified"],
                "website": params["p_website"],
                "phone": params["p_phone"],
                "email": params["p_email"],
                "opening_hours": params["p_opening_hours"],
                **{f: params.get(f"p_{f}") for f in SOCIAL_FIELDS},
                "user_id": None,
            })
            return FakeRPC(row["id"])

        raise AssertionError(f"unexpected rpc {name}")


# --------------------------------------------------
# Fixtures
# --------------------------------------------------

@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_supabase] = lambda: db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def alice():
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob():
    return {"Authorization": "Bearer token-bob"}
