"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field

from kitchen_planner.adapters.supabase_week_plan_repository import (
    SupabaseWeekPlanRepository,
)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": []}
    )
    last_payload: object | None = None
    last_columns: tuple[str, ...] = ()
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_on_conflict: str | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *columns: str) -> "FakeTable":
        self._action = "select"
        self.last_columns = columns
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        queue = self.response_queue.get(self._action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_get_payload_returns_stored_plan() -> None:
    client = FakeSupabaseClient()
    table = client.table("week_plans")
    table.queue("select", [{"payload": {"days": {}, "__version": "menuData.v2"}}])
    repo = SupabaseWeekPlanRepository(client)  # type: ignore[arg-type]

    payload = repo.get_payload("2026-10")

    assert payload == {"days": {}, "__version": "menuData.v2"}
    assert table.last_columns == ("payload",)
    assert table.last_filters == [("plan_id", "2026-10")]


def test_get_payload_missing_returns_none() -> None:
    client = FakeSupabaseClient()
    client.table("week_plans").queue("select", [])
    repo = SupabaseWeekPlanRepository(client)  # type: ignore[arg-type]

    assert repo.get_payload("2026-11") is None


def test_get_payload_ignores_non_object_payload() -> None:
    client = FakeSupabaseClient()
    client.table("week_plans").queue("select", [{"payload": "corrupted"}])
    repo = SupabaseWeekPlanRepository(client)  # type: ignore[arg-type]

    assert repo.get_payload("2026-12") is None


def test_save_payload_upserts_by_plan_id() -> None:
    client = FakeSupabaseClient()
    repo = SupabaseWeekPlanRepository(client, table="plans")  # type: ignore[arg-type]

    repo.save_payload("2026-10", {"days": {}})

    table = client.tables["plans"]
    assert table.last_on_conflict == "plan_id"
    assert isinstance(table.last_payload, dict)
    assert table.last_payload["plan_id"] == "2026-10"
    assert table.last_payload["payload"] == {"days": {}}
    assert "updated_at" in table.last_payload
