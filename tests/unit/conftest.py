from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from spark.app.domain.models import IdeaRecord, ImageSource, LaunchSource, PageContent, Recipe
from spark.app.infra.db.base import IdeaRepository, RecipeRepository


class FakeQuery:
    """Chainable stand-in for the postgrest request builder."""

    def __init__(self, store: "FakeSupabaseClient", table: str) -> None:
        self._store = store
        self._table = table
        self._mode = "select"
        self._payload: dict[str, Any] | None = None
        self._filters: list[tuple[str, Any]] = []
        self._orders: list[tuple[str, bool]] = []
        self._limit: int | None = None
        self._range: tuple[int, int] | None = None
        self._count: str | None = None

    def select(self, columns: str = "*", count: str | None = None) -> "FakeQuery":
        self._mode = "select"
        self._count = count
        return self

    def insert(self, row: dict[str, Any]) -> "FakeQuery":
        self._mode = "insert"
        self._payload = dict(row)
        return self

    def update(self, changes: dict[str, Any]) -> "FakeQuery":
        self._mode = "update"
        self._payload = dict(changes)
        return self

    def delete(self) -> "FakeQuery":
        self._mode = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._orders.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._range = (start, end)
        return self

    def _matching(self) -> list[dict[str, Any]]:
        rows = self._store.rows(self._table)
        return [row for row in rows if all(row.get(col) == value for col, value in self._filters)]

    def execute(self) -> SimpleNamespace:
        self._store.executed.append((self._table, self._mode))
        if self._store.fail_with is not None:
            raise self._store.fail_with

        if self._mode == "insert":
            row = self._store.add_row(self._table, self._payload or {})
            return SimpleNamespace(data=[dict(row)], count=None)

        matching = self._matching()
        if self._mode == "update":
            for row in matching:
                row.update(self._payload or {})
            return SimpleNamespace(data=[dict(row) for row in matching], count=None)

        if self._mode == "delete":
            table_rows = self._store.rows(self._table)
            for row in matching:
                table_rows.remove(row)
            return SimpleNamespace(data=[dict(row) for row in matching], count=None)

        total = len(matching)
        for column, desc in reversed(self._orders):
            matching.sort(key=lambda row: (row.get(column) is None, row.get(column)), reverse=desc)
        if self._range is not None:
            start, end = self._range
            matching = matching[start : end + 1]
        if self._limit is not None:
            matching = matching[: self._limit]
        return SimpleNamespace(
            data=[dict(row) for row in matching],
            count=total if self._count else None,
        )


class FakeSupabaseClient:
    """In-memory tables keyed by name; assigns ids and created_at on insert."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.executed: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None
        self._next_id = 1

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def add_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        stored = dict(row)
        if stored.get("id") is None:
            stored["id"] = self._next_id
            self._next_id += 1
        else:
            self._next_id = max(self._next_id, int(stored["id"]) + 1)
        stored.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.rows(table).append(stored)
        return stored

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


class InMemoryIdeaRepository(IdeaRepository):
    def __init__(self) -> None:
        self.records: dict[int, IdeaRecord] = {}
        self.inserted: list[IdeaRecord] = []
        self._next_id = 1

    def insert_idea(self, record: IdeaRecord) -> IdeaRecord:
        stored = IdeaRecord(**{**record.__dict__, "id": self._next_id,
                               "created_at": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)})
        self._next_id += 1
        self.records[stored.id] = stored
        self.inserted.append(stored)
        return stored

    def get_idea(self, idea_id: int) -> Optional[IdeaRecord]:
        return self.records.get(idea_id)

    def update_generated_ideas(self, idea_id, mini_ideas, title_summaries, created_at) -> bool:
        record = self.records.get(idea_id)
        if record is None:
            return False
        record.mini_ideas = list(mini_ideas)
        record.title_summaries = list(title_summaries)
        record.created_at = created_at
        return True

    def list_ideas_by_date(self, date: str) -> list[IdeaRecord]:
        return [record for record in self.records.values() if record.date == date]

    def list_ideas(self, limit: int = 30, offset: int = 0) -> list[IdeaRecord]:
        ordered = sorted(self.records.values(), key=lambda record: record.date, reverse=True)
        return ordered[offset : offset + limit]

    def count_ideas(self) -> int:
        return len(self.records)

    def list_dates(self) -> list[str]:
        return sorted({record.date for record in self.records.values()}, reverse=True)

    def delete_ideas_by_date(self, date: str) -> int:
        doomed = [key for key, record in self.records.items() if record.date == date]
        for key in doomed:
            del self.records[key]
        return len(doomed)

    def delete_idea(self, idea_id: int) -> bool:
        return self.records.pop(idea_id, None) is not None


class InMemoryRecipeRepository(RecipeRepository):
    def __init__(self, recipes: list[Recipe] | None = None) -> None:
        self.recipes: dict[int, Recipe] = {recipe.id: recipe for recipe in recipes or []}
        self.deleted: list[int] = []

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        return self.recipes.get(recipe_id)

    def get_default_recipe(self) -> Optional[Recipe]:
        return next((recipe for recipe in self.recipes.values() if recipe.is_default), None)

    def list_recipes(self) -> list[Recipe]:
        return sorted(self.recipes.values(), key=lambda recipe: (not recipe.is_default, recipe.name))

    def create_recipe(self, values: dict[str, Any]) -> Recipe:
        raise NotImplementedError

    def update_recipe(self, recipe_id: int, changes: dict[str, Any]) -> Optional[Recipe]:
        raise NotImplementedError

    def delete_recipe(self, recipe_id: int) -> bool:
        self.deleted.append(recipe_id)
        return self.recipes.pop(recipe_id, None) is not None


class LLMStub:
    """Returns queued responses in order and records every call."""

    def __init__(self, *responses: str) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def generate_content(
        self,
        prompt: str,
        *,
        image: ImageSource | None = None,
        max_tokens: int = 2000,
    ) -> str:
        self.calls.append({"prompt": prompt, "image": image, "max_tokens": max_tokens})
        return self.responses.pop(0)


class LaunchFeedStub:
    def __init__(self, launches: list[LaunchSource] | None = None, error: Exception | None = None) -> None:
        self.launches = launches or []
        self.error = error
        self.requested: list[str | None] = []

    def fetch_top_launches(self, target_date: str | None = None) -> list[LaunchSource]:
        self.requested.append(target_date)
        if self.error is not None:
            raise self.error
        return list(self.launches)


class PageFetcherStub:
    def __init__(self, page: PageContent | None = None) -> None:
        self.page = page
        self.fetched: list[str] = []

    def fetch(self, url: str) -> PageContent:
        self.fetched.append(url)
        return self.page or PageContent(title=url, description="")


@pytest.fixture
def fake_supabase() -> FakeSupabaseClient:
    return FakeSupabaseClient()


@pytest.fixture
def sample_launches() -> list[LaunchSource]:
    return [
        LaunchSource(
            name="Alpha",
            tagline="Alpha tagline",
            description="Alpha does things",
            url="https://alpha.example",
            upvotes=420,
            image_url="https://img.example/alpha.png",
        ),
        LaunchSource(
            name="Beta",
            tagline="Beta tagline",
            description="Beta does other things",
            url="https://beta.example",
            upvotes=300,
        ),
        LaunchSource(
            name="Gamma",
            tagline="Gamma tagline",
            description="",
            url="https://gamma.example",
            upvotes=12,
        ),
    ]
