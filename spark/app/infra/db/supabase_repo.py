from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from spark.app.domain.errors import RepositoryError
from spark.app.domain.models import IdeaRecord, Recipe, SourceKind
from spark.app.infra.db.base import IdeaRepository, RecipeRepository
from spark.services.normalize import align_titles

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    try:
        normalized = value.replace("Z", "+00:00") if value.endswith("Z") else value
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


def _safe_int(value: object, default: int = 0) -> int:
    try:
        return int(value) if value is not None else default  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _safe_str(value: object) -> str | None:
    return str(value) if value else None


def parse_json_list(value: object) -> list[str]:
    """
    Decode a JSON-text array column.
    Legacy rows may hold plain text or NULL; both read as an empty list.
    """
    if isinstance(value, list):
        return [str(item) if item is not None else "" for item in value]
    if not isinstance(value, str) or not value.lstrip().startswith("["):
        return []
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        return []
    if not isinstance(decoded, list):
        return []
    return [str(item) if item is not None else "" for item in decoded]


def row_to_idea(row: dict[str, Any]) -> IdeaRecord:
    mini_ideas = parse_json_list(row.get("mini_idea"))
    return IdeaRecord(
        id=_safe_int(row.get("id")) or None,
        date=str(row.get("date") or ""),
        source_name=str(row.get("name") or ""),
        source_description=str(row.get("description") or ""),
        source_url=str(row.get("url") or ""),
        upvotes=max(_safe_int(row.get("upvotes")), 0),
        image_url=_safe_str(row.get("image")),
        mini_ideas=mini_ideas,
        title_summaries=align_titles(mini_ideas, parse_json_list(row.get("title_summaries"))),
        created_at=_parse_datetime(row.get("created_at")),
    )


def idea_to_row(record: IdeaRecord) -> dict[str, Any]:
    return {
        "date": record.date,
        "name": record.source_name,
        "description": record.source_description,
        "url": record.source_url,
        "upvotes": record.upvotes,
        "image": record.image_url or None,
        "mini_idea": json.dumps(record.mini_ideas),
        "title_summaries": json.dumps(record.title_summaries),
    }


def row_to_recipe(row: dict[str, Any]) -> Recipe:
    return Recipe(
        id=_safe_int(row.get("id")),
        name=str(row.get("name") or ""),
        description=_safe_str(row.get("description")),
        prompt_style=_safe_str(row.get("prompt_style")),
        exclusions=parse_json_list(row.get("exclusions")),
        source=SourceKind.parse(row.get("source")),
        is_default=bool(row.get("is_default")),
        created_at=_parse_datetime(row.get("created_at")),
        updated_at=_parse_datetime(row.get("updated_at")),
    )


class _SupabaseRepository:
    TABLE_NAME = ""

    def __init__(self, client: Client):
        self._client = client

    def _table(self):
        return self._client.table(self.TABLE_NAME)

    def _execute(self, operation: str, query) -> Any:
        try:
            return query.execute()
        except (APIError, httpx.HTTPError) as error:
            logger.error("Idea store error during %s on %s: %s", operation, self.TABLE_NAME, error)
            raise RepositoryError(operation, str(error)) from error


class SupabaseIdeaRepository(_SupabaseRepository, IdeaRepository):
    TABLE_NAME = "ideas"

    def insert_idea(self, record: IdeaRecord) -> IdeaRecord:
        result = self._execute("insert", self._table().insert(idea_to_row(record)))
        if not result.data:
            raise RepositoryError("insert", "no row returned")

        stored = row_to_idea(result.data[0])
        logger.info("Stored idea: id=%s, date=%s, name=%s", stored.id, stored.date, stored.source_name)
        return stored

    def get_idea(self, idea_id: int) -> Optional[IdeaRecord]:
        result = self._execute(
            "get",
            self._table().select("*").eq("id", idea_id).limit(1),
        )
        rows = result.data or []
        return row_to_idea(rows[0]) if rows else None

    def update_generated_ideas(
        self,
        idea_id: int,
        mini_ideas: list[str],
        title_summaries: list[str],
        created_at: datetime,
    ) -> bool:
        changes = {
            "mini_idea": json.dumps(mini_ideas),
            "title_summaries": json.dumps(title_summaries),
            "created_at": created_at.isoformat(),
        }
        result = self._execute("refresh", self._table().update(changes).eq("id", idea_id))
        if result.data:
            logger.info("Refreshed idea: id=%s, mini_ideas=%d", idea_id, len(mini_ideas))
            return True
        return False

    def list_ideas_by_date(self, date: str) -> list[IdeaRecord]:
        result = self._execute(
            "list_by_date",
            self._table().select("*").eq("date", date).order("created_at", desc=True),
        )
        return [row_to_idea(row) for row in result.data or []]

    def list_ideas(self, limit: int = 30, offset: int = 0) -> list[IdeaRecord]:
        result = self._execute(
            "list",
            self._table()
            .select("*")
            .order("date", desc=True)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1),
        )
        return [row_to_idea(row) for row in result.data or []]

    def count_ideas(self) -> int:
        result = self._execute("count", self._table().select("id", count="exact").limit(1))
        return getattr(result, "count", 0) or 0

    def list_dates(self) -> list[str]:
        result = self._execute("list_dates", self._table().select("date").order("date", desc=True))
        dates: list[str] = []
        seen: set[str] = set()
        for row in result.data or []:
            value = row.get("date")
            if value and str(value) not in seen:
                seen.add(str(value))
                dates.append(str(value))
        return dates

    def delete_ideas_by_date(self, date: str) -> int:
        result = self._execute("delete_by_date", self._table().delete().eq("date", date))
        deleted = len(result.data or [])
        logger.info("Deleted %d ideas for %s", deleted, date)
        return deleted

    def delete_idea(self, idea_id: int) -> bool:
        result = self._execute("delete", self._table().delete().eq("id", idea_id))
        return bool(result.data)


class SupabaseRecipeRepository(_SupabaseRepository, RecipeRepository):
    TABLE_NAME = "recipes"

    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        result = self._execute("get", self._table().select("*").eq("id", recipe_id).limit(1))
        rows = result.data or []
        return row_to_recipe(rows[0]) if rows else None

    def get_default_recipe(self) -> Optional[Recipe]:
        result = self._execute(
            "get_default",
            self._table().select("*").eq("is_default", True).limit(1),
        )
        rows = result.data or []
        return row_to_recipe(rows[0]) if rows else None

    def list_recipes(self) -> list[Recipe]:
        result = self._execute(
            "list",
            self._table().select("*").order("is_default", desc=True).order("name"),
        )
        return [row_to_recipe(row) for row in result.data or []]

    def create_recipe(self, values: dict[str, Any]) -> Recipe:
        row = {**values, "is_default": False}
        result = self._execute("create", self._table().insert(row))
        if not result.data:
            raise RepositoryError("create", "no row returned")
        recipe = row_to_recipe(result.data[0])
        logger.info("Created recipe: id=%s, name=%s", recipe.id, recipe.name)
        return recipe

    def update_recipe(self, recipe_id: int, changes: dict[str, Any]) -> Optional[Recipe]:
        payload = {**changes, "updated_at": _now_utc().isoformat()}
        result = self._execute("update", self._table().update(payload).eq("id", recipe_id))
        rows = result.data or []
        return row_to_recipe(rows[0]) if rows else None

    def delete_recipe(self, recipe_id: int) -> bool:
        result = self._execute("delete", self._table().delete().eq("id", recipe_id))
        return bool(result.data)
