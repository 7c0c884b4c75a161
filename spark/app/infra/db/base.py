# spark/app/infra/db/base.py
"""
Abstract repositories for the idea store.
This interface allows easy swapping between storage backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional

from spark.app.domain.models import IdeaRecord, Recipe


class IdeaRepository(ABC):
    """
    Persistence for generated idea records.

    Implementations:
    - SupabaseIdeaRepository: Postgres table `ideas` through Supabase
    """

    @abstractmethod
    def insert_idea(self, record: IdeaRecord) -> IdeaRecord:
        """
        Append one record.

        Returns:
            The stored record, with id and created_at populated
        """

    @abstractmethod
    def get_idea(self, idea_id: int) -> Optional[IdeaRecord]:
        """Return the record, or None if it does not exist."""

    @abstractmethod
    def update_generated_ideas(
        self,
        idea_id: int,
        mini_ideas: list[str],
        title_summaries: list[str],
        created_at: datetime,
    ) -> bool:
        """
        Overwrite the generated fields of one record in place.
        No other column is touched.

        Returns:
            True if a row was updated
        """

    @abstractmethod
    def list_ideas_by_date(self, date: str) -> list[IdeaRecord]:
        """All records of one date bucket, newest first."""

    @abstractmethod
    def list_ideas(self, limit: int = 30, offset: int = 0) -> list[IdeaRecord]:
        """Records ordered by date then created_at, both descending."""

    @abstractmethod
    def count_ideas(self) -> int:
        pass

    @abstractmethod
    def list_dates(self) -> list[str]:
        """Distinct dates, most recent first."""

    @abstractmethod
    def delete_ideas_by_date(self, date: str) -> int:
        """Returns the number of deleted rows."""

    @abstractmethod
    def delete_idea(self, idea_id: int) -> bool:
        pass


class RecipeRepository(ABC):
    """
    Persistence for prompt recipes.

    Implementations:
    - SupabaseRecipeRepository: Postgres table `recipes` through Supabase
    """

    @abstractmethod
    def get_recipe(self, recipe_id: int) -> Optional[Recipe]:
        pass

    @abstractmethod
    def get_default_recipe(self) -> Optional[Recipe]:
        pass

    @abstractmethod
    def list_recipes(self) -> list[Recipe]:
        """Default recipe first, then by name."""

    @abstractmethod
    def create_recipe(self, values: dict[str, Any]) -> Recipe:
        """Insert a non-default recipe from already-validated column values."""

    @abstractmethod
    def update_recipe(self, recipe_id: int, changes: dict[str, Any]) -> Optional[Recipe]:
        """Apply column changes and bump updated_at. None if the recipe is missing."""

    @abstractmethod
    def delete_recipe(self, recipe_id: int) -> bool:
        pass
