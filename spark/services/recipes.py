# spark/services/recipes.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from spark.app.domain.errors import NotFoundError, ValidationError
from spark.app.domain.models import Recipe, RecipeSettings, SourceKind
from spark.app.infra.db.base import RecipeRepository

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("name", "description", "prompt_style", "exclusions", "source")


class RecipeResolver:
    """
    Looks up the prompt overrides for a generation run.

    Lookup failures degrade to empty settings; the prompt builder always has
    baseline defaults to fall back on.
    """

    def __init__(self, repository: RecipeRepository) -> None:
        self._repo = repository

    def _lookup(self, recipe_id: Optional[int]) -> Optional[Recipe]:
        if recipe_id is None:
            return self._repo.get_default_recipe()
        recipe = self._repo.get_recipe(recipe_id)
        if recipe is None:
            logger.warning("Recipe %s not found; using baseline defaults", recipe_id)
        return recipe

    def resolve(self, recipe_id: Optional[int] = None) -> RecipeSettings:
        try:
            recipe = self._lookup(recipe_id)
        except Exception as error:
            logger.warning("Error getting recipe settings (recipe_id=%s): %s", recipe_id, error)
            return RecipeSettings()

        if recipe is None:
            return RecipeSettings()
        return recipe.to_settings()


def _clean_optional(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Expected a string value")
    return value.strip() or None


def _clean_exclusions(value: Any) -> str:
    if value is None:
        return json.dumps([])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError("exclusions must be a list of strings")
    return json.dumps([item.strip() for item in value if item.strip()])


def _clean_source(value: Any) -> Optional[str]:
    kind = SourceKind.parse(value)
    return kind.value if kind else None


def _clean_name(value: Any, *, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def list_recipes(repo: RecipeRepository) -> list[Recipe]:
    return repo.list_recipes()


def get_recipe(repo: RecipeRepository, recipe_id: int) -> Recipe:
    recipe = repo.get_recipe(recipe_id)
    if recipe is None:
        raise NotFoundError("Recipe", recipe_id)
    return recipe


def create_recipe(repo: RecipeRepository, payload: dict[str, Any]) -> Recipe:
    values = {
        "name": _clean_name(payload.get("name"), message="Recipe name is required"),
        "description": _clean_optional(payload.get("description")),
        "prompt_style": _clean_optional(payload.get("prompt_style")),
        "exclusions": _clean_exclusions(payload.get("exclusions")),
        "source": _clean_source(payload.get("source")),
    }
    return repo.create_recipe(values)


def update_recipe(repo: RecipeRepository, recipe_id: int, changes: dict[str, Any]) -> Recipe:
    """Apply only the fields present in `changes`."""
    get_recipe(repo, recipe_id)

    updates: dict[str, Any] = {}
    for field_name in _EDITABLE_FIELDS:
        if field_name not in changes:
            continue
        value = changes[field_name]
        if field_name == "name":
            updates["name"] = _clean_name(value, message="Recipe name cannot be empty")
        elif field_name == "exclusions":
            updates["exclusions"] = _clean_exclusions(value)
        elif field_name == "source":
            updates["source"] = _clean_source(value)
        else:
            updates[field_name] = _clean_optional(value)

    if not updates:
        raise ValidationError("No fields to update")

    updated = repo.update_recipe(recipe_id, updates)
    if updated is None:
        raise NotFoundError("Recipe", recipe_id)
    return updated


def delete_recipe(repo: RecipeRepository, recipe_id: int) -> None:
    recipe = get_recipe(repo, recipe_id)
    if recipe.is_default:
        raise ValidationError("Cannot delete the default recipe")
    repo.delete_recipe(recipe_id)
    logger.info("Deleted recipe: id=%s", recipe_id)
