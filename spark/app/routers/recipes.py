# spark/app/routers/recipes.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from spark.app.deps import get_recipe_repository
from spark.app.infra.db.base import RecipeRepository
from spark.app.schemas.common import ApiResponse, ok
from spark.app.schemas.recipes import (
    DeleteRecipeResponse,
    RecipeCreate,
    RecipeResponse,
    RecipeUpdate,
)
from spark.services import recipes as recipe_service

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("", response_model=ApiResponse[list[RecipeResponse]])
def list_recipes(
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> ApiResponse[list[RecipeResponse]]:
    recipes = recipe_service.list_recipes(repo)
    return ok([RecipeResponse.from_recipe(recipe) for recipe in recipes])


@router.post("", response_model=ApiResponse[RecipeResponse], status_code=status.HTTP_201_CREATED)
def create_recipe(
    payload: RecipeCreate,
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> ApiResponse[RecipeResponse]:
    recipe = recipe_service.create_recipe(
        repo,
        {
            "name": payload.name,
            "description": payload.description,
            "prompt_style": payload.promptStyle,
            "exclusions": payload.exclusions,
            "source": payload.source,
        },
    )
    return ok(RecipeResponse.from_recipe(recipe))


@router.get("/{recipe_id}", response_model=ApiResponse[RecipeResponse])
def get_recipe(
    recipe_id: int,
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> ApiResponse[RecipeResponse]:
    return ok(RecipeResponse.from_recipe(recipe_service.get_recipe(repo, recipe_id)))


@router.put("/{recipe_id}", response_model=ApiResponse[RecipeResponse])
def update_recipe(
    recipe_id: int,
    payload: RecipeUpdate,
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> ApiResponse[RecipeResponse]:
    recipe = recipe_service.update_recipe(repo, recipe_id, payload.to_changes())
    return ok(RecipeResponse.from_recipe(recipe))


@router.delete("/{recipe_id}", response_model=ApiResponse[DeleteRecipeResponse])
def delete_recipe(
    recipe_id: int,
    repo: RecipeRepository = Depends(get_recipe_repository),
) -> ApiResponse[DeleteRecipeResponse]:
    recipe_service.delete_recipe(repo, recipe_id)
    return ok(DeleteRecipeResponse())
