from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from spark.app.domain.models import Recipe


class RecipeResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    promptStyle: Optional[str] = None
    exclusions: list[str] = Field(default_factory=list)
    source: Optional[str] = None
    isDefault: bool = False
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @classmethod
    def from_recipe(cls, recipe: Recipe) -> "RecipeResponse":
        return cls(
            id=recipe.id,
            name=recipe.name,
            description=recipe.description,
            promptStyle=recipe.prompt_style,
            exclusions=list(recipe.exclusions),
            source=recipe.source.value if recipe.source else None,
            isDefault=recipe.is_default,
            createdAt=recipe.created_at.isoformat() if recipe.created_at else None,
            updatedAt=recipe.updated_at.isoformat() if recipe.updated_at else None,
        )


class RecipeCreate(BaseModel):
    name: str = Field(..., max_length=120)
    description: Optional[str] = Field(default=None, max_length=500)
    promptStyle: Optional[str] = None
    exclusions: Optional[list[str]] = None
    source: Optional[str] = None


class RecipeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=120)
    description: Optional[str] = Field(default=None, max_length=500)
    promptStyle: Optional[str] = None
    exclusions: Optional[list[str]] = None
    source: Optional[str] = None

    def to_changes(self) -> dict[str, object]:
        """Only fields the client actually sent, keyed by column name."""
        sent = self.model_dump(exclude_unset=True)
        if "promptStyle" in sent:
            sent["prompt_style"] = sent.pop("promptStyle")
        return sent


class DeleteRecipeResponse(BaseModel):
    deleted: bool = True
