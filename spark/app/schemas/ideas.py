from __future__ import annotations

from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field

from spark.app.domain.models import IdeaRecord

GenerateType = Literal["url", "prompt", "image"]


class IdeaResponse(BaseModel):
    id: Optional[int] = None
    date: str
    sourceName: str
    sourceDescription: str
    sourceUrl: str
    upvotes: int = 0
    imageUrl: Optional[str] = None
    miniIdeas: list[str] = Field(default_factory=list)
    titleSummaries: list[str] = Field(default_factory=list)
    createdAt: Optional[str] = None

    @classmethod
    def from_record(cls, record: IdeaRecord) -> "IdeaResponse":
        return cls(
            id=record.id,
            date=record.date,
            sourceName=record.source_name,
            sourceDescription=record.source_description,
            sourceUrl=record.source_url,
            upvotes=record.upvotes,
            imageUrl=record.image_url,
            miniIdeas=list(record.mini_ideas),
            titleSummaries=list(record.title_summaries),
            createdAt=record.created_at.isoformat() if record.created_at else None,
        )


class GenerateRequest(BaseModel):
    type: GenerateType
    url: Optional[str] = None
    prompt: Optional[str] = None
    image: Optional[str] = Field(default=None, description="Base64 image, optionally as a data URL")
    recipeId: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("recipeId", "recipe_id"),
    )


class GenerateResponse(BaseModel):
    count: int
    ideas: list[IdeaResponse] = Field(default_factory=list)


class RefreshResponse(BaseModel):
    miniIdeas: list[str]
    titleSummaries: list[str]
    idea: IdeaResponse


class IdeaListResponse(BaseModel):
    ideas: dict[str, list[IdeaResponse]]
    hasMore: bool = False
    page: int = 1


class DatesResponse(BaseModel):
    dates: list[str]


class DeletedResponse(BaseModel):
    deleted: int
