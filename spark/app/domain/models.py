# spark/app/domain/models.py
"""
Domain models for the idea-generation pipeline.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union


class SourceKind(str, Enum):
    """Kind of inspiration material that seeds a generation run."""
    LAUNCHES = "launches"
    URL = "url"
    PROMPT = "prompt"
    IMAGE = "image"

    @classmethod
    def parse(cls, value: object) -> Optional["SourceKind"]:
        """Return the matching kind, or None for anything unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        # Older recipe rows were tagged with the upstream feed's name.
        if normalized == "producthunt":
            return cls.LAUNCHES
        try:
            return cls(normalized)
        except ValueError:
            return None


@dataclass
class LaunchSource:
    """One trending-launch entry from the ranked listing feed."""
    name: str
    tagline: str
    description: str
    url: str
    upvotes: int
    image_url: Optional[str] = None


@dataclass
class PageContent:
    """Best-effort metadata scraped from a web page."""
    title: str
    description: str
    image_url: Optional[str] = None


@dataclass
class ImageSource:
    """Inline image handed to the model as-is."""
    media_type: str
    base64_data: str
    auxiliary_text: Optional[str] = None


@dataclass
class SourceInfo:
    """Normalized source tuple every source kind is reduced to."""
    name: str
    description: str
    url: str
    upvotes: int = 0
    image_url: Optional[str] = None


@dataclass
class RecipeSettings:
    """Prompt overrides resolved from a recipe. Empty means baseline defaults."""
    prompt_style: Optional[str] = None
    exclusions: Optional[list[str]] = None

    @property
    def is_empty(self) -> bool:
        return not self.prompt_style and not self.exclusions


@dataclass
class Recipe:
    id: int
    name: str
    description: Optional[str] = None
    prompt_style: Optional[str] = None
    exclusions: list[str] = field(default_factory=list)
    source: Optional[SourceKind] = None
    is_default: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_settings(self) -> RecipeSettings:
        return RecipeSettings(
            prompt_style=self.prompt_style or None,
            exclusions=list(self.exclusions) if self.exclusions else None,
        )


@dataclass
class GeneratedIdeaSet:
    """One idea-set as the model returned it, before normalization."""
    mini_ideas: list[str] = field(default_factory=list)
    title_summaries: Optional[list[str]] = None
    source_name: Optional[str] = None
    source_description: Optional[str] = None


@dataclass
class IdeaRecord:
    """
    A persisted idea row.
    title_summaries is kept index-aligned with mini_ideas by the normalizer.
    """
    date: str  # YYYY-MM-DD
    source_name: str
    source_description: str
    source_url: str
    upvotes: int = 0
    image_url: Optional[str] = None
    mini_ideas: list[str] = field(default_factory=list)
    title_summaries: list[str] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class Single:
    """Model answered with one bare JSON object."""
    value: dict[str, Any]


@dataclass
class Batch:
    """Model answered with a JSON array."""
    values: list[Any]


ModelPayload = Union[Single, Batch]


@dataclass
class GenerationResult:
    count: int
    records: list[IdeaRecord] = field(default_factory=list)


@dataclass
class StoredObject:
    """Metadata (and optionally body) of an object in the blob store."""
    key: str
    size: int = 0
    etag: Optional[str] = None
    content_type: Optional[str] = None
    cache_control: Optional[str] = None
    uploaded_at: Optional[datetime] = None
    body: Optional[bytes] = None
