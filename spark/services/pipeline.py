"""
Idea-generation pipeline.

acquire source -> resolve recipe -> build prompt -> call model -> extract JSON
-> normalize -> persist. Every step runs sequentially within one call.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional

from spark.app.domain.errors import NotFoundError, ValidationError
from spark.app.domain.models import (
    GenerationResult,
    IdeaRecord,
    SourceInfo,
    SourceKind,
)
from spark.app.infra.db.base import IdeaRepository
from spark.services.dates import require_date, today_date_string
from spark.services.extract import first_object, parse_model_payload
from spark.services.llm_client import AnthropicClient
from spark.services.normalize import align_titles, build_record, build_records, to_idea_set
from spark.services.persist import Persister
from spark.services.prompt import PromptBuilder
from spark.services.recipes import RecipeResolver
from spark.services.sources import IMAGE_SOURCE_URL, SourceAcquirer, launch_to_source

logger = logging.getLogger(__name__)

IMAGE_FALLBACK_NAME = "Screenshot"
IMAGE_FALLBACK_DESCRIPTION = "Inspired by screenshot"


@dataclass
class GenerateParams:
    date: Optional[str] = None
    url: Optional[str] = None
    prompt: Optional[str] = None
    image: Optional[str] = None


class IdeaPipeline:
    def __init__(
        self,
        *,
        acquirer: SourceAcquirer,
        resolver: RecipeResolver,
        builder: PromptBuilder,
        llm: AnthropicClient,
        ideas: IdeaRepository,
        max_tokens: int = 2000,
        batch_max_tokens: int = 3000,
        today: Callable[[], str] = today_date_string,
    ) -> None:
        self.acquirer = acquirer
        self.resolver = resolver
        self.builder = builder
        self.llm = llm
        self.ideas = ideas
        self.persister = Persister(ideas)
        self.max_tokens = max_tokens
        self.batch_max_tokens = batch_max_tokens
        self._today = today

    def generate(
        self,
        kind: SourceKind | str,
        params: GenerateParams,
        recipe_id: Optional[int] = None,
    ) -> GenerationResult:
        source_kind = SourceKind.parse(kind)
        if source_kind is None:
            raise ValidationError(f"Unsupported source type: {kind!r}")

        logger.info("Generating ideas: kind=%s, recipe_id=%s", source_kind.value, recipe_id)
        if source_kind is SourceKind.LAUNCHES:
            return self._generate_launches(params, recipe_id)
        if source_kind is SourceKind.URL:
            if not params.url or not params.url.strip():
                raise ValidationError("url is required for url generation")
            source = self.acquirer.from_url(params.url.strip())
            return self._generate_single(source, recipe_id)
        if source_kind is SourceKind.PROMPT:
            if not params.prompt or not params.prompt.strip():
                raise ValidationError("prompt is required for prompt generation")
            return self._generate_single(self.acquirer.from_prompt(params.prompt), recipe_id)
        return self._generate_image(params, recipe_id)

    def _generate_launches(self, params: GenerateParams, recipe_id: Optional[int]) -> GenerationResult:
        target_date = require_date(params.date) if params.date else self._today()
        launches = self.acquirer.launches(target_date)
        settings = self.resolver.resolve(recipe_id)

        prompt = self.builder.build_batch(launches, settings)
        text = self.llm.generate_content(prompt, max_tokens=self.batch_max_tokens)
        payload = parse_model_payload(text, expect_batch=True)

        sources = [launch_to_source(launch) for launch in launches]
        records = self.persister.save_all(build_records(sources, payload, target_date))
        logger.info("Stored %d launch idea records for %s", len(records), target_date)
        return GenerationResult(count=len(records), records=records)

    def _generate_single(self, source: SourceInfo, recipe_id: Optional[int]) -> GenerationResult:
        settings = self.resolver.resolve(recipe_id)
        prompt = self.builder.build_single(source, settings)
        text = self.llm.generate_content(prompt, max_tokens=self.max_tokens)
        idea_set = to_idea_set(first_object(parse_model_payload(text, expect_batch=False)))

        records = self.persister.save_all([build_record(source, idea_set, self._today())])
        return GenerationResult(count=len(idea_set.mini_ideas), records=records)

    def _generate_image(self, params: GenerateParams, recipe_id: Optional[int]) -> GenerationResult:
        if not params.image:
            raise ValidationError("image is required for image generation")
        image = self.acquirer.from_image(params.image, params.prompt)
        settings = self.resolver.resolve(recipe_id)

        prompt = self.builder.build_image(image.auxiliary_text, settings)
        text = self.llm.generate_content(prompt, image=image, max_tokens=self.max_tokens)
        idea_set = to_idea_set(first_object(parse_model_payload(text, expect_batch=False)))

        # Image sources carry no thumbnail of their own.
        source = SourceInfo(
            name=idea_set.source_name or IMAGE_FALLBACK_NAME,
            description=idea_set.source_description or image.auxiliary_text or IMAGE_FALLBACK_DESCRIPTION,
            url=IMAGE_SOURCE_URL,
        )
        records = self.persister.save_all([build_record(source, idea_set, self._today())])
        return GenerationResult(count=len(idea_set.mini_ideas), records=records)

    def refresh(self, idea_id: int) -> IdeaRecord:
        """Regenerate mini ideas and titles for one stored record."""
        record = self.ideas.get_idea(idea_id)
        if record is None:
            raise NotFoundError("Idea", idea_id)

        source = SourceInfo(
            name=record.source_name,
            description=record.source_description,
            url=record.source_url,
            upvotes=record.upvotes,
            image_url=record.image_url,
        )
        prompt = self.builder.build_single(source, self.resolver.resolve())
        text = self.llm.generate_content(prompt, max_tokens=self.max_tokens)
        idea_set = to_idea_set(first_object(parse_model_payload(text, expect_batch=False)))

        titles = align_titles(idea_set.mini_ideas, idea_set.title_summaries)
        refreshed_at = self.persister.refresh(
            idea_id,
            idea_set.mini_ideas,
            titles,
            datetime.now(timezone.utc),
        )
        logger.info("Refreshed idea %s with %d mini ideas", idea_id, len(idea_set.mini_ideas))
        return replace(
            record,
            mini_ideas=list(idea_set.mini_ideas),
            title_summaries=titles,
            created_at=refreshed_at,
        )
