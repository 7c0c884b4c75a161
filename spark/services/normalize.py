from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Sequence

from spark.app.domain.models import GeneratedIdeaSet, IdeaRecord, ModelPayload, SourceInfo
from spark.services.extract import payload_items

logger = logging.getLogger(__name__)


def _as_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _clean_string(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def coerce_string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_as_text(item) for item in value]


def align_titles(mini_ideas: Sequence[str], titles: Sequence[str] | None) -> list[str]:
    """Pad titles with "" or drop extras so they line up with mini_ideas."""
    titles = list(titles or [])
    return [titles[index] if index < len(titles) else "" for index in range(len(mini_ideas))]


def to_idea_set(raw: Any) -> GeneratedIdeaSet:
    if not isinstance(raw, dict):
        return GeneratedIdeaSet()

    mini_ideas = coerce_string_list(raw.get("mini_ideas"))
    titles = raw.get("title_summaries")
    return GeneratedIdeaSet(
        mini_ideas=mini_ideas,
        title_summaries=coerce_string_list(titles) if isinstance(titles, list) else None,
        source_name=_clean_string(raw.get("source_name")),
        source_description=_clean_string(raw.get("source_description")),
    )


def build_record(source: SourceInfo, idea_set: GeneratedIdeaSet, date: str) -> IdeaRecord:
    return IdeaRecord(
        date=date,
        source_name=source.name,
        source_description=source.description,
        source_url=source.url,
        upvotes=max(int(source.upvotes or 0), 0),
        image_url=source.image_url or None,
        mini_ideas=list(idea_set.mini_ideas),
        title_summaries=align_titles(idea_set.mini_ideas, idea_set.title_summaries),
    )


def build_records(
    sources: Sequence[SourceInfo],
    payload: ModelPayload,
    date: str,
) -> list[IdeaRecord]:
    """One record per source, index-aligned with the model's idea-sets."""
    items = payload_items(payload)
    if len(items) != len(sources):
        logger.warning(
            "Model returned %d idea-sets for %d sources; missing entries stored empty",
            len(items),
            len(sources),
        )

    records: list[IdeaRecord] = []
    for index, source in enumerate(sources):
        raw = items[index] if index < len(items) else None
        records.append(build_record(source, to_idea_set(raw), date))
    return records


def normalize_record(record: IdeaRecord) -> IdeaRecord:
    mini_ideas = list(record.mini_ideas or [])
    return replace(
        record,
        mini_ideas=mini_ideas,
        title_summaries=align_titles(mini_ideas, record.title_summaries),
        upvotes=max(int(record.upvotes or 0), 0),
    )
