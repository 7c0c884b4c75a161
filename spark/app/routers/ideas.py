# spark/app/routers/ideas.py
from __future__ import annotations

from collections import OrderedDict
from typing import Iterable, Optional

from fastapi import APIRouter, Depends, Query

from spark.app.deps import get_idea_repository, get_pipeline
from spark.app.domain.errors import NotFoundError
from spark.app.domain.models import IdeaRecord
from spark.app.infra.db.base import IdeaRepository
from spark.app.schemas.common import ApiResponse, ok
from spark.app.schemas.ideas import (
    DatesResponse,
    DeletedResponse,
    IdeaListResponse,
    IdeaResponse,
    RefreshResponse,
)
from spark.services.dates import require_date
from spark.services.normalize import normalize_record
from spark.services.pipeline import IdeaPipeline

router = APIRouter(prefix="/api", tags=["ideas"])


def _group_by_date(records: Iterable[IdeaRecord]) -> dict[str, list[IdeaResponse]]:
    grouped: dict[str, list[IdeaResponse]] = OrderedDict()
    for record in records:
        normalized = normalize_record(record)
        grouped.setdefault(normalized.date, []).append(IdeaResponse.from_record(normalized))
    return grouped


@router.get("/ideas", response_model=ApiResponse[IdeaListResponse])
def list_ideas(
    date: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=30, ge=1, le=100),
    repo: IdeaRepository = Depends(get_idea_repository),
) -> ApiResponse[IdeaListResponse]:
    if date:
        records = repo.list_ideas_by_date(require_date(date))
        return ok(IdeaListResponse(ideas=_group_by_date(records)))

    offset = (page - 1) * limit
    records = repo.list_ideas(limit=limit, offset=offset)
    has_more = offset + len(records) < repo.count_ideas()
    return ok(IdeaListResponse(ideas=_group_by_date(records), hasMore=has_more, page=page))


@router.get("/dates", response_model=ApiResponse[DatesResponse])
def list_dates(repo: IdeaRepository = Depends(get_idea_repository)) -> ApiResponse[DatesResponse]:
    return ok(DatesResponse(dates=repo.list_dates()))


# Registered before "/ideas/{date}" so "by-id" is never parsed as a date.
@router.delete("/ideas/by-id/{idea_id}", response_model=ApiResponse[DeletedResponse])
def delete_idea(
    idea_id: int,
    repo: IdeaRepository = Depends(get_idea_repository),
) -> ApiResponse[DeletedResponse]:
    if not repo.delete_idea(idea_id):
        raise NotFoundError("Idea", idea_id)
    return ok(DeletedResponse(deleted=1))


@router.delete("/ideas/{date}", response_model=ApiResponse[DeletedResponse])
def delete_ideas_by_date(
    date: str,
    repo: IdeaRepository = Depends(get_idea_repository),
) -> ApiResponse[DeletedResponse]:
    deleted = repo.delete_ideas_by_date(require_date(date))
    return ok(DeletedResponse(deleted=deleted))


@router.post("/ideas/{idea_id}/refresh", response_model=ApiResponse[RefreshResponse])
def refresh_idea(
    idea_id: int,
    pipeline: IdeaPipeline = Depends(get_pipeline),
) -> ApiResponse[RefreshResponse]:
    record = pipeline.refresh(idea_id)
    return ok(
        RefreshResponse(
            miniIdeas=list(record.mini_ideas),
            titleSummaries=list(record.title_summaries),
            idea=IdeaResponse.from_record(record),
        )
    )
