# spark/app/routers/generate.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from spark.app.deps import get_pipeline
from spark.app.domain.models import GenerationResult, SourceKind
from spark.app.schemas.common import ApiResponse, ok
from spark.app.schemas.ideas import GenerateRequest, GenerateResponse, IdeaResponse
from spark.services.pipeline import GenerateParams, IdeaPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])


def _to_response(result: GenerationResult) -> GenerateResponse:
    return GenerateResponse(
        count=result.count,
        ideas=[IdeaResponse.from_record(record) for record in result.records],
    )


@router.post("/fetch-ideas", response_model=ApiResponse[GenerateResponse])
def fetch_ideas(
    date: Optional[str] = Query(default=None, description="YYYY-MM-DD, defaults to today (UTC)"),
    recipe_id: Optional[int] = Query(default=None),
    pipeline: IdeaPipeline = Depends(get_pipeline),
) -> ApiResponse[GenerateResponse]:
    result = pipeline.generate(SourceKind.LAUNCHES, GenerateParams(date=date), recipe_id)
    return ok(_to_response(result))


@router.post("/generate", response_model=ApiResponse[GenerateResponse])
def generate(
    payload: GenerateRequest,
    pipeline: IdeaPipeline = Depends(get_pipeline),
) -> ApiResponse[GenerateResponse]:
    params = GenerateParams(url=payload.url, prompt=payload.prompt, image=payload.image)
    result = pipeline.generate(payload.type, params, payload.recipeId)
    return ok(_to_response(result))
