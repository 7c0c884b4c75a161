# spark/app/main.py
from __future__ import annotations

import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from spark.app.config import settings
from spark.app.domain.errors import SparkError
from spark.app.routers.generate import router as generate_router
from spark.app.routers.ideas import router as ideas_router
from spark.app.routers.images import router as images_router
from spark.app.routers.recipes import router as recipes_router
from spark.app.schemas.common import ErrorResponse

# Plain stdout logging, fine for dev and containers
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Spark Ideas API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SparkError)
async def handle_spark_error(request: Request, exc: SparkError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}" for error in errors
    ) or "Invalid request"
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


app.include_router(ideas_router)
app.include_router(generate_router)
app.include_router(recipes_router)
app.include_router(images_router)


@app.get("/health")
def health():
    return {"ok": True}
