# spark/app/deps.py
from __future__ import annotations

from fastapi import Depends
from supabase import Client, create_client

from spark.app.config import Settings, get_settings
from spark.app.domain.errors import ConfigurationError
from spark.app.infra.db.base import IdeaRepository, RecipeRepository
from spark.app.infra.db.supabase_repo import SupabaseIdeaRepository, SupabaseRecipeRepository
from spark.app.infra.storage.base import StorageProvider
from spark.app.infra.storage.r2_provider import R2StorageProvider
from spark.services.fetcher import PageFetcher
from spark.services.launches import LaunchFeedClient
from spark.services.llm_client import AnthropicClient
from spark.services.pipeline import IdeaPipeline
from spark.services.prompt import PromptBuilder, PromptDefaults
from spark.services.recipes import RecipeResolver
from spark.services.sources import SourceAcquirer

_client: Client | None = None


def _secret(value) -> str | None:
    return value.get_secret_value() if value is not None else None


def get_supabase(settings: Settings = Depends(get_settings)) -> Client:
    global _client
    if _client is None:
        if not settings.SUPABASE_URL:
            raise ConfigurationError("SUPABASE_URL")
        key = _secret(settings.SUPABASE_SERVICE_ROLE_KEY)
        if not key:
            raise ConfigurationError("SUPABASE_SERVICE_ROLE_KEY")
        _client = create_client(settings.SUPABASE_URL, key)
    return _client


def get_idea_repository(supa: Client = Depends(get_supabase)) -> IdeaRepository:
    return SupabaseIdeaRepository(supa)


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> RecipeRepository:
    return SupabaseRecipeRepository(supa)


def get_storage(settings: Settings = Depends(get_settings)) -> StorageProvider:
    return R2StorageProvider(
        account_id=settings.R2_ACCOUNT_ID,
        access_key_id=settings.R2_ACCESS_KEY_ID,
        secret_access_key=_secret(settings.R2_SECRET_ACCESS_KEY),
        bucket_name=settings.R2_BUCKET_NAME,
    )


def get_llm_client(settings: Settings = Depends(get_settings)) -> AnthropicClient:
    return AnthropicClient(
        api_key=_secret(settings.ANTHROPIC_API_KEY),
        model_name=settings.ANTHROPIC_MODEL,
    )


def get_pipeline(
    llm: AnthropicClient = Depends(get_llm_client),
    ideas: IdeaRepository = Depends(get_idea_repository),
    recipes: RecipeRepository = Depends(get_recipe_repository),
    settings: Settings = Depends(get_settings),
) -> IdeaPipeline:
    acquirer = SourceAcquirer(
        launch_feed=LaunchFeedClient(
            api_token=_secret(settings.PRODUCT_HUNT_API_TOKEN),
            api_url=settings.PRODUCT_HUNT_API_URL,
            first=settings.LAUNCHES_PER_DAY,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        ),
        page_fetcher=PageFetcher(timeout=settings.HTTP_TIMEOUT_SECONDS),
    )
    return IdeaPipeline(
        acquirer=acquirer,
        resolver=RecipeResolver(recipes),
        builder=PromptBuilder(PromptDefaults()),
        llm=llm,
        ideas=ideas,
        max_tokens=settings.LLM_MAX_TOKENS,
        batch_max_tokens=settings.LLM_BATCH_MAX_TOKENS,
    )
