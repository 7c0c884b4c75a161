from __future__ import annotations

import logging
import re

from spark.app.domain.errors import EmptyResultError, ValidationError
from spark.app.domain.models import ImageSource, LaunchSource, SourceInfo
from spark.services.fetcher import PageFetcher
from spark.services.launches import LaunchFeedClient

logger = logging.getLogger(__name__)

PROMPT_SOURCE_NAME = "Custom Prompt"
PROMPT_SOURCE_URL = "#prompt"
IMAGE_SOURCE_URL = "#screenshot"
DEFAULT_IMAGE_MEDIA_TYPE = "image/png"

DATA_URL_PATTERN = re.compile(r"^data:(image/[\w.+-]+);base64,", re.IGNORECASE)


def launch_to_source(launch: LaunchSource) -> SourceInfo:
    return SourceInfo(
        name=launch.name,
        description=launch.description or launch.tagline,
        url=launch.url,
        upvotes=launch.upvotes,
        image_url=launch.image_url,
    )


def prepare_image(image: str, auxiliary_text: str | None = None) -> ImageSource:
    """Strip any data-URL prefix; the payload itself is passed through untouched."""
    match = DATA_URL_PATTERN.match(image)
    media_type = match.group(1).lower() if match else DEFAULT_IMAGE_MEDIA_TYPE
    data = image[match.end():] if match else image
    if not data.strip():
        raise ValidationError("Image payload is empty")
    return ImageSource(
        media_type=media_type,
        base64_data=data,
        auxiliary_text=(auxiliary_text or "").strip() or None,
    )


class SourceAcquirer:
    def __init__(self, launch_feed: LaunchFeedClient, page_fetcher: PageFetcher) -> None:
        self.launch_feed = launch_feed
        self.page_fetcher = page_fetcher

    def launches(self, target_date: str) -> list[LaunchSource]:
        launches = self.launch_feed.fetch_top_launches(target_date)
        if not launches:
            raise EmptyResultError(target_date)
        return launches

    def from_url(self, url: str) -> SourceInfo:
        page = self.page_fetcher.fetch(url)
        return SourceInfo(
            name=page.title,
            description=page.description,
            url=url,
            image_url=page.image_url,
        )

    def from_prompt(self, text: str) -> SourceInfo:
        return SourceInfo(name=PROMPT_SOURCE_NAME, description=text.strip(), url=PROMPT_SOURCE_URL)

    def from_image(self, image: str, auxiliary_text: str | None = None) -> ImageSource:
        return prepare_image(image, auxiliary_text)
