from __future__ import annotations

import logging
import re

import httpx

from spark.app.domain.models import PageContent

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; SparkBot/1.0)"

TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
DESCRIPTION_PATTERNS = (
    re.compile(r"""<meta[^>]*name=["']description["'][^>]*content=["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""<meta[^>]*content=["']([^"']+)["'][^>]*name=["']description["']""", re.IGNORECASE),
)
OG_IMAGE_PATTERNS = (
    re.compile(r"""<meta[^>]*property=["']og:image["'][^>]*content=["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""<meta[^>]*content=["']([^"']+)["'][^>]*property=["']og:image["']""", re.IGNORECASE),
)


def _first_match(patterns: tuple[re.Pattern[str], ...], html: str) -> str | None:
    for pattern in patterns:
        match = pattern.search(html)
        if match:
            return match.group(1).strip()
    return None


def extract_page_content(html: str, url: str) -> PageContent:
    title_match = TITLE_PATTERN.search(html)
    title = title_match.group(1).strip() if title_match else ""
    return PageContent(
        title=title or url,
        description=_first_match(DESCRIPTION_PATTERNS, html) or "",
        image_url=_first_match(OG_IMAGE_PATTERNS, html),
    )


class PageFetcher:
    """Best-effort page scraper; never raises on fetch failure."""

    def __init__(self, timeout: float = 15.0, transport: httpx.BaseTransport | None = None) -> None:
        self.timeout = timeout
        self._transport = transport

    def fetch(self, url: str) -> PageContent:
        try:
            with httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT},
                transport=self._transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
                html = response.text
        except (httpx.HTTPError, httpx.InvalidURL) as error:
            logger.warning("Error fetching URL %s: %s", url, error)
            return PageContent(title=url, description="")

        return extract_page_content(html, url)
