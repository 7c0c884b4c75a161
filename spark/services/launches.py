from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from spark.app.domain.errors import UpstreamAuthError, UpstreamError
from spark.app.domain.models import LaunchSource

logger = logging.getLogger(__name__)

PRODUCT_HUNT_API_URL = "https://api.producthunt.com/v2/api/graphql"
DEFAULT_LAUNCH_COUNT = 3
_AUTH_ERROR_MARKERS = ("unauthorized", "invalid_oauth_token", "oauth", "access token")


def build_day_range(target_date: str) -> tuple[str, str]:
    return f"{target_date}T00:00:00Z", f"{target_date}T23:59:59Z"


def build_launches_query(first: int = DEFAULT_LAUNCH_COUNT, target_date: str | None = None) -> str:
    date_filter = ""
    if target_date:
        posted_after, posted_before = build_day_range(target_date)
        date_filter = f', postedAfter: "{posted_after}", postedBefore: "{posted_before}"'

    return f"""
    query {{
      posts(first: {first}, order: VOTES{date_filter}) {{
        edges {{
          node {{
            id
            name
            tagline
            description
            url
            votesCount
            thumbnail {{
              url
            }}
          }}
        }}
      }}
    }}
    """


def _safe_int(value: object, default: int = 0) -> int:
    try:
        return max(int(value), 0)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _node_to_launch(node: dict[str, Any]) -> LaunchSource:
    tagline = str(node.get("tagline") or "")
    thumbnail = node.get("thumbnail") or {}
    return LaunchSource(
        name=str(node.get("name") or ""),
        tagline=tagline,
        description=str(node.get("description") or tagline),
        url=str(node.get("url") or ""),
        upvotes=_safe_int(node.get("votesCount")),
        image_url=thumbnail.get("url") if isinstance(thumbnail, dict) else None,
    )


def _is_auth_error(errors: object) -> bool:
    serialized = json.dumps(errors, default=str).lower()
    return any(marker in serialized for marker in _AUTH_ERROR_MARKERS)


class LaunchFeedClient:
    """Ranked-listing GraphQL feed of daily product launches."""

    def __init__(
        self,
        api_token: str | None = None,
        api_url: str = PRODUCT_HUNT_API_URL,
        first: int = DEFAULT_LAUNCH_COUNT,
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_token = api_token
        self.api_url = api_url
        self.first = first
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _post(self, query: str) -> httpx.Response:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                return client.post(self.api_url, headers=self._headers(), json={"query": query})
        except httpx.TimeoutException as error:
            logger.error("Listing API timed out after %ss", self.timeout)
            raise UpstreamError(f"Product Hunt API timed out after {self.timeout}s") from error
        except httpx.HTTPError as error:
            logger.error("Listing API request failed: %s", error)
            raise UpstreamError(f"Product Hunt API request failed: {error}") from error

    def fetch_top_launches(self, target_date: str | None = None) -> list[LaunchSource]:
        """Top launches by vote count, optionally restricted to one UTC day."""
        response = self._post(build_launches_query(self.first, target_date))

        if response.status_code == 401:
            raise UpstreamAuthError()
        if not response.is_success:
            raise UpstreamError(
                f"Product Hunt API error: {response.status_code} {response.reason_phrase}",
                upstream_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as error:
            raise UpstreamError("Invalid response from Product Hunt API: body is not JSON") from error

        if not isinstance(payload, dict):
            raise UpstreamError(f"Invalid response from Product Hunt API: {payload!r}")

        errors = payload.get("errors")
        if errors:
            if _is_auth_error(errors):
                raise UpstreamAuthError(f"Product Hunt API rejected credentials: {json.dumps(errors)}")
            raise UpstreamError(f"Product Hunt API GraphQL errors: {json.dumps(errors)}")

        posts = (payload.get("data") or {}).get("posts")
        if not isinstance(posts, dict):
            raise UpstreamError(f"Invalid response from Product Hunt API: {json.dumps(payload)}")

        edges = posts.get("edges") or []
        launches = [
            _node_to_launch(edge["node"])
            for edge in edges
            if isinstance(edge, dict) and isinstance(edge.get("node"), dict)
        ]
        logger.info("Fetched %d launches for %s", len(launches), target_date or "latest")
        return launches[: self.first]
