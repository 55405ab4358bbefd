"""Ideas feed: trending and searched stories from the Hacker News search API."""

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from collabmatch.core.config import get_settings
from collabmatch.core.errors import TransientError
from collabmatch.schemas.idea import IdeaArticle

logger = logging.getLogger(__name__)

STORY_URL = "https://news.ycombinator.com/item?id={object_id}"


def _parse_date(value: Any) -> datetime:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now(timezone.utc)


def hit_to_article(hit: dict[str, Any]) -> IdeaArticle:
    """Convert one search hit, filling in what the API left out."""
    object_id = str(hit.get("objectID", ""))
    return IdeaArticle(
        id=object_id,
        title=hit.get("title") or "(no title)",
        points=hit.get("points") or 0,
        author=hit.get("author") or "unknown",
        date=_parse_date(hit.get("created_at")),
        url=hit.get("url") or STORY_URL.format(object_id=object_id),
    )


class IdeaService:
    """Client for the ideas feed."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        """Initialize the feed client.

        Args:
            client: HTTP client to use; a new one is opened per request if omitted.
        """
        settings = get_settings()
        self.client = client
        self.api_url = settings.ideas_api_url
        self.page_size = settings.ideas_page_size
        self.timeout = settings.ideas_timeout_seconds

    async def front_page(self) -> list[IdeaArticle]:
        """Stories currently on the front page."""
        return await self._search({"tags": "front_page"})

    async def search(self, query: str) -> list[IdeaArticle]:
        """Stories matching a keyword."""
        return await self._search({"query": query, "tags": "story"})

    async def _search(self, params: dict[str, Any]) -> list[IdeaArticle]:
        params = {**params, "hitsPerPage": self.page_size}
        try:
            if self.client is not None:
                response = await self.client.get(self.api_url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.api_url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Ideas feed returned %s", e.response.status_code)
            raise TransientError(f"Ideas feed returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Ideas feed unreachable: %s", e)
            raise TransientError("Ideas feed unreachable") from e
        except ValueError as e:
            raise TransientError("Ideas feed returned malformed JSON") from e

        return [hit_to_article(hit) for hit in payload.get("hits", [])]
