"""
pipelines/content_source_async.py

Description:
------------
Content Source Adapter: fetches WordPress collections (portfolio, services)
over the REST API and exposes them as `ContentCollection` objects
(`items`, `loading`, `error`).

This module performs **no normalization**; it only moves payloads from the
CMS (or from the bundled fallback file) into `RemoteContentItem` models.

Behavior:
---------
- One GET per collection per load:
      {WP_API_URL}/wp-json/wp/v2/{content_type}?_embed&per_page=N
- Both collections can be loaded concurrently (`load_all_async`).
- No retry, no cancellation. Timeout, connection limits and the request
  budget (aiolimiter) live here, not in the views.
- Fetch failures never propagate: they are logged, recorded in
  `ContentCollection.error`, and the items fall back to bundled content
  (or to an empty list when fallback is disabled).
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import httpx
from httpx import Limits, Timeout
from aiolimiter import AsyncLimiter

from igniting_content.config.project_config import (
    FALLBACK_CONTENT_FILE,
    USE_WORDPRESS,
    WP_API_URL,
    WP_MAX_RPM,
    WP_PER_PAGE,
    WP_REQUEST_TIMEOUT,
    WP_REST_PREFIX,
)
from igniting_content.fsm.view_enums import ContentType
from igniting_content.models.pydantic_model_loaders_for_files import (
    load_fallback_content_model,
)
from igniting_content.models.wp_content_models import (
    ContentCollection,
    FallbackContentFile,
    RemoteContentItem,
    validate_remote_item,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# HTTP client config
# ---------------------------------------------------------------------------

_HTTP_LIMITS = Limits(max_connections=10, max_keepalive_connections=5)
_HTTP_TIMEOUT = Timeout(WP_REQUEST_TIMEOUT, connect=10.0)

USER_AGENT = "igniting-content/1.0 (+https://theignitingstudio.com)"


def build_collection_url(
    content_type: ContentType, api_url: str = WP_API_URL
) -> str:
    """REST collection endpoint for a content type."""
    return f"{api_url.rstrip('/')}{WP_REST_PREFIX}/{content_type.value}"


def parse_collection_payload(payload: object) -> List[RemoteContentItem]:
    """
    Validate a collection response body into RemoteContentItem models.

    Entries are validated one by one; a malformed entry loses its bad
    fields (see `validate_remote_item`) instead of failing the collection.

    Raises:
        ValueError: the body is not a JSON array.
    """
    if not isinstance(payload, list):
        raise ValueError(
            f"Collection payload must be a JSON array, got {type(payload).__name__}"
        )

    items: List[RemoteContentItem] = []
    for position, raw in enumerate(payload):
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object entry at position %d", position)
            continue
        items.append(validate_remote_item(raw))
    return items


class WordPressContentSource:
    """
    Fetches content collections from a headless WordPress install.

    Args:
        api_url: Base URL of the WordPress install (no trailing `/wp-json`).
        use_wordpress: If False, skip the network and serve fallback content.
        use_fallback: If True, serve bundled content when a fetch fails.
        per_page: `per_page` query parameter (WordPress caps it at 100).
        client: Optional pre-built httpx.AsyncClient (not closed by us).
        fallback_file: Path to the bundled fallback content JSON.
        limiter: Optional shared AsyncLimiter (requests per minute).
    """

    def __init__(
        self,
        api_url: str = WP_API_URL,
        *,
        use_wordpress: bool = USE_WORDPRESS,
        use_fallback: bool = True,
        per_page: int = WP_PER_PAGE,
        client: Optional[httpx.AsyncClient] = None,
        fallback_file: Union[Path, str] = FALLBACK_CONTENT_FILE,
        limiter: Optional[AsyncLimiter] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.use_wordpress = use_wordpress
        self.use_fallback = use_fallback
        self.per_page = per_page
        self.fallback_file = Path(fallback_file)
        self.limiter = limiter or AsyncLimiter(max_rate=WP_MAX_RPM, time_period=60)

        self._client = client
        self._owns_client = client is None
        self._fallback: Optional[FallbackContentFile] = None
        self._fallback_loaded = False

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=_HTTP_LIMITS,
                timeout=_HTTP_TIMEOUT,
                follow_redirects=True,
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "WordPressContentSource":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Fallback content
    # ------------------------------------------------------------------

    def fallback_items(self, content_type: ContentType) -> List[RemoteContentItem]:
        """Bundled items for `content_type` ([] if the file is unavailable)."""
        if not self._fallback_loaded:
            self._fallback = load_fallback_content_model(self.fallback_file)
            self._fallback_loaded = True
        if self._fallback is None:
            return []
        return self._fallback.items_for(content_type)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch_items_async(
        self, content_type: ContentType
    ) -> List[RemoteContentItem]:
        """
        GET one collection from the REST API.

        Raises:
            httpx.HTTPError: transport failure, timeout, or non-2xx status.
            ValueError: body is not JSON or not a JSON array.
        """
        url = build_collection_url(content_type, self.api_url)
        params = {"_embed": "1", "per_page": str(self.per_page)}

        logger.info("🌐 Fetching %s from %s", content_type.value, url)

        async with self.limiter:
            response = await self._get_client().get(url, params=params)
        response.raise_for_status()

        items = parse_collection_payload(response.json())
        logger.info("✅ Received %d %s item(s)", len(items), content_type.value)
        return items

    async def load_collection_async(
        self, content_type: ContentType
    ) -> ContentCollection:
        """
        Load one collection; never raises.

        Returns:
            ContentCollection with loading=False. On failure `error` is set
            and `items` holds fallback content (or nothing).
        """
        if not self.use_wordpress:
            logger.info("📦 WordPress disabled; serving fallback %s", content_type.value)
            return self._fallback_collection(content_type, error=None)

        try:
            items = await self.fetch_items_async(content_type)
        except httpx.TimeoutException as e:
            error = f"Timeout: {e}"
            logger.warning("⏱️ %s fetch timed out: %s", content_type.value, e)
        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code}"
            logger.warning(
                "🚫 %s fetch failed with HTTP %s",
                content_type.value,
                e.response.status_code,
            )
        except httpx.HTTPError as e:
            error = f"Error: {e}"
            logger.warning("🚫 %s fetch failed: %s", content_type.value, e)
        except ValueError as e:
            error = f"Invalid payload: {e}"
            logger.warning("🚫 %s payload rejected: %s", content_type.value, e)
        else:
            return ContentCollection(
                content_type=content_type,
                items=items,
                loading=False,
                error=None,
                source="wordpress",
            )

        if self.use_fallback:
            return self._fallback_collection(content_type, error=error)

        return ContentCollection(
            content_type=content_type, items=[], loading=False, error=error
        )

    async def load_all_async(
        self, content_types: Optional[Iterable[ContentType]] = None
    ) -> Dict[ContentType, ContentCollection]:
        """Load several collections concurrently (one request each)."""
        types = list(content_types) if content_types is not None else list(ContentType)
        collections = await asyncio.gather(
            *(self.load_collection_async(t) for t in types)
        )
        return dict(zip(types, collections))

    def _fallback_collection(
        self, content_type: ContentType, *, error: Optional[str]
    ) -> ContentCollection:
        items = self.fallback_items(content_type)
        return ContentCollection(
            content_type=content_type,
            items=items,
            loading=False,
            error=error,
            source="fallback" if items else "none",
        )
