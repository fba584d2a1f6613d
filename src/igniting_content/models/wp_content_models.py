"""
models/wp_content_models.py

Input-side content models for the studio content layer.

Purpose
-------
These models describe what the WordPress REST API (with ACF custom fields)
actually sends back: every field optional, HTML-bearing text wrapped in
`{"rendered": ...}`, media hidden under `_embedded`, and custom-field
groups that serialize as `false` or `[]` when empty.

They are deliberately *loose*. The normalizer
(`pipelines/content_normalizer.py`) is the single boundary that turns them
into strictly-shaped display records; nothing downstream of it touches
optional fields.

Models
------
1. RenderedText       `{"rendered": "<p>..</p>"}` wrapper.
2. EmbeddedResources  `_embedded` block (featured media only).
3. ContentFields      ACF custom-field bag (portfolio + services keys).
4. RemoteContentItem  One REST item.
5. ContentCollection  Adapter output: items + loading/error status.
6. FallbackContentFile  Bundled fallback content file, keyed by content type.
"""

from __future__ import annotations

import logging
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from igniting_content.fsm.view_enums import ContentType

logger = logging.getLogger(__name__)


class WPBaseModel(BaseModel):
    """Project-wide defaults for parsing remote payloads."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


def _empty_to_none(v: Any) -> Any:
    """ACF sends `false`, `""` or `[]` for an unset field/group."""
    if v is False or v == "" or v == [] or v == {}:
        return None
    return v


def _to_str_list(v: Any) -> Any:
    """Accept list, comma-separated string, or None; normalize to list[str]."""
    v = _empty_to_none(v)
    if v is None:
        return None
    if isinstance(v, list):
        return [str(x).strip() for x in v if x is not None and str(x).strip()]
    if isinstance(v, str):
        return [s.strip() for s in v.split(",") if s.strip()]
    return [str(v).strip()]


# ──────────────────────────────────────────────────────────────────────────────
# Small building blocks
# ──────────────────────────────────────────────────────────────────────────────


class RenderedText(WPBaseModel):
    """`title` / `excerpt` / `content` wrapper as sent by the REST API."""

    rendered: Optional[str] = None


class FeaturedMedia(WPBaseModel):
    source_url: Optional[str] = None


class EmbeddedResources(WPBaseModel):
    """
    The `_embedded` block returned when a collection is requested with `_embed`.

    Only the featured-media entry is consumed here.
    """

    featured_media: List[FeaturedMedia] = Field(
        default_factory=list, alias="wp:featuredmedia"
    )

    @field_validator("featured_media", mode="before")
    @classmethod
    def _keep_media_dicts(cls, v):
        # Embedded media can carry error objects (e.g. rest_forbidden) instead
        # of attachments; those are dropped rather than failing the item.
        if not isinstance(v, list):
            return []
        return [m for m in v if isinstance(m, dict)]


class GalleryImage(WPBaseModel):
    url: Optional[str] = None


class DetailGroupFields(WPBaseModel):
    """ACF `bi_details` group (overview / process / tools / results)."""

    overview: Optional[str] = None
    process: Optional[str] = None
    tools: Optional[List[str]] = None
    results: Optional[str] = None

    @field_validator("overview", "process", "results", mode="before")
    @classmethod
    def _blank_text(cls, v):
        return _empty_to_none(v)

    @field_validator("tools", mode="before")
    @classmethod
    def _normalize_tools(cls, v):
        return _to_str_list(v)


class ContentFields(WPBaseModel):
    """
    ACF custom-field bag.

    Portfolio keys:
        project_type, project_date, featured, project_url, gallery, bi_details
    Services keys:
        service_icon, service_features, service_price, cta_url, cta_text
    """

    # Portfolio
    project_type: Optional[str] = None
    project_date: Optional[str] = None
    featured: Optional[bool] = None
    project_url: Optional[str] = None
    gallery: Optional[List[GalleryImage]] = None
    bi_details: Optional[DetailGroupFields] = None

    # Services
    service_icon: Optional[str] = None
    service_features: Optional[List[str]] = None
    service_price: Optional[str] = None
    cta_url: Optional[str] = None
    cta_text: Optional[str] = None

    @field_validator(
        "project_type",
        "project_date",
        "project_url",
        "service_icon",
        "service_price",
        "cta_url",
        "cta_text",
        "bi_details",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v):
        return _empty_to_none(v)

    @field_validator("featured", mode="before")
    @classmethod
    def _coerce_featured(cls, v):
        """ACF true/false fields arrive as bool, 0/1 or "0"/"1"; anything else is unset."""
        if isinstance(v, bool) or v is None:
            return v
        if v in (1, "1", "true", "True"):
            return True
        if v in (0, "0", "false", "False", ""):
            return False
        return None

    @field_validator("gallery", mode="before")
    @classmethod
    def _normalize_gallery(cls, v):
        v = _empty_to_none(v)
        if v is None:
            return None
        if not isinstance(v, list):
            return None
        # Gallery return format may be "URL" (plain strings) or "Image Array"
        return [{"url": g} if isinstance(g, str) else g for g in v if g]

    @field_validator("service_features", mode="before")
    @classmethod
    def _normalize_features(cls, v):
        return _to_str_list(v)


# ──────────────────────────────────────────────────────────────────────────────
# Remote item
# ──────────────────────────────────────────────────────────────────────────────


class RemoteContentItem(WPBaseModel):
    """
    One item from a WordPress collection endpoint.

    Fields:
        id:        Post ID (0 when missing).
        slug:      URL slug, used for the internal case-study route.
        date:      Publish date (ISO-8601 string).
        title:     Rendered title (may contain markup/entities).
        excerpt:   Rendered excerpt HTML.
        content:   Rendered content HTML.
        featured_media_url: Pre-resolved media URL (added by some REST plugins).
        embedded:  `_embedded` block (requires `?_embed`).
        acf:       Custom-field bag.
    """

    id: int = 0
    slug: Optional[str] = None
    date: Optional[str] = None

    title: Optional[RenderedText] = None
    excerpt: Optional[RenderedText] = None
    content: Optional[RenderedText] = None

    featured_media_url: Optional[str] = None
    embedded: Optional[EmbeddedResources] = Field(default=None, alias="_embedded")

    acf: Optional[ContentFields] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v):
        try:
            return int(v)
        except (TypeError, ValueError):
            return 0

    @field_validator("title", "excerpt", "content", mode="before")
    @classmethod
    def _wrap_rendered(cls, v):
        v = _empty_to_none(v)
        # Some plugins flatten rendered fields to plain strings
        return {"rendered": v} if isinstance(v, str) else v

    @field_validator("slug", "date", "featured_media_url", "acf", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        return _empty_to_none(v)

    @field_validator("embedded", mode="before")
    @classmethod
    def _embedded_dict_only(cls, v):
        return v if isinstance(v, dict) else None


def validate_remote_item(raw: Any) -> RemoteContentItem:
    """
    Validate one REST entry without letting a bad field sink the item.

    Top-level keys named in a ValidationError are dropped and the rest is
    validated again; an entry that still fails (or is not an object) becomes
    an empty RemoteContentItem.
    """
    if isinstance(raw, RemoteContentItem):
        return raw
    try:
        return RemoteContentItem.model_validate(raw)
    except ValidationError as e:
        bad_keys = {err["loc"][0] for err in e.errors() if err["loc"]}
        if not isinstance(raw, dict) or not bad_keys:
            logger.warning("⚠️ Unusable content item replaced by defaults: %s", e)
            return RemoteContentItem()

        logger.warning(
            "⚠️ Item %s: dropping invalid field(s) %s",
            raw.get("id"),
            ", ".join(sorted(str(k) for k in bad_keys)),
        )

    trimmed = {k: v for k, v in raw.items() if k not in bad_keys}
    try:
        return RemoteContentItem.model_validate(trimmed)
    except ValidationError as e:
        logger.warning("⚠️ Unusable content item replaced by defaults: %s", e)
        return RemoteContentItem()


# ──────────────────────────────────────────────────────────────────────────────
# Collections
# ──────────────────────────────────────────────────────────────────────────────


class ContentCollection(BaseModel):
    """
    What the content source exposes per content type.

    `error` is informational only: views never render a distinct error state,
    they fall through to whatever `items` holds (possibly none).
    """

    content_type: ContentType
    items: List[RemoteContentItem] = Field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    source: Literal["wordpress", "fallback", "none"] = "none"

    @classmethod
    def pending(cls, content_type: ContentType) -> "ContentCollection":
        """Collection as seen before the fetch resolves."""
        return cls(content_type=content_type, loading=True)


class FallbackContentFile(BaseModel):
    """
    Bundled fallback content, in the REST item shape.

    Supports:
        { "portfolio": [ {...}, ... ], "services": [ {...}, ... ] }
    """

    portfolio: List[RemoteContentItem] = Field(default_factory=list)
    services: List[RemoteContentItem] = Field(default_factory=list)

    @field_validator("portfolio", "services", mode="before")
    @classmethod
    def _validate_each_item(cls, v):
        # One bad entry must not reject the whole bundled file
        if not isinstance(v, list):
            return []
        return [validate_remote_item(raw) for raw in v if isinstance(raw, dict)]

    def items_for(self, content_type: ContentType) -> List[RemoteContentItem]:
        return list(getattr(self, content_type.value))
