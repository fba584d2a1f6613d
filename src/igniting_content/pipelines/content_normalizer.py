"""
pipelines/content_normalizer.py

Description:
------------
The single validation/defaulting boundary between loosely-typed WordPress
items (`RemoteContentItem`) and render-ready records (`DisplayRecord`,
`ServiceCard`).

Every derivation path has a non-failing default, so normalizing an item
never raises: a missing title, category, date, description or image
degrades to a fixed fallback instead.

Portfolio field rules:
----------------------
    image          embedded featured media → featured_media_url →
                   PLACEHOLDER_IMAGES[index % len(PLACEHOLDER_IMAGES)]
    category       acf.project_type → DEFAULT_CATEGORY
    year           acf.project_date year → publish-date year → current year
    description    excerpt (markup stripped) →
                   content (markup stripped, first 200 chars + "...") →
                   NO_DESCRIPTION
    featured       acf.featured is True or index == 0 (per item);
                   first explicit flag, else index 0 (per collection)
    internal_link  "/portfolio/<slug>" when a slug exists
    external_link  acf.project_url verbatim
    gallery_images [g.url for g in acf.gallery]
    is_video       category contains "video" or "content" (case-insensitive)
    detail_group   only when acf.bi_details exists

This module is pure: no I/O, no global state.
"""

from __future__ import annotations

import re
import html
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd

from igniting_content.config.project_config import (
    DEFAULT_CATEGORY,
    DEFAULT_CTA_TEXT,
    DEFAULT_TITLE,
    DESCRIPTION_MAX_CHARS,
    ELLIPSIS,
    NO_DESCRIPTION,
    PLACEHOLDER_IMAGES,
    PORTFOLIO_PATH_PREFIX,
    SCHEDULING_URL,
    VIDEO_CATEGORY_MARKERS,
)
from igniting_content.fsm.view_enums import ServiceIcon
from igniting_content.models.display_models import (
    DetailGroup,
    DisplayRecord,
    ServiceCard,
)
from igniting_content.models.wp_content_models import (
    ContentFields,
    RemoteContentItem,
    RenderedText,
    validate_remote_item,
)

logger = logging.getLogger(__name__)

RawItem = Union[RemoteContentItem, Mapping[str, Any]]

_HTML_TAG_RE = re.compile(r"<[^>]*>")


# ============================================================================
# Text helpers
# ============================================================================


def strip_html(content: Optional[str]) -> str:
    """
    Remove markup from rendered WordPress HTML.

    Steps:
    - Drop every `<...>` tag
    - Unescape entities (`&amp;`, `&#8217;`, `&hellip;`)
    - Trim surrounding whitespace

    Args:
        content (str | None): Rendered HTML.

    Returns:
        str: Plain text ("" for None).
    """
    if not content:
        return ""
    text = _HTML_TAG_RE.sub("", content)
    return html.unescape(text).strip()


def truncate_text(text: str, limit: int = DESCRIPTION_MAX_CHARS) -> str:
    """First `limit` characters of `text` followed by the ellipsis marker."""
    return text[:limit] + ELLIPSIS


def _rendered(field: Optional[RenderedText]) -> Optional[str]:
    return field.rendered if field is not None else None


def _parse_year(value: Optional[str]) -> Optional[str]:
    """Year component of a date-like string, or None if it does not parse."""
    if not value:
        return None
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return str(ts.year)


# ============================================================================
# Input coercion
# ============================================================================


def coerce_remote_item(item: RawItem) -> RemoteContentItem:
    """
    Validate a raw REST payload into a RemoteContentItem.

    Invalid fields are dropped; a payload that cannot be validated at all is
    replaced by an empty item so that normalization still yields a (fully
    defaulted) record.
    """
    return validate_remote_item(item)


# ============================================================================
# Field derivations (portfolio)
# ============================================================================


def resolve_image(item: RemoteContentItem, index: int) -> str:
    """Embedded media → pre-resolved media URL → placeholder by position."""
    if item.embedded is not None:
        for media in item.embedded.featured_media[:1]:
            if media.source_url:
                return media.source_url
    if item.featured_media_url:
        return item.featured_media_url
    return PLACEHOLDER_IMAGES[index % len(PLACEHOLDER_IMAGES)]


def resolve_category(acf: Optional[ContentFields]) -> str:
    if acf is not None and acf.project_type and acf.project_type.strip():
        return acf.project_type.strip()
    return DEFAULT_CATEGORY


def resolve_year(item: RemoteContentItem) -> str:
    """Custom project date → publish date → current year."""
    acf_date = item.acf.project_date if item.acf is not None else None
    year = _parse_year(acf_date) or _parse_year(item.date)
    if year is None:
        year = str(datetime.now(timezone.utc).year)
    return year


def resolve_description(item: RemoteContentItem) -> str:
    """Excerpt → truncated content → NO_DESCRIPTION."""
    excerpt = strip_html(_rendered(item.excerpt))
    if excerpt:
        return excerpt

    content = strip_html(_rendered(item.content))
    if content:
        return truncate_text(content)

    return NO_DESCRIPTION


def resolve_title(item: RemoteContentItem, default: str = DEFAULT_TITLE) -> str:
    return strip_html(_rendered(item.title)) or default


def is_explicitly_featured(item: RemoteContentItem) -> bool:
    return item.acf is not None and item.acf.featured is True


def is_video_category(category: str) -> bool:
    lowered = category.lower()
    return any(marker in lowered for marker in VIDEO_CATEGORY_MARKERS)


def build_detail_group(acf: Optional[ContentFields]) -> Optional[DetailGroup]:
    if acf is None or acf.bi_details is None:
        return None
    details = acf.bi_details
    return DetailGroup(
        overview=details.overview or "",
        process=details.process or "",
        tools=list(details.tools or []),
        results=details.results or "",
    )


# ============================================================================
# Portfolio normalization
# ============================================================================


def normalize_portfolio_item(
    item: RawItem,
    index: int,
    *,
    featured_index: Optional[int] = None,
) -> DisplayRecord:
    """
    Normalize one portfolio item at position `index` into a DisplayRecord.

    Args:
        item: REST payload (dict) or an already-validated RemoteContentItem.
        index: Position of the item in the current collection.
        featured_index: Position of the collection's featured item, when known.
            If None, the per-item rule applies: explicit flag or index 0.

    Returns:
        DisplayRecord: never raises; absent fields degrade to defaults.
    """
    remote = coerce_remote_item(item)
    acf = remote.acf

    category = resolve_category(acf)

    if featured_index is None:
        featured = is_explicitly_featured(remote) or index == 0
    else:
        featured = index == featured_index

    internal_link = f"{PORTFOLIO_PATH_PREFIX}{remote.slug}" if remote.slug else None
    external_link = acf.project_url if acf is not None else None

    gallery_images: List[str] = []
    if acf is not None and acf.gallery:
        gallery_images = [g.url for g in acf.gallery if g.url]

    return DisplayRecord(
        id=remote.id,
        title=resolve_title(remote),
        category=category,
        year=resolve_year(remote),
        description=resolve_description(remote),
        featured=featured,
        image=resolve_image(remote, index),
        external_link=external_link,
        internal_link=internal_link,
        gallery_images=gallery_images,
        is_video=is_video_category(category),
        detail_group=build_detail_group(acf),
    )


def resolve_featured_index(items: Iterable[RemoteContentItem]) -> Optional[int]:
    """First explicitly flagged position, else 0; None for an empty collection."""
    count = 0
    for i, item in enumerate(items):
        count += 1
        if is_explicitly_featured(item):
            return i
    return 0 if count else None


def normalize_portfolio_items(items: Iterable[RawItem]) -> List[DisplayRecord]:
    """
    Normalize a whole portfolio collection.

    Exactly one record comes back with `featured=True`: the first item with
    an explicit flag, or the first item when none is flagged.
    """
    remote_items = [coerce_remote_item(item) for item in items]
    featured_index = resolve_featured_index(remote_items)

    records = [
        normalize_portfolio_item(item, i, featured_index=featured_index)
        for i, item in enumerate(remote_items)
    ]
    logger.debug(
        "Normalized %d portfolio item(s); featured index=%s",
        len(records),
        featured_index,
    )
    return records


# ============================================================================
# Services normalization
# ============================================================================


def normalize_service_item(item: RawItem, index: int) -> ServiceCard:
    """
    Normalize one service item into a ServiceCard.

    `index` only feeds the positional title fallback ("Service 3").
    """
    remote = coerce_remote_item(item)
    acf = remote.acf

    content_html = _rendered(remote.content) or ""
    description = strip_html(content_html) or strip_html(_rendered(remote.excerpt))

    return ServiceCard(
        id=remote.id,
        title=resolve_title(remote, default=f"Service {index + 1}"),
        description=description,
        content_html=content_html,
        icon=ServiceIcon.from_value(acf.service_icon if acf else None),
        features=list(acf.service_features or []) if acf else [],
        price=acf.service_price if acf else None,
        cta_url=(acf.cta_url if acf and acf.cta_url else SCHEDULING_URL),
        cta_text=(acf.cta_text if acf and acf.cta_text else DEFAULT_CTA_TEXT),
    )


def normalize_service_items(items: Iterable[RawItem]) -> List[ServiceCard]:
    return [normalize_service_item(item, i) for i, item in enumerate(items)]
