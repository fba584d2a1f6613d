"""
pipelines/render_pipeline_async.py

Section pipelines: fetch → normalize → view → render.

---------------------------------------------------------------------------
📦 High-Level Flow
---------------------------------------------------------------------------

WordPressContentSource.load_collection_async(content_type)
    |
    v
ContentCollection(items, loading=False, error)
    |
    v
PortfolioView.update() / ServicesView.update()   # normalizer runs here
    |
    v
render_portfolio_view() / render_services_view()  # table | json text

Each collection is fetched exactly once per run; views never go back to
the source. Rendering is a plain-text stand-in for the site's markup:
pandas tables for terminals, JSON for anything downstream.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Literal, Optional, Union

import pandas as pd

from igniting_content.fsm.view_enums import ContentType
from igniting_content.models.display_models import DisplayRecord, ServiceCard
from igniting_content.pipelines.content_source_async import WordPressContentSource
from igniting_content.pipelines.presentation_state import (
    PortfolioView,
    ServicesView,
)

logger = logging.getLogger(__name__)

OutputFormat = Literal["table", "json"]

PORTFOLIO_LOADING_MESSAGE = "Loading our amazing portfolio..."
PORTFOLIO_EMPTY_MESSAGE = (
    "No portfolio items available at the moment. Please check back soon!"
)
SERVICES_LOADING_MESSAGE = "Loading services..."
SERVICES_EMPTY_MESSAGE = "No services available at the moment."

_PORTFOLIO_COLUMNS = [
    "id",
    "title",
    "category",
    "year",
    "featured",
    "is_video",
    "image",
    "link",
]
_SERVICE_COLUMNS = ["id", "title", "icon", "price", "features", "cta_text", "cta_url"]


# ============================================================================
# Records → DataFrame
# ============================================================================


def records_to_dataframe(records: Iterable[DisplayRecord]) -> pd.DataFrame:
    """Flatten DisplayRecords into a table (one row per record)."""
    rows = []
    for r in records:
        rows.append(
            {
                "id": r.id,
                "title": r.title,
                "category": r.category,
                "year": r.year,
                "featured": r.featured,
                "is_video": r.is_video,
                "image": r.image,
                "link": r.external_link or r.internal_link or "",
            }
        )
    return pd.DataFrame(rows, columns=_PORTFOLIO_COLUMNS)


def service_cards_to_dataframe(cards: Iterable[ServiceCard]) -> pd.DataFrame:
    rows = []
    for c in cards:
        rows.append(
            {
                "id": c.id,
                "title": c.title,
                "icon": c.icon.value,
                "price": c.price or "",
                "features": ", ".join(c.features),
                "cta_text": c.cta_text,
                "cta_url": c.cta_url,
            }
        )
    return pd.DataFrame(rows, columns=_SERVICE_COLUMNS)


# ============================================================================
# Rendering
# ============================================================================


def render_portfolio_view(view: PortfolioView, fmt: OutputFormat = "table") -> str:
    """
    Render the portfolio section as text.

    table: featured record, then the current grid page.
    json:  state + entrance flag + featured + current page + paging info.
    """
    if view.is_loading:
        return PORTFOLIO_LOADING_MESSAGE
    if view.is_empty:
        return PORTFOLIO_EMPTY_MESSAGE

    # Rendering puts the section on screen; the entrance animation fires once
    animate_entrance = view.visibility.observe(True)
    featured = view.featured
    page_records = view.current_page_records

    if fmt == "json":
        payload = {
            "state": view.state.value,
            "animate_entrance": animate_entrance,
            "featured": featured.model_dump(mode="json") if featured else None,
            "page": view.current_page,
            "total_pages": view.total_pages,
            "records": [r.model_dump(mode="json") for r in page_records],
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)

    lines = []
    if featured is not None:
        lines.append(f"★ {featured.title} ({featured.category}, {featured.year})")
        lines.append(f"  {featured.description}")
    if page_records:
        lines.append("")
        lines.append(
            f"Page {view.current_page + 1}/{max(view.total_pages, 1)}"
        )
        lines.append(records_to_dataframe(page_records).to_string(index=False))
    return "\n".join(lines)


def render_services_view(view: ServicesView, fmt: OutputFormat = "table") -> str:
    if view.is_loading:
        return SERVICES_LOADING_MESSAGE
    if view.is_empty:
        return SERVICES_EMPTY_MESSAGE

    animate_entrance = view.visibility.observe(True)

    if fmt == "json":
        payload = {
            "state": view.state.value,
            "animate_entrance": animate_entrance,
            "cards": [c.model_dump(mode="json") for c in view.cards],
            "cta_url": view.cta_url,
        }
        return json.dumps(payload, indent=2, ensure_ascii=False)

    table = service_cards_to_dataframe(view.cards).to_string(index=False)
    return f"{table}\n\nBook a call: {view.cta_url}"


# ============================================================================
# Section pipelines
# ============================================================================


async def run_portfolio_pipeline_async(
    *,
    source: Optional[WordPressContentSource] = None,
    page: int = 0,
) -> PortfolioView:
    """
    Fetch the portfolio collection once and build its view.

    Args:
        source: Content source (a default one is created and closed if None).
        page: Grid page to select (wraps like next/prev navigation).

    Returns:
        PortfolioView in EMPTY or READY state.
    """
    owns_source = source is None
    source = source or WordPressContentSource()
    try:
        view = PortfolioView()
        collection = await source.load_collection_async(ContentType.PORTFOLIO)
        view.update(collection)
    finally:
        if owns_source:
            await source.aclose()

    if view.total_pages:
        view.current_page = page % view.total_pages

    logger.info(
        "✅ Portfolio ready | state=%s | records=%d | pages=%d",
        view.state.value,
        len(view.records),
        view.total_pages,
    )
    return view


async def run_services_pipeline_async(
    *,
    source: Optional[WordPressContentSource] = None,
) -> ServicesView:
    """Fetch the services collection once and build its view."""
    owns_source = source is None
    source = source or WordPressContentSource()
    try:
        view = ServicesView()
        collection = await source.load_collection_async(ContentType.SERVICES)
        view.update(collection)
    finally:
        if owns_source:
            await source.aclose()

    logger.info(
        "✅ Services ready | state=%s | cards=%d", view.state.value, len(view.cards)
    )
    return view


async def run_all_sections_async(
    *,
    source: Optional[WordPressContentSource] = None,
) -> Dict[ContentType, Union[PortfolioView, ServicesView]]:
    """Fetch every collection concurrently and build one view per section."""
    owns_source = source is None
    source = source or WordPressContentSource()
    try:
        collections = await source.load_all_async()
    finally:
        if owns_source:
            await source.aclose()

    return {
        ContentType.PORTFOLIO: PortfolioView(collections[ContentType.PORTFOLIO]),
        ContentType.SERVICES: ServicesView(collections[ContentType.SERVICES]),
    }


# ============================================================================
# Export
# ============================================================================


def save_display_records(
    records: List[DisplayRecord],
    file_path: Union[Path, str],
    file_format: Literal["json", "csv"] = "json",
) -> None:
    """
    Save normalized records to a JSON or CSV file.

    Args:
        records: DisplayRecords to write.
        file_path: Destination path.
        file_format: "json" | "csv"
    """
    try:
        if file_format == "csv":
            records_to_dataframe(records).to_csv(file_path, index=False)
        else:
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(
                    [r.model_dump(mode="json") for r in records],
                    f,
                    indent=4,
                    ensure_ascii=False,
                )

        logger.info("💾 Saved %d record(s) to %s", len(records), file_path)

    except Exception as e:
        logger.error(f"Error saving records: {e}")
        raise
