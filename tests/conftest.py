"""pytest configuration and shared fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from igniting_content.fsm.view_enums import ContentType
from igniting_content.models.wp_content_models import ContentCollection


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_item() -> Callable[..., dict[str, Any]]:
    """Build a REST-shaped portfolio item; keyword args land in `acf`."""

    def _make(
        item_id: int,
        *,
        title: str | None = None,
        slug: str | None = None,
        date: str | None = "2024-01-15T09:00:00",
        excerpt: str | None = None,
        content: str | None = None,
        **acf: Any,
    ) -> dict[str, Any]:
        item: dict[str, Any] = {"id": item_id, "date": date}
        item["title"] = {"rendered": title if title is not None else f"Project {item_id}"}
        if slug is not None:
            item["slug"] = slug
        if excerpt is not None:
            item["excerpt"] = {"rendered": excerpt}
        if content is not None:
            item["content"] = {"rendered": content}
        if acf:
            item["acf"] = acf
        return item

    return _make


@pytest.fixture
def make_collection(make_item) -> Callable[..., ContentCollection]:
    """Portfolio collection of `count` plain items (ids 1..count)."""

    def _make(count: int, **kwargs: Any) -> ContentCollection:
        items = [make_item(i + 1) for i in range(count)]
        return ContentCollection.model_validate(
            {"content_type": ContentType.PORTFOLIO, "items": items, **kwargs}
        )

    return _make


@pytest.fixture
def fallback_file(tmp_path: Path) -> Path:
    path = tmp_path / "fallback_content.json"
    path.write_text(
        json.dumps(
            {
                "portfolio": [
                    {"id": 900, "title": {"rendered": "Fallback Project"}},
                    {"id": 901, "title": {"rendered": "Second Fallback"}},
                ],
                "services": [
                    {"id": 950, "title": {"rendered": "Fallback Service"}},
                ],
            }
        ),
        encoding="utf-8",
    )
    return path
