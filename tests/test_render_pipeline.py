"""Render pipeline, export and CLI wiring (bundled fallback content, no network)."""

import json
from pathlib import Path

import pandas as pd
import pytest

from igniting_content.cli.run_pipelines import build_parser, run
from igniting_content.fsm.view_enums import ContentType
from igniting_content.models.wp_content_models import ContentCollection
from igniting_content.pipelines.content_source_async import WordPressContentSource
from igniting_content.pipelines.presentation_state import PortfolioView, ServicesView
from igniting_content.pipelines.render_pipeline_async import (
    PORTFOLIO_EMPTY_MESSAGE,
    PORTFOLIO_LOADING_MESSAGE,
    SERVICES_EMPTY_MESSAGE,
    records_to_dataframe,
    render_portfolio_view,
    render_services_view,
    run_all_sections_async,
    run_portfolio_pipeline_async,
    save_display_records,
)

pytestmark = pytest.mark.anyio


@pytest.fixture
def offline_source(fallback_file: Path) -> WordPressContentSource:
    return WordPressContentSource(use_wordpress=False, fallback_file=fallback_file)


def test_render_loading_and_empty(make_collection):
    assert render_portfolio_view(PortfolioView()) == PORTFOLIO_LOADING_MESSAGE
    assert render_portfolio_view(PortfolioView(make_collection(0))) == PORTFOLIO_EMPTY_MESSAGE


def test_render_portfolio_json(make_collection):
    view = PortfolioView(make_collection(6))
    view.next_page()

    payload = json.loads(render_portfolio_view(view, "json"))

    assert payload["state"] == "READY"
    assert payload["featured"]["id"] == 1
    assert payload["page"] == 1
    assert payload["total_pages"] == 2
    assert [r["id"] for r in payload["records"]] == [6]


def test_first_render_fires_entrance_once(make_collection):
    view = PortfolioView(make_collection(3))
    assert not view.visibility.triggered

    first = json.loads(render_portfolio_view(view, "json"))
    second = json.loads(render_portfolio_view(view, "json"))

    assert first["animate_entrance"] is True
    assert second["animate_entrance"] is False
    assert view.visibility.triggered


def test_loading_render_does_not_fire_entrance():
    view = ServicesView()
    render_services_view(view)
    assert not view.visibility.triggered


def test_render_portfolio_table(make_collection):
    text = render_portfolio_view(PortfolioView(make_collection(3)))

    assert text.startswith("★ Project 1")
    assert "Page 1/1" in text
    assert "Project 3" in text


def test_records_to_dataframe(make_collection):
    view = PortfolioView(make_collection(3))
    df = records_to_dataframe(view.records)

    assert isinstance(df, pd.DataFrame)
    assert list(df["id"]) == [1, 2, 3]
    assert list(df["featured"]) == [True, False, False]


def test_records_to_dataframe_empty():
    assert records_to_dataframe([]).empty


async def test_portfolio_pipeline_wraps_page(offline_source):
    async with offline_source as source:
        view = await run_portfolio_pipeline_async(source=source, page=5)

    # two fallback items: one featured, one on the grid → a single page
    assert view.is_ready
    assert view.featured.id == 900
    assert view.current_page == 0


async def test_all_sections(offline_source):
    async with offline_source as source:
        views = await run_all_sections_async(source=source)

    assert isinstance(views[ContentType.PORTFOLIO], PortfolioView)
    assert isinstance(views[ContentType.SERVICES], ServicesView)
    assert [c.title for c in views[ContentType.SERVICES].cards] == ["Fallback Service"]


def test_services_empty_message():
    view = ServicesView(ContentCollection(content_type=ContentType.SERVICES))
    assert render_services_view(view) == SERVICES_EMPTY_MESSAGE


def test_save_display_records(tmp_path: Path, make_collection):
    records = PortfolioView(make_collection(2)).records

    json_path = tmp_path / "records.json"
    save_display_records(records, json_path)
    saved = json.loads(json_path.read_text(encoding="utf-8"))
    assert [r["id"] for r in saved] == [1, 2]
    assert saved[0]["featured"] is True

    csv_path = tmp_path / "records.csv"
    save_display_records(records, csv_path, file_format="csv")
    assert list(pd.read_csv(csv_path)["title"]) == ["Project 1", "Project 2"]


# ============================================
# CLI
# ============================================


def test_parser_defaults():
    args = build_parser().parse_args(["portfolio"])
    assert args.command == "portfolio"
    assert args.page == 0
    assert args.fmt == "table"
    assert args.fallback_only is False


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


async def test_cli_portfolio_from_bundled_content():
    args = build_parser().parse_args(["--fallback-only", "portfolio", "--format", "json"])

    payload = json.loads(await run(args))

    assert payload["featured"]["id"] == 101
    assert payload["total_pages"] == 2
    assert len(payload["records"]) == 4


async def test_cli_services_from_bundled_content():
    args = build_parser().parse_args(["--fallback-only", "services", "--format", "json"])

    payload = json.loads(await run(args))

    assert [c["icon"] for c in payload["cards"]] == ["instagram", "globe", "bar-chart"]
    assert payload["cards"][2]["title"] == "Analytics & Reporting"


async def test_cli_export(tmp_path: Path):
    out = tmp_path / "portfolio.json"
    args = build_parser().parse_args(["--fallback-only", "export", "--out", str(out)])

    message = await run(args)

    assert message == f"Exported 6 record(s) to {out}"
    assert len(json.loads(out.read_text(encoding="utf-8"))) == 6
