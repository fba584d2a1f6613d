"""
Command-line interface (CLI) wrapper for the section pipelines.

This file provides an argparse-based interface so you can trigger:

    • portfolio: fetch + normalize + render the portfolio showcase
    • services:  fetch + normalize + render the services grid
    • all:       both sections, fetched concurrently
    • export:    write normalized portfolio records to JSON/CSV

from the command line, without mixing CLI code into the pipeline modules.

Usage examples:

    # Portfolio, first grid page, as a table
    igniting-content portfolio

    # Third grid page as JSON
    igniting-content portfolio --page 2 --format json

    # Services grid from the bundled fallback content only
    igniting-content --fallback-only services

    # Both sections against a staging CMS
    igniting-content --api-url https://staging.example.com all

    # Export normalized records
    igniting-content export --out portfolio.csv --csv
"""

import argparse
import asyncio

from igniting_content.config.logging_config import init_logging
from igniting_content.config.project_config import USE_WORDPRESS, WP_API_URL
from igniting_content.fsm.view_enums import ContentType
from igniting_content.pipelines.content_source_async import WordPressContentSource
from igniting_content.pipelines.render_pipeline_async import (
    render_portfolio_view,
    render_services_view,
    run_all_sections_async,
    run_portfolio_pipeline_async,
    run_services_pipeline_async,
    save_display_records,
)


def build_parser():
    """
    Build and configure the top-level argparse ArgumentParser.

    Returns:
        argparse.ArgumentParser
            Fully configured parser ready for parse_args().
    """
    parser = argparse.ArgumentParser(description="Studio content runner")

    parser.add_argument(
        "--api-url",
        default=WP_API_URL,
        help="WordPress base URL (defaults to WP_API_URL).",
    )
    parser.add_argument(
        "--fallback-only",
        action="store_true",
        help="Skip the CMS and use bundled fallback content.",
    )
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="On fetch errors, show the empty state instead of fallback content.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    # --- Portfolio ---
    portfolio = sub.add_parser(
        "portfolio",
        help="Render the portfolio showcase (featured + paginated grid).",
    )
    portfolio.add_argument(
        "--page",
        type=int,
        default=0,
        help="Zero-based grid page (wraps around).",
    )
    portfolio.add_argument(
        "--format",
        dest="fmt",
        choices=["table", "json"],
        default="table",
        help="Output format.",
    )

    # --- Services ---
    services = sub.add_parser("services", help="Render the services grid.")
    services.add_argument(
        "--format",
        dest="fmt",
        choices=["table", "json"],
        default="table",
        help="Output format.",
    )

    # --- Both ---
    full = sub.add_parser("all", help="Render every section (fetched concurrently).")
    full.add_argument(
        "--format",
        dest="fmt",
        choices=["table", "json"],
        default="table",
        help="Output format.",
    )

    # --- Export ---
    export = sub.add_parser(
        "export", help="Write normalized portfolio records to a file."
    )
    export.add_argument("--out", required=True, help="Destination file path.")
    export.add_argument(
        "--csv",
        action="store_true",
        help="Write CSV instead of JSON.",
    )

    return parser


def build_source(args) -> WordPressContentSource:
    return WordPressContentSource(
        args.api_url,
        use_wordpress=USE_WORDPRESS and not args.fallback_only,
        use_fallback=not args.no_fallback,
    )


async def run(args) -> str:
    """
    Execute the pipeline selected on the command line and return its output.
    """
    async with build_source(args) as source:
        if args.command == "portfolio":
            view = await run_portfolio_pipeline_async(source=source, page=args.page)
            return render_portfolio_view(view, args.fmt)

        elif args.command == "services":
            view = await run_services_pipeline_async(source=source)
            return render_services_view(view, args.fmt)

        elif args.command == "all":
            views = await run_all_sections_async(source=source)
            return "\n\n".join(
                [
                    render_portfolio_view(views[ContentType.PORTFOLIO], args.fmt),
                    render_services_view(views[ContentType.SERVICES], args.fmt),
                ]
            )

        elif args.command == "export":
            view = await run_portfolio_pipeline_async(source=source)
            save_display_records(
                view.records, args.out, file_format="csv" if args.csv else "json"
            )
            return f"Exported {len(view.records)} record(s) to {args.out}"

    raise ValueError(f"Unknown command: {args.command}")


def main():
    """
    Entry point for CLI execution.
    """
    init_logging()
    parser = build_parser()
    args = parser.parse_args()
    print(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
