"""
main.py

High-level orchestrator for the studio content layer.

Sections:
    PORTFOLIO  featured project + paginated grid
    SERVICES   service cards + scheduling call-to-action

This module:

    1) Loads both collections from the CMS concurrently (one request each,
       bundled fallback content on failure).
    2) Normalizes them into display records.
    3) Prints each section's first render.

Usage:
    python -m igniting_content.main
"""

from __future__ import annotations

import asyncio
import logging

from igniting_content.config.logging_config import init_logging
from igniting_content.fsm.view_enums import ContentType
from igniting_content.fsm.view_state_config import validate_state_set
from igniting_content.pipelines.render_pipeline_async import (
    render_portfolio_view,
    render_services_view,
    run_all_sections_async,
)

logger = logging.getLogger(__name__)


async def run_all() -> None:
    """
    Load every section once and print it.

    Notes
    -----
    - Fetch errors never stop the run; an unreachable CMS shows fallback
      content or the empty-state message.
    """
    validate_state_set()

    views = await run_all_sections_async()

    print(render_portfolio_view(views[ContentType.PORTFOLIO]))
    print()
    print(render_services_view(views[ContentType.SERVICES]))


if __name__ == "__main__":
    init_logging()
    asyncio.run(run_all())
