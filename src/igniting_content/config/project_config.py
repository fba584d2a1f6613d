"""
config/project_config.py

Centralized config for the studio content layer:

- Project root detection
- WordPress REST endpoint + request budget (overridable from `.env`)
- Bundled fallback content location
- Display defaults shared by the normalizer and the view containers
"""

from __future__ import annotations

import os
import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "pyproject.toml"

# -----------------------------------------------------------------------------
# Project root detection
# -----------------------------------------------------------------------------


def find_project_root(
    starting_path: str | Path | None = None,
    marker: str = DEFAULT_MARKER,
) -> Path | None:
    """
    Find the project root by searching upward for a marker (e.g. 'pyproject.toml').

    Args:
        starting_path: Optional path to start from. Defaults to this file's dir.
        marker: File or directory name that marks the project root.

    Returns:
        Path to the project root, or None if not found.
    """
    if starting_path is None:
        starting_path = Path(__file__).resolve().parent
    else:
        starting_path = Path(starting_path).resolve()

    for candidate in (starting_path, *starting_path.parents):
        if (candidate / marker).exists():
            return candidate

    logger.debug("Project root not found (marker %r); using installed package.", marker)
    return None


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean env var ('true'/'1'/'yes' are truthy)."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default, cast=int):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %r", name, raw, default)
        return default


# -----------------------------------------------------------------------------
# Base directories
# -----------------------------------------------------------------------------

BASE_DIR = find_project_root()

# Load .env once at import time (project root first, then cwd lookup)
if BASE_DIR is not None and (BASE_DIR / ".env").exists():
    load_dotenv(BASE_DIR / ".env")
else:
    load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = PACKAGE_DIR / "data"
FALLBACK_CONTENT_FILE = DATA_DIR / "fallback_content.json"


# -----------------------------------------------------------------------------
# WordPress REST API
# -----------------------------------------------------------------------------

WP_API_URL = os.getenv("WP_API_URL", "https://admin.theignitingstudio.com").rstrip("/")
WP_SITE_URL = os.getenv("WP_SITE_URL", "https://theignitingstudio.com").rstrip("/")
WP_REST_PREFIX = "/wp-json/wp/v2"

# Feature flag: when off, only bundled fallback content is used
USE_WORDPRESS = _env_flag("USE_WORDPRESS", True)

WP_PER_PAGE = _env_number("WP_PER_PAGE", 100)
WP_REQUEST_TIMEOUT = _env_number("WP_REQUEST_TIMEOUT", 15.0, float)

# Requests per minute against the CMS
WP_MAX_RPM = _env_number("WP_MAX_RPM", 60)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# -----------------------------------------------------------------------------
# Display defaults
# -----------------------------------------------------------------------------

DEFAULT_CATEGORY = "Digital Marketing"
DEFAULT_TITLE = "Untitled Project"
NO_DESCRIPTION = "No description available"

DESCRIPTION_MAX_CHARS = 200
ELLIPSIS = "..."

PORTFOLIO_PATH_PREFIX = "/portfolio/"

# Placeholder rotation used when an item carries no media (order matters)
PLACEHOLDER_IMAGES: tuple[str, ...] = (
    "/assets/portfolio/placeholder-1.png",
    "/assets/portfolio/placeholder-2.png",
    "/assets/portfolio/placeholder-3.png",
    "/assets/portfolio/placeholder-4.png",
    "/assets/portfolio/placeholder-5.png",
)

# Categories that open an in-page detail overlay instead of navigating
MODAL_CATEGORIES: frozenset[str] = frozenset(
    {"Content Creation", "Business Intelligence"}
)

# Lower-case substrings of a category that mark a video project
VIDEO_CATEGORY_MARKERS: tuple[str, ...] = ("video", "content")

PORTFOLIO_PAGE_SIZE = 4

# Default call-to-action target (third-party scheduling page)
SCHEDULING_URL = "https://calendly.com/theignitingstudio/30min"
DEFAULT_CTA_TEXT = "Book a Free Call"
