"""
fsm/view_enums.py

Core Enum types used across the studio content layer.

Centralizes canonical value definitions for:
- Content types (WordPress custom post types)
- View states (per-section FSM)
- Click actions (modal vs navigation decision)
- Service icons

These enums are reused across:
- REST endpoint construction
- Pydantic model validation
- View-state transitions
- CLI rendering and logging
"""

from enum import Enum


# ──────────────────────────────────────────────────────────────────────────────
# Content types
# ──────────────────────────────────────────────────────────────────────────────


class ContentType(str, Enum):
    """
    WordPress custom post types consumed by the site.

    The value doubles as the REST collection path segment
    (e.g. `/wp-json/wp/v2/portfolio`) and as the key in the bundled
    fallback content file.
    """

    PORTFOLIO = "portfolio"
    SERVICES = "services"

    @classmethod
    def values(cls) -> list[str]:
        return [e.value for e in cls]

    def __str__(self) -> str:
        return self.value


# ──────────────────────────────────────────────────────────────────────────────
# View states (FSM)
# ──────────────────────────────────────────────────────────────────────────────


class ViewState(str, Enum):
    """
    Per-section view lifecycle.

    States
    ------
    LOADING
        Adapter has not reported yet.
    EMPTY
        Adapter finished with zero usable records (includes fetch errors).
    READY
        At least one record; interaction sub-state is live.
    """

    LOADING = "LOADING"
    EMPTY = "EMPTY"
    READY = "READY"

    @classmethod
    def list(cls) -> list["ViewState"]:
        """Return all defined states as a list."""
        return list(cls)


# ──────────────────────────────────────────────────────────────────────────────
# Click outcome
# ──────────────────────────────────────────────────────────────────────────────


class ClickAction(str, Enum):
    """What a click on a record resolved to."""

    OPEN_MODAL = "OPEN_MODAL"  # in-page detail overlay
    OPEN_EXTERNAL = "OPEN_EXTERNAL"  # new browsing context
    NAVIGATE = "NAVIGATE"  # in-app route
    NONE = "NONE"  # nothing to do


# ──────────────────────────────────────────────────────────────────────────────
# Service icons
# ──────────────────────────────────────────────────────────────────────────────


class ServiceIcon(str, Enum):
    """Icon shown on a service card."""

    INSTAGRAM = "instagram"
    GLOBE = "globe"
    BAR_CHART = "bar-chart"
    SPARKLES = "sparkles"

    @classmethod
    def from_value(cls, value: str | None) -> "ServiceIcon":
        """
        Map a free-text `service_icon` custom field to an icon.

        Unknown or missing values map to SPARKLES.
        """
        key = (value or "").strip().lower()
        return _ICON_ALIASES.get(key, cls.SPARKLES)


_ICON_ALIASES = {
    "instagram": ServiceIcon.INSTAGRAM,
    "globe": ServiceIcon.GLOBE,
    "website": ServiceIcon.GLOBE,
    "bar-chart": ServiceIcon.BAR_CHART,
    "analytics": ServiceIcon.BAR_CHART,
}
