"""
pipelines/presentation_state.py

Per-section presentation state containers.

Each section (portfolio, services) holds:
    - a view state on the LOADING → {EMPTY, READY} rail
      (see `fsm/view_state_config.py`)
    - the records normalized from the latest ContentCollection
    - transient interaction sub-state (page, hover, modal, gallery)
    - a one-shot visibility trigger for the entrance animation

Only `update(collection)` moves the view state. User actions (hover,
click, page and gallery navigation, modal open/close) mutate the
interaction sub-state and never send the view back to LOADING or EMPTY.

Navigation side effects are delegated to injected callables so the
containers stay free of any UI framework:

    navigate(path)      in-app route
    open_external(url)  new browsing context
"""

from __future__ import annotations

import logging
import math
from typing import Callable, FrozenSet, List, Optional

from igniting_content.config.project_config import (
    MODAL_CATEGORIES,
    PORTFOLIO_PAGE_SIZE,
    SCHEDULING_URL,
)
from igniting_content.fsm.view_enums import ClickAction, ViewState
from igniting_content.fsm.view_state_config import (
    INITIAL_VIEW_STATE,
    InvalidViewTransition,
    can_transition,
    next_index,
    prev_index,
    resolve_view_state,
)
from igniting_content.models.display_models import (
    ClickOutcome,
    DisplayRecord,
    ServiceCard,
)
from igniting_content.models.wp_content_models import ContentCollection
from igniting_content.pipelines.content_normalizer import (
    normalize_portfolio_items,
    normalize_service_items,
)

logger = logging.getLogger(__name__)

Navigator = Callable[[str], None]


def _log_navigation(target: str) -> None:
    logger.info("➡️ Navigate to %s", target)


# ============================================================================
# Visibility
# ============================================================================


class VisibilityTrigger:
    """
    One-shot viewport-intersection trigger.

    The first intersecting observation fires; every later observation
    (intersecting or not) is ignored. There is no reset.
    """

    def __init__(self) -> None:
        self.triggered = False

    def observe(self, is_intersecting: bool) -> bool:
        """Return True only for the observation that fires the trigger."""
        if self.triggered or not is_intersecting:
            return False
        self.triggered = True
        return True


# ============================================================================
# Shared section plumbing
# ============================================================================


class _SectionView:
    """View-state rail + visibility shared by every section."""

    def __init__(self) -> None:
        self.state: ViewState = INITIAL_VIEW_STATE
        self.visibility = VisibilityTrigger()
        self.last_error: Optional[str] = None

    def _transition_to(self, target: ViewState) -> None:
        if not can_transition(self.state, target):
            raise InvalidViewTransition(self.state, target)
        if target != self.state:
            logger.debug(
                "%s: %s → %s", type(self).__name__, self.state.value, target.value
            )
        self.state = target

    @property
    def is_loading(self) -> bool:
        return self.state is ViewState.LOADING

    @property
    def is_empty(self) -> bool:
        return self.state is ViewState.EMPTY

    @property
    def is_ready(self) -> bool:
        return self.state is ViewState.READY


# ============================================================================
# Portfolio
# ============================================================================


class PortfolioView(_SectionView):
    """
    Portfolio showcase: one featured record plus a paginated grid.

    Args:
        collection: Optional initial collection (otherwise starts LOADING).
        page_size: Grid page size.
        navigate: Callback for in-app routes.
        open_external: Callback for new-context links.
        modal_categories: Categories that open the detail modal on click.
    """

    def __init__(
        self,
        collection: Optional[ContentCollection] = None,
        *,
        page_size: int = PORTFOLIO_PAGE_SIZE,
        navigate: Optional[Navigator] = None,
        open_external: Optional[Navigator] = None,
        modal_categories: FrozenSet[str] = MODAL_CATEGORIES,
    ) -> None:
        super().__init__()
        self.page_size = page_size
        self.modal_categories = modal_categories
        self._navigate = navigate or _log_navigation
        self._open_external = open_external or _log_navigation

        self.records: List[DisplayRecord] = []

        # Interaction sub-state
        self.current_page = 0
        self.hovered_id: Optional[int] = None
        self.selected_record: Optional[DisplayRecord] = None
        self.gallery_index = 0

        if collection is not None:
            self.update(collection)

    # ------------------------------------------------------------------
    # Collection → state
    # ------------------------------------------------------------------

    def update(self, collection: ContentCollection) -> ViewState:
        """
        Rebuild records from the adapter's collection and move the view state.

        Fetch errors are not a state of their own: whatever items the
        collection carries (possibly none) decide between EMPTY and READY.
        """
        self.last_error = collection.error
        if collection.error:
            logger.info("Portfolio collection reported an error: %s", collection.error)

        self.records = (
            [] if collection.loading else normalize_portfolio_items(collection.items)
        )
        self._transition_to(
            resolve_view_state(
                loading=collection.loading, record_count=len(self.records)
            )
        )

        self.current_page = 0
        self.hovered_id = None
        self.close_modal()
        return self.state

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def featured(self) -> Optional[DisplayRecord]:
        for record in self.records:
            if record.featured:
                return record
        return self.records[0] if self.records else None

    @property
    def others(self) -> List[DisplayRecord]:
        """Every record except the featured one, in collection order."""
        return [r for r in self.records if not r.featured]

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.others) / self.page_size) if self.page_size else 0

    @property
    def current_page_records(self) -> List[DisplayRecord]:
        start = self.current_page * self.page_size
        return self.others[start : start + self.page_size]

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def next_page(self) -> int:
        nxt = next_index(self.current_page, self.total_pages)
        if nxt is not None:
            self.current_page = nxt
        return self.current_page

    def prev_page(self) -> int:
        prv = prev_index(self.current_page, self.total_pages)
        if prv is not None:
            self.current_page = prv
        return self.current_page

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------

    def hover(self, record_id: int) -> None:
        self.hovered_id = record_id

    def unhover(self) -> None:
        self.hovered_id = None

    def is_hovered(self, record: DisplayRecord) -> bool:
        return self.hovered_id is not None and self.hovered_id == record.id

    # ------------------------------------------------------------------
    # Click handling
    # ------------------------------------------------------------------

    def opens_modal(self, record: DisplayRecord) -> bool:
        return record.category in self.modal_categories

    def click(self, record: DisplayRecord) -> ClickOutcome:
        """
        Card click.

        Allow-listed categories open the modal; everything else navigates:
        external link first, then the internal route, else nothing.
        """
        if self.opens_modal(record):
            self.open_modal(record)
            return ClickOutcome(
                action=ClickAction.OPEN_MODAL, record_id=record.id
            )

        if record.external_link:
            self._open_external(record.external_link)
            return ClickOutcome(
                action=ClickAction.OPEN_EXTERNAL,
                target=record.external_link,
                record_id=record.id,
            )

        if record.internal_link:
            self._navigate(record.internal_link)
            return ClickOutcome(
                action=ClickAction.NAVIGATE,
                target=record.internal_link,
                record_id=record.id,
            )

        return ClickOutcome(action=ClickAction.NONE, record_id=record.id)

    # The preview ("eye") button resolves exactly like a card click; it
    # exists separately so a renderer can wire it without bubbling.
    click_preview = click

    # ------------------------------------------------------------------
    # Modal + gallery
    # ------------------------------------------------------------------

    def open_modal(self, record: DisplayRecord) -> None:
        self.selected_record = record
        self.gallery_index = 0

    def close_modal(self) -> None:
        self.selected_record = None
        self.gallery_index = 0

    @property
    def modal_open(self) -> bool:
        return self.selected_record is not None

    def _gallery_size(self) -> int:
        if self.selected_record is None:
            return 0
        return len(self.selected_record.gallery_images)

    def next_gallery_image(self) -> int:
        nxt = next_index(self.gallery_index, self._gallery_size())
        if nxt is not None:
            self.gallery_index = nxt
        return self.gallery_index

    def prev_gallery_image(self) -> int:
        prv = prev_index(self.gallery_index, self._gallery_size())
        if prv is not None:
            self.gallery_index = prv
        return self.gallery_index

    @property
    def current_gallery_image(self) -> Optional[str]:
        if self._gallery_size() == 0:
            return None
        return self.selected_record.gallery_images[self.gallery_index]


# ============================================================================
# Services
# ============================================================================


class ServicesView(_SectionView):
    """Services grid: LOADING / EMPTY / READY over ServiceCards."""

    cta_url = SCHEDULING_URL

    def __init__(self, collection: Optional[ContentCollection] = None) -> None:
        super().__init__()
        self.cards: List[ServiceCard] = []
        if collection is not None:
            self.update(collection)

    def update(self, collection: ContentCollection) -> ViewState:
        self.last_error = collection.error
        if collection.error:
            logger.info("Services collection reported an error: %s", collection.error)

        self.cards = (
            [] if collection.loading else normalize_service_items(collection.items)
        )
        self._transition_to(
            resolve_view_state(loading=collection.loading, record_count=len(self.cards))
        )
        return self.state
