"""
fsm/view_state_config.py

Defines the view-state rail for a presentation section.

FSM:
    LOADING → {EMPTY, READY}

A new collection from the adapter may move EMPTY/READY back to LOADING or
across (EMPTY ↔ READY). User interaction never changes the view state; it
only mutates the orthogonal sub-state (page, hover, modal, gallery).

Also hosts the wraparound index helpers shared by page and gallery
navigation.
"""

from typing import Optional

from igniting_content.fsm.view_enums import ViewState

# ---------------------------------------------------------------------------
# Allowed transitions
# ---------------------------------------------------------------------------

VIEW_STATE_TRANSITIONS: dict[ViewState, frozenset[ViewState]] = {
    ViewState.LOADING: frozenset({ViewState.EMPTY, ViewState.READY}),
    ViewState.EMPTY: frozenset({ViewState.LOADING, ViewState.READY}),
    ViewState.READY: frozenset({ViewState.LOADING, ViewState.EMPTY}),
}

INITIAL_VIEW_STATE = ViewState.LOADING


class InvalidViewTransition(ValueError):
    """Raised when a view tries to move along an edge the rail does not define."""

    def __init__(self, current: ViewState, target: ViewState):
        super().__init__(f"Invalid view transition {current.value} → {target.value}")
        self.current = current
        self.target = target


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def can_transition(cur: ViewState, target: ViewState) -> bool:
    """Return True if `cur → target` is on the rail (staying put is always allowed)."""
    if cur == target:
        return True
    return target in VIEW_STATE_TRANSITIONS.get(cur, frozenset())


def resolve_view_state(*, loading: bool, record_count: int) -> ViewState:
    """Map adapter status + normalized record count to a view state."""
    if loading:
        return ViewState.LOADING
    return ViewState.READY if record_count > 0 else ViewState.EMPTY


def validate_state_set() -> None:
    """
    Ensure the rail covers **every** ViewState.

    This guards against drift when adding/removing states.
    """
    assert set(VIEW_STATE_TRANSITIONS) == set(
        ViewState
    ), "View rail mismatch: VIEW_STATE_TRANSITIONS != ViewState"


def next_index(cur: int, total: int) -> Optional[int]:
    """Advance `cur` by one, wrapping to 0 (None if there is nothing to index)."""
    if total <= 0:
        return None
    return (cur + 1) % total


def prev_index(cur: int, total: int) -> Optional[int]:
    """Step `cur` back by one, wrapping to `total - 1` (None if empty)."""
    if total <= 0:
        return None
    return (cur - 1 + total) % total
