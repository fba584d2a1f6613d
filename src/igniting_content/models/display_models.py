"""
models/display_models.py

Output-side (render-ready) models for the studio content layer.

These are the strictly-shaped records the presentation containers consume.
They are built fresh on every normalization pass and are immutable
(`frozen=True`): a view never patches a record in place.

Models
------
1. DetailGroup     Overview / process / tools / results block for BI projects.
2. DisplayRecord   One normalized portfolio entry.
3. ServiceCard     One normalized service entry.
4. ClickOutcome    Resolved effect of clicking a record.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from igniting_content.fsm.view_enums import ClickAction, ServiceIcon


class DisplayBaseModel(BaseModel):
    """Project-wide defaults for render-ready records."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        use_enum_values=False,
    )


class DetailGroup(DisplayBaseModel):
    overview: str = ""
    process: str = ""
    tools: List[str] = Field(default_factory=list)
    results: str = ""


class DisplayRecord(DisplayBaseModel):
    """
    Normalized, guaranteed-complete portfolio entry.

    Fields:
        id:             Stable identity for hover/selection comparisons.
        title:          Plain-text title (never empty).
        category:       Project type, defaulted when absent.
        year:           Four-digit year string.
        description:    Plain text, markup stripped; capped when taken from content.
        featured:       Highlighted record of the collection.
        image:          Resolved image URL or a placeholder.
        external_link:  Project URL, opened in a new browsing context.
        internal_link:  In-app case-study route.
        gallery_images: Ordered gallery URLs (possibly empty).
        is_video:       Category looks like video/content work.
        detail_group:   BI detail block, only for items that carry one.
    """

    id: int
    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    featured: bool = False
    image: str = Field(..., min_length=1)

    external_link: Optional[str] = None
    internal_link: Optional[str] = None

    gallery_images: List[str] = Field(default_factory=list)
    is_video: bool = False
    detail_group: Optional[DetailGroup] = None


class ServiceCard(DisplayBaseModel):
    """
    Normalized service entry.

    `content_html` keeps the rendered HTML as-is for renderers that can
    display markup; `description` is its plain-text form.
    """

    id: int
    title: str = Field(..., min_length=1)
    description: str
    content_html: str = ""
    icon: ServiceIcon = ServiceIcon.SPARKLES
    features: List[str] = Field(default_factory=list)
    price: Optional[str] = None
    cta_url: str
    cta_text: str


class ClickOutcome(DisplayBaseModel):
    """What a click on a record did (modal, external link, route, or nothing)."""

    action: ClickAction
    target: Optional[str] = None
    record_id: Optional[int] = None

    @property
    def opens_new_context(self) -> bool:
        return self.action is ClickAction.OPEN_EXTERNAL
