"""Normalizer tests: field derivation rules and defaults."""

from datetime import datetime, timezone

import pytest

from igniting_content.config.project_config import (
    DEFAULT_CATEGORY,
    DEFAULT_CTA_TEXT,
    DEFAULT_TITLE,
    NO_DESCRIPTION,
    PLACEHOLDER_IMAGES,
    SCHEDULING_URL,
)
from igniting_content.fsm.view_enums import ServiceIcon
from igniting_content.pipelines.content_normalizer import (
    normalize_portfolio_item,
    normalize_portfolio_items,
    normalize_service_item,
    normalize_service_items,
    strip_html,
)


# ============================================
# Defaults
# ============================================


class TestDefaults:
    def test_empty_item_gets_every_required_field(self):
        record = normalize_portfolio_item({}, 0)

        assert record.title == DEFAULT_TITLE
        assert record.category == DEFAULT_CATEGORY
        assert record.year == str(datetime.now(timezone.utc).year)
        assert record.description == NO_DESCRIPTION
        assert record.image == PLACEHOLDER_IMAGES[0]
        assert record.featured is True
        assert record.gallery_images == []
        assert record.detail_group is None
        assert record.internal_link is None
        assert record.external_link is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"id": 3, "acf": False},
            {"id": 3, "acf": []},
            {"id": 3, "title": "", "excerpt": {"rendered": ""}, "content": None},
            {"id": "not-a-number", "_embedded": "oops"},
            "not even an object",
        ],
    )
    def test_malformed_items_still_normalize(self, payload):
        record = normalize_portfolio_item(payload, 2)

        assert record.title
        assert record.category == DEFAULT_CATEGORY
        assert record.year
        assert record.description == NO_DESCRIPTION
        assert record.image == PLACEHOLDER_IMAGES[2]

    def test_invalid_field_does_not_drop_item(self):
        record = normalize_portfolio_item(
            {"id": 7, "title": {"rendered": "Kept"}, "acf": {"bi_details": "see PDF"}},
            0,
        )

        assert record.id == 7
        assert record.title == "Kept"
        assert record.detail_group is None

    def test_title_markup_and_entities_removed(self, make_item):
        record = normalize_portfolio_item(make_item(1, title="Caf&eacute; <em>Reels</em>"), 0)
        assert record.title == "Café Reels"


# ============================================
# Featured
# ============================================


class TestFeatured:
    def test_first_item_featured_without_flags(self, make_item):
        records = normalize_portfolio_items([make_item(i) for i in range(1, 6)])

        assert records[0].featured is True
        assert [r.featured for r in records[1:]] == [False] * 4

    def test_explicit_flag_wins_over_position(self, make_item):
        items = [make_item(i) for i in range(1, 6)]
        items[3] = make_item(4, featured=True)

        records = normalize_portfolio_items(items)

        assert records[3].featured is True
        assert records[0].featured is False
        assert sum(r.featured for r in records) == 1

    def test_first_of_several_flags_wins(self, make_item):
        items = [
            make_item(1),
            make_item(2, featured=True),
            make_item(3, featured=True),
        ]
        records = normalize_portfolio_items(items)
        assert [r.featured for r in records] == [False, True, False]

    def test_per_item_rule(self, make_item):
        assert normalize_portfolio_item(make_item(1, featured=True), 3).featured
        assert normalize_portfolio_item(make_item(1), 0).featured
        assert not normalize_portfolio_item(make_item(1), 2).featured

    def test_empty_collection(self):
        assert normalize_portfolio_items([]) == []


# ============================================
# Image
# ============================================


class TestImage:
    def test_placeholder_is_deterministic(self, make_item):
        item = make_item(9)
        first = normalize_portfolio_item(item, 7)
        second = normalize_portfolio_item(item, 7)

        assert first.image == second.image == PLACEHOLDER_IMAGES[7 % len(PLACEHOLDER_IMAGES)]

    def test_embedded_media_preferred(self, make_item):
        item = make_item(1)
        item["_embedded"] = {"wp:featuredmedia": [{"source_url": "https://cdn/a.jpg"}]}
        item["featured_media_url"] = "https://cdn/b.jpg"

        assert normalize_portfolio_item(item, 0).image == "https://cdn/a.jpg"

    def test_pre_resolved_media_url(self, make_item):
        item = make_item(1)
        item["featured_media_url"] = "https://cdn/b.jpg"

        assert normalize_portfolio_item(item, 0).image == "https://cdn/b.jpg"

    def test_embedded_error_object_ignored(self, make_item):
        item = make_item(1)
        item["_embedded"] = {"wp:featuredmedia": [{"code": "rest_forbidden"}]}

        assert normalize_portfolio_item(item, 1).image == PLACEHOLDER_IMAGES[1]


# ============================================
# Description
# ============================================


class TestDescription:
    def test_excerpt_stripped(self, make_item):
        item = make_item(1, excerpt="<p>Hello <strong>world</strong></p>\n")
        assert normalize_portfolio_item(item, 0).description == "Hello world"

    def test_content_truncated_to_200_plus_ellipsis(self, make_item):
        body = "x" * 250
        item = make_item(1, content=f"<div><p>{body}</p></div>")

        description = normalize_portfolio_item(item, 0).description

        assert description == "x" * 200 + "..."
        assert "<" not in description

    def test_blank_excerpt_falls_through_to_content(self, make_item):
        item = make_item(1, excerpt="<p></p>", content="<p>Body text</p>")
        assert normalize_portfolio_item(item, 0).description == "Body text..."

    def test_strip_html(self):
        assert strip_html("<p>A &amp; B</p>") == "A & B"
        assert strip_html(None) == ""


# ============================================
# Year
# ============================================


class TestYear:
    @pytest.mark.parametrize(
        "project_date, expected",
        [("20230415", "2023"), ("2021-07-01", "2021"), ("March 3, 2019", "2019")],
    )
    def test_custom_date_preferred(self, make_item, project_date, expected):
        item = make_item(1, date="2024-05-01T10:00:00", project_date=project_date)
        assert normalize_portfolio_item(item, 0).year == expected

    def test_publish_date_fallback(self, make_item):
        item = make_item(1, date="2022-05-01T10:00:00")
        assert normalize_portfolio_item(item, 0).year == "2022"

    def test_unparsable_custom_date_uses_publish_date(self, make_item):
        item = make_item(1, date="2020-02-02T00:00:00", project_date="coming soon")
        assert normalize_portfolio_item(item, 0).year == "2020"


# ============================================
# Category, links, gallery, details
# ============================================


class TestCustomFields:
    @pytest.mark.parametrize(
        "category, is_video",
        [
            ("Video Production", True),
            ("Content Creation", True),
            ("SOCIAL CONTENT", True),
            ("Web Development", False),
        ],
    )
    def test_is_video(self, make_item, category, is_video):
        record = normalize_portfolio_item(make_item(1, project_type=category), 0)
        assert record.category == category
        assert record.is_video is is_video

    def test_default_category_is_not_video(self, make_item):
        assert normalize_portfolio_item(make_item(1), 0).is_video is False

    def test_links(self, make_item):
        item = make_item(1, slug="brand-relaunch", project_url="https://client.example")
        record = normalize_portfolio_item(item, 0)

        assert record.internal_link == "/portfolio/brand-relaunch"
        assert record.external_link == "https://client.example"

    def test_gallery_urls_in_order(self, make_item):
        item = make_item(
            1, gallery=[{"url": "a.jpg"}, {"url": None}, "c.jpg", {"url": "d.jpg"}]
        )
        assert normalize_portfolio_item(item, 0).gallery_images == ["a.jpg", "c.jpg", "d.jpg"]

    def test_detail_group_sub_fields_default_independently(self, make_item):
        item = make_item(1, bi_details={"overview": "Why", "tools": "Power BI, Excel"})
        group = normalize_portfolio_item(item, 0).detail_group

        assert group is not None
        assert group.overview == "Why"
        assert group.process == ""
        assert group.tools == ["Power BI", "Excel"]
        assert group.results == ""

    def test_empty_detail_group_is_absent(self, make_item):
        assert normalize_portfolio_item(make_item(1, bi_details=False), 0).detail_group is None


# ============================================
# Services
# ============================================


class TestServices:
    @pytest.mark.parametrize(
        "raw, icon",
        [
            ("instagram", ServiceIcon.INSTAGRAM),
            ("Website", ServiceIcon.GLOBE),
            ("globe", ServiceIcon.GLOBE),
            ("analytics", ServiceIcon.BAR_CHART),
            ("bar-chart", ServiceIcon.BAR_CHART),
            ("rocket", ServiceIcon.SPARKLES),
            (None, ServiceIcon.SPARKLES),
        ],
    )
    def test_icon_mapping(self, raw, icon):
        card = normalize_service_item({"id": 1, "acf": {"service_icon": raw}}, 0)
        assert card.icon is icon

    def test_cta_defaults(self):
        card = normalize_service_item({"id": 1, "title": {"rendered": "SEO"}}, 0)

        assert card.cta_url == SCHEDULING_URL
        assert card.cta_text == DEFAULT_CTA_TEXT
        assert card.features == []
        assert card.price is None

    def test_custom_fields(self):
        card = normalize_service_item(
            {
                "id": 7,
                "title": {"rendered": "Analytics &amp; Reporting"},
                "content": {"rendered": "<p>Dashboards that matter.</p>"},
                "acf": {
                    "service_features": ["Setup", "KPIs"],
                    "service_price": 499,
                    "cta_url": "https://example.com/book",
                    "cta_text": "Talk to us",
                },
            },
            0,
        )

        assert card.title == "Analytics & Reporting"
        assert card.description == "Dashboards that matter."
        assert card.content_html == "<p>Dashboards that matter.</p>"
        assert card.features == ["Setup", "KPIs"]
        assert card.price == "499"
        assert card.cta_url == "https://example.com/book"
        assert card.cta_text == "Talk to us"

    def test_positional_title_fallback(self):
        cards = normalize_service_items([{"id": 1}, {"id": 2}])
        assert [c.title for c in cards] == ["Service 1", "Service 2"]
