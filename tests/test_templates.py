"""
Tests templates + sections obligatoires
  create_section / create_project_from_template / ensure_required_sections
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from lp_studio.normalizer import normalize
from lp_studio.templates import (
    REQUIRED_SECTION_TYPES, TEMPLATE_OPTIONS, create_project_from_template, create_section,
    ensure_required_sections, get_template,
)


def make_doc(sections):
    return normalize({"meta": {"projectName": "t"}, "sections": sections})


# ── Catalogue ────────────────────────────────────────────────────────────

class TestCatalogue:
    def test_five_templates(self):
        assert [t.id for t in TEMPLATE_OPTIONS] == [
            "campaign", "point", "ranking", "excluded-stores", "excluded-brands",
        ]

    def test_point_has_no_coupon_flow(self):
        assert "couponFlow" not in get_template("point").section_order
        assert "couponFlow" in get_template("campaign").section_order

    def test_unknown_template(self):
        assert get_template("nope") is None


class TestCreateSection:
    def test_brand_bar_defaults(self):
        section = create_section("brandBar")
        assert section.id.startswith("sec_brandBar_")
        assert section.data == {"logoText": "新しいブランド", "brandText": "新しいブランド"}
        assert section.style.layout.full_width is True

    def test_coupon_flow_content(self):
        section = create_section("couponFlow")
        image, button = section.content.items
        assert image.layout == "slideshow"
        assert len(image.images) == 6
        assert button.label == "クーポンを獲得する"

    def test_ranking_rows_follow_columns(self):
        data = create_section("rankingTable").data
        assert [c["key"] for c in data["columns"]] == ["amount", "count"]
        assert all(len(row["values"]) == 2 for row in data["rows"])

    def test_unknown_type(self):
        section = create_section("customWidget")
        assert section.type == "customWidget"
        assert section.data == {}


class TestCreateProject:
    def test_from_template(self):
        template = get_template("ranking")
        doc = create_project_from_template(template.template_type, "秋", template.section_order)
        assert doc.meta.template_type == "quickchance"
        assert doc.meta.project_name == "秋"
        assert [s.type for s in doc.sections] == template.section_order

    def test_default_order(self):
        doc = create_project_from_template("coupon", "")
        assert doc.meta.project_name == "キャンペーンLP"
        assert [s.type for s in doc.sections] == get_template("campaign").section_order


# ── Sections obligatoires ────────────────────────────────────────────────

class TestEnsureRequired:
    def test_empty_document_gets_all_required(self):
        doc = ensure_required_sections(make_doc([]))
        assert [s.type for s in doc.sections] == REQUIRED_SECTION_TYPES
        assert doc.sections[0].id == "sec_brandBar"
        assert doc.sections[0].data["logoText"] == "ブランド名"

    def test_existing_values_win(self):
        doc = ensure_required_sections(make_doc([
            {"id": "mine", "type": "campaignOverview", "locked": True, "data": {"title": "概要"}},
        ]))
        overview = doc.section_of_type("campaignOverview")
        assert overview.id == "mine"
        assert overview.data["title"] == "概要"
        assert overview.locked is False

    def test_extras_follow_in_order(self):
        doc = ensure_required_sections(make_doc([
            {"type": "faq"},
            {"type": "legalNotes"},
            {"type": "divider"},
            {"type": "legalNotes", "id": "second"},
        ]))
        types = [s.type for s in doc.sections]
        assert types[:len(REQUIRED_SECTION_TYPES)] == REQUIRED_SECTION_TYPES
        assert types[len(REQUIRED_SECTION_TYPES):] == ["faq", "divider"]
        assert types.count("legalNotes") == 1

    def test_each_required_type_once(self):
        doc = ensure_required_sections(make_doc([{"type": t} for t in REQUIRED_SECTION_TYPES * 2]))
        for section_type in REQUIRED_SECTION_TYPES:
            assert [s.type for s in doc.sections].count(section_type) == 1

    def test_idempotent(self):
        once = ensure_required_sections(make_doc([{"type": "faq"}, {"type": "brandBar"}]))
        twice = ensure_required_sections(once)
        assert twice.to_json_dict() == once.to_json_dict()
