# tests/unit/config/test_tag_attrs.py - v1
"""Tests for the resource attribute table."""

from __future__ import annotations

from cdnrewrite.config.tag_attrs import DEFAULT_LINK_RELS, HTML_TAG_RESOURCE_ATTRS, merge_tag_attrs


class TestDefaults:
    def test_core_entries(self):
        assert HTML_TAG_RESOURCE_ATTRS["img"] == ["src", "srcset"]
        assert HTML_TAG_RESOURCE_ATTRS["link"] == ["href"]
        assert "poster" in HTML_TAG_RESOURCE_ATTRS["video"]

    def test_stylesheet_rel(self):
        assert DEFAULT_LINK_RELS == ("stylesheet",)


class TestMergeTagAttrs:
    def test_order_and_dedup(self):
        merged = merge_tag_attrs({"img": ["src"]}, {"IMG": ["SRC", "data-src"]})
        assert merged == {"img": ["src", "data-src"]}

    def test_string_shorthand(self):
        assert merge_tag_attrs({"div": "data-bg"}) == {"div": ["data-bg"]}

    def test_does_not_mutate_inputs(self):
        base = {"img": ["src"]}
        merge_tag_attrs(base, {"img": ["srcset"]})
        assert base == {"img": ["src"]}
