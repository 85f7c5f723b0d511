# tests/unit/extraction/test_patterns.py - v1
"""Tests for reference patterns and asynchronous substitution."""

from __future__ import annotations

import re

import pytest

from cdnrewrite.extraction.patterns import (
    async_replace,
    replace_css_resource,
    replace_js_resource,
)


class Resolver:
    def __init__(self):
        self.seen: list[str] = []

    async def __call__(self, path: str) -> str:
        self.seen.append(path)
        return f"https://cdn.example/{path.lstrip('/')}"


@pytest.fixture
def resolve():
    return Resolver()


class TestBackgroundRule:
    @pytest.mark.asyncio
    async def test_query_dropped(self, resolve):
        out = await replace_css_resource("url(/img/a.png?v=3) no-repeat", "background", resolve)
        assert out == "url(https://cdn.example/img/a.png) no-repeat"

    @pytest.mark.asyncio
    async def test_quotes_removed(self, resolve):
        out = await replace_css_resource("url( 'img/b.JPG' )", "background-image", resolve)
        assert out == "url(https://cdn.example/img/b.JPG)"

    @pytest.mark.asyncio
    async def test_multiple_in_order(self, resolve):
        out = await replace_css_resource("url(/a.png), url(/b.gif)", "background", resolve)
        assert out == "url(https://cdn.example/a.png), url(https://cdn.example/b.gif)"

    @pytest.mark.asyncio
    async def test_fonts_ignored(self, resolve):
        value = "url(/f/a.woff)"
        assert await replace_css_resource(value, "background", resolve) == value
        assert resolve.seen == []

    @pytest.mark.asyncio
    async def test_bare_value_uses_background_rule(self, resolve):
        out = await replace_css_resource("background:url(/bg.webp)", "", resolve)
        assert out == "background:url(https://cdn.example/bg.webp)"

    @pytest.mark.asyncio
    async def test_protocol_relative_passthrough(self, resolve):
        out = await replace_css_resource("url(//other.cdn/a.png)", "background", resolve)
        assert out == "url(//other.cdn/a.png)"
        assert resolve.seen == []

    @pytest.mark.asyncio
    async def test_absolute_url_untouched(self, resolve):
        value = "url(https://other.cdn/a.png)"
        assert await replace_css_resource(value, "background", resolve) == value


class TestFontRule:
    @pytest.mark.asyncio
    async def test_iefix_suffix_kept(self, resolve):
        out = await replace_css_resource(
            "url(/f/a.eot?#iefix) format('embedded-opentype')", "src", resolve
        )
        assert out == "url(https://cdn.example/f/a.eot?#iefix) format('embedded-opentype')"
        assert resolve.seen == ["/f/a.eot"]

    @pytest.mark.asyncio
    async def test_svg_fragment_kept(self, resolve):
        out = await replace_css_resource('url("/f/a.svg#svgFontName")', "src", resolve)
        assert out == "url(https://cdn.example/f/a.svg#svgFontName)"

    @pytest.mark.asyncio
    async def test_woff2_not_split(self, resolve):
        out = await replace_css_resource("url(/f/a.woff2) format('woff2')", "src", resolve)
        assert out == "url(https://cdn.example/f/a.woff2) format('woff2')"

    @pytest.mark.asyncio
    async def test_images_ignored_under_src(self, resolve):
        value = "url(/img/a.png)"
        assert await replace_css_resource(value, "src", resolve) == value


class TestFilterRule:
    @pytest.mark.asyncio
    async def test_quote_and_query_kept(self, resolve):
        value = (
            "progid:DXImageTransform.Microsoft.AlphaImageLoader"
            "(src='/img/a.png?v=1', sizingMethod='scale')"
        )
        out = await replace_css_resource(value, "filter", resolve)
        assert "src='https://cdn.example/img/a.png?v=1'" in out
        assert out.endswith("sizingMethod='scale')")

    @pytest.mark.asyncio
    async def test_unquoted(self, resolve):
        out = await replace_css_resource("alpha(src=/img/a.gif)", "filter", resolve)
        assert out == "alpha(src=https://cdn.example/img/a.gif)"


class TestJsRule:
    @pytest.mark.asyncio
    async def test_pseudo_literal_replaced(self, resolve):
        out = await replace_js_resource('var u = {cdn: "/img/a.png"}.cdn;', resolve)
        assert out == 'var u = "https://cdn.example/img/a.png";'

    @pytest.mark.asyncio
    async def test_quoted_key(self, resolve):
        out = await replace_js_resource("x({'cdn':'/a.png'}.cdn)", resolve)
        assert out == 'x("https://cdn.example/a.png")'

    @pytest.mark.asyncio
    async def test_longer_property_ignored(self, resolve):
        src = 'var u = {cdn: "/a.png"}.cdnUrl;'
        assert await replace_js_resource(src, resolve) == src

    @pytest.mark.asyncio
    async def test_plain_strings_untouched(self, resolve):
        src = 'var u = "/img/a.png";'
        assert await replace_js_resource(src, resolve) == src
        assert resolve.seen == []


class TestAsyncReplace:
    @pytest.mark.asyncio
    async def test_no_match_returns_input(self):
        async def boom(m):
            raise AssertionError("not called")

        assert await async_replace("abc", re.compile("z"), boom) == "abc"

    @pytest.mark.asyncio
    async def test_spans_spliced_in_order(self):
        async def upper(m):
            return m.group(0).upper()

        assert await async_replace("a-b-c", re.compile("[ac]"), upper) == "A-b-C"
