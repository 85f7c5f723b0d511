# tests/unit/api/test_facade.py - v1
"""Tests for the public facade."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from cdnrewrite.api.facade import build_pipeline, rewrite_documents
from cdnrewrite.cache.handle import CacheRegistry
from cdnrewrite.core.errors import ResourceNotFoundError
from cdnrewrite.core.models import Document
from cdnrewrite.host.memory_host import MemoryHost
from cdnrewrite.pipeline.rewriter import ResourceRewriter


class TestBuildPipeline:
    def test_wires_host_and_rewriter(self, settings, adapter):
        host, rewriter = build_pipeline([], {"adapter": adapter}, settings)
        assert isinstance(host, MemoryHost)
        assert isinstance(rewriter, ResourceRewriter)

    def test_shared_caches(self, settings, adapter):
        caches = CacheRegistry(settings)
        _, rewriter = build_pipeline([], {"adapter": adapter}, settings, caches=caches)
        assert rewriter.caches is caches

    @pytest.mark.asyncio
    async def test_host_recurses_into_rewriter(self, settings, adapter, asset):
        host, _ = build_pipeline([asset("a.png")], {"adapter": adapter}, settings)
        result = await host.invoke_self("a.png")
        assert result.url == "https://cdn.example/a.png"


class TestRewriteDocuments:
    @pytest.mark.asyncio
    async def test_markup_targets_only(self, settings, adapter, asset, tok):
        page = Document(path="index.html", kind="markup", tokens=[tok.tag("img", {"src": "/a.png"})])
        results = await rewrite_documents(
            [page, asset("/a.png")], {"adapter": adapter}, settings
        )
        assert list(results) == ["index.html"]
        assert page.tokens[0].ext.attrs[0].value == "https://cdn.example/a.png"

    @pytest.mark.asyncio
    async def test_explicit_paths(self, settings, adapter, asset):
        results = await rewrite_documents(
            [asset("/a.png")], {"adapter": adapter}, settings, paths=["a.png"]
        )
        assert results["/a.png"].url == "https://cdn.example/a.png"

    @pytest.mark.asyncio
    async def test_unknown_path(self, settings, adapter):
        with pytest.raises(ResourceNotFoundError):
            await rewrite_documents([], {"adapter": adapter}, settings, paths=["x.png"])

    @pytest.mark.asyncio
    async def test_configure_logging(self, settings, adapter):
        with patch("cdnrewrite.api.facade.setup_logging") as setup:
            await rewrite_documents([], {"adapter": adapter}, settings, configure_logging=True)
        setup.assert_called_once_with(
            level=settings.log_level,
            log_format=settings.log_format,
            log_file=settings.log_file,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
        )
