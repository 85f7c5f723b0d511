# src/resolve/leaf.py - v1
"""Leaf resolution: turn published bytes into a final URL through the adapter.

Two layers of deduplication sit in front of the adapter:
  1. a run-scoped memo keyed by (operation, path, serialized options), so one
     run never asks for the same file's URL twice;
  2. the content-hash cache namespace, shared by the whole build, so two paths
     with byte-identical content trigger the adapter at most once.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any

from cdnrewrite.core.errors import AdapterConfigurationError, ResolutionError
from cdnrewrite.resolve.adapter import Adapter, load_adapter
from cdnrewrite.resolve.memo import InvocationMemo

if TYPE_CHECKING:
    from cdnrewrite.cache.handle import CacheHandle, CacheRegistry, NullCacheHandle
    from cdnrewrite.config.options import RunOptions
    from cdnrewrite.host.base_host import BaseHost

logger = logging.getLogger(__name__)


class UrlResolver:
    """Resolve content to its deployable URL.

    Args:
        options: Run options (adapter, cache switch).
        caches: Build-wide cache namespaces.
        host: Host used to report fatal configuration errors.
        memo: Run-scoped invocation memo (shared with the rewriter).
        default_adapter: Adapter used when options carry none.
    """

    def __init__(
        self,
        options: RunOptions,
        caches: CacheRegistry,
        host: BaseHost,
        memo: InvocationMemo | None = None,
        default_adapter: Any = None,
    ) -> None:
        self._options = options
        self._caches = caches
        self._host = host
        self._memo = memo or InvocationMemo()
        self._default_adapter = default_adapter
        self._adapter: Adapter | None = None
        self._inflight: dict[str, asyncio.Task[str]] = {}
        self.adapter_calls = 0

    @property
    def memo(self) -> InvocationMemo:
        return self._memo

    def adapter(self) -> Adapter:
        """Validated adapter; a missing or invalid one is fatal."""
        if self._adapter is None:
            configured = self._options.adapter
            if configured is None:
                configured = self._default_adapter
            try:
                self._adapter = load_adapter(configured)
            except AdapterConfigurationError as exc:
                self._host.fatal(exc)
        return self._adapter  # type: ignore[return-value]

    async def get_cdn_url(self, content: bytes | str, path: str) -> str:
        """Final URL of ``content`` published under the logical ``path``."""
        adapter = self.adapter()
        key = f"get_cdn_url{path}{self._options.memo_key()}"
        return await self._memo.run_once(
            key, lambda: self._resolve(adapter, content, path)
        )

    async def _resolve(self, adapter: Adapter, content: bytes | str, path: str) -> str:
        handle = self._caches.handle_for(
            content, enabled=self._options.cache, source_path=path
        )
        if not handle.key:
            return await self._call_adapter(adapter, content, path, handle)

        cached = await handle.get()
        if isinstance(cached, str):
            logger.debug("Cache hit for %s (%s)", path, handle.key)
            return cached

        # Identical content requested concurrently: first caller publishes.
        task = self._inflight.get(handle.key)
        if task is None:
            task = asyncio.ensure_future(
                self._publish(adapter, content, path, handle)
            )
            self._inflight[handle.key] = task
            task.add_done_callback(lambda _t: self._inflight.pop(handle.key, None))
        return await asyncio.shield(task)

    async def _publish(
        self,
        adapter: Adapter,
        content: bytes | str,
        path: str,
        handle: CacheHandle,
    ) -> str:
        url = await self._call_adapter(adapter, content, path, handle)
        await handle.set(url)
        return url

    async def _call_adapter(
        self,
        adapter: Adapter,
        content: bytes | str,
        path: str,
        handle: CacheHandle | NullCacheHandle,
    ) -> str:
        self.adapter_calls += 1
        logger.debug("Invoking adapter for %s", path)
        result = adapter(content, path, self._options, handle)
        if inspect.isawaitable(result):
            result = await result
        if not isinstance(result, str):
            raise ResolutionError(
                f"Adapter returned {type(result).__name__} for {path}, expected str"
            )
        return result
