# src/resolve/adapter.py - v1
"""Resolution adapter contract and loading.

An adapter turns ``(content, path, options, cache_handle)`` into the final
deployable URL of ``content``. It may be a plain function or a coroutine
function; either way its result must be a ``str``.
"""

from __future__ import annotations

import importlib
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Union

from cdnrewrite.core.errors import AdapterConfigurationError

if TYPE_CHECKING:
    from cdnrewrite.cache.handle import CacheHandle, NullCacheHandle
    from cdnrewrite.config.options import RunOptions

Adapter = Callable[
    [Union[bytes, str], str, "RunOptions", Union["CacheHandle", "NullCacheHandle"]],
    Union[str, Awaitable[str]],
]

ADAPTER_LABEL = "ResourceRewriter"


def load_adapter(value: Any) -> Adapter:
    """Resolve the configured adapter to a callable.

    Accepts a callable, a module or object exposing a callable ``default``
    attribute, or a dotted import path ("pkg.module:func" or "pkg.module.func").

    Raises:
        AdapterConfigurationError: If no callable can be resolved.
    """
    if isinstance(value, str) and value:
        value = _import_adapter(value)

    default = getattr(value, "default", None)
    if default is not None and callable(default):
        value = default

    if not callable(value) or isinstance(value, type):
        raise AdapterConfigurationError(
            f"{ADAPTER_LABEL}: options.adapter must be a callable",
            label=ADAPTER_LABEL,
        )
    return value


def _import_adapter(path: str) -> Any:
    """Import an adapter from a dotted path."""
    if ":" in path:
        module_path, attr = path.split(":", 1)
    else:
        parts = path.rsplit(".", 1)
        if len(parts) != 2:
            raise AdapterConfigurationError(
                f"{ADAPTER_LABEL}: invalid adapter path {path!r}", label=ADAPTER_LABEL
            )
        module_path, attr = parts

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise AdapterConfigurationError(
            f"{ADAPTER_LABEL}: cannot import adapter module {module_path}: {exc}",
            label=ADAPTER_LABEL,
        ) from exc

    if not attr:
        return module
    adapter = getattr(module, attr, None)
    if adapter is None:
        raise AdapterConfigurationError(
            f"{ADAPTER_LABEL}: {attr} not found in {module_path}", label=ADAPTER_LABEL
        )
    return adapter
