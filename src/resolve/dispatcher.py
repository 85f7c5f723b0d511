# src/resolve/dispatcher.py - v2
"""Recursive resolution of candidate reference paths.

Every candidate found by an extractor ends up here. Excluded and remote
references come back unchanged; everything else is handed to the host's
self-invocation primitive, which processes the referenced file through this
same pipeline and surfaces its resolved URL.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cdnrewrite.core.errors import ResolutionError
from cdnrewrite.resolve.exclusion import is_remote_url

if TYPE_CHECKING:
    from cdnrewrite.config.options import RunOptions
    from cdnrewrite.host.base_host import BaseHost

logger = logging.getLogger(__name__)


class ReferenceResolver:
    """Resolve one reference path to its replacement text."""

    def __init__(self, host: BaseHost, options: RunOptions) -> None:
        self._host = host
        self._options = options

    async def resolve(self, path: str, referrer: str | None = None) -> str:
        """Return the final URL for ``path`` (or ``path`` itself when passed through).

        ``referrer`` is the path of the document the reference was found in;
        the host resolves relative paths against it.
        """
        if self._options.exclude and self._host.match_exclusion(
            path, self._options.exclude
        ):
            logger.debug("Excluded reference left as-is: %s", path)
            return path
        if is_remote_url(path):
            logger.debug("Remote reference left as-is: %s", path)
            return path

        result = await self._host.invoke_self(path, referrer=referrer)
        if result.url is None:
            raise ResolutionError(f"{path} did not resolve to a URL")
        return result.url
