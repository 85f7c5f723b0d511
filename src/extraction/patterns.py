# src/extraction/patterns.py - v1
"""Reference patterns and span-based asynchronous substitution.

Stylesheet values use one of three mutually exclusive rules, picked by the
declaring property:
  - ``filter``  IE ``progid:DXImageTransform`` filters: ``src='path'``
  - ``src``     ``@font-face`` sources: ``url(path?#suffix)``
  - otherwise   background images: ``url(path)``
Scripts mark CDN paths with the pseudo-literal ``{cdn: "path"}.cdn``.
"""

from __future__ import annotations

import asyncio
import json
import re
from collections.abc import Awaitable, Callable

from cdnrewrite.resolve.exclusion import is_remote_url

Resolve = Callable[[str], Awaitable[str]]

IMAGE_EXTENSIONS = "png|jpg|gif|jpeg|ico|cur|webp"
FONT_EXTENSIONS = "eot|woff2|woff|ttf|svg"

# The query string belongs to cache busting, not to the asset: dropped.
BACKGROUND_RE = re.compile(
    r"url\s*\(\s*(['\"]?)([\w\-/.@]+\.(?:" + IMAGE_EXTENSIONS + r"))"
    r"(?:\?[^?'\")\s]*)?\1\s*\)",
    re.IGNORECASE,
)

# Suffix (``?#iefix``, ``#svgFontName``) is kept.
FONT_RE = re.compile(
    r"url\s*\(\s*(['\"]?)([^'\"?#)\s]+\.(?:" + FONT_EXTENSIONS + r"))"
    r"([^\s)'\"]*)\1\s*\)",
    re.IGNORECASE,
)

FILTER_RE = re.compile(
    r"src\s*=\s*(['\"]?)([^'\"?)\s]+?\.(?:" + IMAGE_EXTENSIONS + r"))"
    r"(\?[^?'\")\s]*)?\1",
    re.IGNORECASE,
)

CDN_RE = re.compile(
    r"\{\s*(['\"]?)cdn\1\s*:\s*(['\"])([\w\-/.@]+)\2\s*\}\.cdn\b"
)

# Plain ``.word`` extension; anything else (query strings, template syntax) is skipped.
PLAIN_EXTNAME_RE = re.compile(r"^\.\w+$")


async def async_replace(
    text: str,
    pattern: re.Pattern[str],
    replacer: Callable[[re.Match[str]], Awaitable[str]],
) -> str:
    """Replace every match of ``pattern`` with the awaited result of ``replacer``.

    All matches are found up front, resolved concurrently, then spliced in a
    single pass in original span order.
    """
    matches = list(pattern.finditer(text))
    if not matches:
        return text

    replacements = await asyncio.gather(*(replacer(m) for m in matches))

    parts: list[str] = []
    pos = 0
    for match, replacement in zip(matches, replacements):
        parts.append(text[pos:match.start()])
        parts.append(replacement)
        pos = match.end()
    parts.append(text[pos:])
    return "".join(parts)


async def replace_css_resource(value: str, prop: str, resolve: Resolve) -> str:
    """Rewrite the references of one stylesheet value.

    ``prop`` is the lower-case declaring property; empty for bare values such
    as inline ``style`` attributes, which only get the background rule.
    """

    async def _resolve(path: str) -> str:
        return path if is_remote_url(path) else await resolve(path)

    if prop == "filter":

        async def _filter(m: re.Match[str]) -> str:
            quote, path, suffix = m.group(1), m.group(2), m.group(3) or ""
            return f"src={quote}{await _resolve(path)}{suffix}{quote}"

        return await async_replace(value, FILTER_RE, _filter)

    if prop == "src":

        async def _font(m: re.Match[str]) -> str:
            path, suffix = m.group(2), m.group(3)
            return f"url({await _resolve(path)}{suffix})"

        return await async_replace(value, FONT_RE, _font)

    async def _background(m: re.Match[str]) -> str:
        return f"url({await _resolve(m.group(2))})"

    return await async_replace(value, BACKGROUND_RE, _background)


async def replace_js_resource(content: str, resolve: Resolve) -> str:
    """Replace each ``{cdn: "path"}.cdn`` with the quoted resolved URL."""

    async def _cdn(m: re.Match[str]) -> str:
        return json.dumps(await resolve(m.group(3)))

    return await async_replace(content, CDN_RE, _cdn)
