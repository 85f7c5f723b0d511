# src/config/tag_attrs.py - v1
"""Declarative table of resource-bearing markup attributes.

Keys are lower-case tag names, values the attributes that hold a local
resource path. Per-run ``tag_attrs`` options are merged on top.
"""

from __future__ import annotations

from collections.abc import Mapping

HTML_TAG_RESOURCE_ATTRS: dict[str, list[str]] = {
    "img": ["src", "srcset"],
    "script": ["src"],
    "link": ["href"],
    "embed": ["src"],
    "object": ["data"],
    "source": ["src", "srcset"],
    "audio": ["src"],
    "video": ["src", "poster"],
    "input": ["src"],
}

# <link rel="..."> values that are always rewritten.
DEFAULT_LINK_RELS: tuple[str, ...] = ("stylesheet",)


def merge_tag_attrs(
    *tables: Mapping[str, list[str] | str],
) -> dict[str, list[str]]:
    """Merge tag/attribute tables, keeping first-seen order and no duplicates.

    A bare string value is treated as a single-attribute list.
    """
    merged: dict[str, list[str]] = {}
    for table in tables:
        for tag, attrs in table.items():
            if isinstance(attrs, str):
                attrs = [attrs]
            bucket = merged.setdefault(tag.lower(), [])
            for attr in attrs:
                attr = attr.lower()
                if attr not in bucket:
                    bucket.append(attr)
    return merged
