# src/config/options.py - v1
"""Per-run rewrite options.

Hosts usually hand these over as a plain mapping using their own camelCase
names (``tagAttrs``, ``notUpdateResource``); both spellings are accepted.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from cdnrewrite.config.tag_attrs import HTML_TAG_RESOURCE_ATTRS, merge_tag_attrs

ExcludePattern = str | re.Pattern[str]


class RunOptions(BaseModel):
    """Options recognized by the rewriter for one build run."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    adapter: Any = None
    cache: bool = True
    tag_attrs: dict[str, list[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("tag_attrs", "tagAttrs"),
    )
    rels: list[str] = Field(default_factory=list)
    exclude: list[ExcludePattern] = Field(default_factory=list)
    not_update_resource: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "not_update_resource", "notUpdateResource",
            "suppress_rewrite", "suppressRewrite",
        ),
    )

    @field_validator("tag_attrs", mode="before")
    @classmethod
    def normalize_tag_attrs(cls, v: Any) -> Any:  # noqa: N805
        """Accept ``{"tag": "attr"}`` as shorthand for ``{"tag": ["attr"]}``."""
        if v is None:
            return {}
        if isinstance(v, dict):
            return merge_tag_attrs(v)
        return v

    @field_validator("rels", mode="before")
    @classmethod
    def normalize_rels(cls, v: Any) -> Any:  # noqa: N805
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [r.lower() for r in v]

    @field_validator("exclude", mode="before")
    @classmethod
    def normalize_exclude(cls, v: Any) -> Any:  # noqa: N805
        """Promote a single pattern to a list."""
        if v is None:
            return []
        if isinstance(v, (str, re.Pattern)):
            return [v]
        return list(v)

    # --- Helpers ---

    def resource_attrs(self) -> dict[str, list[str]]:
        """Built-in tag/attribute table merged with ``tag_attrs``."""
        return merge_tag_attrs(HTML_TAG_RESOURCE_ATTRS, self.tag_attrs)

    def memo_key(self) -> str:
        """Stable serialization used to key per-run memoized invocations."""
        adapter = self.adapter
        if adapter is not None and not isinstance(adapter, str):
            adapter = getattr(adapter, "__qualname__", type(adapter).__qualname__)
        payload = {
            "adapter": adapter,
            "cache": self.cache,
            "tag_attrs": self.tag_attrs,
            "rels": self.rels,
            "exclude": [
                p.pattern if isinstance(p, re.Pattern) else p for p in self.exclude
            ],
            "not_update_resource": self.not_update_resource,
        }
        return json.dumps(payload, sort_keys=True)


def coerce_options(options: RunOptions | dict[str, Any] | None) -> RunOptions:
    """Build RunOptions from a host-supplied mapping (or pass through)."""
    if options is None:
        return RunOptions()
    if isinstance(options, RunOptions):
        return options
    return RunOptions.model_validate(options)
