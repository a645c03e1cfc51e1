# File: site_mapper/aggregator.py
"""site_mapper.aggregator: summary report built from a finished SiteMap."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, TypedDict

from site_mapper.crawler.sitemap import SiteMap


class PageInfo(TypedDict):
    """Flat view of one site-map node."""

    url: str
    depth: int
    parent: str | None
    children: int


@dataclass(slots=True)
class SiteMapReport:
    """Site map statistics plus the tree itself, ready for JSON/HTML output."""

    root: str
    max_depth: int
    total: int = 0
    depth_counts: Dict[int, int] = field(default_factory=dict)
    host_counts: Dict[str, int] = field(default_factory=dict)
    pages: List[PageInfo] = field(default_factory=list)
    tree: Dict[str, Any] = field(default_factory=dict)

    def json(self, *, pretty: bool = False) -> str:
        """Return the JSON representation of the report."""
        # asdict() recurses once per tree level
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        return json.dumps(data, ensure_ascii=False, indent=2 if pretty else None)


def _pages(site_map: SiteMap) -> List[PageInfo]:
    pages: List[PageInfo] = []
    for node in site_map.levels():
        parent = site_map.parent(node)
        pages.append(
            {
                "url": node.url,
                "depth": node.depth,
                "parent": parent.url if parent else None,
                "children": len(site_map.children(node)),
            }
        )
    return pages


def summarize(site_map: SiteMap) -> SiteMapReport:
    """Collect every part of the report into a SiteMapReport."""
    pages = _pages(site_map)
    depths = Counter(p["depth"] for p in pages)
    hosts = Counter(node.hostname for node in site_map.walk())
    return SiteMapReport(
        root=site_map.root.url,
        max_depth=site_map.max_depth,
        total=len(site_map),
        depth_counts=dict(sorted(depths.items())),
        host_counts=dict(hosts.most_common()),
        pages=pages,
        tree=site_map.to_dict(),
    )
