# site_mapper/crawler/sitemap.py
"""
Site map: a depth-bounded tree of URL nodes rooted at the crawl's start URL.

Nodes live in a flat arena (a list); parent and child links are list indices
and a ``url -> index`` map backs the whole-tree duplicate check, so the tree
never holds reference cycles and is trivial to walk or export.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union
from urllib.parse import urlsplit

from site_mapper.exceptions import InvalidNodeError, StructuralError

__all__ = ("URLNode", "SiteMap")


@dataclass(frozen=True, slots=True)
class URLNode:
    """A normalized absolute URL and its distance from the root."""

    url: str
    depth: int

    @property
    def hostname(self) -> str:
        return urlsplit(self.url).hostname or ""


class SiteMap:
    """Tree of :class:`URLNode` with a maximum depth and unique URLs."""

    def __init__(self, root: URLNode, max_depth: int) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        if root.depth != 0:
            raise ValueError(f"root node must have depth 0, got {root.depth}")
        self.max_depth = max_depth
        self._nodes: List[URLNode] = [root]
        self._parents: List[Optional[int]] = [None]
        self._children: List[List[int]] = [[]]
        self._index: Dict[str, int] = {root.url: 0}

    # Mutation ---------------------------------------------------------------
    def add_child(self, parent: URLNode, candidate: URLNode) -> None:
        """Insert *candidate* as a new leaf under *parent*.

        Raises :class:`InvalidNodeError` when the candidate is deeper than
        ``max_depth`` or its URL is already in the tree, and
        :class:`StructuralError` when *parent* is not part of this tree or the
        candidate's depth does not follow from it.
        """
        parent_idx = self._lookup(parent)
        if parent_idx is None:
            raise StructuralError(f"parent {parent.url!r} is not in the site map")
        if candidate.depth != parent.depth + 1:
            raise StructuralError(
                f"node {candidate.url!r} has depth {candidate.depth}, "
                f"expected {parent.depth + 1}"
            )
        if candidate.depth > self.max_depth:
            raise InvalidNodeError(
                candidate.url, f"depth {candidate.depth} exceeds max depth {self.max_depth}"
            )
        if candidate.url in self._index:
            raise InvalidNodeError(candidate.url, "duplicate url")

        idx = len(self._nodes)
        self._nodes.append(candidate)
        self._parents.append(parent_idx)
        self._children.append([])
        self._children[parent_idx].append(idx)
        self._index[candidate.url] = idx

    # Read access ------------------------------------------------------------
    @property
    def root(self) -> URLNode:
        return self._nodes[0]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, item: Union[URLNode, str]) -> bool:
        if isinstance(item, URLNode):
            return self._lookup(item) is not None
        return item in self._index

    def __iter__(self) -> Iterator[URLNode]:
        return self.walk()

    def get(self, url: str) -> Optional[URLNode]:
        idx = self._index.get(url)
        return None if idx is None else self._nodes[idx]

    def parent(self, node: URLNode) -> Optional[URLNode]:
        parent_idx = self._parents[self._require(node)]
        return None if parent_idx is None else self._nodes[parent_idx]

    def children(self, node: URLNode) -> List[URLNode]:
        return [self._nodes[i] for i in self._children[self._require(node)]]

    def depth(self, node: URLNode) -> int:
        return self._nodes[self._require(node)].depth

    def hostname(self, node: URLNode) -> str:
        return self._nodes[self._require(node)].hostname

    def walk(self) -> Iterator[URLNode]:
        """Pre-order traversal, children in insertion order."""
        stack = [0]
        while stack:
            idx = stack.pop()
            yield self._nodes[idx]
            stack.extend(reversed(self._children[idx]))

    def levels(self) -> Iterator[URLNode]:
        """Breadth-first traversal (the order a crawl discovers nodes in)."""
        queue = deque([0])
        while queue:
            idx = queue.popleft()
            yield self._nodes[idx]
            queue.extend(self._children[idx])

    def to_dict(self) -> Dict[str, Any]:
        """Export the tree as nested ``{"url", "depth", "children"}`` mappings."""
        exported = [{"url": n.url, "depth": n.depth, "children": []} for n in self._nodes]
        # a child always has a larger index than its parent, so sibling order is kept
        for idx, parent_idx in enumerate(self._parents):
            if parent_idx is not None:
                exported[parent_idx]["children"].append(exported[idx])
        return exported[0]

    # Helpers ----------------------------------------------------------------
    def _lookup(self, node: URLNode) -> Optional[int]:
        idx = self._index.get(node.url)
        if idx is None or self._nodes[idx] != node:
            return None
        return idx

    def _require(self, node: URLNode) -> int:
        idx = self._lookup(node)
        if idx is None:
            raise StructuralError(f"node {node.url!r} is not in the site map")
        return idx
