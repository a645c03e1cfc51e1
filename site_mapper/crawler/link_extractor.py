# site_mapper/crawler/link_extractor.py
"""
Raw link extraction for SiteMapper.

Links are returned exactly as written in the page (stripped of surrounding
whitespace); resolving them against the page URL is the resolver's job.
"""
from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup
from bs4.element import Tag

_SKIP_PREFIXES = ("mailto:", "javascript:", "tel:", "data:", "#")


def extract_links(html: str) -> List[str]:
    """
    Extract ``href`` values of ``<a>`` tags from *html*.

    Ignores empty values, in-page anchors and mailto:/javascript:/tel:/data: links.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.lower().startswith(_SKIP_PREFIXES):
            continue
        links.append(raw)
    return links
