# site_mapper/crawler/resolver.py
"""
URL resolution: turns a raw link string found on a page into the normalized
absolute URL used as a site-map node identity.

Normalization rule
------------------
* scheme and host are lower-cased, internationalized hosts are IDNA-encoded;
* default ports (``:80`` for http, ``:443`` for https) are stripped;
* userinfo and fragment are dropped, the query string is kept verbatim;
* an empty path becomes ``/``, a path without a leading slash is rooted.
"""
from __future__ import annotations

import posixpath
import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from site_mapper.exceptions import ParseError

__all__ = ("resolve", "SUPPORTED_SCHEMES")

SUPPORTED_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def _netloc(hostname: str, port: Optional[int], scheme: str) -> str:
    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is None or port == _DEFAULT_PORTS.get(scheme):
        return host
    return f"{host}:{port}"


def _join_relative(parent_path: str, path: str) -> str:
    base = parent_path if parent_path.endswith("/") else posixpath.dirname(parent_path)
    joined = posixpath.normpath(posixpath.join(base or "/", path))
    # normpath keeps a leading "//" as-is
    return "/" + joined.lstrip("/")


def resolve(parent: Optional[str], raw: str) -> str:
    """Resolve *raw* against the absolute URL *parent* (``None`` for the root).

    Raises :class:`ParseError` when *raw* is malformed or does not end up as an
    absolute http(s) URL.
    """
    if _CONTROL_RE.search(raw):
        raise ParseError(raw, "invalid control character in url")
    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as exc:
        raise ParseError(raw, str(exc)) from exc

    scheme = parts.scheme.lower()
    hostname = parts.hostname or ""
    path = parts.path or "/"

    base = urlsplit(parent) if parent is not None else None
    if not hostname and base is not None:
        hostname = base.hostname or ""
        port = base.port
    if not scheme and base is not None:
        scheme = base.scheme
    if path.startswith(".") and base is not None:
        path = _join_relative(base.path or "/", path)
    if not path.startswith("/"):
        path = "/" + path

    if scheme not in SUPPORTED_SCHEMES:
        raise ParseError(raw, f"unsupported scheme {scheme!r}" if scheme else "missing scheme")
    if not hostname:
        raise ParseError(raw, "missing host")
    if ":" not in hostname:
        try:
            hostname = hostname.encode("idna").decode("ascii").lower()
        except UnicodeError as exc:
            raise ParseError(raw, f"invalid host {hostname!r}: {exc}") from exc

    return urlunsplit((scheme, _netloc(hostname, port, scheme), path, parts.query, ""))
