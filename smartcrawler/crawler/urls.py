"""URL canonicalization and same-origin scope checks."""
from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

from ..exceptions import InvalidSeedUrlError

NON_CONTENT_SCHEMES = ("mailto:", "tel:", "javascript:")

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}

Origin = Tuple[str, str, Optional[int]]


def normalize_url(raw_url: str, base_url: str) -> Optional[str]:
    """Resolve a URL against a base and put it in canonical form.

    The fragment is dropped, scheme and host are lowercased, default ports are
    removed and trailing slashes are stripped from every path except the root.

    Args:
        raw_url: URL as found in a page, possibly relative.
        base_url: URL the raw URL is relative to.

    Returns:
        The canonical absolute URL, or None if it cannot be parsed.
    """
    try:
        parsed = urlsplit(urljoin(base_url, raw_url.strip()))
        port = parsed.port
    except ValueError:
        return None

    scheme = parsed.scheme.lower()
    if not scheme:
        return None

    if scheme in DEFAULT_PORTS:
        host = parsed.hostname
        if not host:
            return None
        if ":" in host:
            host = f"[{host}]"
        netloc = host if port in (None, DEFAULT_PORTS[scheme]) else f"{host}:{port}"
        userinfo = parsed.netloc.rpartition("@")[0]
        if userinfo:
            netloc = f"{userinfo}@{netloc}"
        path = parsed.path.rstrip("/") or "/"
    else:
        netloc = parsed.netloc
        path = parsed.path

    return urlunsplit((scheme, netloc, path, parsed.query, ""))


def is_non_content_url(url: str) -> bool:
    """Whether the URL uses a scheme that never leads to a page."""
    return url.lower().startswith(NON_CONTENT_SCHEMES)


def url_origin(url: str) -> Optional[Origin]:
    """Get the (scheme, host, port) origin of a URL, with default ports filled in."""
    try:
        parsed = urlsplit(url)
        port = parsed.port
    except ValueError:
        return None
    scheme = parsed.scheme.lower()
    if port is None:
        port = DEFAULT_PORTS.get(scheme)
    return scheme, (parsed.hostname or ""), port


class ScopeGuard:
    """Decides whether a URL belongs to the origin of the seed URL."""

    def __init__(self, seed_url: str):
        """Fix the crawl origin.

        Args:
            seed_url: Normalized seed URL of the crawl.

        Raises:
            InvalidSeedUrlError: If the seed is not an HTTP(S) URL with a host.
        """
        origin = url_origin(seed_url)
        if origin is None or origin[0] not in DEFAULT_PORTS or not origin[1]:
            raise InvalidSeedUrlError(f"Invalid seed URL: {seed_url}")
        self.origin: Origin = origin

    def in_scope(self, url: str) -> bool:
        if is_non_content_url(url):
            return False
        return url_origin(url) == self.origin
