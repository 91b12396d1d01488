"""
URL normalization and channel pattern tables.

Normalization rules (applied before any pattern comparison):
- protocol-relative (//host/...) is promoted to https://
- host-relative (/path) is resolved against base_url when one is supplied
- bare hosts (maps.google.com/...) are prefixed with https://
- hostnames are lower-cased
- a trailing slash is stripped except for the root path

Normalization never raises: anything it cannot make sense of is returned
unchanged, so one malformed link cannot break channel detection.
"""

import re
import logging
from typing import List, Optional, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

from .models import SocialNetwork, ALL_NETWORKS

logger = logging.getLogger(__name__)


# =============================================================================
# PATTERN TABLES
# =============================================================================

# Anchored at the start of a normalized URL so a profile URL embedded in a
# query string (share widgets, redirects) is not mistaken for a link to it.
SOCIAL_PATTERNS = {
    SocialNetwork.INSTAGRAM: re.compile(
        r'https?://(www\.)?instagram\.com/([a-zA-Z0-9_.]+)/?', re.IGNORECASE),
    SocialNetwork.FACEBOOK: re.compile(
        r'https?://(www\.|m\.)?facebook\.com/([a-zA-Z0-9_.]+)/?', re.IGNORECASE),
    SocialNetwork.TIKTOK: re.compile(
        r'https?://(www\.)?tiktok\.com/@?([a-zA-Z0-9_.]+)/?', re.IGNORECASE),
    SocialNetwork.X: re.compile(
        r'https?://(www\.)?(twitter|x)\.com/([a-zA-Z0-9_]+)/?', re.IGNORECASE),
    SocialNetwork.LINKEDIN: re.compile(
        r'https?://(www\.)?linkedin\.com/(company|in|showcase)/([a-zA-Z0-9_-]+)/?', re.IGNORECASE),
    SocialNetwork.YOUTUBE: re.compile(
        r'https?://(www\.)?youtube\.com/(channel/|c/|user/|@)?([a-zA-Z0-9_-]+)/?', re.IGNORECASE),
}

# Regex group holding the handle, per network
_HANDLE_GROUP = {
    SocialNetwork.INSTAGRAM: 2,
    SocialNetwork.FACEBOOK: 2,
    SocialNetwork.TIKTOK: 2,
    SocialNetwork.X: 3,
    SocialNetwork.LINKEDIN: 3,
    SocialNetwork.YOUTUBE: 3,
}

# Path segments that are widgets/actions rather than an account
NON_PROFILE_SEGMENTS = {
    SocialNetwork.INSTAGRAM: {"p", "reel", "reels", "explore", "tv", "stories", "accounts"},
    SocialNetwork.FACEBOOK: {"sharer", "sharer.php", "share", "share.php", "dialog", "plugins"},
    SocialNetwork.TIKTOK: {"embed", "tag", "music", "discover"},
    SocialNetwork.X: {"intent", "share", "home"},
    SocialNetwork.YOUTUBE: {"watch", "embed"},
}

# Google Business Profile URL shapes. Searched (not anchored) except where
# the pattern carries its own ^, which covers relative map paths and bare hosts.
GBP_PATTERNS = [
    re.compile(r'(https?:)?//g\.page/[a-zA-Z0-9_/-]+', re.IGNORECASE),
    re.compile(r'(https?:)?//goo\.gl/maps/[a-zA-Z0-9]+', re.IGNORECASE),
    re.compile(r'(https?:)?//maps\.app\.goo\.gl/[a-zA-Z0-9]+', re.IGNORECASE),
    re.compile(r'(https?:)?//(www\.)?google\.com/maps\?cid=\d+', re.IGNORECASE),
    re.compile(r'(https?:)?//(www\.)?google\.com/maps/place/[^\s"\'<>]+', re.IGNORECASE),
    re.compile(r'(https?:)?//(www\.)?google\.com/maps/search/\?api=1&query=[^\s"\'<>]+', re.IGNORECASE),
    re.compile(r'(https?:)?//(www\.)?google\.com/maps/@\?api=1&map_action=map[^\s"\'<>]*', re.IGNORECASE),
    re.compile(r'(https?:)?//search\.google\.com/local/writereview\?placeid=[^\s"\'<>]+', re.IGNORECASE),
    re.compile(r'(https?:)?//maps\.google\.com/[^\s"\'<>]+', re.IGNORECASE),
    re.compile(r'(https?:)?//(www\.)?google\.com/business/[^\s"\'<>]+', re.IGNORECASE),
    re.compile(r'^/maps\?cid=\d+', re.IGNORECASE),
    re.compile(r'^/maps/place/[^\s"\'<>]+', re.IGNORECASE),
    re.compile(r'^(www\.)?maps\.google\.com/[^\s"\'<>]+', re.IGNORECASE),
    re.compile(r'^g\.page/[a-zA-Z0-9_/-]+', re.IGNORECASE),
]

_HAS_SCHEME = re.compile(r'^[a-z][a-z0-9+.\-]*://', re.IGNORECASE)
_BARE_HOST = re.compile(r'^(?:[a-z0-9-]+\.)+[a-z]{2,}(?::\d+)?(?:[/?#]|$)', re.IGNORECASE)


# =============================================================================
# NORMALIZATION
# =============================================================================

def normalize_url(url: str, base_url: Optional[str] = None) -> str:
    """
    Normalize a link target for comparison.

    Args:
        url: Raw href / structured-data value
        base_url: Page URL used to resolve host-relative paths

    Returns:
        Normalized absolute URL, or the original input if it cannot be
        normalized (relative path without base, mailto:, garbage).
    """
    if not isinstance(url, str):
        return url
    candidate = url.strip()
    if not candidate:
        return url

    try:
        if _HAS_SCHEME.match(candidate):
            pass
        elif candidate.startswith("//"):
            candidate = "https:" + candidate
        elif candidate.startswith("/"):
            if not base_url:
                return url
            base = normalize_url(base_url)
            if not _HAS_SCHEME.match(base):
                return url
            candidate = urljoin(base, candidate)
        elif _BARE_HOST.match(candidate):
            candidate = "https://" + candidate
        else:
            return url

        parts = urlsplit(candidate)
        host = parts.hostname
        if not host:
            return url

        netloc = f"[{host}]" if ":" in host else host
        if parts.port is not None:
            netloc = f"{netloc}:{parts.port}"
        if parts.username is not None:
            userinfo = parts.username
            if parts.password is not None:
                userinfo = f"{userinfo}:{parts.password}"
            netloc = f"{userinfo}@{netloc}"

        path = parts.path or "/"
        if path != "/" and path.endswith("/") and not parts.query and not parts.fragment:
            path = path[:-1]

        return urlunsplit((parts.scheme.lower(), netloc, path, parts.query, parts.fragment))
    except ValueError as e:
        logger.debug("URL normalization failed for %r: %s", url, e)
        return url


# =============================================================================
# MATCHING
# =============================================================================

def extract_handle(network: SocialNetwork, match: "re.Match") -> Optional[str]:
    """Pull the account handle out of a SOCIAL_PATTERNS match."""
    handle = match.group(_HANDLE_GROUP[network])
    if not handle:
        return None
    if network == SocialNetwork.TIKTOK:
        handle = handle.lstrip("@")
    return handle or None


def match_social_urls(url: str) -> List[Tuple[SocialNetwork, Optional[str]]]:
    """
    Test a (normalized) URL against every network pattern.

    Returns:
        List of (network, handle) for each network the URL points at.
        Share/intent widgets are not treated as profiles.
    """
    if not isinstance(url, str) or not url:
        return []
    matches = []
    for network in ALL_NETWORKS:
        m = SOCIAL_PATTERNS[network].match(url)
        if not m:
            continue
        handle = extract_handle(network, m)
        if handle and handle.lower() in NON_PROFILE_SEGMENTS.get(network, ()):
            continue
        matches.append((network, handle))
    return matches


def match_social_url(url: str) -> Optional[Tuple[SocialNetwork, Optional[str]]]:
    """First (network, handle) the URL points at, or None."""
    matches = match_social_urls(url)
    return matches[0] if matches else None


def is_local_profile_url(url: str, base_url: Optional[str] = None) -> bool:
    """True if the raw or normalized URL has a Google Business Profile shape."""
    if not isinstance(url, str) or not url.strip():
        return False
    raw = url.strip()
    if any(p.search(raw) for p in GBP_PATTERNS):
        return True
    normalized = normalize_url(raw, base_url)
    if normalized != raw:
        return any(p.search(normalized) for p in GBP_PATTERNS)
    return False
