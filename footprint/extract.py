"""
Signal extraction: raw HTML and structured data -> per-channel observations.

Two independent, side-effect-free passes:
- HTML pass: every <a href> is normalized and tested against the social
  and Google Business Profile pattern tables; its DOM position (header/nav,
  footer, body) becomes the provenance tag.
- Structured-data pass: schema.org objects (already parsed, or JSON text)
  are scanned for sameAs links and, on local-business-like types, for
  hasMap / url / @id Business Profile links.

Neither pass raises on malformed input. A bad structured-data fragment is
skipped on its own; the rest are still processed.
"""

import re
import json
import logging
from typing import Any, Iterable, Iterator, List, Optional

from bs4 import BeautifulSoup

from .models import DetectionSource, ExtractionPass, Observation
from .urls import normalize_url, match_social_urls, is_local_profile_url

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

HEADER_TAGS = ("header", "nav")
HEADER_MARKERS = ("header", "site-header", "nav")
FOOTER_TAGS = ("footer",)
FOOTER_MARKERS = ("footer", "site-footer")

# schema.org @type values treated as a local business entity
LOCAL_BUSINESS_TYPES = frozenset({
    "LocalBusiness",
    "Restaurant",
    "Store",
    "Organization",
    "Place",
})

_JSON_LD_TYPE = re.compile(r'application/ld\+json', re.IGNORECASE)


# =============================================================================
# HTML PASS
# =============================================================================

def _region_matches(element, tags, markers) -> bool:
    """Tag name or id/class substring test for one ancestor."""
    name = getattr(element, "name", None)
    if name in tags:
        return True
    attrs = getattr(element, "attrs", None) or {}
    element_id = attrs.get("id") or ""
    classes = attrs.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    haystacks = (str(element_id).lower(), " ".join(str(c) for c in classes).lower())
    return any(marker in hay for marker in markers for hay in haystacks if hay)


def classify_link_location(anchor) -> DetectionSource:
    """
    Classify where an anchor sits on the page.

    Header/navigation wins over footer when an anchor is nested in both.
    Anything else is body.
    """
    ancestors = list(anchor.parents)
    if any(_region_matches(el, HEADER_TAGS, HEADER_MARKERS) for el in ancestors):
        return DetectionSource.HTML_LINK_HEADER
    if any(_region_matches(el, FOOTER_TAGS, FOOTER_MARKERS) for el in ancestors):
        return DetectionSource.HTML_LINK_FOOTER
    return DetectionSource.HTML_LINK_BODY


def detect_from_html(html: str, base_url: Optional[str] = None) -> ExtractionPass:
    """
    Detect social profiles and Business Profile links from anchors.

    Args:
        html: Raw HTML of a single page (may be empty)
        base_url: Page URL, used only to resolve host-relative links

    Returns:
        ExtractionPass with html_link_* observations
    """
    result = ExtractionPass()
    if not html or not isinstance(html, str):
        return result

    soup = BeautifulSoup(html, "html.parser")
    for anchor in soup.find_all("a", href=True):
        href = anchor.get("href")
        if not isinstance(href, str) or not href.strip():
            continue

        source = classify_link_location(anchor)
        resolved = normalize_url(href, base_url)

        for network, handle in match_social_urls(resolved):
            result.add_social(network, Observation(source=source, url=resolved, handle=handle))

        if is_local_profile_url(href, base_url):
            result.add_local_profile(Observation(source=source, url=resolved))

    return result


# =============================================================================
# STRUCTURED-DATA PASS
# =============================================================================

def _iter_structured_items(items: Iterable[Any]) -> Iterator[dict]:
    """
    Yield schema objects, decoding JSON text and flattening top-level
    arrays and @graph wrappers. Undecodable fragments are skipped.
    """
    for raw in items or []:
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.debug("Skipping undecodable structured-data fragment: %s", e)
                continue

        if isinstance(raw, list):
            yield from _iter_structured_items(raw)
            continue
        if not isinstance(raw, dict):
            logger.debug("Skipping structured-data fragment of type %s", type(raw).__name__)
            continue

        graph = raw.get("@graph")
        if isinstance(graph, list):
            for node in graph:
                if isinstance(node, dict):
                    yield node
        elif isinstance(graph, dict):
            yield graph
        else:
            yield raw


def _as_list(value) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _is_local_business_type(schema_type) -> bool:
    return any(
        isinstance(t, str) and t in LOCAL_BUSINESS_TYPES
        for t in _as_list(schema_type)
    )


def _map_url(has_map) -> Optional[str]:
    if isinstance(has_map, str):
        return has_map
    if isinstance(has_map, dict):
        candidate = has_map.get("@id") or has_map.get("url")
        return candidate if isinstance(candidate, str) else None
    return None


def _scan_item(item: dict, result: ExtractionPass) -> None:
    for url in _as_list(item.get("sameAs")):
        if not isinstance(url, str):
            continue
        normalized = normalize_url(url)
        for network, handle in match_social_urls(normalized):
            result.add_social(
                network,
                Observation(source=DetectionSource.SCHEMA_SAME_AS, url=normalized, handle=handle),
            )
        if is_local_profile_url(url):
            result.add_local_profile(Observation(source=DetectionSource.SCHEMA_SAME_AS, url=normalized))

    if not _is_local_business_type(item.get("@type")):
        return

    for has_map in _as_list(item.get("hasMap")):
        map_url = _map_url(has_map)
        if map_url and is_local_profile_url(map_url):
            result.add_local_profile(
                Observation(source=DetectionSource.SCHEMA_GBP, url=normalize_url(map_url))
            )

    url = item.get("url")
    if isinstance(url, str) and is_local_profile_url(url):
        result.add_local_profile(Observation(source=DetectionSource.SCHEMA_URL, url=normalize_url(url)))

    node_id = item.get("@id")
    if isinstance(node_id, str) and is_local_profile_url(node_id):
        result.add_local_profile(Observation(source=DetectionSource.SCHEMA_GBP, url=normalize_url(node_id)))


def detect_from_structured_data(items: Iterable[Any]) -> ExtractionPass:
    """
    Detect social profiles and Business Profile links from schema.org data.

    Args:
        items: Parsed JSON-LD objects (dicts, arrays, @graph wrappers) or
               raw JSON strings. Anything else is ignored.

    Returns:
        ExtractionPass with schema_* observations
    """
    result = ExtractionPass()
    for item in _iter_structured_items(items):
        try:
            _scan_item(item, result)
        except (TypeError, AttributeError, ValueError) as e:
            logger.debug("Skipping malformed structured-data item: %s", e)
    return result


def extract_json_ld_schemas(html: str) -> List[Any]:
    """
    Pull embedded JSON-LD blocks out of raw HTML.

    Each block is decoded independently; invalid blocks are skipped and
    top-level arrays are flattened.
    """
    schemas: List[Any] = []
    if not html or not isinstance(html, str):
        return schemas

    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script", attrs={"type": _JSON_LD_TYPE}):
        content = (script.string or script.get_text() or "").strip()
        if not content:
            continue
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            logger.debug("Ignoring invalid JSON-LD block: %s", e)
            continue
        if isinstance(parsed, list):
            schemas.extend(parsed)
        else:
            schemas.append(parsed)
    return schemas
