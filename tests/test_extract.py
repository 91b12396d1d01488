"""
Unit tests for the HTML and structured-data extraction passes.

Fixtures:
  PAGE_HTML: header/nav LinkedIn, body YouTube, footer Instagram + Business Profile
  Structured data: sameAs lists, @graph wrappers, hasMap variants, malformed fragments
"""

import os
import sys

from bs4 import BeautifulSoup

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _root)

from footprint.models import DetectionSource, SocialNetwork
from footprint.extract import (
    classify_link_location,
    detect_from_html,
    detect_from_structured_data,
    extract_json_ld_schemas,
)


PAGE_HTML = """
<html><body>
  <header class="site-header">
    <nav><a href="https://www.linkedin.com/company/acme">LinkedIn</a></nav>
  </header>
  <main>
    <p>Watch <a href="https://www.youtube.com/@acme">our videos</a>.</p>
    <a href="mailto:hello@acme.com">Email</a>
    <a>No target</a>
  </main>
  <footer>
    <a href="https://www.instagram.com/acme/">Instagram</a>
    <a href="https://g.page/acme-shop">Find us</a>
  </footer>
</body></html>
"""


def _anchor(html: str):
    return BeautifulSoup(html, "html.parser").find("a")


# --- Link location ---

def test_classify_link_location_by_tag():
    assert classify_link_location(_anchor('<header><a href="#">x</a></header>')) == DetectionSource.HTML_LINK_HEADER
    assert classify_link_location(_anchor('<nav><a href="#">x</a></nav>')) == DetectionSource.HTML_LINK_HEADER
    assert classify_link_location(_anchor('<footer><a href="#">x</a></footer>')) == DetectionSource.HTML_LINK_FOOTER
    assert classify_link_location(_anchor('<main><p><a href="#">x</a></p></main>')) == DetectionSource.HTML_LINK_BODY


def test_classify_link_location_by_id_and_class():
    assert classify_link_location(_anchor('<div id="Site-Footer"><a href="#">x</a></div>')) == DetectionSource.HTML_LINK_FOOTER
    assert classify_link_location(_anchor('<div class="wrap footer-links"><a href="#">x</a></div>')) == DetectionSource.HTML_LINK_FOOTER
    assert classify_link_location(_anchor('<div class="main-nav"><a href="#">x</a></div>')) == DetectionSource.HTML_LINK_HEADER


def test_classify_link_location_header_wins_over_footer():
    html = '<footer><nav class="footer-nav"><a href="#">x</a></nav></footer>'
    assert classify_link_location(_anchor(html)) == DetectionSource.HTML_LINK_HEADER


# --- HTML pass ---

def test_detect_from_html_tags_each_link_with_position():
    result = detect_from_html(PAGE_HTML)

    linkedin = result.socials[SocialNetwork.LINKEDIN]
    assert [o.source for o in linkedin] == [DetectionSource.HTML_LINK_HEADER]
    assert linkedin[0].handle == "acme"

    youtube = result.socials[SocialNetwork.YOUTUBE]
    assert [o.source for o in youtube] == [DetectionSource.HTML_LINK_BODY]

    instagram = result.socials[SocialNetwork.INSTAGRAM]
    assert instagram[0].source == DetectionSource.HTML_LINK_FOOTER
    assert instagram[0].url == "https://www.instagram.com/acme"

    assert [o.source for o in result.local_profile] == [DetectionSource.HTML_LINK_FOOTER]
    assert result.local_profile[0].url == "https://g.page/acme-shop"

    assert SocialNetwork.FACEBOOK not in result.socials


def test_detect_from_html_resolves_relative_map_link():
    html = '<footer><a href="/maps?cid=42">Directions</a></footer>'
    result = detect_from_html(html, base_url="https://Acme.com/")
    assert len(result.local_profile) == 1
    assert result.local_profile[0].url == "https://acme.com/maps?cid=42"


def test_detect_from_html_empty_and_invalid_input():
    assert detect_from_html("").is_empty()
    assert detect_from_html(None).is_empty()
    assert detect_from_html("<html><body><p>No links</p></body></html>").is_empty()


def test_detect_from_html_tolerates_malformed_markup():
    html = '<div><footer><a href="https://www.facebook.com/acme">fb<a href="http://[::1">bad</footer>'
    result = detect_from_html(html)
    assert [o.url for o in result.socials[SocialNetwork.FACEBOOK]] == ["https://www.facebook.com/acme"]


def test_detect_from_html_skips_embedded_posts():
    html = ('<main><a href="https://www.instagram.com/p/CxYz123/">Our latest cake</a>'
            '<a href="https://www.tiktok.com/tag/sourdough">#sourdough</a></main>')
    assert detect_from_html(html).is_empty()


# --- Structured-data pass ---

def test_detect_from_structured_data_same_as_and_has_map():
    items = [{
        "@context": "https://schema.org",
        "@type": "LocalBusiness",
        "sameAs": ["https://www.facebook.com/acme", "https://www.instagram.com/acme"],
        "hasMap": "https://www.google.com/maps?cid=123",
    }]
    result = detect_from_structured_data(items)
    assert result.socials[SocialNetwork.FACEBOOK][0].source == DetectionSource.SCHEMA_SAME_AS
    assert result.socials[SocialNetwork.INSTAGRAM][0].handle == "acme"
    assert [o.source for o in result.local_profile] == [DetectionSource.SCHEMA_GBP]


def test_detect_from_structured_data_flattens_graph():
    items = [{"@graph": [
        {"@type": "Organization", "sameAs": "https://twitter.com/acme"},
        {"@type": "WebSite", "url": "https://acme.com"},
    ]}]
    result = detect_from_structured_data(items)
    assert result.socials[SocialNetwork.X][0].handle == "acme"
    assert result.local_profile == []


def test_detect_from_structured_data_local_business_properties():
    items = [
        {"@type": ["Thing", "Restaurant"], "@id": "https://g.page/acme"},
        {"@type": "Store", "hasMap": {"@id": "https://goo.gl/maps/abc123"}},
        {"@type": "Place", "url": "https://maps.google.com/?cid=9"},
    ]
    result = detect_from_structured_data(items)
    assert [o.source for o in result.local_profile] == [
        DetectionSource.SCHEMA_GBP,
        DetectionSource.SCHEMA_GBP,
        DetectionSource.SCHEMA_URL,
    ]


def test_detect_from_structured_data_ignores_map_on_non_business_type():
    items = [{"@type": "WebPage", "hasMap": "https://g.page/acme", "url": "https://g.page/acme"}]
    assert detect_from_structured_data(items).is_empty()


def test_detect_from_structured_data_skips_bad_fragments_individually():
    items = [
        "{not json",
        42,
        None,
        '{"sameAs": "https://www.tiktok.com/@acme"}',
        {"@type": "Place", "url": "https://maps.google.com/?cid=9"},
        {"@type": "Organization", "sameAs": [None, 7, "https://www.youtube.com/@acme"]},
    ]
    result = detect_from_structured_data(items)
    assert result.socials[SocialNetwork.TIKTOK][0].handle == "acme"
    assert result.socials[SocialNetwork.YOUTUBE][0].source == DetectionSource.SCHEMA_SAME_AS
    assert [o.source for o in result.local_profile] == [DetectionSource.SCHEMA_URL]


def test_detect_from_structured_data_empty():
    assert detect_from_structured_data([]).is_empty()
    assert detect_from_structured_data(None).is_empty()


# --- Embedded JSON-LD ---

def test_extract_json_ld_schemas():
    html = """
    <script type="application/ld+json">{"@type": "Organization", "sameAs": ["https://www.facebook.com/acme"]}</script>
    <script type="application/ld+json">[{"@type": "Place"}, {"@type": "Store"}]</script>
    <script type="application/ld+json">{broken</script>
    <script type="text/javascript">var x = 1;</script>
    """
    schemas = extract_json_ld_schemas(html)
    assert [s["@type"] for s in schemas] == ["Organization", "Place", "Store"]


def test_extract_json_ld_schemas_empty():
    assert extract_json_ld_schemas("") == []
    assert extract_json_ld_schemas("<html></html>") == []
