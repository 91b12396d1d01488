"""
Unit tests for snapshot sanity checks.
"""

import os
import sys
import logging
from dataclasses import replace

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _root)

from footprint.models import (
    ChannelPresence,
    DetectionSource,
    PresenceStatus,
    SocialNetwork,
)
from footprint.snapshot import build_footprint_snapshot
from footprint.validation import check_snapshot


def test_built_snapshots_are_clean():
    html = ('<footer><a href="https://www.facebook.com/acme">FB</a>'
            '<a href="https://g.page/acme-shop">Map</a></footer>')
    assert check_snapshot(build_footprint_snapshot(html, [])) == []
    assert check_snapshot(build_footprint_snapshot("", [])) == []


def test_fixture_snapshots_are_clean(make_snapshot):
    snapshot = make_snapshot(
        socials={SocialNetwork.INSTAGRAM: (PresenceStatus.PRESENT, 0.85)},
        local_profile=(PresenceStatus.PROBABLE, 0.6),
    )
    assert check_snapshot(snapshot) == []


def test_status_mismatch(make_snapshot, caplog):
    snapshot = make_snapshot(
        socials={SocialNetwork.INSTAGRAM: (PresenceStatus.PRESENT, 0.5)},
        local_profile=(PresenceStatus.PRESENT, 0.6),
    )
    with caplog.at_level(logging.WARNING, logger="footprint.validation"):
        warnings = check_snapshot(snapshot)
    assert "instagram: status=present but confidence=0.5 implies inconclusive" in warnings
    assert "gbp: status=present but confidence=0.6 implies probable" in warnings
    assert len(caplog.records) == len(warnings)


def test_missing_and_duplicate_networks(make_snapshot):
    snapshot = make_snapshot()
    trimmed = replace(snapshot, socials=snapshot.socials[:5])
    assert any("youtube: missing from snapshot" in w for w in check_snapshot(trimmed))

    doubled = replace(snapshot, socials=snapshot.socials + (snapshot.socials[0],))
    assert "instagram: appears 2 times" in check_snapshot(doubled)


def test_out_of_range_values(make_snapshot):
    snapshot = make_snapshot(
        socials={SocialNetwork.X: (PresenceStatus.PRESENT, 1.2)},
        data_confidence=1.3,
    )
    warnings = check_snapshot(snapshot)
    assert any(w.startswith("data_confidence=1.3") for w in warnings)
    assert any(w.startswith("x: confidence=1.2") for w in warnings)


def test_sources_without_confidence(make_snapshot):
    snapshot = make_snapshot()
    orphan = ChannelPresence(
        network=SocialNetwork.INSTAGRAM,
        detection_sources=(DetectionSource.MANUAL,),
        confidence=0.0,
        status=PresenceStatus.MISSING,
    )
    patched = replace(snapshot, socials=(orphan,) + snapshot.socials[1:])
    assert check_snapshot(patched) == ["instagram: has detection sources but confidence=0"]
