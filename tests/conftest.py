"""
Shared fixtures: hand-built snapshots for gate, subscore and work-item tests.

Snapshots here are constructed directly (as a caller that deserialized or
assembled one would) so tests can pin exact statuses, confidences and
data_confidence values that the builder would never produce together.
"""

import os
import sys

import pytest

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _root)

from footprint.models import (
    ALL_NETWORKS,
    ChannelPresence,
    DetectionSource,
    FootprintSnapshot,
    LocalProfilePresence,
    PresenceStatus,
)

_MISSING = (PresenceStatus.MISSING, 0.0)


def build_snapshot(socials=None, local_profile=_MISSING, data_confidence=0.9):
    """
    Args:
        socials: {SocialNetwork: (PresenceStatus, confidence)}; others missing
        local_profile: (PresenceStatus, confidence), or None for "not checked"
        data_confidence: snapshot-level confidence
    """
    socials = socials or {}
    channels = []
    for network in ALL_NETWORKS:
        status, confidence = socials.get(network, _MISSING)
        sources = (DetectionSource.HTML_LINK_FOOTER,) if confidence > 0 else ()
        channels.append(ChannelPresence(
            network=network,
            detection_sources=sources,
            confidence=confidence,
            status=status,
            url=f"https://example.com/{network.value}" if confidence > 0 else None,
        ))

    local = None
    if local_profile is not None:
        status, confidence = local_profile
        local = LocalProfilePresence(
            detection_sources=(DetectionSource.SCHEMA_GBP,) if confidence > 0 else (),
            confidence=confidence,
            status=status,
        )
    return FootprintSnapshot(socials=tuple(channels), local_profile=local, data_confidence=data_confidence)


@pytest.fixture
def make_snapshot():
    return build_snapshot
