"""
Unit tests for the recommendation gate (rewrite / soften / pass tiers).
"""

import os
import sys

import pytest

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _root)

from footprint.config import FootprintCalibration
from footprint.models import PresenceStatus, SocialNetwork
from footprint.snapshot import build_footprint_snapshot
from footprint.recommendation_gate import (
    ACTION_PASS,
    ACTION_REWRITE,
    ACTION_SOFTEN,
    recommendation_action,
    sanitize_quick_summary,
    sanitize_recommendation,
    sanitize_recommendations,
)

ESTABLISH_GBP = "Establish a Google Business Profile for local visibility"
SOFTENED_GBP = "Verify and, if needed, establish a Google Business Profile for local visibility"
START_IG = "Begin posting regularly on Instagram"
PADDING = "<p>" + ("Family-owned bakery serving the neighborhood since 1998. " * 30) + "</p>"


def _page(body_links: str) -> str:
    return f"<html><body><main>{PADDING}{body_links}</main></body></html>"


# --- Policy table ---

@pytest.mark.parametrize("status, data_confidence, expected", [
    (PresenceStatus.PRESENT, 0.2, ACTION_REWRITE),
    (PresenceStatus.PROBABLE, 0.9, ACTION_REWRITE),
    (PresenceStatus.MISSING, 0.8, ACTION_PASS),
    (PresenceStatus.MISSING, 0.7, ACTION_PASS),
    (PresenceStatus.MISSING, 0.69, ACTION_SOFTEN),
    (PresenceStatus.INCONCLUSIVE, 0.95, ACTION_PASS),
    (PresenceStatus.INCONCLUSIVE, 0.3, ACTION_PASS),
    (None, 0.95, ACTION_PASS),
    (None, 0.5, ACTION_SOFTEN),
])
def test_recommendation_action(status, data_confidence, expected):
    assert recommendation_action(status, data_confidence) == expected


def test_recommendation_action_uses_calibrated_threshold():
    calibration = FootprintCalibration(gate_confidence_threshold=0.9)
    assert recommendation_action(PresenceStatus.MISSING, 0.8, calibration) == ACTION_SOFTEN


# --- Business Profile ---

@pytest.mark.parametrize("status", [PresenceStatus.PRESENT, PresenceStatus.PROBABLE])
def test_establish_profile_rewritten_when_active(make_snapshot, status):
    snapshot = make_snapshot(local_profile=(status, 0.7), data_confidence=0.4)
    assert sanitize_recommendation(snapshot, ESTABLISH_GBP) == \
        "Optimize the existing Google Business Profile for local visibility"


def test_establish_profile_passes_when_confidently_missing(make_snapshot):
    snapshot = make_snapshot(data_confidence=0.8)
    assert sanitize_recommendation(snapshot, ESTABLISH_GBP) == ESTABLISH_GBP


def test_establish_profile_softened_when_detection_weak(make_snapshot):
    snapshot = make_snapshot(data_confidence=0.4)
    assert sanitize_recommendation(snapshot, ESTABLISH_GBP) == SOFTENED_GBP


@pytest.mark.parametrize("local_profile", [(PresenceStatus.INCONCLUSIVE, 0.3), None])
def test_establish_profile_passes_when_unconfirmed_but_thorough(make_snapshot, local_profile):
    snapshot = make_snapshot(local_profile=local_profile, data_confidence=0.95)
    assert sanitize_recommendation(snapshot, ESTABLISH_GBP) == ESTABLISH_GBP


def test_establish_profile_softened_when_unchecked_and_weak(make_snapshot):
    snapshot = make_snapshot(local_profile=None, data_confidence=0.5)
    assert sanitize_recommendation(snapshot, ESTABLISH_GBP) == SOFTENED_GBP


def test_built_snapshot_without_profile_check_passes():
    snapshot = build_footprint_snapshot(_page(""), [], check_local_profile=False)
    assert snapshot.local_profile is None
    assert snapshot.data_confidence == 0.9
    assert sanitize_recommendation(snapshot, ESTABLISH_GBP) == ESTABLISH_GBP


def test_no_snapshot_softens():
    assert sanitize_recommendation(None, ESTABLISH_GBP) == SOFTENED_GBP


# --- Instagram ---

def test_instagram_start_rewritten_when_active(make_snapshot):
    snapshot = make_snapshot(socials={SocialNetwork.INSTAGRAM: (PresenceStatus.PRESENT, 0.85)})
    assert sanitize_recommendation(snapshot, START_IG) == "Strengthen the existing Instagram presence"


def test_instagram_start_passes_when_confidently_missing(make_snapshot):
    snapshot = make_snapshot(data_confidence=0.9)
    assert sanitize_recommendation(snapshot, START_IG) == START_IG


def test_instagram_start_softened_when_detection_weak(make_snapshot):
    snapshot = make_snapshot(data_confidence=0.5)
    assert sanitize_recommendation(snapshot, START_IG) == \
        "If not already active on Instagram, begin posting regularly"


def test_instagram_start_passes_when_body_link_is_inconclusive():
    snapshot = build_footprint_snapshot(_page('<a href="https://instagram.com/acme">Instagram</a>'), [])
    instagram = snapshot.channel(SocialNetwork.INSTAGRAM)
    assert instagram.status == PresenceStatus.INCONCLUSIVE
    assert instagram.confidence == 0.45
    assert snapshot.data_confidence == 0.9
    assert sanitize_recommendation(snapshot, START_IG) == START_IG


# --- Generic social ---

def test_social_start_names_active_networks(make_snapshot):
    snapshot = make_snapshot(socials={
        SocialNetwork.FACEBOOK: (PresenceStatus.PRESENT, 0.85),
        SocialNetwork.INSTAGRAM: (PresenceStatus.PROBABLE, 0.65),
    })
    assert sanitize_recommendation(snapshot, "Develop a social media strategy") == \
        "Strengthen the existing Instagram, Facebook presence and content strategy"


def test_social_start_names_at_most_three_networks(make_snapshot):
    snapshot = make_snapshot(socials={
        network: (PresenceStatus.PRESENT, 0.85)
        for network in (SocialNetwork.INSTAGRAM, SocialNetwork.FACEBOOK,
                        SocialNetwork.TIKTOK, SocialNetwork.YOUTUBE)
    })
    assert sanitize_recommendation(snapshot, "Build a social media presence") == \
        "Strengthen the existing Instagram, Facebook, TikTok presence"


def test_social_start_passes_when_only_inconclusive(make_snapshot):
    snapshot = make_snapshot(
        socials={SocialNetwork.FACEBOOK: (PresenceStatus.INCONCLUSIVE, 0.4)}, data_confidence=0.95
    )
    text = "Build a social media presence"
    assert sanitize_recommendation(snapshot, text) == text


def test_social_start_softened_when_detection_weak(make_snapshot):
    snapshot = make_snapshot(data_confidence=0.6)
    assert sanitize_recommendation(snapshot, "Build a social media presence") == \
        "If not already active on social media, build a social media presence"


def test_social_start_passes_when_confidently_missing(make_snapshot):
    snapshot = make_snapshot(data_confidence=0.9)
    assert sanitize_recommendation(snapshot, "Create social media profiles") == "Create social media profiles"


# --- Mixed and unrelated text ---

def test_categories_are_gated_independently(make_snapshot):
    snapshot = make_snapshot(local_profile=(PresenceStatus.PRESENT, 0.85), data_confidence=0.9)
    text = "Establish a Google Business Profile and begin posting regularly on Instagram"
    assert sanitize_recommendation(snapshot, text) == \
        "Optimize the existing Google Business Profile and begin posting regularly on Instagram"


@pytest.mark.parametrize("text", ["Improve page load speed", "", "   "])
def test_unrelated_text_passes_through(make_snapshot, text):
    for snapshot in (None, make_snapshot(data_confidence=0.3), make_snapshot(
            socials={SocialNetwork.X: (PresenceStatus.PRESENT, 0.9)},
            local_profile=(PresenceStatus.PRESENT, 0.9))):
        assert sanitize_recommendation(snapshot, text) == text


def test_gate_is_idempotent(make_snapshot):
    texts = [ESTABLISH_GBP, START_IG, "Build a social media presence", "Create social media profiles"]
    snapshots = [
        None,
        make_snapshot(data_confidence=0.4),
        make_snapshot(data_confidence=0.9),
        make_snapshot(
            socials={SocialNetwork.INSTAGRAM: (PresenceStatus.PRESENT, 0.85)},
            local_profile=(PresenceStatus.PROBABLE, 0.6),
        ),
    ]
    for snapshot in snapshots:
        for text in texts:
            once = sanitize_recommendation(snapshot, text)
            assert sanitize_recommendation(snapshot, once) == once, (text, once)


# --- Lists ---

def test_lists_keep_length_and_order(make_snapshot):
    snapshot = make_snapshot(local_profile=(PresenceStatus.PRESENT, 0.85))
    quick_wins = ["Fix title tags", ESTABLISH_GBP, "Add booking widget"]
    opportunities = [START_IG]
    result = sanitize_recommendations(snapshot, quick_wins, opportunities)
    assert result.quick_wins == [
        "Fix title tags",
        "Optimize the existing Google Business Profile for local visibility",
        "Add booking widget",
    ]
    assert len(result.top_opportunities) == 1


def test_lists_drop_only_none_items(make_snapshot):
    result = sanitize_recommendations(make_snapshot(), ["A", None, "B"], None)
    assert result.quick_wins == ["A", "B"]
    assert result.top_opportunities == []


# --- Quick summary ---

def test_quick_summary_applies_both_gates(make_snapshot):
    snapshot = make_snapshot(
        socials={SocialNetwork.INSTAGRAM: (PresenceStatus.PRESENT, 0.85)},
        local_profile=(PresenceStatus.PRESENT, 0.85),
    )
    text = ("Acme has no Google Business Profile and weak social media presence; "
            "establish a Google Business Profile now.")
    assert sanitize_quick_summary(snapshot, text) == (
        "Acme has an under-optimized Google Business Profile and under-leveraged social media presence; "
        "optimize the existing Google Business Profile now."
    )


def test_quick_summary_softens_when_missing_and_weak(make_snapshot):
    snapshot = make_snapshot(data_confidence=0.5)
    text = "Weak visibility. Establish a Google Business Profile for local visibility"
    assert sanitize_quick_summary(snapshot, text) == \
        "Weak visibility. Verify and, if needed, establish a Google Business Profile for local visibility"
