"""
Footprint Gating - Social & Local-Presence Detection Package

This package fuses weak, noisy page signals (HTML links, structured data)
into a calibrated presence judgment per channel (Google Business Profile,
Instagram, Facebook, TikTok, X, LinkedIn, YouTube), then uses that
judgment to gate generated narrative and recommendations so they never
contradict what was detected.

Architecture:
    models: Enums and immutable result objects (snapshot, subscores, work items)
    config: Calibration (weights, thresholds, bands) with JSON/.env overrides
    urls: URL normalization and per-network / Business Profile pattern tables
    extract: HTML pass (anchor position) and structured-data pass (schema.org)
    aggregate: Merge passes per channel (first URL wins, sources union)
    confidence: Source-weight scoring and status classification
    snapshot: Snapshot builder, data confidence, summary and presence helpers
    rewrite: Declarative regex rewrite engine
    phrase_patterns: Versioned trigger-phrase tables
    narrative_gate: Rewrite absence claims that contradict detection
    recommendation_gate: Rewrite / soften / pass "establish X" recommendations
    subscores: Status-banded subscores and composite footprint score
    work_items: Prioritized channel suggestions with documented skips
    validation: Snapshot sanity checks (warnings only)

Data flows one way:
    HTML + structured data -> extract -> aggregate -> confidence -> snapshot
    snapshot -> {narrative_gate, recommendation_gate, subscores, work_items}
"""

from .models import (
    DetectionSource,
    PresenceStatus,
    SocialNetwork,
    ChannelKind,
    ALL_NETWORKS,
    Observation,
    ExtractionPass,
    ChannelPresence,
    LocalProfilePresence,
    FootprintSnapshot,
    FootprintSubscores,
    SanitizedNarrative,
    SanitizedRecommendations,
    WorkItem,
    SkipRecord,
    WorkItemPlan,
)
from .config import (
    FootprintCalibration,
    StatusThresholds,
    SubscoreBands,
    CalibrationError,
    DEFAULT_CALIBRATION,
    load_calibration,
)
from .urls import normalize_url, match_social_url, match_social_urls, is_local_profile_url
from .extract import (
    detect_from_html,
    detect_from_structured_data,
    extract_json_ld_schemas,
    classify_link_location,
)
from .aggregate import merge_observations, AggregatedSignal, AggregatedFootprint
from .confidence import score_sources, classify_status, build_channel_presence, build_local_profile_presence
from .snapshot import (
    build_footprint_snapshot,
    calculate_data_confidence,
    build_footprint_summary,
    has_local_profile_present,
    has_instagram_present,
    has_social_present,
    get_active_social_networks,
    needs_verification_caveat,
)
from .narrative_gate import sanitize_narrative, rewrite_no_local_profile_text, rewrite_weak_social_text
from .recommendation_gate import (
    sanitize_recommendation,
    sanitize_recommendations,
    sanitize_quick_summary,
    recommendation_action,
)
from .phrase_patterns import PHRASE_PATTERNS_VERSION
from .subscores import (
    compute_local_profile_subscore,
    compute_social_presence_subscore,
    compute_professional_network_subscore,
    compute_footprint_subscores,
    compute_footprint_score,
    compute_social_local_presence_score,
)
from .work_items import derive_work_items
from .validation import check_snapshot

__all__ = [
    # models
    "DetectionSource",
    "PresenceStatus",
    "SocialNetwork",
    "ChannelKind",
    "ALL_NETWORKS",
    "Observation",
    "ExtractionPass",
    "ChannelPresence",
    "LocalProfilePresence",
    "FootprintSnapshot",
    "FootprintSubscores",
    "SanitizedNarrative",
    "SanitizedRecommendations",
    "WorkItem",
    "SkipRecord",
    "WorkItemPlan",
    # config
    "FootprintCalibration",
    "StatusThresholds",
    "SubscoreBands",
    "CalibrationError",
    "DEFAULT_CALIBRATION",
    "load_calibration",
    # urls
    "normalize_url",
    "match_social_url",
    "match_social_urls",
    "is_local_profile_url",
    # extract
    "detect_from_html",
    "detect_from_structured_data",
    "extract_json_ld_schemas",
    "classify_link_location",
    # aggregate
    "merge_observations",
    "AggregatedSignal",
    "AggregatedFootprint",
    # confidence
    "score_sources",
    "classify_status",
    "build_channel_presence",
    "build_local_profile_presence",
    # snapshot
    "build_footprint_snapshot",
    "calculate_data_confidence",
    "build_footprint_summary",
    "has_local_profile_present",
    "has_instagram_present",
    "has_social_present",
    "get_active_social_networks",
    "needs_verification_caveat",
    # gates
    "sanitize_narrative",
    "rewrite_no_local_profile_text",
    "rewrite_weak_social_text",
    "sanitize_recommendation",
    "sanitize_recommendations",
    "sanitize_quick_summary",
    "recommendation_action",
    "PHRASE_PATTERNS_VERSION",
    # subscores
    "compute_local_profile_subscore",
    "compute_social_presence_subscore",
    "compute_professional_network_subscore",
    "compute_footprint_subscores",
    "compute_footprint_score",
    "compute_social_local_presence_score",
    # work items
    "derive_work_items",
    # validation
    "check_snapshot",
]
