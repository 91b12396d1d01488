"""
Footprint snapshot builder.

One call per analysis run:
    HTML + structured data -> extract -> merge -> score -> classify -> snapshot

The snapshot always carries all six networks (missing ones included) and
an overall data_confidence describing how thorough the pass was:

    data_confidence = base + coverage_weight * coverage + quality_weight * quality

    coverage = checked networks / known networks (1.0 here)
    quality  = 0.5 HTML only, 0.8 with structured data,
               forced to 0.3 when the HTML is shorter than 1000 chars

Also hosts the read-only presence helpers and the one-line prompt summary
consumed by the gates and by callers.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence

from .aggregate import merge_observations
from .config import DEFAULT_CALIBRATION, FootprintCalibration
from .confidence import build_channel_presence, build_local_profile_presence, round_half_up
from .extract import detect_from_html, detect_from_structured_data, extract_json_ld_schemas
from .models import (
    ALL_NETWORKS,
    ExtractionPass,
    FootprintSnapshot,
    PresenceStatus,
    SocialNetwork,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CONFIDENCE
# =============================================================================

def calculate_data_confidence(
    html: Optional[str],
    structured_data: Optional[Sequence[Any]],
    checked_networks: Optional[int] = None,
    calibration: Optional[FootprintCalibration] = None,
) -> float:
    """
    How thorough the detection pass was, in [0, 1], rounded to 2 decimals.

    Args:
        html: The HTML that was scanned (None/empty counts as short)
        structured_data: Structured-data objects that were scanned
        checked_networks: Networks actually evaluated; defaults to all
        calibration: Overrides for base / weights / quality levels
    """
    calibration = calibration or DEFAULT_CALIBRATION

    if checked_networks is None:
        checked_networks = len(ALL_NETWORKS)
    coverage = max(0, min(checked_networks, len(ALL_NETWORKS))) / len(ALL_NETWORKS)

    quality = calibration.quality_html_only
    if structured_data:
        quality = calibration.quality_with_structured_data
    if len(html or "") < calibration.min_html_length:
        # Very short HTML usually means a failed fetch upstream
        quality = calibration.quality_short_html

    value = (
        calibration.data_confidence_base
        + calibration.data_confidence_coverage_weight * coverage
        + calibration.data_confidence_quality_weight * quality
    )
    value = max(0.0, min(1.0, value))
    return round_half_up(value, 2)


# =============================================================================
# BUILDER
# =============================================================================

def build_footprint_snapshot(
    html: Optional[str],
    structured_data: Optional[Sequence[Any]] = None,
    base_url: Optional[str] = None,
    extra_observations: Optional[Iterable[ExtractionPass]] = None,
    check_local_profile: bool = True,
    calibration: Optional[FootprintCalibration] = None,
) -> FootprintSnapshot:
    """
    Build the immutable detection result for one page.

    Args:
        html: Raw HTML of the page (may be empty)
        structured_data: Parsed schema.org objects. When None, JSON-LD
                         blocks embedded in the HTML are used instead.
        base_url: Page URL for resolving host-relative links
        extra_observations: Signals found outside the page (search
                            fallback, manual confirmation), merged after
                            the HTML and structured-data passes
        check_local_profile: False when no Business Profile check should
                             be reported (local_profile is then None)
        calibration: Weight/threshold overrides

    Returns:
        FootprintSnapshot
    """
    calibration = calibration or DEFAULT_CALIBRATION
    html = html if isinstance(html, str) else ""

    if structured_data is None:
        structured_data = extract_json_ld_schemas(html)
    structured_data = list(structured_data)

    html_pass = detect_from_html(html, base_url)
    schema_pass = detect_from_structured_data(structured_data)
    merged = merge_observations(html_pass, schema_pass, *(extra_observations or ()))

    socials = tuple(
        build_channel_presence(network, merged.socials[network], calibration)
        for network in ALL_NETWORKS
    )
    local_profile = None
    if check_local_profile:
        local_profile = build_local_profile_presence(merged.local_profile, calibration)

    data_confidence = calculate_data_confidence(
        html, structured_data, len(socials), calibration
    )

    snapshot = FootprintSnapshot(
        socials=socials,
        local_profile=local_profile,
        data_confidence=data_confidence,
    )
    logger.info(
        "Footprint snapshot: %d active networks, local profile %s, data confidence %.2f",
        len(snapshot.active_networks()),
        local_profile.status.value if local_profile else "unchecked",
        data_confidence,
    )
    return snapshot


# =============================================================================
# PRESENCE HELPERS
# =============================================================================

def has_local_profile_present(snapshot: Optional[FootprintSnapshot]) -> bool:
    """True if the Business Profile is present or probable."""
    if snapshot is None or snapshot.local_profile is None:
        return False
    return snapshot.local_profile.is_active


def has_instagram_present(snapshot: Optional[FootprintSnapshot]) -> bool:
    if snapshot is None:
        return False
    instagram = snapshot.channel(SocialNetwork.INSTAGRAM)
    return bool(instagram and instagram.is_active)


def has_social_present(snapshot: Optional[FootprintSnapshot]) -> bool:
    """True if any social network is present or probable."""
    if snapshot is None:
        return False
    return any(s.is_active for s in snapshot.socials)


def get_active_social_networks(snapshot: Optional[FootprintSnapshot]) -> List[SocialNetwork]:
    if snapshot is None:
        return []
    return snapshot.active_networks()


def needs_verification_caveat(
    snapshot: Optional[FootprintSnapshot],
    calibration: Optional[FootprintCalibration] = None,
) -> bool:
    """
    True when detection was too thin to state presence facts plainly.

    Callers attach a "our view of social and local profiles is limited"
    style note to reports when this is set.
    """
    calibration = calibration or DEFAULT_CALIBRATION
    if snapshot is None:
        return True
    return snapshot.data_confidence < calibration.caveat_confidence_threshold


# =============================================================================
# SUMMARY
# =============================================================================

def _percent(confidence: float) -> int:
    return int(round_half_up(confidence * 100))


def build_footprint_summary(snapshot: Optional[FootprintSnapshot]) -> str:
    """
    One-line summary of every non-missing channel.

    Example: "GBP: present (80%); instagram: present @acme (85%)"
    """
    parts = []
    if snapshot is not None:
        profile = snapshot.local_profile
        if profile is not None and profile.status != PresenceStatus.MISSING:
            parts.append(f"GBP: {profile.status.value} ({_percent(profile.confidence)}%)")

        for social in snapshot.socials:
            if social.status == PresenceStatus.MISSING:
                continue
            handle = f" @{social.handle}" if social.handle else ""
            parts.append(
                f"{social.network.value}: {social.status.value}{handle} ({_percent(social.confidence)}%)"
            )

    if not parts:
        return "No social profiles or GBP detected"
    return "; ".join(parts)
