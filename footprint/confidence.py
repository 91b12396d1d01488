"""
Confidence scoring and status classification.

confidence = min(1.0, sum of per-source weights for every distinct source)
status     = threshold-table image of confidence (per channel kind)

Corroborating sources accumulate instead of taking a maximum. Status is
never set independently of confidence: the only way to obtain a
ChannelPresence / LocalProfilePresence in the detection path is through
the builders below.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional

from .aggregate import AggregatedSignal
from .config import DEFAULT_CALIBRATION, FootprintCalibration, StatusThresholds
from .models import (
    ChannelKind,
    ChannelPresence,
    DetectionSource,
    LocalProfilePresence,
    PresenceStatus,
    SocialNetwork,
)


# =============================================================================
# HELPERS
# =============================================================================

def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with ties away from zero (0.5 -> 1), unlike built-in round()."""
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return float(rounded)


def thresholds_for(kind: ChannelKind, calibration: Optional[FootprintCalibration] = None) -> StatusThresholds:
    calibration = calibration or DEFAULT_CALIBRATION
    if kind == ChannelKind.LOCAL_PROFILE:
        return calibration.local_profile_thresholds
    return calibration.social_thresholds


def weights_for(kind: ChannelKind, calibration: Optional[FootprintCalibration] = None) -> Mapping[DetectionSource, float]:
    calibration = calibration or DEFAULT_CALIBRATION
    if kind == ChannelKind.LOCAL_PROFILE:
        return calibration.local_profile_weights
    return calibration.social_weights


# =============================================================================
# SCORING
# =============================================================================

def score_sources(sources: Iterable[DetectionSource], weights: Mapping[DetectionSource, float]) -> float:
    """
    Sum the weights of each distinct source, capped at 1.0.

    Unknown sources contribute nothing. An empty source set scores 0.
    """
    total = 0.0
    for source in dict.fromkeys(sources):
        total += weights.get(source, 0.0)
    return round_half_up(min(1.0, total), 4)


def classify_status(confidence: float, thresholds: StatusThresholds) -> PresenceStatus:
    """Map a confidence value onto the four-level status table."""
    if confidence >= thresholds.present:
        return PresenceStatus.PRESENT
    if confidence >= thresholds.probable:
        return PresenceStatus.PROBABLE
    if confidence >= thresholds.inconclusive:
        return PresenceStatus.INCONCLUSIVE
    return PresenceStatus.MISSING


# =============================================================================
# BUILDERS
# =============================================================================

def build_channel_presence(
    network: SocialNetwork,
    signal: Optional[AggregatedSignal],
    calibration: Optional[FootprintCalibration] = None,
) -> ChannelPresence:
    """Score and classify one social network's merged evidence."""
    signal = signal or AggregatedSignal()
    confidence = score_sources(signal.sources, weights_for(ChannelKind.SOCIAL, calibration))
    return ChannelPresence(
        network=network,
        detection_sources=tuple(signal.sources),
        confidence=confidence,
        status=classify_status(confidence, thresholds_for(ChannelKind.SOCIAL, calibration)),
        url=signal.url,
        handle=signal.handle,
    )


def build_local_profile_presence(
    signal: Optional[AggregatedSignal],
    calibration: Optional[FootprintCalibration] = None,
) -> LocalProfilePresence:
    """Score and classify the local business profile's merged evidence."""
    signal = signal or AggregatedSignal()
    confidence = score_sources(signal.sources, weights_for(ChannelKind.LOCAL_PROFILE, calibration))
    return LocalProfilePresence(
        detection_sources=tuple(signal.sources),
        confidence=confidence,
        status=classify_status(confidence, thresholds_for(ChannelKind.LOCAL_PROFILE, calibration)),
        url=signal.url,
    )
