"""
Digital-footprint subscores and composite score.

All values are deterministic functions of the snapshot. Channel subscores
are status-banded rather than continuous:

    present       -> present_base      + span * confidence
    probable      -> probable_base     + span * confidence
    inconclusive  -> inconclusive_base + span * confidence
    missing       -> 0

Local profile uses 80/60/30 with a 20-point span; professional network
(LinkedIn) uses 75/50/25 with a 25-point span.

Social breadth rewards channel count: a stepped base per number of active
networks (0, 1, 2, 3, 4+ -> 0, 40, 55, 70, 85) plus up to 15 points for
their average confidence.

Composite: 35% local profile, 35% social breadth, 15% professional
network, 15% reputation. Reputation has no detector here and defaults to
a neutral 50.
"""

from typing import Optional

from .config import DEFAULT_CALIBRATION, FootprintCalibration, SubscoreBands
from .confidence import round_half_up
from .models import FootprintSnapshot, FootprintSubscores, PresenceStatus, SocialNetwork


# =============================================================================
# HELPERS
# =============================================================================

def _banded(status: PresenceStatus, confidence: float, bands: SubscoreBands) -> int:
    if status == PresenceStatus.PRESENT:
        base = bands.present
    elif status == PresenceStatus.PROBABLE:
        base = bands.probable
    elif status == PresenceStatus.INCONCLUSIVE:
        base = bands.inconclusive
    else:
        return 0
    return _clamp_score(base + bands.span * confidence)


def _clamp_score(value: float) -> int:
    return int(round_half_up(max(0.0, min(100.0, value))))


# =============================================================================
# SUBSCORES
# =============================================================================

def compute_local_profile_subscore(
    snapshot: Optional[FootprintSnapshot],
    calibration: Optional[FootprintCalibration] = None,
) -> int:
    """Business Profile strength, 0 when unchecked or missing."""
    calibration = calibration or DEFAULT_CALIBRATION
    if snapshot is None or snapshot.local_profile is None:
        return 0
    profile = snapshot.local_profile
    return _banded(profile.status, profile.confidence, calibration.local_profile_bands)


def compute_social_presence_subscore(
    snapshot: Optional[FootprintSnapshot],
    calibration: Optional[FootprintCalibration] = None,
) -> int:
    calibration = calibration or DEFAULT_CALIBRATION
    if snapshot is None:
        return 0
    active = [s for s in snapshot.socials if s.is_active]
    if not active:
        return 0

    steps = calibration.social_breadth_base_scores
    base = steps[min(len(active), len(steps) - 1)]
    avg_confidence = sum(s.confidence for s in active) / len(active)
    return _clamp_score(base + avg_confidence * calibration.social_breadth_confidence_bonus)


def compute_professional_network_subscore(
    snapshot: Optional[FootprintSnapshot],
    calibration: Optional[FootprintCalibration] = None,
) -> int:
    """LinkedIn strength."""
    calibration = calibration or DEFAULT_CALIBRATION
    if snapshot is None:
        return 0
    linkedin = snapshot.channel(SocialNetwork.LINKEDIN)
    if linkedin is None:
        return 0
    return _banded(linkedin.status, linkedin.confidence, calibration.professional_network_bands)


def compute_footprint_subscores(
    snapshot: Optional[FootprintSnapshot],
    reputation_score: Optional[float] = None,
    calibration: Optional[FootprintCalibration] = None,
) -> FootprintSubscores:
    """
    Build the four-part subscore bundle.

    Args:
        snapshot: Detection result (None scores every detected part 0)
        reputation_score: Externally measured reviews/reputation 0-100;
                          clamped, defaults to a neutral value
    """
    calibration = calibration or DEFAULT_CALIBRATION
    if reputation_score is None:
        reputation = calibration.default_reputation_score
    else:
        reputation = _clamp_score(reputation_score)

    return FootprintSubscores(
        local_profile=compute_local_profile_subscore(snapshot, calibration),
        social_presence=compute_social_presence_subscore(snapshot, calibration),
        professional_network=compute_professional_network_subscore(snapshot, calibration),
        reputation=reputation,
    )


def compute_footprint_score(
    subscores: FootprintSubscores,
    calibration: Optional[FootprintCalibration] = None,
) -> int:
    """Weighted blend of the four subscores, 0-100."""
    calibration = calibration or DEFAULT_CALIBRATION
    weights = calibration.composite_weights
    values = subscores.to_dict()
    total = sum(values[key] * weight for key, weight in weights.items())
    return _clamp_score(total)


# =============================================================================
# LEGACY COMBINED SCORE
# =============================================================================

LEGACY_LOCAL_PROFILE_POINTS = 40
LEGACY_INCONCLUSIVE_PROFILE_POINTS = 20
LEGACY_MAX_NETWORKS = 4
LEGACY_POINTS_PER_NETWORK = 60 / LEGACY_MAX_NETWORKS


def compute_social_local_presence_score(snapshot: Optional[FootprintSnapshot]) -> int:
    """
    Older single 0-100 score kept for reports that still display it.

    Business Profile is worth up to 40 points (20 when inconclusive); up
    to four active networks add 15 points each. Everything is scaled by
    confidence.
    """
    if snapshot is None:
        return 0

    score = 0.0
    profile = snapshot.local_profile
    if profile is not None:
        if profile.is_active:
            score += LEGACY_LOCAL_PROFILE_POINTS * profile.confidence
        elif profile.status == PresenceStatus.INCONCLUSIVE:
            score += LEGACY_INCONCLUSIVE_PROFILE_POINTS * profile.confidence

    active = [s for s in snapshot.socials if s.is_active]
    for social in active[:LEGACY_MAX_NETWORKS]:
        score += LEGACY_POINTS_PER_NETWORK * social.confidence

    return _clamp_score(score)
