"""
Sanity checks for footprint snapshots.

Snapshots built by build_footprint_snapshot are consistent by
construction; these checks exist for snapshots assembled elsewhere
(deserialized, hand-built in fixtures, produced by an older calibration).
Surfaces odd states as warnings, never raises.
"""

import logging
from typing import List, Optional

from .config import DEFAULT_CALIBRATION, FootprintCalibration
from .confidence import classify_status
from .models import ALL_NETWORKS, FootprintSnapshot

logger = logging.getLogger(__name__)


def check_snapshot(
    snapshot: FootprintSnapshot,
    calibration: Optional[FootprintCalibration] = None,
) -> List[str]:
    """
    Check a snapshot for inconsistent states.
    Returns list of warning strings (empty if none).
    """
    calibration = calibration or DEFAULT_CALIBRATION
    warnings = []

    if not 0.0 <= snapshot.data_confidence <= 1.0:
        warnings.append(f"data_confidence={snapshot.data_confidence} outside [0, 1]")

    seen = [s.network for s in snapshot.socials]
    for network in ALL_NETWORKS:
        count = seen.count(network)
        if count == 0:
            warnings.append(f"{network.value}: missing from snapshot (every network must be represented)")
        elif count > 1:
            warnings.append(f"{network.value}: appears {count} times")

    for social in snapshot.socials:
        label = social.network.value
        if not 0.0 <= social.confidence <= 1.0:
            warnings.append(f"{label}: confidence={social.confidence} outside [0, 1]")
        expected = classify_status(social.confidence, calibration.social_thresholds)
        if social.status != expected:
            warnings.append(
                f"{label}: status={social.status.value} but confidence={social.confidence} "
                f"implies {expected.value}"
            )
        if social.detection_sources and social.confidence == 0:
            warnings.append(f"{label}: has detection sources but confidence=0")

    profile = snapshot.local_profile
    if profile is not None:
        if not 0.0 <= profile.confidence <= 1.0:
            warnings.append(f"gbp: confidence={profile.confidence} outside [0, 1]")
        expected = classify_status(profile.confidence, calibration.local_profile_thresholds)
        if profile.status != expected:
            warnings.append(
                f"gbp: status={profile.status.value} but confidence={profile.confidence} "
                f"implies {expected.value}"
            )
        if profile.detection_sources and profile.confidence == 0:
            warnings.append("gbp: has detection sources but confidence=0")

    for warning in warnings:
        logger.warning("Snapshot check: %s", warning)
    return warnings
