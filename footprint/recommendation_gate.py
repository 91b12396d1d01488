"""
Recommendation gate: presence-aware policy for "establish X" actions.

For each channel category (Business Profile, Instagram, generic social)
an "establish / start X" recommendation gets one of three treatments:

    X present or probable                   -> REWRITE  ("optimize the existing X")
    X missing or never checked,
    data_confidence < 0.7                   -> SOFTEN   ("verify and, if needed, ...")
    anything else (confident missing,
    inconclusive)                           -> PASS     (left unchanged)

A None snapshot has data_confidence 0, so its recommendations are softened.

Text that matches no category passes through unchanged. Lists keep their
length and order; only None entries are dropped.
"""

import logging
from typing import List, Optional

from .config import DEFAULT_CALIBRATION, FootprintCalibration
from .models import FootprintSnapshot, PresenceStatus, SanitizedRecommendations, SocialNetwork
from .narrative_gate import gate_narrative_text
from .phrase_patterns import RECOMMENDATION_CATEGORIES
from .rewrite import apply_rules

logger = logging.getLogger(__name__)

ACTION_REWRITE = "rewrite"
ACTION_SOFTEN = "soften"
ACTION_PASS = "pass"

# Networks named in "strengthen the existing ... presence"
MAX_NAMED_NETWORKS = 3


# =============================================================================
# POLICY
# =============================================================================

def recommendation_action(
    status: Optional[PresenceStatus],
    data_confidence: float,
    calibration: Optional[FootprintCalibration] = None,
) -> str:
    """
    Decide how an "establish X" recommendation is treated.

    Args:
        status: Status of X, or None when X was never checked
        data_confidence: Snapshot-level detection thoroughness
    """
    calibration = calibration or DEFAULT_CALIBRATION
    if status is not None and status.is_active:
        return ACTION_REWRITE
    if status is None or status == PresenceStatus.MISSING:
        if data_confidence < calibration.gate_confidence_threshold:
            return ACTION_SOFTEN
    return ACTION_PASS


def _channel_status(snapshot: Optional[FootprintSnapshot], channel: str) -> Optional[PresenceStatus]:
    if snapshot is None:
        return None
    if channel == "local_profile":
        return snapshot.local_profile.status if snapshot.local_profile else None
    if channel == "instagram":
        presence = snapshot.channel(SocialNetwork.INSTAGRAM)
        return presence.status if presence else None
    # generic social: the strongest status across networks
    if not snapshot.socials:
        return None
    return max((s.status for s in snapshot.socials), key=lambda status: status.rank)


def _network_list(snapshot: Optional[FootprintSnapshot]) -> str:
    if snapshot is None:
        return "social media"
    names = [n.display_name for n in snapshot.active_networks()[:MAX_NAMED_NETWORKS]]
    return ", ".join(names) if names else "social media"


# =============================================================================
# GATE
# =============================================================================

def sanitize_recommendation(
    snapshot: Optional[FootprintSnapshot],
    text: str,
    calibration: Optional[FootprintCalibration] = None,
) -> str:
    """
    Gate a single recommendation string.

    Categories run in order on the same string, so a recommendation that
    mentions both a Business Profile and Instagram is handled for each.
    Non-string input is returned unchanged.
    """
    if not isinstance(text, str) or not text.strip():
        return text

    data_confidence = snapshot.data_confidence if snapshot is not None else 0.0
    networks = _network_list(snapshot)

    result = text
    for category in RECOMMENDATION_CATEGORIES:
        if not category.is_triggered(result):
            continue
        action = recommendation_action(
            _channel_status(snapshot, category.channel), data_confidence, calibration
        )
        if action == ACTION_REWRITE:
            updated = apply_rules(result, category.rewrites, networks=networks)
        elif action == ACTION_SOFTEN:
            updated = apply_rules(result, category.soften)
        else:
            continue
        if updated != result:
            logger.debug("Recommendation %s (%s): %r -> %r", action, category.name, result, updated)
        result = updated
    return result


def _sanitize_list(
    snapshot: Optional[FootprintSnapshot],
    items: Optional[List[str]],
    calibration: Optional[FootprintCalibration],
) -> List[str]:
    sanitized = []
    for index, item in enumerate(items or []):
        if item is None:
            logger.debug("Dropping empty recommendation at position %d", index)
            continue
        sanitized.append(sanitize_recommendation(snapshot, item, calibration))
    return sanitized


def sanitize_recommendations(
    snapshot: Optional[FootprintSnapshot],
    quick_wins: Optional[List[str]],
    top_opportunities: Optional[List[str]],
    calibration: Optional[FootprintCalibration] = None,
) -> SanitizedRecommendations:
    """Gate both recommendation lists, preserving length and order."""
    return SanitizedRecommendations(
        quick_wins=_sanitize_list(snapshot, quick_wins, calibration),
        top_opportunities=_sanitize_list(snapshot, top_opportunities, calibration),
    )


def sanitize_quick_summary(
    snapshot: Optional[FootprintSnapshot],
    text: str,
    calibration: Optional[FootprintCalibration] = None,
) -> str:
    """Summary strings mix actions and assessments: apply both gates."""
    result = sanitize_recommendation(snapshot, text, calibration)
    return gate_narrative_text(snapshot, result)
