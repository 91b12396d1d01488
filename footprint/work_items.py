"""
Work-item deriver: snapshot -> prioritized channel action suggestions.

Decision table (per channel, Business Profile first, then each network):

    present / probable                      -> "optimize"
    missing, data confidence >= 0.7         -> "set_up"
    missing, data confidence 0.5-0.7        -> "verify_then_set_up"
    missing below 0.5, or inconclusive      -> skip record with reason
    Business Profile never checked          -> skip record with reason

Every channel yields either a suggestion or a skip record, never nothing.
"""

import logging
from typing import List, Optional, Tuple

from .config import DEFAULT_CALIBRATION, FootprintCalibration
from .confidence import round_half_up
from .models import (
    ALL_NETWORKS,
    LOCAL_PROFILE_DISPLAY_NAME,
    LOCAL_PROFILE_KEY,
    FootprintSnapshot,
    PresenceStatus,
    SkipRecord,
    SocialNetwork,
    WorkItem,
    WorkItemPlan,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

ACTION_OPTIMIZE = "optimize"
ACTION_SET_UP = "set_up"
ACTION_VERIFY_THEN_SET_UP = "verify_then_set_up"

PRIORITY_LEVELS = ("high", "medium", "low")

BASE_PRIORITY = {
    LOCAL_PROFILE_KEY: "medium",
    SocialNetwork.INSTAGRAM.value: "medium",
}
DEFAULT_PRIORITY = "low"


# =============================================================================
# HELPERS
# =============================================================================

def _shift_priority(priority: str, steps: int) -> str:
    """Negative steps raise priority, positive lower it; clamped to the scale."""
    index = PRIORITY_LEVELS.index(priority) + steps
    index = max(0, min(len(PRIORITY_LEVELS) - 1, index))
    return PRIORITY_LEVELS[index]


def _priority_for(channel: str, action: str, is_local_business: bool) -> str:
    priority = BASE_PRIORITY.get(channel, DEFAULT_PRIORITY)
    if is_local_business and (action == ACTION_OPTIMIZE or channel == LOCAL_PROFILE_KEY):
        priority = _shift_priority(priority, -1)
    if action == ACTION_VERIFY_THEN_SET_UP:
        priority = _shift_priority(priority, 1)
    return priority


def _pct(value: float) -> int:
    return int(round_half_up(value * 100))


# Initials read with a vowel sound ("an X presence")
_VOWEL_SOUND_INITIALS = "AEIOUX"


def _title(action: str, label: str) -> str:
    article = "an" if label[0] in _VOWEL_SOUND_INITIALS else "a"
    if action == ACTION_OPTIMIZE:
        return f"Optimize the existing {label}"
    if action == ACTION_SET_UP:
        return f"Set up {article} {label}"
    return f"Verify whether {article} {label} exists, then set one up if needed"


def _decide(
    name: str,
    status: PresenceStatus,
    confidence: float,
    data_confidence: float,
    calibration: FootprintCalibration,
) -> Tuple[Optional[str], str]:
    """Return (action or None, rationale / skip reason)."""
    if status.is_active:
        return ACTION_OPTIMIZE, (
            f"{name} detected ({status.value}, {_pct(confidence)}% confidence); "
            "focus on completeness and activity rather than setup"
        )
    if status == PresenceStatus.INCONCLUSIVE:
        return None, (
            f"{name} signals were inconclusive ({_pct(confidence)}% confidence); "
            "not enough evidence to recommend setting it up or optimizing it"
        )
    if data_confidence >= calibration.work_item_high_confidence:
        return ACTION_SET_UP, (
            f"No {name} found and detection was thorough ({_pct(data_confidence)}% data confidence)"
        )
    if data_confidence >= calibration.work_item_medium_confidence:
        return ACTION_VERIFY_THEN_SET_UP, (
            f"No {name} found, but detection was only partly thorough "
            f"({_pct(data_confidence)}% data confidence); confirm before creating a new one"
        )
    return None, (
        f"No {name} found, but detection confidence ({_pct(data_confidence)}%) "
        "is too low to recommend setting it up"
    )


# =============================================================================
# DERIVER
# =============================================================================

def derive_work_items(
    snapshot: Optional[FootprintSnapshot],
    is_local_business: bool = False,
    calibration: Optional[FootprintCalibration] = None,
) -> WorkItemPlan:
    """
    Turn a snapshot into suggestions plus documented skips.

    Args:
        snapshot: Detection result; None skips every channel
        is_local_business: Raises priority of local-profile and optimize items

    Returns:
        WorkItemPlan with suggestions sorted by priority (stable within a
        level, Business Profile first) and one skip record per channel
        that produced no suggestion
    """
    calibration = calibration or DEFAULT_CALIBRATION
    suggestions: List[WorkItem] = []
    skipped: List[SkipRecord] = []

    if snapshot is None:
        for channel in [LOCAL_PROFILE_KEY] + [n.value for n in ALL_NETWORKS]:
            skipped.append(SkipRecord(channel=channel, status=None, reason="No detection data available"))
        logger.debug("No snapshot supplied; skipped all %d channels", len(skipped))
        return WorkItemPlan(suggestions=suggestions, skipped=skipped)

    # (channel key, name used in rationale, label used in titles, status, confidence)
    channels = []
    if snapshot.local_profile is None:
        skipped.append(SkipRecord(
            channel=LOCAL_PROFILE_KEY,
            status=None,
            reason=f"No {LOCAL_PROFILE_DISPLAY_NAME} check was performed",
        ))
    else:
        channels.append((
            LOCAL_PROFILE_KEY, LOCAL_PROFILE_DISPLAY_NAME, LOCAL_PROFILE_DISPLAY_NAME,
            snapshot.local_profile.status, snapshot.local_profile.confidence,
        ))
    for presence in snapshot.socials:
        name = presence.network.display_name
        channels.append((presence.network.value, name, f"{name} presence",
                         presence.status, presence.confidence))

    for channel, name, label, status, confidence in channels:
        action, rationale = _decide(name, status, confidence, snapshot.data_confidence, calibration)
        if action is None:
            logger.debug("Work item skipped for %s: %s", channel, rationale)
            skipped.append(SkipRecord(channel=channel, status=status.value, reason=rationale))
            continue
        suggestions.append(WorkItem(
            channel=channel,
            action=action,
            title=_title(action, label),
            priority=_priority_for(channel, action, is_local_business),
            rationale=rationale,
            confidence=confidence,
        ))

    suggestions.sort(key=lambda item: PRIORITY_LEVELS.index(item.priority))
    return WorkItemPlan(suggestions=suggestions, skipped=skipped)
