"""
Narrative gate: keep generated narrative consistent with detection.

Text from upstream generators (one-liners, issue lists) sometimes asserts
that a channel is absent when the snapshot shows it present or probable.
Such claims are rewritten to "under-optimized" / "under-leveraged"
language. When the channel is missing or inconclusive, text passes
through unchanged: the gate only narrows contradictions, it never adds
claims.

Rewriting is case-insensitive, keeps the surrounding sentence intact and
is idempotent, since the same string may pass through several call sites.
"""

import logging
from typing import List, Optional

from .models import FootprintSnapshot, SanitizedNarrative
from .phrase_patterns import LOCAL_PROFILE_NARRATIVE_RULES, SOCIAL_NARRATIVE_RULES
from .rewrite import apply_rules
from .snapshot import has_local_profile_present, has_social_present

logger = logging.getLogger(__name__)


def rewrite_no_local_profile_text(text: str) -> str:
    """Rewrite "no / lacks / missing Google Business Profile" claims."""
    return apply_rules(text, LOCAL_PROFILE_NARRATIVE_RULES)


def rewrite_weak_social_text(text: str) -> str:
    """Rewrite "weak / no social media presence" claims."""
    return apply_rules(text, SOCIAL_NARRATIVE_RULES)


def gate_narrative_text(snapshot: Optional[FootprintSnapshot], text: str) -> str:
    """Apply whichever rewrite tables the snapshot licenses to one string."""
    if not isinstance(text, str):
        return text
    result = text
    if has_local_profile_present(snapshot):
        result = rewrite_no_local_profile_text(result)
    if has_social_present(snapshot):
        result = rewrite_weak_social_text(result)
    if result != text:
        logger.debug("Narrative rewritten: %r -> %r", text, result)
    return result


def sanitize_narrative(
    snapshot: Optional[FootprintSnapshot],
    one_liner: str,
    issues: Optional[List[str]] = None,
) -> SanitizedNarrative:
    """
    Sanitize a dimension narrative against a snapshot.

    Args:
        snapshot: Detection result (None means nothing is known; text
                  then passes through)
        one_liner: Summary sentence
        issues: Issue strings; order and length are preserved

    Returns:
        SanitizedNarrative
    """
    return SanitizedNarrative(
        one_liner=gate_narrative_text(snapshot, one_liner),
        issues=[gate_narrative_text(snapshot, issue) for issue in (issues or [])],
    )
