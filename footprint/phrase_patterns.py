"""
Trigger-phrase tables for the narrative and recommendation gates.

This is a maintained data asset: new phrasings from upstream text
generators are added here, each with a test case in
tests/test_phrase_patterns.py. Bump PHRASE_PATTERNS_VERSION on any change
so downstream reports can record which table produced a rewrite.

Rules inside a table run in order. Longer phrasings come before the
shorter ones they contain ("lack of" before "lack"). No template output
may match any pattern of its own table, so re-running a table is a no-op.
"""

import re
from dataclasses import dataclass
from typing import Pattern, Tuple

from .rewrite import RewriteRule, rule

PHRASE_PATTERNS_VERSION = "1.4"

# Named group "profile" keeps the caller's own wording ("GBP" stays "GBP")
LOCAL_PROFILE_TERM = r'(?P<profile>google\s+business\s+profile|google\s+my\s+business|gbp)\b'
_ARTICLE = r'(?:(?:a|an)\s+)?'


# =============================================================================
# NARRATIVE: absence claims -> under-optimized / under-leveraged
# =============================================================================

LOCAL_PROFILE_NARRATIVE_RULES: Tuple[RewriteRule, ...] = (
    rule("absence_of_profile", r'\babsence\s+of\s+' + _ARTICLE + LOCAL_PROFILE_TERM,
         "under-optimized {profile}"),
    rule("lack_of_profile", r'\black\s+of\s+' + _ARTICLE + LOCAL_PROFILE_TERM,
         "under-optimized {profile}"),
    rule("lacks_profile", r'\blacks\s+' + _ARTICLE + LOCAL_PROFILE_TERM,
         "has an under-optimized {profile}"),
    rule("lack_profile", r'\black\s+' + _ARTICLE + LOCAL_PROFILE_TERM,
         "have an under-optimized {profile}"),
    rule("does_not_have_profile",
         r"\b(?:does\s+not|doesn't|doesn’t)\s+have\s+" + _ARTICLE + LOCAL_PROFILE_TERM,
         "has an under-optimized {profile}"),
    rule("without_profile", r'\bwithout\s+' + _ARTICLE + LOCAL_PROFILE_TERM,
         "with an under-optimized {profile}"),
    rule("is_missing_profile", r'\bis\s+missing\s+' + _ARTICLE + LOCAL_PROFILE_TERM,
         "has an under-optimized {profile}"),
    rule("missing_profile", r'\bmissing\s+' + _ARTICLE + LOCAL_PROFILE_TERM,
         "under-optimized {profile}"),
    rule("no_profile", r'\bno\s+' + LOCAL_PROFILE_TERM,
         "an under-optimized {profile}"),
)

SOCIAL_NARRATIVE_RULES: Tuple[RewriteRule, ...] = (
    rule("absence_of_social", r'\b(?:absence|lack)\s+of\s+' + _ARTICLE + r'social\s+media\b',
         "under-leveraged social media"),
    rule("lacks_social", r'\blacks\s+' + _ARTICLE + r'social\s+media\s+presence\b',
         "has an under-leveraged social media presence"),
    rule("lack_social", r'\black\s+' + _ARTICLE + r'social\s+media\s+presence\b',
         "have an under-leveraged social media presence"),
    rule("weak_social_media", r'\b(?:weak|no|limited)\s+social\s+media\s+presence\b',
         "under-leveraged social media presence"),
    rule("weak_social", r'\b(?:weak|no|limited)\s+social\s+presence\b',
         "under-leveraged social presence"),
)


# =============================================================================
# RECOMMENDATIONS: "establish / start X" per channel category
# =============================================================================

@dataclass(frozen=True)
class RecommendationCategory:
    """
    One channel category of "establish X" recommendations.

    channel:  "local_profile", "instagram" or "social"
    triggers: any match classifies the text into this category
    rewrites: applied when the channel is present/probable
    soften:   applied in order when absence cannot be asserted confidently
    """
    name: str
    channel: str
    triggers: Pattern
    rewrites: Tuple[RewriteRule, ...]
    soften: Tuple[RewriteRule, ...]

    def is_triggered(self, text: str) -> bool:
        return isinstance(text, str) and bool(self.triggers.search(text))


def _category(name: str, channel: str, rewrites: Tuple[RewriteRule, ...],
              soften_guard: str, soften_template: str,
              narrowed: Tuple[Tuple[str, str], ...] = ()) -> RecommendationCategory:
    """
    narrowed: (name, pattern) soften rules tried before the generic one;
    each pattern's "phrase" group is the part kept after the prefix.
    """
    alternation = "|".join(f"(?:{r.pattern.pattern})" for r in rewrites)
    # guard lookbehind keeps already-softened text from being softened again
    guard = f"(?<!{soften_guard})"
    soften = tuple(
        rule(f"{rule_name}_soften", guard + pattern, soften_template)
        for rule_name, pattern in narrowed
    )
    soften += (rule(f"{name}_soften", f"{guard}(?:{alternation})", soften_template),)
    return RecommendationCategory(
        name=name,
        channel=channel,
        triggers=re.compile(alternation, re.IGNORECASE),
        rewrites=rewrites,
        soften=soften,
    )


LOCAL_PROFILE_RECOMMENDATION_RULES: Tuple[RewriteRule, ...] = (
    rule("establish_profile",
         r'\b(?:establish|set\s+up|create|claim|start)(?:\s+(?:and\s+)?optimize)?'
         r'(?:\s+(?:a|an|the|your))?\s+' + LOCAL_PROFILE_TERM,
         "optimize the existing {profile}"),
)

INSTAGRAM_RECOMMENDATION_RULES: Tuple[RewriteRule, ...] = (
    rule("begin_posting_instagram",
         r'\bbegin\s+posting\s+(?:regularly\s+)?on\s+instagram\b',
         "strengthen the existing Instagram presence"),
    rule("start_instagram_presence",
         r'\b(?:start|establish|create|launch|build)\s+(?:(?:a|an|your)\s+)?'
         r'instagram\s+(?:presence|account|profile)\b',
         "strengthen the existing Instagram presence"),
    rule("develop_instagram_presence",
         r'\bdevelop\s+' + _ARTICLE + r'(?:robust\s+|active\s+)?instagram\s+presence\b',
         "strengthen the existing Instagram presence"),
    rule("social_strategy_on_instagram",
         r'\bdevelop\s+(?:a\s+)?robust\s+social\s+media\s+strategy\s+on\s+'
         r'(?:platforms\s+like\s+)?instagram\b',
         "strengthen Instagram content and engagement strategy"),
    rule("launch_instagram",
         r'\blaunch\s+(?:(?:a|an|your)\s+)?instagram\b',
         "strengthen the existing Instagram presence"),
)

SOCIAL_RECOMMENDATION_RULES: Tuple[RewriteRule, ...] = (
    rule("develop_social_strategy",
         r'\bdevelop\s+' + _ARTICLE + r'(?:robust\s+)?social\s+media\s+strategy\b',
         "strengthen the existing {networks} presence and content strategy"),
    rule("establish_social_presence",
         r'\b(?:establish|start|build)\s+' + _ARTICLE + r'social\s+media\s+presence\b',
         "strengthen the existing {networks} presence"),
    rule("create_social_profiles",
         r'\bcreate\s+' + _ARTICLE + r'social\s+media\s+(?:presence|profiles?|accounts?)\b',
         "optimize the existing {networks} presence"),
)

# Evaluated in this order on the same string
RECOMMENDATION_CATEGORIES: Tuple[RecommendationCategory, ...] = (
    _category("local_profile", "local_profile", LOCAL_PROFILE_RECOMMENDATION_RULES,
              soften_guard="if needed, ",
              soften_template="verify and, if needed, {phrase}"),
    _category("instagram", "instagram", INSTAGRAM_RECOMMENDATION_RULES,
              soften_guard="on instagram, ",
              soften_template="if not already active on Instagram, {phrase}",
              # "..., begin posting regularly" without repeating the channel
              narrowed=(
                  ("begin_posting_instagram",
                   r'\b(?P<phrase>begin\s+posting(?:\s+regularly)?)\s+on\s+instagram\b'),
              )),
    _category("social", "social", SOCIAL_RECOMMENDATION_RULES,
              soften_guard="on social media, ",
              soften_template="if not already active on social media, {phrase}"),
)
