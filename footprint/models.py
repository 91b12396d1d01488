"""
Data model for social & local-presence detection.

Everything here is a plain value object. Detection results are frozen
dataclasses so a snapshot cannot be mutated once a run has produced it;
downstream consumers (gates, subscores, work items) only read them.

Semantics:
- A channel is always represented, even when nothing was found
  (status "missing", confidence 0, no sources).
- Provenance (detection sources) is never discarded.
- Status is derived from confidence by the classifier, never set by hand
  in the detection path.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any


# =============================================================================
# ENUMS
# =============================================================================

class DetectionSource(str, Enum):
    """Where a social / local-profile signal was observed."""
    HTML_LINK_HEADER = "html_link_header"
    HTML_LINK_FOOTER = "html_link_footer"
    HTML_LINK_BODY = "html_link_body"
    SCHEMA_SAME_AS = "schema_sameAs"
    SCHEMA_URL = "schema_url"
    SCHEMA_GBP = "schema_gbp"
    SCHEMA_SOCIAL = "schema_social"
    SEARCH_FALLBACK = "search_fallback"
    MANUAL = "manual"


class PresenceStatus(str, Enum):
    """Four-level presence judgment, ordered by decreasing certainty."""
    PRESENT = "present"
    PROBABLE = "probable"
    INCONCLUSIVE = "inconclusive"
    MISSING = "missing"

    @property
    def rank(self) -> int:
        """Higher rank = more certain the channel exists."""
        return _STATUS_RANK[self]

    @property
    def is_active(self) -> bool:
        return self in (PresenceStatus.PRESENT, PresenceStatus.PROBABLE)


_STATUS_RANK = {
    PresenceStatus.PRESENT: 3,
    PresenceStatus.PROBABLE: 2,
    PresenceStatus.INCONCLUSIVE: 1,
    PresenceStatus.MISSING: 0,
}


class SocialNetwork(str, Enum):
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    TIKTOK = "tiktok"
    X = "x"
    LINKEDIN = "linkedin"
    YOUTUBE = "youtube"

    @property
    def display_name(self) -> str:
        return NETWORK_DISPLAY_NAMES[self]


class ChannelKind(str, Enum):
    """Which threshold / weight table applies to a channel."""
    SOCIAL = "social"
    LOCAL_PROFILE = "local_profile"


# Snapshot order; every snapshot carries exactly these, in this order
ALL_NETWORKS: Tuple[SocialNetwork, ...] = (
    SocialNetwork.INSTAGRAM,
    SocialNetwork.FACEBOOK,
    SocialNetwork.TIKTOK,
    SocialNetwork.X,
    SocialNetwork.LINKEDIN,
    SocialNetwork.YOUTUBE,
)

NETWORK_DISPLAY_NAMES = {
    SocialNetwork.INSTAGRAM: "Instagram",
    SocialNetwork.FACEBOOK: "Facebook",
    SocialNetwork.TIKTOK: "TikTok",
    SocialNetwork.X: "X",
    SocialNetwork.LINKEDIN: "LinkedIn",
    SocialNetwork.YOUTUBE: "YouTube",
}

# Channel key used for the local business profile in work items / summaries
LOCAL_PROFILE_KEY = "gbp"
LOCAL_PROFILE_DISPLAY_NAME = "Google Business Profile"


# =============================================================================
# RAW OBSERVATIONS (extractor output, aggregator input)
# =============================================================================

@dataclass(frozen=True)
class Observation:
    """A single raw sighting of a channel, tagged with its provenance."""
    source: DetectionSource
    url: Optional[str] = None
    handle: Optional[str] = None


@dataclass
class ExtractionPass:
    """
    Observations produced by one extraction pass (HTML, structured data,
    or caller-supplied signals such as search fallback / manual checks).
    """
    socials: Dict[SocialNetwork, List[Observation]] = field(default_factory=dict)
    local_profile: List[Observation] = field(default_factory=list)

    def add_social(self, network: SocialNetwork, observation: Observation) -> None:
        self.socials.setdefault(network, []).append(observation)

    def add_local_profile(self, observation: Observation) -> None:
        self.local_profile.append(observation)

    def is_empty(self) -> bool:
        return not self.local_profile and not any(self.socials.values())


# =============================================================================
# DETECTION RESULTS
# =============================================================================

@dataclass(frozen=True)
class ChannelPresence:
    """Presence judgment for one social network."""
    network: SocialNetwork
    detection_sources: Tuple[DetectionSource, ...]
    confidence: float              # 0.0-1.0, capped sum of source weights
    status: PresenceStatus         # table image of confidence
    url: Optional[str] = None
    handle: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network.value,
            "url": self.url,
            "handle": self.handle,
            "detection_sources": [s.value for s in self.detection_sources],
            "confidence": self.confidence,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class LocalProfilePresence:
    """Presence judgment for the local business profile (Google Business Profile)."""
    detection_sources: Tuple[DetectionSource, ...]
    confidence: float
    status: PresenceStatus
    url: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "detection_sources": [s.value for s in self.detection_sources],
            "confidence": self.confidence,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class FootprintSnapshot:
    """
    Complete, immutable detection result for one analysis run.

    socials always holds one entry per known network (ALL_NETWORKS order).
    local_profile is None only when no local-profile check was attempted.
    data_confidence describes how thorough the detection pass was, not
    how present any channel is.
    """
    socials: Tuple[ChannelPresence, ...]
    local_profile: Optional[LocalProfilePresence]
    data_confidence: float

    def channel(self, network: SocialNetwork) -> Optional[ChannelPresence]:
        for presence in self.socials:
            if presence.network == network:
                return presence
        return None

    def active_networks(self) -> List[SocialNetwork]:
        return [s.network for s in self.socials if s.is_active]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "socials": [s.to_dict() for s in self.socials],
            "gbp": self.local_profile.to_dict() if self.local_profile else None,
            "data_confidence": self.data_confidence,
        }


# =============================================================================
# DERIVED OUTPUTS
# =============================================================================

@dataclass(frozen=True)
class FootprintSubscores:
    """Four 0-100 subscores for the digital footprint dimension."""
    local_profile: int
    social_presence: int
    professional_network: int
    reputation: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "local_profile": self.local_profile,
            "social_presence": self.social_presence,
            "professional_network": self.professional_network,
            "reputation": self.reputation,
        }


@dataclass(frozen=True)
class SanitizedNarrative:
    one_liner: str
    issues: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"one_liner": self.one_liner, "issues": list(self.issues)}


@dataclass(frozen=True)
class SanitizedRecommendations:
    quick_wins: List[str]
    top_opportunities: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quick_wins": list(self.quick_wins),
            "top_opportunities": list(self.top_opportunities),
        }


@dataclass(frozen=True)
class WorkItem:
    """A human-readable, prioritized action suggestion for one channel."""
    channel: str                   # network value or LOCAL_PROFILE_KEY
    action: str                    # "optimize", "set_up", "verify_then_set_up"
    title: str
    priority: str                  # "high", "medium", "low"
    rationale: str
    confidence: float              # channel confidence the decision was based on

    def to_dict(self) -> Dict[str, Any]:
        return {
            "channel": self.channel,
            "action": self.action,
            "title": self.title,
            "priority": self.priority,
            "rationale": self.rationale,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class SkipRecord:
    """A channel that deliberately produced no suggestion, and why."""
    channel: str
    status: Optional[str]
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"channel": self.channel, "status": self.status, "reason": self.reason}


@dataclass(frozen=True)
class WorkItemPlan:
    suggestions: List[WorkItem]
    skipped: List[SkipRecord]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestions": [w.to_dict() for w in self.suggestions],
            "skipped": [s.to_dict() for s in self.skipped],
        }
