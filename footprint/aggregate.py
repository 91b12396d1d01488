"""
Signal aggregation: merge extraction passes per channel.

URL and handle are first-non-empty-wins in pass order (the HTML pass is
merged first, so an HTML-discovered URL beats a structured-data one).
Detection sources are a union across every pass, so confidence reflects
every corroborating signal rather than just the first.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import ALL_NETWORKS, DetectionSource, ExtractionPass, Observation, SocialNetwork


@dataclass
class AggregatedSignal:
    """Merged evidence for one channel. Sources keep first-seen order."""
    url: Optional[str] = None
    handle: Optional[str] = None
    sources: List[DetectionSource] = field(default_factory=list)

    def add(self, observation: Observation) -> None:
        if not self.url and observation.url:
            self.url = observation.url
        if not self.handle and observation.handle:
            self.handle = observation.handle
        if observation.source not in self.sources:
            self.sources.append(observation.source)


@dataclass
class AggregatedFootprint:
    """One AggregatedSignal per known network plus the local profile."""
    socials: Dict[SocialNetwork, AggregatedSignal] = field(
        default_factory=lambda: {n: AggregatedSignal() for n in ALL_NETWORKS}
    )
    local_profile: AggregatedSignal = field(default_factory=AggregatedSignal)


def merge_observations(*passes: ExtractionPass) -> AggregatedFootprint:
    """
    Merge any number of extraction passes, in the order given.

    Observations for networks outside ALL_NETWORKS are ignored; every
    known network is present in the result, possibly with no sources.
    """
    merged = AggregatedFootprint()
    for extraction in passes:
        if extraction is None:
            continue
        for network, observations in extraction.socials.items():
            signal = merged.socials.get(network)
            if signal is None:
                continue
            for observation in observations:
                signal.add(observation)
        for observation in extraction.local_profile:
            merged.local_profile.add(observation)
    return merged
