"""
Calibration for footprint detection, gating and scoring.

All tunables live on one validated object instead of module globals so
they can be tuned and tested without code changes. Defaults reproduce
the production-calibrated values.

Override file (JSON) is optional. Its path comes from the
FOOTPRINT_CALIBRATION_PATH environment variable (a project-level .env is
honored). A partial file overrides only the keys it names; source-weight
tables are merged onto the defaults key by key. Unknown keys are rejected.

Example override:
    {
      "social_thresholds": {"present": 0.85, "probable": 0.6, "inconclusive": 0.3},
      "local_profile_weights": {"schema_url": 0.4},
      "gate_confidence_threshold": 0.75
    }
"""

import os
import json
import logging
from enum import Enum
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import DetectionSource

logger = logging.getLogger(__name__)

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

CALIBRATION_PATH_ENV = "FOOTPRINT_CALIBRATION_PATH"


# =============================================================================
# DEFAULT TABLES
# =============================================================================

# Footer/header links are the strongest behavioral signal: a business that
# links a profile in site chrome almost certainly owns it.
SOCIAL_SOURCE_WEIGHTS: Dict[DetectionSource, float] = {
    DetectionSource.HTML_LINK_HEADER: 0.85,
    DetectionSource.HTML_LINK_FOOTER: 0.85,
    DetectionSource.HTML_LINK_BODY: 0.45,    # may be an incidental mention
    DetectionSource.SCHEMA_SAME_AS: 0.50,
    DetectionSource.SCHEMA_URL: 0.30,
    DetectionSource.SCHEMA_GBP: 0.50,
    DetectionSource.SCHEMA_SOCIAL: 0.50,
    DetectionSource.SEARCH_FALLBACK: 0.30,
    DetectionSource.MANUAL: 1.0,
}

LOCAL_PROFILE_SOURCE_WEIGHTS: Dict[DetectionSource, float] = {
    DetectionSource.HTML_LINK_HEADER: 0.80,
    DetectionSource.HTML_LINK_FOOTER: 0.80,
    DetectionSource.HTML_LINK_BODY: 0.50,    # often a contact-section map link
    DetectionSource.SCHEMA_SAME_AS: 0.80,
    DetectionSource.SCHEMA_URL: 0.50,
    DetectionSource.SCHEMA_GBP: 0.85,        # explicit hasMap
    DetectionSource.SCHEMA_SOCIAL: 0.40,
    DetectionSource.SEARCH_FALLBACK: 0.30,
    DetectionSource.MANUAL: 1.0,
}


class CalibrationError(ValueError):
    """Raised when a calibration override file cannot be read or parsed."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


# =============================================================================
# MODELS
# =============================================================================

class StatusThresholds(BaseModel):
    """Minimum confidence for each non-missing status."""
    model_config = ConfigDict(frozen=True)

    present: float = Field(ge=0.0, le=1.0)
    probable: float = Field(ge=0.0, le=1.0)
    inconclusive: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _strictly_descending(self):
        if not (self.present > self.probable > self.inconclusive):
            raise ValueError("thresholds must satisfy present > probable > inconclusive")
        return self


class SubscoreBands(BaseModel):
    """Status-banded subscore: base per status plus span * confidence."""
    model_config = ConfigDict(frozen=True)

    present: float = Field(ge=0.0, le=100.0)
    probable: float = Field(ge=0.0, le=100.0)
    inconclusive: float = Field(ge=0.0, le=100.0)
    span: float = Field(ge=0.0, le=100.0)


def _source_key(key) -> str:
    if isinstance(key, Enum):
        return key.value
    return str(key)


def _merge_weights(defaults: Dict[DetectionSource, float], value) -> Dict[str, float]:
    merged = {source.value: weight for source, weight in defaults.items()}
    if value is None:
        return merged
    if not isinstance(value, dict):
        raise ValueError("source weights must be a mapping of detection source to weight")
    for key, weight in value.items():
        merged[_source_key(key)] = weight
    return merged


class FootprintCalibration(BaseModel):
    """Every tunable used by the scorer, classifier, gates and derivers."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    # Confidence scorer
    social_weights: Dict[DetectionSource, float] = Field(
        default_factory=lambda: dict(SOCIAL_SOURCE_WEIGHTS)
    )
    local_profile_weights: Dict[DetectionSource, float] = Field(
        default_factory=lambda: dict(LOCAL_PROFILE_SOURCE_WEIGHTS)
    )

    # Status classifier (local profile is more lenient: structured-data
    # corroboration is rarer and counts for more there)
    social_thresholds: StatusThresholds = StatusThresholds(
        present=0.80, probable=0.60, inconclusive=0.30
    )
    local_profile_thresholds: StatusThresholds = StatusThresholds(
        present=0.75, probable=0.50, inconclusive=0.25
    )

    # Snapshot data confidence: base + coverage_weight*coverage + quality_weight*quality
    data_confidence_base: float = Field(default=0.3, ge=0.0, le=1.0)
    data_confidence_coverage_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    data_confidence_quality_weight: float = Field(default=0.2, ge=0.0, le=1.0)
    quality_html_only: float = Field(default=0.5, ge=0.0, le=1.0)
    quality_with_structured_data: float = Field(default=0.8, ge=0.0, le=1.0)
    quality_short_html: float = Field(default=0.3, ge=0.0, le=1.0)
    min_html_length: int = Field(default=1000, ge=0)

    # Recommendation gate: below this, "missing" may not be asserted
    gate_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    # Caveat rule: below this, callers should flag limited visibility
    caveat_confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    # Work-item deriver detector-confidence bands
    work_item_high_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    work_item_medium_confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    # Subscores
    local_profile_bands: SubscoreBands = SubscoreBands(
        present=80, probable=60, inconclusive=30, span=20
    )
    professional_network_bands: SubscoreBands = SubscoreBands(
        present=75, probable=50, inconclusive=25, span=25
    )
    social_breadth_base_scores: Tuple[int, ...] = (0, 40, 55, 70, 85)
    social_breadth_confidence_bonus: float = Field(default=15.0, ge=0.0, le=100.0)
    composite_weights: Dict[str, float] = Field(
        default_factory=lambda: {
            "local_profile": 0.35,
            "social_presence": 0.35,
            "professional_network": 0.15,
            "reputation": 0.15,
        }
    )
    default_reputation_score: int = Field(default=50, ge=0, le=100)

    @field_validator("social_weights", mode="before")
    @classmethod
    def _merge_social_weights(cls, value):
        return _merge_weights(SOCIAL_SOURCE_WEIGHTS, value)

    @field_validator("local_profile_weights", mode="before")
    @classmethod
    def _merge_local_profile_weights(cls, value):
        return _merge_weights(LOCAL_PROFILE_SOURCE_WEIGHTS, value)

    @field_validator("social_weights", "local_profile_weights")
    @classmethod
    def _weights_in_range(cls, value: Dict[DetectionSource, float]):
        for source, weight in value.items():
            if not 0.0 <= weight <= 1.0:
                raise ValueError(f"weight for {source.value} must be within [0, 1], got {weight}")
        return value

    @field_validator("social_breadth_base_scores")
    @classmethod
    def _breadth_scores(cls, value: Tuple[int, ...]):
        if len(value) < 2:
            raise ValueError("social_breadth_base_scores needs at least two steps")
        if any(b < a for a, b in zip(value, value[1:])):
            raise ValueError("social_breadth_base_scores must be non-decreasing")
        return value

    @field_validator("composite_weights")
    @classmethod
    def _composite_weights(cls, value: Dict[str, float]):
        expected = {"local_profile", "social_presence", "professional_network", "reputation"}
        if set(value) != expected:
            raise ValueError(f"composite_weights keys must be {sorted(expected)}")
        if abs(sum(value.values()) - 1.0) > 1e-6:
            raise ValueError("composite_weights must sum to 1.0")
        return value

    @model_validator(mode="after")
    def _work_item_bands(self):
        if self.work_item_medium_confidence > self.work_item_high_confidence:
            raise ValueError("work_item_medium_confidence must not exceed work_item_high_confidence")
        return self


DEFAULT_CALIBRATION = FootprintCalibration()


# =============================================================================
# LOADING
# =============================================================================

def load_calibration(path: Optional[str] = None) -> FootprintCalibration:
    """
    Load calibration overrides from a JSON file.

    Args:
        path: Explicit file path. When omitted, FOOTPRINT_CALIBRATION_PATH
              (after loading the project .env) is used; if that is unset
              the defaults are returned.

    Returns:
        FootprintCalibration

    Raises:
        CalibrationError: file unreadable, not JSON, or not a JSON object
        pydantic.ValidationError: values out of range / inconsistent
    """
    if path is None:
        load_dotenv(os.path.join(_PROJECT_ROOT, ".env"))
        path = os.getenv(CALIBRATION_PATH_ENV)
    if not path:
        return DEFAULT_CALIBRATION

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not load calibration from %s: %s", path, e)
        raise CalibrationError(path, str(e)) from e

    if not isinstance(raw, dict):
        raise CalibrationError(path, "calibration file must contain a JSON object")

    calibration = FootprintCalibration.model_validate(raw)
    logger.info("Loaded footprint calibration overrides from %s (%d keys)", path, len(raw))
    return calibration
