"""
Confidence arithmetic shared by both validators and the diagnostics layer.

All helpers are pure and monotone: adding a match can only raise a ratio,
and every combination of ratios uses non-negative weights.
"""

from __future__ import annotations

from .config import ValidationSettings, validation_settings
from .models import ConfidenceTier


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def match_ratio(matched: int, expected: int) -> float:
    """Share of ``expected`` items found, capped at 1.0. Zero expected → 0.0."""
    if expected <= 0:
        return 0.0
    return clamp(matched / expected)


def weighted_confidence(
    keyword_ratio: float,
    parameter_ratio: float,
    settings: ValidationSettings = validation_settings,
) -> float:
    """Combine the two text signals into one score in [0, 1]."""
    score = (
        settings.KEYWORD_WEIGHT * keyword_ratio
        + settings.PARAMETER_WEIGHT * parameter_ratio
    )
    return round(clamp(score), 4)


def confidence_tier(
    confidence: float, settings: ValidationSettings = validation_settings
) -> ConfidenceTier:
    if confidence >= settings.TIER_HIGH_FLOOR:
        return ConfidenceTier.HIGH
    if confidence >= settings.TIER_MEDIUM_FLOOR:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def as_percent(confidence: float) -> int:
    return int(round(clamp(confidence) * 100))
