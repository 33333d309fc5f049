"""
Scoring weights and thresholds.

Every number the validators compare against lives here, so it can be tuned
per deployment through ``LAB_VALIDATOR_*`` environment variables (or a
``.env`` file in the working directory) without touching the matching code.

Per-category coverage (expected panel size, minimum parameter count) is
reference data and lives with the category definitions instead.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ValidationSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LAB_VALIDATOR_", env_file=".env", extra="ignore"
    )

    # ── Text validator ──────────────────────────────────────────────
    KEYWORD_WEIGHT: float = Field(
        default=0.3,
        ge=0.0, le=1.0,
        description="Share of text confidence driven by header keywords (CBC, Urinalysis...)",
    )
    PARAMETER_WEIGHT: float = Field(
        default=0.7,
        ge=0.0, le=1.0,
        description="Share of text confidence driven by parameter names. OCR keeps table rows far more reliably than headers.",
    )
    TEXT_ACCEPTANCE_THRESHOLD: float = Field(
        default=0.4,
        ge=0.0, le=1.0,
        description="Text confidence must exceed this (and at least one parameter must match) to accept",
    )

    # ── Diagnostics ─────────────────────────────────────────────────
    NEAR_ZERO_CONFIDENCE: float = Field(
        default=0.2,
        ge=0.0, le=1.0,
        description="At or below this, with no parameters matched, the upload is not a lab report at all",
    )
    TIER_MEDIUM_FLOOR: float = Field(
        default=0.4,
        ge=0.0, le=1.0,
        description="Lowest confidence bucketed as 'medium'",
    )
    TIER_HIGH_FLOOR: float = Field(
        default=0.7,
        ge=0.0, le=1.0,
        description="Lowest confidence bucketed as 'high'",
    )

    @model_validator(mode="after")
    def _check_tiers(self) -> "ValidationSettings":
        if self.TIER_MEDIUM_FLOOR > self.TIER_HIGH_FLOOR:
            raise ValueError("TIER_MEDIUM_FLOOR must not exceed TIER_HIGH_FLOOR")
        return self


validation_settings = ValidationSettings()
