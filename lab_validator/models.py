"""
Pydantic models for lab validation results — the only thing callers ever see.

Results are frozen: they are derived on every call and never mutated or
persisted, so two calls with identical inputs compare equal.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ─── Categories ─────────────────────────────────────────────────────


class Category(str, Enum):
    """Closed set of supported lab report types."""

    CBC = "cbc"
    URINALYSIS = "urinalysis"
    LIPID = "lipid"


class ValidationSource(str, Enum):
    """Which validator produced a result."""

    TEXT = "text"
    VALUES = "values"


class ConfidenceTier(str, Enum):
    """Coarse bucket of a numeric confidence, for user-facing messages."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCode(str, Enum):
    INVALID_LAB_IMAGE = "INVALID_LAB_IMAGE"
    MISMATCHED_LAB_TYPE = "MISMATCHED_LAB_TYPE"


# ─── Validator Output ───────────────────────────────────────────────


class ValidationResult(BaseModel):
    """Verdict of one validator run against one declared category."""

    model_config = ConfigDict(frozen=True)

    category: Category
    source: ValidationSource
    is_valid: bool
    confidence: float = Field(ge=0.0, le=1.0)
    matched_keywords: list[str] = Field(default_factory=list)  # Text validator only
    matched_parameters: list[str] = Field(default_factory=list)  # Canonical names


# ─── Caller-facing Error Payload ────────────────────────────────────


class ValidationErrorDetails(BaseModel):
    selected_lab_type: str  # Display name, e.g. "CBC"
    confidence_tier: ConfidenceTier
    confidence: int = Field(ge=0, le=100)  # Percent
    reasons: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    suggested_lab_type: Optional[str] = None  # Set when another category fits better


class ValidationErrorPayload(BaseModel):
    """What an upload handler shows the user when validation fails."""

    code: ErrorCode
    message: str
    details: ValidationErrorDetails


# ─── Pipeline Report ────────────────────────────────────────────────


class LabValidationReport(BaseModel):
    """The final output of the validation pipeline."""

    category: Category
    is_valid: bool
    confidence: float = Field(ge=0.0, le=1.0)
    confidence_tier: ConfidenceTier
    text_result: Optional[ValidationResult] = None
    values_result: Optional[ValidationResult] = None
    error: Optional[ValidationErrorPayload] = None
    original_hash: str = ""  # SHA-256 of the raw text for audit trail
