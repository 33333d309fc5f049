"""
Turns failed validation results into something a user can act on.

Everything here is derived from ValidationResult fields alone:
  - which failure it is (not a lab report vs. the wrong lab type)
  - a confidence tier for the UI
  - human-readable reasons and suggestions
  - another category the same content would have passed, if any

The upload handler decides whether the payload blocks or merely warns.
"""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from .categories import definition_for, supported_categories
from .config import ValidationSettings, validation_settings
from .exceptions import InvalidLabImageError, MismatchedLabTypeError
from .models import (
    Category,
    ErrorCode,
    LabValidationReport,
    ValidationErrorDetails,
    ValidationErrorPayload,
    ValidationResult,
    ValidationSource,
)
from .scoring import as_percent, confidence_tier
from .structured_validator import LabValue, validate_parsed_values
from .text_validator import validate_lab_type

INVALID_LAB_IMAGE_MESSAGE = "The uploaded image does not appear to be a valid lab report"
MISMATCHED_LAB_TYPE_MESSAGE = "The extracted values do not match the selected lab type"


def combined_confidence(results: Sequence[ValidationResult]) -> float:
    """The weakest validator decides. No results → 0.0."""
    return min((r.confidence for r in results), default=0.0)


def find_better_category(
    declared: Category,
    raw_text: Optional[str] = None,
    parsed_values: Optional[Mapping[str, LabValue]] = None,
    settings: ValidationSettings = validation_settings,
) -> Optional[Category]:
    """Return the best other category that the same inputs fully validate against."""
    best: Optional[Category] = None
    best_confidence = -1.0

    # Sorted so ties resolve the same way on every call
    for candidate in sorted(supported_categories() - {declared}, key=lambda c: c.value):
        results = _run_validators(candidate, raw_text, parsed_values, settings)
        if not results or not all(r.is_valid for r in results):
            continue
        confidence = combined_confidence(results)
        if confidence > best_confidence:
            best, best_confidence = candidate, confidence

    return best


def build_error(
    declared: Category,
    results: Sequence[ValidationResult],
    better: Optional[Category] = None,
    settings: ValidationSettings = validation_settings,
) -> Optional[ValidationErrorPayload]:
    """Compose the user-facing error payload, or None if every result passed."""
    failed = [r for r in results if not r.is_valid]
    if not failed:
        return None

    definition = definition_for(declared)
    confidence = combined_confidence(results)
    nothing_medical = not any(r.matched_parameters for r in results)

    if better is None and nothing_medical and confidence <= settings.NEAR_ZERO_CONFIDENCE:
        code = ErrorCode.INVALID_LAB_IMAGE
        message = INVALID_LAB_IMAGE_MESSAGE
        suggestions = [
            "Upload a clearer image of the lab report",
            "Make sure the entire report is visible and in focus",
            "Only laboratory test reports can be analyzed",
        ]
    else:
        code = ErrorCode.MISMATCHED_LAB_TYPE
        message = MISMATCHED_LAB_TYPE_MESSAGE
        suggestions = ["Verify you selected the correct lab type"]
        if better is not None:
            suggestions.append(f"Try selecting {definition_for(better).display_name} instead")
        else:
            suggestions.append(
                f"Upload a report that includes the full {definition.display_name} panel"
            )

    reasons = [reason for r in failed for reason in _reasons_for(r)]
    if better is not None:
        reasons.append(
            f"Content looks like a {definition_for(better).display_name} report"
        )

    return ValidationErrorPayload(
        code=code,
        message=message,
        details=ValidationErrorDetails(
            selected_lab_type=definition.display_name,
            confidence_tier=confidence_tier(confidence, settings),
            confidence=as_percent(confidence),
            reasons=reasons,
            suggestions=suggestions,
            suggested_lab_type=definition_for(better).display_name if better else None,
        ),
    )


def raise_for_report(report: LabValidationReport) -> None:
    """Raise the matching exception if the report carries an error payload."""
    if report.error is None:
        return

    details = report.error.details.model_dump(mode="json")
    if report.error.code == ErrorCode.INVALID_LAB_IMAGE:
        raise InvalidLabImageError(report.error.message, details)
    raise MismatchedLabTypeError(report.error.message, details)


# ─── Internal Helpers ────────────────────────────────────────────────


def _run_validators(
    category: Category,
    raw_text: Optional[str],
    parsed_values: Optional[Mapping[str, LabValue]],
    settings: ValidationSettings,
) -> list[ValidationResult]:
    results: list[ValidationResult] = []
    if raw_text is not None:
        results.append(validate_lab_type(raw_text, category, settings))
    if parsed_values is not None:
        results.append(validate_parsed_values(parsed_values, category))
    return results


def _reasons_for(result: ValidationResult) -> list[str]:
    definition = definition_for(result.category)
    name = definition.display_name

    if result.source == ValidationSource.VALUES:
        if not result.matched_parameters:
            return [f"None of the extracted values are {name} parameters"]
        return [
            f"Only {len(result.matched_parameters)} of at least "
            f"{definition.min_parameters} {name} parameters were recognized"
        ]

    reasons: list[str] = []
    if not result.matched_keywords:
        reasons.append("Missing required keywords")
    if not result.matched_parameters:
        reasons.append(f"No {name} parameters were found")
    else:
        reasons.append(f"Parameters do not match {name} format")
    return reasons
