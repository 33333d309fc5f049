"""
Main validation pipeline — orchestrates one upload check.

Flow:
  ┌──────────────────┐
  │ Declared lab type│   ← Resolve against the closed registry (or fail loudly)
  └────────┬─────────┘
           │
  ┌────────▼────────┐     ┌──────────────┐
  │  Text validator │     │  Structured  │   ← Whichever inputs were supplied
  │   (raw OCR)     │     │  validator   │
  └────────┬────────┘     └──────┬───────┘
           │                     │
           └──────────┬──────────┘
                      │
              ┌───────▼───────┐
              │  Diagnostics  │   ← Better-fitting category, reasons, tier
              └───────┬───────┘
                      │
              ┌───────▼───────┐
              │    Report     │   ← Pass/fail + error payload
              └───────────────┘

Design principles:
  - Validators are pure functions — no state survives between runs.
  - When both text and parsed values are supplied, both must pass and the
    weaker confidence is reported.
  - The raw input is SHA-256 hashed for audit trail.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Mapping, Optional

from .categories import definition_for, resolve_category
from .config import ValidationSettings, validation_settings
from .diagnostics import build_error, combined_confidence, find_better_category
from .models import Category, LabValidationReport, ValidationResult
from .scoring import confidence_tier
from .structured_validator import LabValue, validate_parsed_values
from .text_validator import validate_lab_type

logger = logging.getLogger(__name__)


class LabReportValidationPipeline:
    """Orchestrates the full lab upload validation workflow.

    Usage:
        pipeline = LabReportValidationPipeline()
        report = pipeline.run("cbc", raw_text=ocr_text)
        if not report.is_valid:
            # show report.error to the user, then block or warn
            print(report.error.details.reasons)
    """

    def __init__(self, settings: ValidationSettings | None = None):
        self.settings = settings or validation_settings

    def run(
        self,
        category: Category | str,
        raw_text: Optional[str] = None,
        parsed_values: Optional[Mapping[str, LabValue]] = None,
    ) -> LabValidationReport:
        """Validate one upload against its declared lab type.

        Args:
            category: The user-declared lab type (id or display name).
            raw_text: Raw OCR text, if available.
            parsed_values: Parsed parameter → value mapping, if available.

        Returns:
            LabValidationReport with per-validator results and, on failure,
            the user-facing error payload.

        Raises:
            UnknownCategoryError: if the lab type is not supported.
            ValueError: if neither raw_text nor parsed_values is given.
        """
        if raw_text is None and parsed_values is None:
            raise ValueError("Provide raw_text, parsed_values, or both")

        # ── Step 1: Resolve declared category (never defaults) ──────
        declared = resolve_category(category)
        display_name = definition_for(declared).display_name

        # ── Step 2: Run whichever validators have input ─────────────
        text_result: ValidationResult | None = None
        values_result: ValidationResult | None = None

        if raw_text is not None:
            logger.info("Validating %d chars of text as %s...", len(raw_text), display_name)
            text_result = validate_lab_type(raw_text, declared, self.settings)

        if parsed_values is not None:
            logger.info("Validating %d parsed value(s) as %s...", len(parsed_values), display_name)
            values_result = validate_parsed_values(parsed_values, declared)

        results = [r for r in (text_result, values_result) if r is not None]
        is_valid = all(r.is_valid for r in results)
        confidence = combined_confidence(results)

        # ── Step 3: Diagnose failures ───────────────────────────────
        error = None
        if not is_valid:
            better = find_better_category(declared, raw_text, parsed_values, self.settings)
            error = build_error(declared, results, better, self.settings)
            logger.info(
                "Rejected as %s: %s (confidence %.2f%s)",
                display_name,
                error.code.value if error else "unknown",
                confidence,
                f", looks like {better.value}" if better else "",
            )

        return LabValidationReport(
            category=declared,
            is_valid=is_valid,
            confidence=confidence,
            confidence_tier=confidence_tier(confidence, self.settings),
            text_result=text_result,
            values_result=values_result,
            error=error,
            original_hash=_audit_hash(raw_text, parsed_values),
        )


def _audit_hash(
    raw_text: Optional[str], parsed_values: Optional[Mapping[str, LabValue]]
) -> str:
    """SHA-256 over the raw text, or over the canonical JSON of the parsed values."""
    if raw_text is not None:
        payload = raw_text
    else:
        payload = json.dumps(dict(parsed_values or {}), sort_keys=True, default=str)
    # Lone surrogates are legal in JSON strings but not in strict UTF-8
    return hashlib.sha256(payload.encode("utf-8", "surrogatepass")).hexdigest()
