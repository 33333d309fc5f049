"""
Text validator — scores raw OCR text against one declared lab type.

Two independent signals are measured:
  - keyword ratio:   header terms found / keywords in the category
  - parameter ratio: distinct parameters found / size of a complete panel

Parameters dominate the score. OCR regularly loses report headers but keeps
the table rows, while prose that merely says "blood test" has no rows at
all. A document is only accepted when it clears the confidence threshold
AND names at least one category-specific parameter.
"""

from __future__ import annotations

import logging

from .categories import CategoryDefinition, definition_for
from .config import ValidationSettings, validation_settings
from .models import Category, ValidationResult, ValidationSource
from .normalize import contains_term, normalize_text, term_pattern
from .scoring import match_ratio, weighted_confidence

logger = logging.getLogger(__name__)


def validate_lab_type(
    text: str,
    category: Category | str,
    settings: ValidationSettings = validation_settings,
) -> ValidationResult:
    """Decide whether ``text`` reads like a report of ``category``.

    Args:
        text: Raw extracted document text. May be empty or noisy.
        category: The user-declared lab type.
        settings: Weights and threshold; defaults to the process settings.

    Returns:
        ValidationResult with matched keywords and canonical parameter names.

    Raises:
        UnknownCategoryError: if ``category`` is not supported.
    """
    definition = definition_for(category)
    normalized = normalize_text(text or "")

    if not normalized:
        return ValidationResult(
            category=definition.category,
            source=ValidationSource.TEXT,
            is_valid=False,
            confidence=0.0,
        )

    matched_keywords = [kw for kw in definition.keywords if contains_term(normalized, kw)]
    matched_parameters = _match_parameters(normalized, definition)

    confidence = weighted_confidence(
        match_ratio(len(matched_keywords), len(definition.keywords)),
        match_ratio(len(matched_parameters), definition.expected_parameters),
        settings,
    )
    is_valid = (
        confidence > settings.TEXT_ACCEPTANCE_THRESHOLD
        and len(matched_parameters) > 0
    )

    logger.debug(
        "Text check for %s: %d keyword(s), %d parameter(s), confidence %.2f",
        definition.category.value,
        len(matched_keywords),
        len(matched_parameters),
        confidence,
    )

    return ValidationResult(
        category=definition.category,
        source=ValidationSource.TEXT,
        is_valid=is_valid,
        confidence=confidence,
        matched_keywords=matched_keywords,
        matched_parameters=matched_parameters,
    )


def _match_parameters(normalized: str, definition: CategoryDefinition) -> list[str]:
    """Canonical names of parameters whose name or any alias occurs in the text.

    Longer terms are matched first and the text they claim is blanked out,
    so "HDL Cholesterol" counts for hdl and not also for total cholesterol
    through its bare "cholesterol" alias.
    """
    candidates = sorted(
        (
            (term, parameter)
            for parameter in definition.parameters
            for term in definition.terms_for(parameter)
        ),
        key=lambda candidate: len(normalize_text(candidate[0])),
        reverse=True,
    )

    found: set[str] = set()
    remaining = normalized
    for term, parameter in candidates:
        pattern = term_pattern(term)
        if pattern.search(remaining) is None:
            continue
        found.add(parameter)
        remaining = pattern.sub(lambda match: " " * len(match.group()), remaining)

    return [parameter for parameter in definition.parameters if parameter in found]
