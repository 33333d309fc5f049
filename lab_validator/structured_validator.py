"""
Structured validator — scores an already-parsed field mapping.

Only key identity matters here; values are never inspected. Each key is
compacted (case and separators removed) and looked up in the category's
alias index. The verdict is count-based: a panel needs a minimum number of
recognized fields, because a lone "hemoglobin" could come from almost any
blood report.
"""

from __future__ import annotations

import logging
from typing import Mapping, Union

from .categories import definition_for, parameter_key_index
from .models import Category, ValidationResult, ValidationSource
from .normalize import normalize_key
from .scoring import match_ratio

logger = logging.getLogger(__name__)

LabValue = Union[int, float, str, None]


def validate_parsed_values(
    values: Mapping[str, LabValue],
    category: Category | str,
) -> ValidationResult:
    """Decide whether parsed ``values`` form a plausible ``category`` panel.

    Raises:
        UnknownCategoryError: if ``category`` is not supported.
    """
    definition = definition_for(category)
    index = parameter_key_index(definition.category)

    matched_parameters: list[str] = []
    for key in values or {}:
        parameter = index.get(normalize_key(key))
        if parameter is not None and parameter not in matched_parameters:
            matched_parameters.append(parameter)

    confidence = round(
        match_ratio(len(matched_parameters), definition.expected_parameters), 4
    )
    is_valid = len(matched_parameters) >= definition.min_parameters

    logger.debug(
        "Structured check for %s: %d/%d field(s) recognized (need %d)",
        definition.category.value,
        len(matched_parameters),
        len(values or {}),
        definition.min_parameters,
    )

    return ValidationResult(
        category=definition.category,
        source=ValidationSource.VALUES,
        is_valid=is_valid,
        confidence=confidence,
        matched_parameters=matched_parameters,
    )
