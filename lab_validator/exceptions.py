"""
Custom exception hierarchy for lab report validation.

The validators themselves only raise UnknownCategoryError (a caller bug).
The two user-facing failures are raised by the caller-side helper
``raise_for_report`` so an upload handler can choose to block on them.
"""

from __future__ import annotations


class LabValidationError(Exception):
    """Base exception for all lab validation failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UnknownCategoryError(LabValidationError):
    """The declared lab type is not one of the supported categories."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("UNKNOWN_CATEGORY", message, details)


class InvalidLabImageError(LabValidationError):
    """The upload does not look like a lab report at all."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("INVALID_LAB_IMAGE", message, details)


class MismatchedLabTypeError(LabValidationError):
    """The upload is a lab report, but not of the declared type."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("MISMATCHED_LAB_TYPE", message, details)
