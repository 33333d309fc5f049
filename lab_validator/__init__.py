"""
Lab Report Validator — does this document really belong to the lab type the user picked?

Architecture: Category Registry → Text / Structured Validators → Diagnostics
Philosophy:  Score deterministically. Let the caller decide whether to block or warn.
"""

__version__ = "1.0.0"
