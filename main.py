#!/usr/bin/env python3
"""
Lab Report Validator — Entry Point
===================================

Runs the validation pipeline on a sample OCR-scanned report, or on a text
file, and prints a colored report.

Usage:
    python main.py                          # Sample CBC report declared as CBC
    python main.py urinalysis               # Same sample, declared as urinalysis
    python main.py lipid report.txt         # Your own OCR text
    python main.py cbc report.txt -v        # With pipeline logging
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lab_validator.categories import definition_for
from lab_validator.exceptions import UnknownCategoryError
from lab_validator.models import LabValidationReport, ValidationResult
from lab_validator.pipeline import LabReportValidationPipeline


# ─── Sample OCR Output ──────────────────────────────────────────────

SAMPLE_OCR_TEXT = """\
        Laboratory Report
        Complete Blood Count (CBC)
        Patient: John Doe
        Hemoglobin: 14.5 g/dL
        WBC: 7.5 x 10^9/L
        RBC: 5.0 x 10^12/L
        Platelet: 250 x 10^9/L
        Hematocrit: 42%
        Reference Range: Normal"""


# ─── ANSI Color Constants ───────────────────────────────────────────

_RED = "\033[91m"
_YELLOW = "\033[93m"
_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72

_TIER_COLORS = {"low": _RED, "medium": _YELLOW, "high": _GREEN}


# ─── Pretty Printer Helpers ─────────────────────────────────────────


def _print_result(label: str, result: ValidationResult) -> None:
    """Print one validator's matches."""
    verdict = f"{_GREEN}pass{_RESET}" if result.is_valid else f"{_RED}fail{_RESET}"
    print(f"  {label:<12} {verdict}  {_DIM}confidence {result.confidence:.0%}{_RESET}")
    if result.matched_keywords:
        print(f"    Keywords:   {', '.join(result.matched_keywords)}")
    print(f"    Parameters: {', '.join(result.matched_parameters) or _DIM + 'none' + _RESET}")


def _print_list(items: list[str], color: str, label: str) -> None:
    if not items:
        return
    print(f"\n  {color}{_BOLD}{label} ({len(items)}){_RESET}")
    for item in items:
        print(f"    - {item}")


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_report(report: LabValidationReport) -> int:
    """Pretty-print the validation report with ANSI color codes.

    Returns:
        0 if the report matched its lab type, 1 if rejected.
    """
    tier_color = _TIER_COLORS[report.confidence_tier.value]

    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  LAB REPORT VALIDATION{_RESET}")
    print(f"{'=' * _WIDTH}")
    print(f"  Lab type:    {definition_for(report.category).display_name}")
    print(f"  Audit Hash:  {_DIM}{report.original_hash[:16]}...{_RESET}")
    print(
        f"  Confidence:  {tier_color}{report.confidence:.0%} "
        f"({report.confidence_tier.value}){_RESET}"
    )
    print(f"{'─' * _WIDTH}")

    if report.text_result:
        _print_result("Text", report.text_result)
    if report.values_result:
        _print_result("Values", report.values_result)

    if report.error:
        print(f"{'─' * _WIDTH}")
        print(f"  {_RED}[{report.error.code.value}]{_RESET} {report.error.message}")
        _print_list(report.error.details.reasons, _RED, "REASONS")
        _print_list(report.error.details.suggestions, _YELLOW, "SUGGESTIONS")

    print(f"\n{'=' * _WIDTH}")
    if report.is_valid:
        print(f"  {_GREEN}{_BOLD}REPORT MATCHES SELECTED LAB TYPE{_RESET}")
    else:
        print(f"  {_RED}{_BOLD}REPORT REJECTED{_RESET}")
    print(f"{'=' * _WIDTH}\n")

    return 0 if report.is_valid else 1


# ─── Main ────────────────────────────────────────────────────────────


def main(argv: list[str] | None = None) -> int:
    """Run the pipeline on the sample (or a file) and print the report."""
    parser = argparse.ArgumentParser(description="Validate OCR text against a lab type.")
    parser.add_argument("category", nargs="?", default="cbc", help="cbc, urinalysis or lipid")
    parser.add_argument("file", nargs="?", type=Path, help="UTF-8 text file with OCR output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline steps")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    raw_text = args.file.read_text(encoding="utf-8") if args.file else SAMPLE_OCR_TEXT

    try:
        report = LabReportValidationPipeline().run(args.category, raw_text=raw_text)
    except UnknownCategoryError as exc:
        print(f"{_RED}{exc}{_RESET}", file=sys.stderr)
        return 2

    return print_report(report)


if __name__ == "__main__":
    sys.exit(main())
