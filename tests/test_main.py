"""CLI entry point tests — exit codes and printed verdicts."""

from __future__ import annotations

from main import main

from samples import LIPID_TEXT


def test_sample_passes_as_cbc(capsys):
    assert main(["cbc"]) == 0
    assert "REPORT MATCHES SELECTED LAB TYPE" in capsys.readouterr().out


def test_sample_rejected_as_urinalysis(capsys):
    assert main(["urinalysis"]) == 1
    out = capsys.readouterr().out
    assert "MISMATCHED_LAB_TYPE" in out
    assert "Try selecting CBC instead" in out


def test_reads_report_from_file(tmp_path):
    report = tmp_path / "lipid.txt"
    report.write_text(LIPID_TEXT, encoding="utf-8")
    assert main(["lipid", str(report)]) == 0


def test_unknown_category_exit_code(capsys):
    assert main(["thyroid"]) == 2
    assert "thyroid" in capsys.readouterr().err
