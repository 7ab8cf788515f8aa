"""
Tests for the command-line scripts that need no database.
"""

from __future__ import annotations

import json

import pytest

from scripts import evaluate_lead, process_lead


def test_load_payloads_accepts_objects_and_lists(tmp_path) -> None:
    single = tmp_path / "one.json"
    single.write_text(json.dumps({"fundly_id": "lead-1"}), encoding="utf-8")
    many = tmp_path / "many.json"
    many.write_text(json.dumps([{"fundly_id": "lead-2"}, {"fundly_id": "lead-3"}]), encoding="utf-8")

    payloads = process_lead.load_payloads([str(single), str(many)])

    assert [p["fundly_id"] for p in payloads] == ["lead-1", "lead-2", "lead-3"]


def test_load_payloads_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        process_lead.load_payloads([str(tmp_path / "missing.json")])


def test_load_payloads_rejects_scalars(tmp_path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("42", encoding="utf-8")

    with pytest.raises(ValueError):
        process_lead.load_payloads([str(bad)])


def test_evaluate_lead_prints_programs(tmp_path, monkeypatch, capsys) -> None:
    lead = tmp_path / "lead.json"
    lead.write_text(
        json.dumps({"fundly_id": "lead-1", "annual_revenue": "$150,000", "time_in_business": "2 years"}),
        encoding="utf-8",
    )
    monkeypatch.setattr("sys.argv", ["evaluate_lead.py", str(lead)])

    assert evaluate_lead.main() == 0

    out = capsys.readouterr().out
    assert "[PASS] working_capital" in out
    assert "[FAIL] bank_loc" in out
    assert "filter_success: working_capital" in out


def test_evaluate_lead_without_id_fails(tmp_path, monkeypatch) -> None:
    lead = tmp_path / "lead.json"
    lead.write_text(json.dumps({"annual_revenue": "$150,000"}), encoding="utf-8")
    monkeypatch.setattr("sys.argv", ["evaluate_lead.py", str(lead)])

    assert evaluate_lead.main() == 1
