from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

from app_cli import run_test
from placement_core import audit_bank, config, smoke
from placement_core.audit_bank import audit_items
from placement_core.question_bank import load_bank
from placement_core.types import ExactAnswer, UnknownAnswer

from tests.conftest import build_synthetic_set, make_item


def test_audit_flags_gaps():
    items = [
        make_item("a", spec=UnknownAnswer(), tags=("Z9: made up",)),
        make_item("b", skill="Reading", tags=("B1: identify main idea",)),
    ]
    summary = audit_items(items, library={"B1: identify main idea": "Skim."})
    warnings = summary["warnings"]
    assert any("Listening has no items" in w for w in warnings)
    assert any("Grammar has 1 item(s) without a usable answer key" in w for w in warnings)
    assert any("'Z9: made up' (a)" in w for w in warnings)
    assert any("writing topic" in w for w in warnings)
    assert not any("B1: identify main idea" in w for w in warnings)
    assert summary["totals"]["single_choice"] == 2


def test_audit_counts_units(synthetic_set):
    summary = audit_items(synthetic_set.items)
    grammar = summary["coverage"]["Grammar"]
    assert grammar["units"] == 6
    assert grammar["types"]["multi_blank"] == 1
    assert summary["coverage"]["Writing"]["units"] == 6


def test_audit_main_on_bundled_bank(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "summary.json"
    assert audit_bank.main([config.QUESTION_SET_PATH, str(out)]) == 0
    summary = json.loads(out.read_text(encoding="utf-8"))
    assert summary["warnings"] == []
    assert "No warnings." in capsys.readouterr().out


def test_audit_main_returns_two_on_warnings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    bank = tmp_path / "bank.json"
    bank.write_text(json.dumps([{"id": "q1", "type": "mcq", "skill": "Grammar", "answer": "a"}]), encoding="utf-8")
    assert audit_bank.main([str(bank)]) == 2


def test_smoke_passes_on_bundled_bank(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    assert smoke.run_smoke(load_bank()) == []
    assert smoke.main() == 0


def test_smoke_key_sheet_shapes():
    qs = build_synthetic_set()
    sheet = smoke.key_answers(qs, essay="short")
    assert sheet["Grammar_mb"] == ["a", "b", "c"]
    assert sheet["Grammar_sc_0"] == "right"
    assert sheet["w_1"] == "short"


def test_ask_item_maps_option_index():
    item = make_item("q", spec=ExactAnswer("is"))
    item = replace(item, options=("am", "is", "are"))
    assert run_test.ask_item(item, ask=lambda prompt: "1") == "is"
    assert run_test.ask_item(item, ask=lambda prompt: " are ") == "are"
    assert run_test.ask_item(item, ask=lambda prompt: "7") == "7"


def test_ask_item_blanks_and_writing():
    blanks = make_item("mb", type="multi_blank", spec=None)
    blanks = replace(blanks, blank_count=2)
    replies = iter([" was ", "were"])
    assert run_test.ask_item(blanks, ask=lambda prompt: next(replies)) == ["was", "were"]

    essay = make_item("w", skill="Writing", type="extended_writing")
    lines = iter(["First line.", "Second line.", ""])
    assert run_test.ask_item(essay, ask=lambda prompt: next(lines)) == "First line.\nSecond line."


def test_cli_writes_report(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    path = run_test.main(ask=lambda prompt: "", out_dir=str(tmp_path / "reports"))
    assert Path(path).parent == tmp_path / "reports"
    html = Path(path).read_text(encoding="utf-8")
    assert "English Test Results: Candidate" in html
    assert "Predicted CEFR" in html


def test_unanswered_items_are_listed(capsys):
    qs = build_synthetic_set(skills=["Grammar"], per_skill=2)
    answers = {"Grammar_sc_0": "right", "Grammar_sc_1": "  ", "Grammar_mb": ["a", "", "c"], "w_1": "Some text"}
    assert run_test.unanswered_ids(qs, answers) == ["Grammar_sc_1", "Grammar_mb"]
    answers.pop("w_1")
    assert run_test.unanswered_ids(qs, answers)[-1] == "w_1"


def test_cli_reports_unanswered_count(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    run_test.main(ask=lambda prompt: "", out_dir=str(tmp_path / "reports"), name="Ann")
    assert "You have 18 unanswered item(s)" in capsys.readouterr().out
