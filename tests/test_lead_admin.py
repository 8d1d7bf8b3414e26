"""Tests for the lead admin CLI helpers."""

import json

from lead_admin.main import export_latest, list_leads
from lead_scoring.lead_profile import LeadProfile


def test_list_empty(store, capsys):
    assert list_leads(store, None) == 0
    assert "No captured leads yet" in capsys.readouterr().out


def test_list_leads(store, full_profile, capsys):
    store.save(LeadProfile(company_name="Globex"), 12)
    store.save(full_profile, 100)
    assert list_leads(store, 1) == 0
    out = capsys.readouterr().out
    assert "Acme Robotics" in out
    assert "Generate more qualified leads" in out
    assert "Globex" not in out


def test_list_placeholders_for_missing_fields(store, capsys):
    store.save(LeadProfile(), 0)
    list_leads(store, None)
    out = capsys.readouterr().out
    assert "Unnamed lead" in out
    assert "Goal not captured yet" in out


def test_export_nothing(store, tmp_path):
    assert export_latest(store, str(tmp_path / "out")) == 1
    assert not (tmp_path / "out").exists()


def test_export_latest(store, full_profile, tmp_path, capsys):
    store.save(full_profile, 100)
    assert export_latest(store, str(tmp_path / "out")) == 0
    path = tmp_path / "out" / "acme-robotics-lead.json"
    assert str(path) in capsys.readouterr().out
    assert json.loads(path.read_text(encoding="utf-8"))["score"] == 100
