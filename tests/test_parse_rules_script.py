"""Tests for scripts/parse_rules.py."""
from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Any

import orjson
import pytest

RULES = (
    "Riftbound Core Rules\n"
    "Last Updated: 2025-06-01\n"
    "100. Combat\n"
    "100.1. Initiative\n"
    "Determines turn order.\n"
    "100.2. Attack Resolution\n"
    "See rule 100.1.\n"
    "101. Damage\n"
)


def _load_parse_rules_module() -> Any:
    root = Path(__file__).resolve().parents[1]
    script_path = root / "scripts" / "parse_rules.py"
    spec = importlib.util.spec_from_file_location("parse_rules", script_path)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


@pytest.fixture()
def source(tmp_path: Path) -> Path:
    path = tmp_path / "Riftbound Core Rules v1.3.txt"
    path.write_text(RULES, encoding="utf-8")
    return path


class TestParseRulesScript:
    def test_writes_dataset_file(self, tmp_path: Path, source: Path) -> None:
        mod = _load_parse_rules_module()
        out = tmp_path / "data" / "rules.json"
        assert mod.main([str(source), "--output", str(out)]) == 0

        payload = orjson.loads(out.read_bytes())
        assert payload["version"] == "1.3"
        assert payload["lastUpdated"] == "2025-06-01"
        assert [s["id"] for s in payload["sections"]] == ["100", "100.1", "100.2", "101"]
        assert set(payload["index"]) == {"100", "100.1", "100.2", "101"}
        assert payload["index"]["100.2"]["crossRefs"] == ["100.1"]

    def test_stdout_when_no_output(
        self, source: Path, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        mod = _load_parse_rules_module()
        assert mod.main([str(source), "--compact"]) == 0
        payload = orjson.loads(capsysbinary.readouterr().out)
        assert len(payload["sections"]) == 4

    def test_overrides_and_anomalies(self, tmp_path: Path, source: Path) -> None:
        mod = _load_parse_rules_module()
        out = tmp_path / "rules.json"
        audit = tmp_path / "anomalies.json"
        code = mod.main([
            str(source), "--output", str(out), "--anomalies", str(audit),
            "--version", "2.0", "--last-updated", "today",
        ])
        assert code == 0
        payload = orjson.loads(out.read_bytes())
        assert payload["version"] == "2.0"
        assert payload["lastUpdated"] == "today"

        report = orjson.loads(audit.read_bytes())
        assert report["counts"] == {"hundred_block_fallback": 1}
        assert report["anomalies"][0]["id"] == "101"

    def test_config_file(self, tmp_path: Path) -> None:
        mod = _load_parse_rules_module()
        src = tmp_path / "rules.txt"
        src.write_text("050. Half\n051. Rule\n", encoding="utf-8")
        config = tmp_path / "parser.json"
        config.write_bytes(orjson.dumps({"section_modulus": 50, "default_version": "0.9"}))
        out = tmp_path / "rules.json"
        assert mod.main([str(src), "--config", str(config), "--output", str(out)]) == 0
        payload = orjson.loads(out.read_bytes())
        assert payload["version"] == "0.9"
        assert payload["index"]["051"]["parentId"] == "050"

    def test_missing_config(self, tmp_path: Path, source: Path) -> None:
        mod = _load_parse_rules_module()
        assert mod.main([str(source), "--config", str(tmp_path / "nope.json")]) == 2

    def test_missing_source(self, tmp_path: Path) -> None:
        mod = _load_parse_rules_module()
        assert mod.main([str(tmp_path / "missing.txt")]) == 1

    def test_source_without_rules(self, tmp_path: Path) -> None:
        mod = _load_parse_rules_module()
        src = tmp_path / "notes.txt"
        src.write_text("No numbered rules here.\n", encoding="utf-8")
        out = tmp_path / "rules.json"
        assert mod.main([str(src), "--output", str(out)]) == 1
        assert not out.exists()
