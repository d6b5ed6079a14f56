"""
Unit tests for the decisions CLI.
Runs the typer app in-process with CliRunner against temp files.
"""

import json
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from typer.testing import CliRunner

from decisions import app, load_items, parse_now
from decision_queue.core.exceptions import InvalidItemError


NOW = "2026-02-15T12:00:00Z"

runner = CliRunner()


def item(item_id, tier="capital", category="process", severity="red", **extra):
    record = {
        "id": item_id,
        "surface": "action",
        "severity": severity,
        "category": category,
        "title": item_id.replace("-", " ").title(),
        "decisionTier": tier,
        "createdAt": "2026-02-10T12:00:00Z",
    }
    record.update(extra)
    return record


def unsimulated(n):
    return item(
        f"a3-unsimulated-{n}",
        severity="orange",
        titleKey="IDEA_NOT_SIMULATED",
        context={"assetId": f"asset-{n}", "portfolioName": "Growth"},
    )


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path / "config"


@pytest.fixture
def items_file(tmp_path):
    records = [unsimulated(n) for n in range(1, 4)]
    records += [item(f"cap-{n}") for n in range(6)]
    records.append(item("int-1", tier="integrity", category="project"))
    records.append(item("cov-1", tier="coverage", category="risk"))
    records.append(item("i1-rating-1", tier=None, category="alpha", severity="blue", surface="intel"))

    path = tmp_path / "items.json"
    path.write_text(json.dumps({"items": records}))
    return path


def invoke(*args):
    return runner.invoke(app, [str(a) for a in args])


class TestHelpers:
    """Tests for the CLI helper functions."""

    def test_parse_now_assumes_utc(self):
        assert parse_now("2026-02-15T12:00:00").tzinfo is not None

    def test_load_items_accepts_plain_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"id": "a"}, {"id": "b"}]))

        assert [i.id for i in load_items(path)] == ["a", "b"]

    def test_load_items_rejects_scalar_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("42")

        with pytest.raises(InvalidItemError):
            load_items(path)


class TestRankCommand:
    """Tests for `decisions rank`."""

    def test_json_output(self, items_file, config_dir):
        result = invoke("rank", items_file, "--now", NOW, "--json", "--config-dir", config_dir)

        assert result.exit_code == 0
        data = json.loads(result.output)
        ids = [i["id"] for i in data["actionItems"]]
        assert ids[0] == "cap-0"
        assert "rollup-idea-not-simulated" in ids
        assert ids[-1] == "cov-1"
        assert len(ids) == 9
        assert [i["id"] for i in data["intelItems"]] == ["i1-rating-1"]

    def test_table_output(self, items_file, config_dir):
        result = invoke("rank", items_file, "--now", NOW, "--config-dir", config_dir)

        assert result.exit_code == 0
        assert "Action Queue (9)" in result.output

    def test_malformed_item_exits_nonzero(self, tmp_path, config_dir):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps([{"title": "no id"}]))

        result = invoke("rank", path, "--config-dir", config_dir)

        assert result.exit_code == 1
        assert "Error ranking items" in result.output

    def test_bad_now_is_usage_error(self, items_file, config_dir):
        result = invoke("rank", items_file, "--now", "soon", "--config-dir", config_dir)

        assert result.exit_code != 0


class TestDashboardCommand:
    """Tests for `decisions dashboard`."""

    def test_json_output_has_six_rows_and_every_tier(self, items_file, config_dir):
        result = invoke("dashboard", items_file, "--now", NOW, "--json", "--config-dir", config_dir)

        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert len(rows) == 6
        assert {r["decisionTier"] for r in rows} == {"capital", "integrity", "coverage"}

    def test_limit_option(self, items_file, config_dir):
        result = invoke(
            "dashboard", items_file, "--now", NOW, "--json", "-n", "3", "--config-dir", config_dir,
        )

        assert [r["id"] for r in json.loads(result.output)] == ["cap-0", "cap-1", "int-1"]

    def test_table_output(self, items_file, config_dir):
        result = invoke("dashboard", items_file, "--now", NOW, "--config-dir", config_dir)

        assert result.exit_code == 0
        assert "Decisions" in result.output
        assert "rolled up" in result.output


class TestExplainCommand:
    """Tests for `decisions explain`."""

    def test_explains_top_level_item(self, items_file, config_dir):
        result = invoke("explain", items_file, "int-1", "--now", NOW, "--config-dir", config_dir)

        assert result.exit_code == 0
        assert "+20000" in result.output
        assert "+3000" in result.output

    def test_explains_rollup_child(self, items_file, config_dir):
        result = invoke(
            "explain", items_file, "a3-unsimulated-2", "--now", NOW, "--config-dir", config_dir,
        )

        assert result.exit_code == 0
        assert "a3-unsimulated-2" in result.output

    def test_unknown_id(self, items_file, config_dir):
        result = invoke("explain", items_file, "nope", "--now", NOW, "--config-dir", config_dir)

        assert result.exit_code == 1
        assert "No item with id nope" in result.output
