"""Tests for float_planner.cli — command-line entry point."""

import json
from datetime import datetime, timezone

import pytest

from float_planner.cli import EXIT_PLAN_ERROR, main, parse_args


class TestParseArgs:

    def test_plan_defaults(self):
        args = parse_args(["--data", "s.json", "plan", "current", "akers", "pulltite"])
        assert args.command == "plan"
        assert args.vessel is None
        assert args.format == "markdown"

    def test_data_required(self):
        with pytest.raises(SystemExit):
            parse_args(["plan", "current", "akers", "pulltite"])

    def test_as_of_parsed(self):
        args = parse_args(["--data", "s.json", "gauges", "--as-of", "2026-06-01T12:00:00Z"])
        assert args.as_of == datetime(2026, 6, 1, 12, tzinfo=timezone.utc)

    def test_malformed_as_of_is_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["--data", "s.json", "plan", "current", "akers", "pulltite", "--as-of", "June 1st"])
        assert exc_info.value.code == 2
        assert "invalid ISO-8601 timestamp" in capsys.readouterr().err

    def test_repeatable_river(self):
        args = parse_args(["--data", "s.json", "gauges", "--river", "a", "--river", "b"])
        assert args.river == ["a", "b"]


class TestPlanCommand:

    def test_markdown(self, snapshot_path, capsys):
        code = main(["--data", str(snapshot_path), "-q", "plan", "current", "akers", "pulltite"])
        out = capsys.readouterr().out
        assert code == 0
        assert "# Current River: Akers Ferry to Pulltite" in out
        assert "4h 48m" in out

    def test_json(self, snapshot_path, capsys):
        code = main([
            "--data", str(snapshot_path), "-q",
            "plan", "current", "akers", "pulltite", "--vessel", "canoe", "--format", "json",
        ])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["plan"]["distance"]["miles"] == 12.0
        assert data["plan"]["direction"] == "downstream"
        assert data["plan"]["condition"]["code"] == "too_low"

    def test_as_of(self, snapshot_path, capsys):
        main([
            "--data", str(snapshot_path), "-q",
            "plan", "current", "akers", "pulltite",
            "--as-of", "2026-06-04T12:00:00Z", "--format", "json",
        ])
        data = json.loads(capsys.readouterr().out)
        assert data["plan"]["condition"]["code"] == "unknown"
        assert data["plan"]["condition"]["readingAgeHours"] == 72.0

    def test_error_exit_code(self, snapshot_path, capsys):
        code = main(["--data", str(snapshot_path), "-q", "plan", "current", "akers", "akers"])
        captured = capsys.readouterr()
        assert code == EXIT_PLAN_ERROR
        assert "ERROR [SAME_POINT]" in captured.err
        assert captured.out == ""

    def test_config_file(self, snapshot_path, tmp_path, capsys):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"gauge_url_template": "https://example.org/{site_id}"}))
        main([
            "--data", str(snapshot_path), "--config", str(config), "-q",
            "plan", "current", "akers", "pulltite", "--format", "json",
        ])
        data = json.loads(capsys.readouterr().out)
        assert data["plan"]["condition"]["sourceUrl"] == "https://example.org/07064533"


class TestGaugesCommand:

    def test_json(self, snapshot_path, capsys):
        code = main(["--data", str(snapshot_path), "-q", "gauges", "--format", "json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert [g["code"] for g in data["gauges"]] == ["too_low", "unknown"]

    def test_markdown(self, snapshot_path, capsys):
        main(["--data", str(snapshot_path), "-q", "gauges", "--river", "current"])
        assert "primary gauge" in capsys.readouterr().out

    def test_unknown_river(self, snapshot_path, capsys):
        code = main(["--data", str(snapshot_path), "-q", "gauges", "--river", "nile"])
        assert code == EXIT_PLAN_ERROR
        assert "RIVER_NOT_FOUND" in capsys.readouterr().err


class TestSnapCommand:

    def test_snap_vertex(self, snapshot_path, capsys):
        code = main(["--data", str(snapshot_path), "-q", "snap", "current", "37.30", "-91.45"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["riverId"] == "current"
        assert data["needsReview"] is False
        assert data["snapped"]["lat"] == pytest.approx(37.30)

    def test_snap_far_point_needs_review(self, snapshot_path, capsys):
        main(["--data", str(snapshot_path), "-q", "snap", "current", "37.30", "-91.00"])
        data = json.loads(capsys.readouterr().out)
        assert data["needsReview"] is True

    def test_snap_missing_geometry(self, snapshot_path, capsys):
        code = main(["--data", str(snapshot_path), "-q", "snap", "eleven-point", "36.8", "-91.5"])
        assert code == EXIT_PLAN_ERROR
        assert "GEOMETRY_MISSING" in capsys.readouterr().err
