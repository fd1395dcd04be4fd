import json

import pytest

import fleettrack.analyze.gpx_analyze as ga
from fleettrack.config import FleetTrackConfig


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.setattr(ga, "load_config", lambda: FleetTrackConfig())


def test_analyze_sample_gpx(sample_gpx_path):
    from fleettrack.analyze.facade import TrackingAnalysis
    from fleettrack.formats.gpx import read_trackpoints

    result = TrackingAnalysis().analyze(read_trackpoints(sample_gpx_path))
    stats = result.statistics

    assert result.accepted_points == 8
    assert stats.total_distance_km == pytest.approx(1.0)
    assert stats.total_time_seconds == 300
    assert stats.moving_time_seconds == 90
    assert stats.idle_time_seconds == 210
    assert stats.average_speed_kmh == pytest.approx(40.03, abs=0.02)
    assert stats.max_speed_kmh == pytest.approx(30.0)
    assert stats.total_stops == 1

    assert len(result.stops) == 1
    assert (result.stops[0].start_index, result.stops[0].end_index) == (2, 5)
    assert result.stops[0].duration_seconds == 180
    assert result.stops[0].centroid.longitude == pytest.approx(0.0045)
    assert len(result.simplified) == 6


def test_main_tsv(sample_gpx_path, capsys):
    rc = ga.main(["--tsv", str(sample_gpx_path)])
    assert rc == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0] == ga.TSV_HEADER
    row = lines[1].split("\t")
    assert row[0] == str(sample_gpx_path)
    assert row[1:4] == ["8", "0", "1.00"]
    assert row[-2:] == ["1", "6"]


def test_main_json(sample_gpx_path, capsys):
    rc = ga.main(["--json", "--min-stop-s", "600", str(sample_gpx_path)])
    assert rc == 0

    doc = json.loads(capsys.readouterr().out)
    assert doc["statistics"]["total_stops"] == 1
    assert doc["stops"] == []
    assert doc["simplified_points"] == 6


def test_main_human_report(sample_gpx_path, capsys):
    assert ga.main([str(sample_gpx_path)]) == 0
    out = capsys.readouterr().out
    assert "stops           : 1" in out
    assert "180s  at 0.000000°N, 0.004500°E" in out


def test_main_reports_failures_and_continues(sample_gpx_path, tmp_path, capsys):
    bad = tmp_path / "bad.gpx"
    bad.write_text("not xml", encoding="utf-8")

    rc = ga.main(["--tsv", str(tmp_path / "missing.gpx"), str(bad), str(sample_gpx_path)])

    assert rc == 1
    captured = capsys.readouterr()
    assert len(captured.out.strip().splitlines()) == 2
    assert "Skipping (not a file)" in captured.err
    assert "ERROR" in captured.err
