from pathlib import Path

import pytest

import gpxmax.cli.gpx_roundtrip as gr
from gpxmax.config import GPXmaxConfig
from gpxmax.errors import ConfigError
from gpxmax.extensions.garmin import GarminTrackPointExtensionReader
from gpxmax.model.document import GpxFile
from gpxmax.settings import ReaderSettings, WriterSettings


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    # keep the developer's own ~/.config and GPXMAX_* out of the picture
    monkeypatch.setattr(
        gr,
        "load_config",
        lambda: GPXmaxConfig(reader=ReaderSettings(), writer=WriterSettings(), source={}),
    )


def test_main_rewrites_files(tmp_path: Path, sample_gpx_path, monkeypatch, capsys):
    out_dir = tmp_path / "out"
    monkeypatch.setattr(gr.sys, "argv", ["gpx-roundtrip", str(sample_gpx_path), "--out-dir", str(out_dir)])

    rc = gr.main()
    assert rc == 0

    dest = out_dir / "sample.gpx"
    assert dest.is_file()
    assert GpxFile.read_from(dest) == GpxFile.read_from(sample_gpx_path)

    out = capsys.readouterr().out
    assert "sample.gpx: 2 waypoints, 1 routes, 1 tracks (3 track points)" in out


def test_main_reports_unreadable_files(tmp_path: Path, sample_gpx_path, capsys):
    bad = tmp_path / "bad.gpx"
    bad.write_text("<gpx/>", encoding="utf-8")
    missing = tmp_path / "missing.gpx"

    rc = gr.main([str(bad), str(missing), str(sample_gpx_path), "--out-dir", str(tmp_path / "out")])
    assert rc == 1

    out = capsys.readouterr().out
    assert "bad.gpx: cannot read" in out
    assert "is not a file: Skipping" in out
    assert (tmp_path / "out" / "sample.gpx").is_file()
    assert not (tmp_path / "out" / "bad.gpx").exists()


def test_main_garmin_flag_writes_prefixed_extensions(tmp_path: Path, sample_gpx_path):
    rc = gr.main([str(sample_gpx_path), "--out-dir", str(tmp_path), "--garmin", "--compact"])
    assert rc == 0

    text = (tmp_path / "sample.gpx").read_text(encoding="utf-8")
    assert "<gpxtpx:TrackPointExtension><gpxtpx:atemp>14.5</gpxtpx:atemp><gpxtpx:hr>98</gpxtpx:hr>" in text


def test_main_writer_time_zone_flag(tmp_path: Path, sample_gpx_path):
    rc = gr.main([str(sample_gpx_path), "--out-dir", str(tmp_path), "--writer-time-zone", "+02:00"])
    assert rc == 0
    assert "<time>2024-05-04T10:00:00+02:00</time>" in (tmp_path / "sample.gpx").read_text(encoding="utf-8")


def test_main_config_error(tmp_path: Path, sample_gpx_path, monkeypatch, capsys):
    def broken():
        raise ConfigError("Failed to parse TOML config: x")

    monkeypatch.setattr(gr, "load_config", broken)
    rc = gr.main([str(sample_gpx_path), "--out-dir", str(tmp_path)])
    assert rc == 2
    assert "Configuration error" in capsys.readouterr().out


def test_main_bad_time_zone_flag(tmp_path: Path, sample_gpx_path):
    assert gr.main([str(sample_gpx_path), "--out-dir", str(tmp_path), "--reader-time-zone", "nowhere"]) == 2


def test_main_reports_unwritable_files(tmp_path: Path, sample_gpx_path, monkeypatch, capsys):
    # typed Garmin payloads on read, but a writer that only knows raw XML
    monkeypatch.setattr(
        gr,
        "load_config",
        lambda: GPXmaxConfig(
            reader=ReaderSettings(extension_reader=GarminTrackPointExtensionReader()),
            writer=WriterSettings(),
            source={},
        ),
    )
    other = tmp_path / "plain.gpx"
    other.write_text(
        '<gpx xmlns="http://www.topografix.com/GPX/1/1" version="1.1" creator="x"><wpt lat="1" lon="2"/></gpx>',
        encoding="utf-8",
    )

    rc = gr.main([str(sample_gpx_path), str(other), "--out-dir", str(tmp_path / "out")])
    assert rc == 1

    out = capsys.readouterr().out
    assert "sample.gpx: cannot write" in out
    assert "plain.gpx: 1 waypoints" in out
    assert not (tmp_path / "out" / "sample.gpx").exists()
    assert (tmp_path / "out" / "plain.gpx").is_file()
