from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from callout_timeline import cli


class _FakeMeasurer:
    def __init__(self, font_path: str | None = None) -> None:
        self.font_path = font_path

    def __call__(self, font_family: str, font_size_pt: float, text: str) -> float:
        return 4.0 * max(len(line) for line in text.split("\n"))


def _write_timeline(path: Path) -> Path:
    path.write_text(
        json.dumps(
            {
                "width": 500,
                "start": "2000-01-01",
                "end": "2010-01-01",
                "num_ticks": 2,
                "callouts": [["First", "2002-01-01"], ["Second one", "2002-02-01", "#AA0000"]],
                "eras": [["Decade", "2000-01-01", "2009-12-31"]],
            }
        ),
        encoding="utf-8",
    )
    return path


def test_cli_writes_svg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr(cli, "PillowTextMeasurer", _FakeMeasurer)
    source = _write_timeline(tmp_path / "timeline.json")
    out = tmp_path / "rendered.svg"
    assert cli.main([str(source), "--output", str(out), "--full-scan"]) == 0
    assert out.exists()
    assert "Second one" in out.read_text(encoding="utf-8")
    assert str(out) in capsys.readouterr().out


def test_cli_defaults_output_next_to_input(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "PillowTextMeasurer", _FakeMeasurer)
    source = _write_timeline(tmp_path / "timeline.json")
    assert cli.main([str(source)]) == 0
    assert (tmp_path / "timeline.svg").exists()


def test_cli_rejects_malformed_input(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "PillowTextMeasurer", _FakeMeasurer)
    source = tmp_path / "broken.json"
    source.write_text(json.dumps({"apiVersion": 2, "width": 100, "startDate": "2000-01-01"}), encoding="utf-8")
    assert cli.main([str(source)]) == 2
    assert cli.main([str(tmp_path / "missing.json")]) == 2


def test_cli_missing_config_exits_2(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(cli, "PillowTextMeasurer", _FakeMeasurer)
    source = _write_timeline(tmp_path / "timeline.json")
    assert cli.main([str(source), "--config", str(tmp_path / "nope.toml")]) == 2
    assert "Config file not found" in caplog.text
    assert not (tmp_path / "timeline.svg").exists()


def test_cli_malformed_config_exits_2(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(cli, "PillowTextMeasurer", _FakeMeasurer)
    source = _write_timeline(tmp_path / "timeline.json")
    config = tmp_path / "timeline.config.toml"
    config.write_text("[layout\nlevel_increment = 12\n", encoding="utf-8")
    assert cli.main([str(source), "--config", str(config)]) == 2
    assert "invalid TOML" in caplog.text


def test_cli_png_without_cairosvg_exits_2(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setattr(cli, "PillowTextMeasurer", _FakeMeasurer)
    # A None entry in sys.modules makes `import cairosvg` raise ImportError.
    monkeypatch.setitem(sys.modules, "cairosvg", None)
    source = _write_timeline(tmp_path / "timeline.json")
    png = tmp_path / "timeline.png"
    assert cli.main([str(source), "--png", str(png)]) == 2
    assert (tmp_path / "timeline.svg").exists()
    assert not png.exists()
    assert "cairosvg" in caplog.text


def test_cli_config_colors_reach_svg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "PillowTextMeasurer", _FakeMeasurer)
    source = _write_timeline(tmp_path / "timeline.json")
    config = tmp_path / "timeline.config.toml"
    config.write_text('[render]\ncallout_color = "#ABCDEF"\nlabel_color = "#FEDCBA"\n', encoding="utf-8")
    assert cli.main([str(source), "--config", str(config)]) == 0
    svg = (tmp_path / "timeline.svg").read_text(encoding="utf-8")
    assert 'stroke="#ABCDEF"' in svg
    assert 'fill="#FEDCBA"' in svg
