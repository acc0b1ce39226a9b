import pytest

import canvas_layout.__main__ as cli
from canvas_layout import EXAMPLE
from canvas_layout.bitmap import Bitmap


def _write(tmp_path, text):
    path = tmp_path / "layout.txt"
    path.write_text(text, encoding="utf-8")
    return path


def test_main_prints_solved_locations(tmp_path, capsys):
    path = _write(tmp_path, EXAMPLE)

    cli.main([str(path), "--log-level", "WARNING"])

    out = capsys.readouterr().out
    assert "Image: 1000x800" in out
    assert "plot: (left=50, bottom=40, right=980, top=760)" in out
    assert "legend: (left=850, bottom=690, right=970, top=750)" in out
    assert "coordinates: x=[0, 10] y=[0, 5]" in out
    assert "method: lu" in out
    assert "Unconstrained:\n  (none)" in out


def test_main_writes_png(tmp_path, capsys, monkeypatch):
    path = _write(tmp_path, EXAMPLE)
    saved = []

    def _save(self, output):
        saved.append((self.width, self.height, output))
        return output

    monkeypatch.setattr(Bitmap, "save", _save)
    png_path = tmp_path / "out" / "layout.png"

    cli.main([str(path), "--png-output-path", str(png_path)])

    assert saved == [(1000, 800, png_path)]
    assert f"PNG written to {png_path}" in capsys.readouterr().out


def test_invalid_script_exits_with_status_one(tmp_path):
    path = _write(tmp_path, "canvas plot in nowhere\n")

    with pytest.raises(SystemExit) as exc:
        cli.main([str(path)])

    assert exc.value.code == 1


def test_contradiction_fails_unless_lenient(tmp_path, capsys):
    text = "\n".join(
        [
            "image [width=100 height=100]",
            "canvas a in master",
            "relation a.left = master.left + 10",
            "relation a.left = master.left + 20 [description=\"conflict\"]",
            "relation master.right = a.right",
            "relation a.bottom = master.bottom",
            "relation master.top = a.top",
        ]
    )
    path = _write(tmp_path, text)

    with pytest.raises(SystemExit) as exc:
        cli.main([str(path)])
    assert exc.value.code == 1

    cli.main([str(path), "--lenient", "--no-diagnostics"])
    out = capsys.readouterr().out
    assert "success: False" in out
    assert "FAILED" in out
    assert "a: (left=15, bottom=0, right=100, top=100)" in out
