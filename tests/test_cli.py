"""
End-to-end tests for the command-line interface.
"""

import csv
import json

import pytest
import yaml

from polyvf import __version__
from polyvf.cli import main, main_with_args, run_calculation
from polyvf.cli_parser import create_parser, validate_args


def _args(*argv):
    return create_parser().parse_args(list(argv))


def _pair_file(tmp_path, separation=1.0):
    path = tmp_path / "pair.yaml"
    data = {
        "surface_a": {"rectangle": {"origin": [0, 0, 0], "u": [1, 0, 0], "v": [0, 1, 0]}},
        "surface_b": {"rectangle": {"origin": [0, 0, separation], "u": [1, 0, 0], "v": [0, 1, 0]}},
    }
    path.write_text(yaml.dump(data), encoding="utf-8")
    return str(path)


def test_version(capsys):
    assert main_with_args(_args("--version")) == 0
    assert capsys.readouterr().out.strip() == __version__


def test_no_arguments_prints_help_and_exits_2(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2
    assert "usage" in capsys.readouterr().out.lower()


def test_main_exit_code(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--geometry", _pair_file(tmp_path), "--outdir", str(tmp_path / "out")])
    assert exc.value.code == 0


def test_single_geometry_run(tmp_path, capsys):
    outdir = tmp_path / "out"
    rc = main_with_args(_args("--geometry", _pair_file(tmp_path), "--outdir", str(outdir)))
    assert rc == 0
    out = capsys.readouterr().out
    assert "[order=7] F12=0.1998" in out

    with open(outdir / "results.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 1
    assert rows[0]["order"] == "7"
    assert float(rows[0]["F12"]) == pytest.approx(0.19982, abs=1e-4)


def test_results_csv_appends(tmp_path):
    outdir = tmp_path / "out"
    geometry = _pair_file(tmp_path)
    for order in ("3", "5"):
        assert main_with_args(_args("--geometry", geometry, "--order", order, "--outdir", str(outdir))) == 0
    with open(outdir / "results.csv", newline="", encoding="utf-8") as f:
        lines = list(csv.reader(f))
    assert lines[0][0] == "timestamp"
    assert [r[2] for r in lines[1:]] == ["3", "5"]


def test_sweep_prints_table(tmp_path, capsys):
    rc = main_with_args(_args("--geometry", _pair_file(tmp_path), "--sweep", "1", "2", "4",
                              "--outdir", str(tmp_path / "out")))
    assert rc == 0
    out = capsys.readouterr().out
    assert "=== Convergence study ===" in out
    with open(tmp_path / "out" / "results.csv", newline="", encoding="utf-8") as f:
        assert len(list(csv.DictReader(f))) == 3


def test_run_calculation_rows(tmp_path):
    rows = run_calculation(_args("--geometry", _pair_file(tmp_path), "--sweep", "2", "3",
                                 "--validate", "--outdir", str(tmp_path)))
    assert [r["order"] for r in rows] == [2, 3]
    for r in rows:
        assert r["reciprocity_residual"] < 1e-14
        assert r["A1"] == pytest.approx(1.0)


def test_plot_outputs(tmp_path):
    outdir = tmp_path / "out"
    rc = main_with_args(_args("--geometry", _pair_file(tmp_path), "--sweep", "1", "2", "3",
                              "--plot", "--outdir", str(outdir)))
    assert rc == 0
    assert len(list(outdir.glob("*_geometry.html"))) == 1
    assert len(list(outdir.glob("*_convergence.png"))) == 1


def test_write_sample(tmp_path):
    out = tmp_path / "cases.yaml"
    assert main_with_args(_args("--write-sample", str(out))) == 0
    assert "cases" in yaml.safe_load(out.read_text(encoding="utf-8"))


def test_cases_mode(tmp_path):
    sample = tmp_path / "cases.yaml"
    main_with_args(_args("--write-sample", str(sample)))
    assert main_with_args(_args("--cases", str(sample), "--outdir", str(tmp_path / "out"))) == 0
    assert (tmp_path / "out" / "cases_summary.csv").exists()


def test_cases_mode_missing_file(tmp_path):
    assert main_with_args(_args("--cases", str(tmp_path / "missing.yaml"),
                                "--outdir", str(tmp_path))) == 1


@pytest.mark.parametrize("argv", [
    ("--outdir", "x"),
    ("--geometry", "a.yaml", "--cases", "b.yaml"),
    ("--cases", "b.yaml", "--sweep", "1", "2"),
])
def test_invalid_argument_combinations(argv):
    with pytest.raises(ValueError):
        validate_args(_args(*argv))
    assert main_with_args(_args(*argv)) == 2


@pytest.mark.parametrize("value", ["0", "-1", "two"])
def test_order_must_be_positive_integer(value):
    with pytest.raises(SystemExit):
        _args("--geometry", "a.yaml", "--order", value)


def test_missing_geometry_file_returns_2(tmp_path):
    assert main_with_args(_args("--geometry", str(tmp_path / "nope.yaml"),
                                "--outdir", str(tmp_path))) == 2


def test_strict_validation_failure_returns_2(tmp_path):
    path = tmp_path / "crossing.yaml"
    path.write_text(yaml.dump({
        "surface_a": {"rectangle": {"origin": [0, 0, 0], "u": [1, 0, 0], "v": [0, 1, 0]}},
        "surface_b": {"rectangle": {"origin": [0, 1.5, -0.5], "u": [1, 0, 0], "v": [0, 0, 1]}},
    }), encoding="utf-8")
    outdir = tmp_path / "out"
    assert main_with_args(_args("--geometry", str(path), "--outdir", str(outdir))) == 0
    assert main_with_args(_args("--geometry", str(path), "--validate", "--outdir", str(outdir))) == 2


def _pair_with_reference(tmp_path, reference):
    path = tmp_path / "pair_ref.yaml"
    _pair_file(tmp_path)
    data = yaml.safe_load((tmp_path / "pair.yaml").read_text(encoding="utf-8"))
    data["reference"] = reference
    path.write_text(yaml.dump(data), encoding="utf-8")
    return str(path)


SQUARES_REFERENCE = {"type": "parallel_rectangles", "a": 1.0, "b": 1.0, "separation": 1.0}


def test_save_results_json(tmp_path, capsys):
    out = tmp_path / "run.json"
    rc = main_with_args(_args("--geometry", _pair_file(tmp_path), "--sweep", "2", "4",
                              "--save-results", str(out), "--outdir", str(tmp_path / "out")))
    assert rc == 0
    assert f"Results saved to: {out}" in capsys.readouterr().out
    data = json.loads(out.read_text(encoding="utf-8"))
    assert set(data["results"]) == {"order_2", "order_4"}
    assert data["results"]["order_4"]["quadrature_order"] == 4
    assert data["results"]["order_4"]["F12"] == pytest.approx(0.19982, abs=1e-3)


def test_save_results_csv(tmp_path):
    out = tmp_path / "run.csv"
    assert main_with_args(_args("--geometry", _pair_file(tmp_path), "--save-results", str(out),
                                "--outdir", str(tmp_path / "out"))) == 0
    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["name"] == "order_7"
    assert rows[0]["quadrature_order"] == "7"


@pytest.mark.parametrize("argv", [
    ("--geometry", "a.yaml", "--save-results", "run.txt"),
    ("--cases", "b.yaml", "--save-results", "run.json"),
])
def test_save_results_argument_errors(argv):
    with pytest.raises(ValueError, match="--save-results"):
        validate_args(_args(*argv))


def test_geometry_reference_reported(tmp_path, capsys):
    geometry = _pair_with_reference(tmp_path, SQUARES_REFERENCE)
    rows = run_calculation(_args("--geometry", geometry, "--outdir", str(tmp_path)))
    assert rows[0]["reference"] == pytest.approx(0.19982, abs=1e-5)

    assert main_with_args(_args("--geometry", geometry, "--outdir", str(tmp_path / "out"))) == 0
    assert "reference=0.1998" in capsys.readouterr().out


def test_geometry_without_reference(tmp_path):
    rows = run_calculation(_args("--geometry", _pair_file(tmp_path), "--outdir", str(tmp_path)))
    assert rows[0]["reference"] is None


def test_convergence_plot_receives_reference(tmp_path, monkeypatch):
    import polyvf.plotting

    seen = {}

    def fake_plot_convergence(orders, f12, out_png, reference=None, title=None):
        seen["orders"] = list(orders)
        seen["reference"] = reference
        return out_png

    monkeypatch.setattr(polyvf.plotting, "plot_convergence", fake_plot_convergence)
    geometry = _pair_with_reference(tmp_path, SQUARES_REFERENCE)
    rc = main_with_args(_args("--geometry", geometry, "--sweep", "2", "3", "--plot",
                              "--outdir", str(tmp_path / "out")))
    assert rc == 0
    assert seen["orders"] == [2, 3]
    assert seen["reference"] == pytest.approx(0.19982, abs=1e-5)


@pytest.mark.parametrize("reference", [{"type": "sphere"}, "coaxial_disks"])
def test_invalid_geometry_reference_returns_2(tmp_path, reference):
    geometry = _pair_with_reference(tmp_path, reference)
    assert main_with_args(_args("--geometry", geometry, "--outdir", str(tmp_path))) == 2
