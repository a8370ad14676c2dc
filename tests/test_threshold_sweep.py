import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import threshold_sweep
from threshold_sweep import SweepPoint, extrapolate, plot_extrapolation, plot_thresholds, sweep


def test_extrapolation_recovers_intercept():
    sizes = np.array([16, 32, 64, 128])
    means = 0.5927 + 0.3 * sizes ** (-3 / 4)
    fit = extrapolate(sizes, means)
    assert fit.pc_inf == pytest.approx(0.5927)
    assert fit.slope == pytest.approx(0.3)
    assert fit.r_squared == pytest.approx(1.0)


def test_extrapolation_needs_two_sizes():
    with pytest.raises(ValueError):
        extrapolate([32, 32], [0.6, 0.61])
    with pytest.raises(ValueError):
        extrapolate([16, 32], [0.6])


def test_sweep_one_point_per_size():
    points = sweep([1, 4], trials=5, seed=0)
    assert [p.n for p in points] == [1, 4]
    assert points[0].mean == 1.0
    assert points[0].stddev == 0.0
    for p in points:
        assert p.lo <= p.mean <= p.hi


def test_sweep_is_reproducible_with_seed():
    a = sweep([3, 5], trials=4, seed=11)
    b = sweep([3, 5], trials=4, seed=11)
    assert a == b


def test_plot_thresholds():
    points = [
        SweepPoint(n=10, mean=0.60, stddev=0.05, lo=0.59, hi=0.61),
        SweepPoint(n=20, mean=0.595, stddev=0.03, lo=0.589, hi=0.601),
    ]
    fit = extrapolate([p.n for p in points], [p.mean for p in points])
    ax = plot_thresholds(points, fit)
    assert ax.get_xlabel() == 'Linear System Size ($L$)'
    labels = [t.get_text() for t in ax.get_legend().get_texts()]
    assert any("p_c(\\infty)" in label for label in labels)
    threshold_sweep.plt.close(ax.figure)


def test_cli_saves_plot(tmp_path, capsys):
    out = tmp_path / "sweep.png"
    argv = ["--Lmin", "2", "--Lmax", "6", "--Lstep", "2", "--t", "3",
            "--seed", "1", "--out", str(out)]
    assert threshold_sweep.main(argv) == 0
    assert out.exists()
    text = capsys.readouterr().out
    assert "simulate n = 4" in text
    assert "pc(infinity) =" in text


def test_cli_single_size_skips_extrapolation(capsys):
    assert threshold_sweep.main(["--Lmin", "3", "--Lmax", "3", "--t", "2", "--seed", "0"]) == 0
    assert "skipping extrapolation" in capsys.readouterr().out


def test_cli_rejects_bad_range():
    with pytest.raises(SystemExit):
        threshold_sweep.main(["--Lmin", "10", "--Lmax", "5"])


def test_plot_extrapolation_draws_fit_to_intercept():
    sizes = [16, 32, 64]
    points = [SweepPoint(n=n, mean=0.5927 + 0.3 * n ** (-3 / 4), stddev=0.01, lo=0.0, hi=1.0)
              for n in sizes]
    fit = extrapolate(sizes, [p.mean for p in points])
    ax = plot_extrapolation(points, fit)

    fit_line, data, intercept = ax.get_lines()
    assert fit_line.get_xdata()[0] == 0.0
    assert fit_line.get_ydata()[0] == pytest.approx(0.5927)
    np.testing.assert_allclose(data.get_xdata(), np.array(sizes, dtype=float) ** (-3 / 4))
    assert intercept.get_ydata()[0] == pytest.approx(0.5927)
    assert ax.get_xlabel() == '$L^{-0.75}$'
    threshold_sweep.plt.close(ax.figure)
