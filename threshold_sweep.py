"""
Percolation threshold across grid sizes.

Runs the Monte Carlo estimator for a range of grid sizes L, fits the mean
threshold against L^(-3/4) and reads pc(infinity) off the intercept.

    python threshold_sweep.py --Lmin 50 --Lmax 200 --Lstep 50 --t 500 --out sweep.png
"""

import argparse
import sys
from dataclasses import dataclass

import numpy as np
import matplotlib.pyplot as plt
from scipy.stats import linregress

from percolation_stats import PercolationStats

# correlation-length exponent nu = 4/3 for 2D percolation
SCALING_EXPONENT = -3 / 4


@dataclass
class SweepPoint:
    n: int
    mean: float
    stddev: float
    lo: float
    hi: float


@dataclass
class Extrapolation:
    pc_inf: float
    slope: float
    r_squared: float
    exponent: float = SCALING_EXPONENT


def sweep(sizes, trials, seed=None, jobs=1, verbose=False):
    """
    Runs one PercolationStats per grid size. With a seed, size i uses
    seed + i so every size draws from its own stream.
    """
    points = []
    for i, n in enumerate(sizes):
        n = int(n)
        if verbose:
            print(f"simulate n = {n}")
        stats = PercolationStats(
            n,
            trials,
            seed=None if seed is None else seed + i,
            jobs=jobs,
        )
        if verbose:
            stats.report()
        points.append(SweepPoint(
            n=n,
            mean=stats.mean(),
            stddev=stats.stddev(),
            lo=stats.confidenceLo(),
            hi=stats.confidenceHi(),
        ))
    return points


def extrapolate(sizes, means, exponent=SCALING_EXPONENT):
    """
    Least-squares line of mean threshold against L**exponent.
    The intercept at L**exponent == 0 estimates pc(infinity).
    """
    sizes = np.asarray(sizes, dtype=float)
    means = np.asarray(means, dtype=float)
    if sizes.shape != means.shape:
        raise ValueError("sizes and means must have the same length")
    if len(np.unique(sizes)) < 2:
        raise ValueError("extrapolation needs at least two distinct grid sizes")

    fit = linregress(sizes ** exponent, means)
    return Extrapolation(
        pc_inf=float(fit.intercept),
        slope=float(fit.slope),
        r_squared=float(fit.rvalue ** 2),
        exponent=exponent,
    )


def plot_thresholds(points, extrapolation=None, ax=None):
    """
    Error-bar plot of mean pc +- stddev against L. When an extrapolation
    is given, its pc(infinity) is drawn as a horizontal reference line.
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 6))

    L_values = np.array([p.n for p in points])
    ax.errorbar(
        L_values,
        [p.mean for p in points],
        yerr=[p.stddev for p in points],
        fmt='o-',
        color='blue',
        ecolor='blue',
        capsize=5,
        label=r'Mean $p_c \pm \sigma$'
    )
    if extrapolation is not None:
        ax.axhline(
            extrapolation.pc_inf,
            color='red',
            linestyle='--',
            label=f"$p_c(\\infty)$ = {extrapolation.pc_inf:.5f}"
        )

    ax.set_xlabel('Linear System Size ($L$)', fontsize=14)
    ax.set_ylabel(r'Mean Critical Probability ($\bar{p}_c$)', fontsize=14)
    ax.set_title('Mean $p_c$ vs. System Size ($L$)', fontsize=16)
    ax.grid(True, linestyle='--', alpha=0.6)
    ax.legend(loc='best')
    return ax


def plot_extrapolation(points, extrapolation, ax=None):
    """
    Mean pc against L**exponent with the fitted line carried down to
    L**exponent == 0, where the intercept marks pc(infinity).
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 6))

    X_scaling = np.array([p.n for p in points], dtype=float) ** extrapolation.exponent
    X_plot_max = float(np.max(X_scaling) * 1.05)
    X_line = np.linspace(0.0, X_plot_max, 100)
    Y_line = extrapolation.slope * X_line + extrapolation.pc_inf

    ax.plot(X_line, Y_line, color='blue', linestyle='--',
            label=f"Fit: $p_c(\\infty)$ = {extrapolation.pc_inf:.5f}")
    ax.plot(X_scaling, [p.mean for p in points], 'o', color='blue', markersize=8,
            label=r"Data $\bar{p}_c(L)$")
    ax.plot(0, extrapolation.pc_inf, 'x', color='red', markersize=10)

    ax.set_xlabel(f'$L^{{{extrapolation.exponent:.2f}}}$', fontsize=14)
    ax.set_ylabel(r'Mean Critical Probability ($\bar{p}_c$)', fontsize=14)
    ax.set_title('Finite-Size Scaling Extrapolation', fontsize=16)
    ax.set_xlim(-0.05 * X_plot_max, X_plot_max)
    ax.grid(True, linestyle='--', alpha=0.6)
    ax.legend(loc='best')
    return ax


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run a Monte Carlo simulation for 2D percolation over a range of grid sizes."
    )
    parser.add_argument(
        '--Lmin',
        type=int,
        default=50,
        help="Minimum size of the square grid (N_min x N_min)."
    )
    parser.add_argument(
        '--Lmax',
        type=int,
        default=200,
        help="Maximum size of the square grid (N_max x N_max)."
    )
    parser.add_argument(
        '--Lstep',
        type=int,
        default=50,
        help="Step size for increasing the grid size N."
    )
    parser.add_argument(
        '--t',
        type=int,
        default=500,
        help="The number of Monte Carlo trials to perform."
    )
    parser.add_argument('--seed', type=int, default=None, help="Base random seed.")
    parser.add_argument('--jobs', type=int, default=1, help="Number of parallel processes.")
    parser.add_argument('--out', default=None, help="Save the plot to this file.")
    parser.add_argument('--show', action='store_true', help="Show the plot window.")
    args = parser.parse_args(argv)

    if args.Lmin < 1 or args.Lstep < 1 or args.Lmax < args.Lmin:
        parser.error("need 1 <= Lmin <= Lmax and Lstep >= 1")
    if args.t < 1:
        parser.error("--t must be at least 1")
    if args.jobs < 1:
        parser.error("--jobs must be at least 1")

    sizes = np.arange(args.Lmin, args.Lmax + 1, args.Lstep)

    print("Starting Monte Carlo Percolation Analysis...")
    print(f"System sizes (N): {args.Lmin} to {args.Lmax}, step {args.Lstep}")
    print(f"Trials per size: {args.t}")
    print("=" * 60)

    points = sweep(sizes, args.t, seed=args.seed, jobs=args.jobs, verbose=True)

    print("\n--- Simulation Complete ---")

    extrapolation = None
    if len(points) >= 2:
        extrapolation = extrapolate([p.n for p in points], [p.mean for p in points])
        print(f"\n--- Extrapolation Results (exponent {extrapolation.exponent:.2f}) ---")
        print(f"pc(infinity) = {extrapolation.pc_inf:.6f}, R^2 = {extrapolation.r_squared:.4f}")
        print("-------------------------------------------------------")
    else:
        print("Only one grid size, skipping extrapolation.")

    if args.out or args.show:
        if extrapolation is None:
            fig, ax = plt.subplots(figsize=(10, 6))
            plot_thresholds(points, ax=ax)
        else:
            fig, (ax, ax_fit) = plt.subplots(1, 2, figsize=(20, 6))
            plot_thresholds(points, extrapolation, ax=ax)
            plot_extrapolation(points, extrapolation, ax=ax_fit)
        if args.out:
            fig.savefig(args.out, dpi=150, bbox_inches='tight')
            print(f"  Saved: {args.out}")
        if args.show:
            plt.show()
        plt.close(fig)
    return 0


if __name__ == "__main__":
    sys.exit(main())
