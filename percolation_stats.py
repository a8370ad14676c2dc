"""
Monte Carlo estimate of the site percolation threshold.

Each trial opens the sites of a fresh n-by-n grid in uniformly random order
until the grid percolates and records the fraction of open sites. The
trials are independent, so with ``jobs > 1`` they are farmed out to worker
processes and only the samples are merged.

    python percolation_stats.py 200 100 --seed 42 --jobs 4
"""

import argparse
import math
import sys
from concurrent.futures import ProcessPoolExecutor

import numpy as np

from percolation import Percolation, is_integer

CONFIDENCE_95 = 1.96


def run_trial(n: int, rng: np.random.Generator) -> float:
    """
    One trial on an n-by-n grid; returns the open fraction at the moment
    the grid first percolates.
    """
    sim = Percolation(n)
    # shuffling every site avoids re-drawing sites that are already open
    for site in rng.permutation(n * n):
        row, col = divmod(int(site), n)
        sim.open(row + 1, col + 1)
        if sim.percolates():
            break
    return sim.numberOfOpenSites() / (n * n)


def _run_batch(n, seeds):
    return [run_trial(n, np.random.default_rng(s)) for s in seeds]


def confidence_interval(mean, stddev, trials):
    margin = CONFIDENCE_95 * stddev / math.sqrt(trials)
    return mean - margin, mean + margin


class PercolationStats:
    """
    Runs ``trials`` independent experiments on an n-by-n grid.

    :param n: grid size, >= 1
    :param trials: number of experiments, >= 1
    :param seed: seed for numpy's SeedSequence; the same seed gives the
                 same samples whatever ``jobs`` is.
    :param jobs: worker processes to spread the trials over.
    """

    def __init__(self, n: int, trials: int, seed=None, jobs: int = 1):
        for name, value in (("grid size n", n), ("number of trials", trials), ("number of jobs", jobs)):
            if not is_integer(value):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value < 1:
                raise ValueError(f"{name} must be at least 1, got {value}")

        self.gridSize = int(n)
        self.trialCount = int(trials)
        self.seed = seed

        seeds = np.random.SeedSequence(seed).spawn(self.trialCount)
        if jobs == 1 or self.trialCount == 1:
            results = _run_batch(self.gridSize, seeds)
        else:
            # contiguous chunks keep the samples in trial order
            size = math.ceil(self.trialCount / jobs)
            chunks = [seeds[i:i + size] for i in range(0, self.trialCount, size)]
            with ProcessPoolExecutor(max_workers=jobs) as executor:
                results = []
                for batch in executor.map(_run_batch, [self.gridSize] * len(chunks), chunks):
                    results.extend(batch)

        self.thresholds = np.asarray(results, dtype=float)
        self._mean = float(np.mean(self.thresholds))
        if self.trialCount > 1:
            self._stddev = float(np.std(self.thresholds, ddof=1))
        else:
            self._stddev = 0.0

    def mean(self) -> float:
        """Sample mean of the percolation threshold."""
        return self._mean

    def stddev(self) -> float:
        """Sample standard deviation of the percolation threshold."""
        return self._stddev

    def confidenceLo(self) -> float:
        """Low endpoint of the 95% confidence interval."""
        return confidence_interval(self._mean, self._stddev, self.trialCount)[0]

    def confidenceHi(self) -> float:
        """High endpoint of the 95% confidence interval."""
        return confidence_interval(self._mean, self._stddev, self.trialCount)[1]

    def report(self):
        print(f"{'mean':<23} = {self.mean():.6f}")
        print(f"{'stddev':<23} = {self.stddev():.6f}")
        print(f"{'95% confidence interval':<23} = "
              f"[{self.confidenceLo():.6f}, {self.confidenceHi():.6f}]")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Estimate the percolation threshold of an n-by-n grid by Monte Carlo simulation."
    )
    parser.add_argument('n', type=int, help="Size of the square grid (n x n).")
    parser.add_argument('trials', type=int, help="Number of independent trials.")
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help="Random seed for reproducibility (default: fresh entropy)."
    )
    parser.add_argument(
        '--jobs',
        type=int,
        default=1,
        help="Number of parallel processes (default: 1)."
    )
    args = parser.parse_args(argv)

    if args.n < 1:
        parser.error("n must be at least 1")
    if args.trials < 1:
        parser.error("trials must be at least 1")
    if args.jobs < 1:
        parser.error("jobs must be at least 1")

    stats = PercolationStats(args.n, args.trials, seed=args.seed, jobs=args.jobs)
    stats.report()
    return 0


if __name__ == "__main__":
    sys.exit(main())
