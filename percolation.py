"""
Site percolation on an n-by-n square grid.

Rows and columns are numbered 1 .. n, with (1, 1) the upper-left site.
Run as a script to replay a file of site openings:

    python percolation.py input.txt

where the first non-blank line holds n and every following line a
``row col`` pair.
"""

import argparse
import sys

import numpy as np

from union_find import WeightedQuickUnionUF


class InvalidCoordinateError(IndexError, ValueError):
    """Row or column that is not an integer in 1 .. n."""


def is_integer(x) -> bool:
    # bool is an int subclass but never a valid size or coordinate
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)


class Percolation:
    """
    Incremental connectivity over an n-by-n grid of blocked/open sites.

    Two union-find structures share the site indices 0 .. n*n-1 and each
    reserves index n*n for a single virtual anchor: the top structure ties
    it to the open sites of row 1, the bottom structure to those of row n.
    isFull() reads the top structure alone, so a site that only reaches the
    bottom never shows up as full once the grid percolates elsewhere.
    """

    def __init__(self, n: int, prune: bool = True):
        if not is_integer(n):
            raise ValueError(f"grid size n must be an integer, got {n!r}")
        if n <= 0:
            raise ValueError(f"grid size n must be greater than 0, got {n}")

        self.gridSize = int(n)
        self.gridSquare = self.gridSize * self.gridSize
        self.prune = prune

        self.grid = np.zeros((self.gridSize, self.gridSize), dtype=bool)

        self.ufTop = WeightedQuickUnionUF(self.gridSquare + 1)
        self.ufBottom = WeightedQuickUnionUF(self.gridSquare + 1)
        self.anchor = self.gridSquare

        self.openSite = 0
        self.isPercolate = False

    @property
    def n(self) -> int:
        return self.gridSize

    def __repr__(self):
        return (f"Percolation(n={self.gridSize}, open={self.openSite}, "
                f"percolates={self.isPercolate})")

    def validate(self, row: int, col: int):
        if not is_integer(row):
            raise InvalidCoordinateError(f"row must be an integer, got {row!r}")
        if not is_integer(col):
            raise InvalidCoordinateError(f"column must be an integer, got {col!r}")
        if row < 1 or row > self.gridSize:
            raise InvalidCoordinateError(
                f"row {row} is not between 1 and {self.gridSize}")
        if col < 1 or col > self.gridSize:
            raise InvalidCoordinateError(
                f"column {col} is not between 1 and {self.gridSize}")

    def flattenGrid(self, row: int, col: int) -> int:
        return self.gridSize * (row - 1) + (col - 1)

    # open the site (row, col) if it is not open already
    def open(self, row: int, col: int):
        self.validate(row, col)
        if self.grid[row - 1, col - 1]:
            return

        self.grid[row - 1, col - 1] = True
        self.openSite += 1
        self._connect_neighbours(row, col)

        # a top-to-bottom path needs at least n open sites
        if self.isPercolate or (self.prune and self.openSite < self.gridSize):
            return
        index = self.flattenGrid(row, col)
        if (self.ufTop.connected(index, self.anchor)
                and self.ufBottom.connected(index, self.anchor)):
            self.isPercolate = True

    def _connect_neighbours(self, row: int, col: int):
        n = self.gridSize
        index = self.flattenGrid(row, col)

        # a single open site touches both the top and the bottom row
        if n == 1:
            self.ufTop.union(index, self.anchor)
            self.ufBottom.union(index, self.anchor)
            self.isPercolate = True
            return

        ## left, right, up, down
        for nRow, nCol in ((row, col - 1), (row, col + 1),
                           (row - 1, col), (row + 1, col)):
            if not (1 <= nRow <= n and 1 <= nCol <= n):
                continue
            if not self.grid[nRow - 1, nCol - 1]:
                continue
            other = self.flattenGrid(nRow, nCol)
            if not self.ufTop.connected(index, other):
                self.ufTop.union(index, other)
                self.ufBottom.union(index, other)

        ## top row
        if row == 1:
            self.ufTop.union(index, self.anchor)

        ## bottom row
        if row == n:
            self.ufBottom.union(index, self.anchor)

    # is site (row, col) open?
    def isOpen(self, row: int, col: int) -> bool:
        self.validate(row, col)
        return bool(self.grid[row - 1, col - 1])

    # is site (row, col) connected to the top row?
    def isFull(self, row: int, col: int) -> bool:
        self.validate(row, col)
        return self.ufTop.connected(self.flattenGrid(row, col), self.anchor)

    def numberOfOpenSites(self) -> int:
        return self.openSite

    def percolates(self) -> bool:
        return self.isPercolate

    def open_fraction(self) -> float:
        return self.openSite / self.gridSquare


def read_sites(path):
    """
    Parses a replay file into (n, [(row, col), ...]).

    The first non-blank line is the grid size. Reading stops at the first
    later line that does not hold exactly two fields.
    """
    with open(path) as fh:
        lines = [line.strip() for line in fh]
    lines = [line for line in lines if line]
    if not lines:
        raise ValueError(f"{path}: no grid size found")

    try:
        n = int(lines[0])
    except ValueError:
        raise ValueError(f"{path}: grid size {lines[0]!r} is not an integer") from None

    sites = []
    for line in lines[1:]:
        fields = line.split()
        if len(fields) != 2:
            break
        sites.append((int(fields[0]), int(fields[1])))
    return n, sites


def replay(n, sites):
    """
    Opens each (row, col) in turn on a fresh grid, yielding the
    site and the grid after every step.
    """
    perc = Percolation(n)
    for row, col in sites:
        perc.open(row, col)
        yield row, col, perc


def _flag(value: bool) -> str:
    return "true" if value else "false"


def describe(perc, row, col):
    return (f"grid [{row}][{col}] isOpen: {_flag(perc.isOpen(row, col))}; "
            f"isFull: {_flag(perc.isFull(row, col))}; "
            f"isPercolation: {_flag(perc.percolates())}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Replay a file of site openings on an n-by-n percolation grid."
    )
    parser.add_argument(
        'file',
        help="First non-blank line is n, then one 'row col' pair per line."
    )
    args = parser.parse_args(argv)

    try:
        n, sites = read_sites(args.file)
        for row, col, perc in replay(n, sites):
            print(f"open grid[{row}][{col}]")
            print(describe(perc, row, col))
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
