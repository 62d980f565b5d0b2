"""
Backtracking solver for Kakuro puzzles

Strategy:
1. Validate the givens run by run; a broken board is never searched
2. MRV selection: recompute the domain of every open cell, fail on an empty
   one, commit to a singleton at once, otherwise branch on the smallest domain
3. Try digits 9 down to 1, recurse, undo on failure
4. Report the partial board every `report_interval` seconds and on return

Pruning lives in ConstraintChecker.compute_domain and is recomputed at every
node; there is no separate propagation pass and no cached domain state.
"""

import sys
import time
from typing import Dict, Optional, Tuple, Union

from .puzzle import KakuroPuzzle, KakuroError, Position
from .constraints import ConstraintChecker, mask_to_digits


Choice = Tuple[Position, int]  # cell to branch on and its domain mask


class SolveTimeoutError(KakuroError, RuntimeError):
    """The optional time budget ran out before the search finished"""


class ProgressSink:
    """Receives the partially solved board while a solve is running"""

    def update_status(self, puzzle: KakuroPuzzle) -> None:
        raise NotImplementedError


class NullProgress(ProgressSink):
    def update_status(self, puzzle: KakuroPuzzle) -> None:
        pass


class KakuroSolver:
    def __init__(self, puzzle: KakuroPuzzle, progress: Optional[ProgressSink] = None,
                 report_interval: float = 5.0, verbose: bool = False):
        if report_interval < 0:
            raise ValueError(f"[solver] report_interval must be >= 0, got {report_interval}")
        self.puzzle = puzzle
        self.progress = progress if progress is not None else NullProgress()
        self.report_interval = report_interval
        self.verbose = verbose
        self.timeout: Optional[float] = None
        self.start_time = 0.0
        self._next_report = 0.0
        self.stats: Dict[str, Union[int, float]] = {}
        self._reset_stats()

    def _reset_stats(self) -> None:
        self.stats = {
            'iterations': 0,
            'assignments': 0,
            'backtracks': 0,
            'contradictions': 0,
            'progress_reports': 0,
            'elapsed_seconds': 0.0,
        }

    # -------------------------------------------------------------------------
    # Main solving driver
    # -------------------------------------------------------------------------
    def solve(self, timeout_seconds: Optional[float] = None) -> bool:
        """
        Fill in every value cell.

        Returns True with the board solved, or False with every value cell
        reset to unknown when no filling exists. Raises MalformedPuzzleError
        for runs without a clue and SolveTimeoutError when `timeout_seconds`
        runs out (the board is then back in its pre-call state).
        """
        self._reset_stats()
        self.start_time = time.time()
        self.timeout = timeout_seconds
        self._next_report = self.start_time + self.report_interval

        if self.verbose:
            print(f"Starting Kakuro solver: {self.puzzle}")
            print(f"Open cells: {len(self.puzzle.unknown_cells())}\n")

        if not ConstraintChecker.is_consistent(self.puzzle):
            if self.verbose:
                print("Givens already break the puzzle:")
                for violation in ConstraintChecker.find_violations(self.puzzle):
                    print(f"  {violation}")
            self.puzzle.clear_digits()
            self._finish(False)
            return False

        previous_limit = self._ensure_recursion_headroom()
        try:
            solved = self._backtrack(0)
        finally:
            sys.setrecursionlimit(previous_limit)
        if not solved:
            self.puzzle.clear_digits()
        self._finish(solved)
        return solved

    def _finish(self, solved: bool) -> None:
        self.stats['elapsed_seconds'] = time.time() - self.start_time
        self._report()
        if self.verbose:
            print("\n✓ Puzzle solved!" if solved else "\n✗ No solution exists")
            self._print_stats()

    def _ensure_recursion_headroom(self) -> int:
        """Raise the recursion limit for this search; returns the limit to restore"""
        # one frame per open cell, plus whatever the caller already uses
        previous = sys.getrecursionlimit()
        needed = len(self.puzzle.unknown_cells()) + 200
        if previous < needed:
            sys.setrecursionlimit(needed)
        return previous

    # -------------------------------------------------------------------------
    # Progress and time budget
    # -------------------------------------------------------------------------
    def _report(self) -> None:
        self.stats['progress_reports'] += 1
        self.progress.update_status(self.puzzle)

    def _maybe_report(self, now: float) -> None:
        if now >= self._next_report:
            self._report()
            self._next_report = now + self.report_interval

    def _check_timeout(self, now: float) -> None:
        if self.timeout is not None and now - self.start_time >= self.timeout:
            raise SolveTimeoutError(
                f"[solver] Gave up after {now - self.start_time:.1f}s "
                f"({self.stats['iterations']} iterations)"
            )

    # -------------------------------------------------------------------------
    # MRV selection
    # -------------------------------------------------------------------------
    def _select_cell(self) -> Optional[Choice]:
        """
        Pick the open cell with the fewest legal digits.

        Returns None when no open cells remain. A returned mask of 0 is a
        contradiction: some open cell has nothing left to try.
        """
        best: Optional[Choice] = None
        best_count = 10

        for row, col in self.puzzle.unknown_cells():
            mask, count = ConstraintChecker.compute_domain(self.puzzle, row, col)
            if count == 0:
                return (row, col), 0
            if count == 1:
                return (row, col), mask
            if count < best_count:
                best = ((row, col), mask)
                best_count = count

        return best

    # -------------------------------------------------------------------------
    # Backtracking
    # -------------------------------------------------------------------------
    def _backtrack(self, depth: int) -> bool:
        self.stats['iterations'] += 1
        now = time.time()
        self._check_timeout(now)
        self._maybe_report(now)

        if self.verbose and self.stats['iterations'] % 1000 == 0:
            cp = self.puzzle.get_completion_percentage()
            print(f"  Progress: {cp:.1%} | Iterations: {self.stats['iterations']} | "
                  f"Backtracks: {self.stats['backtracks']} | Depth: {depth}")

        choice = self._select_cell()
        if choice is None:
            return True

        (row, col), mask = choice
        if not mask:
            self.stats['contradictions'] += 1
            return False

        if self.verbose and depth < 3:
            print(f"{'  ' * depth}Trying cell ({row},{col}) with {mask_to_digits(mask)}")

        for digit in mask_to_digits(mask):
            self.puzzle.set_digit(row, col, digit)
            self.stats['assignments'] += 1

            solved = False
            try:
                solved = self._backtrack(depth + 1)
            finally:
                # undo on failure and on any exception unwinding through here
                if not solved:
                    self.puzzle.clear_digit(row, col)

            if solved:
                return True

            self.stats['backtracks'] += 1
            if self.verbose and depth < 3:
                print(f"{'  ' * depth}  Backtrack from {digit} at ({row},{col})")

        return False

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------
    def _print_stats(self) -> None:
        """Print solving statistics."""
        print("\nSolving Statistics:")
        print(f"  Iterations: {self.stats['iterations']}")
        print(f"  Assignments: {self.stats['assignments']}")
        print(f"  Backtracks: {self.stats['backtracks']}")
        print(f"  Contradictions: {self.stats['contradictions']}")
        print(f"  Progress reports: {self.stats['progress_reports']}")
        print(f"  Elapsed: {self.stats['elapsed_seconds']:.3f}s")


def solve(puzzle: KakuroPuzzle, progress_sink: Optional[ProgressSink] = None,
          report_interval: float = 5.0) -> bool:
    """Solve `puzzle` in place; see KakuroSolver.solve"""
    return KakuroSolver(puzzle, progress_sink, report_interval).solve()
