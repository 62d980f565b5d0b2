"""
Constraint checking and domain computation for the Kakuro solver

Key points:
 - Domains are bitmasks: bit d set <=> digit d is still legal
 - Duplicate avoidance across the cell's across and down runs
 - Closing-run forcing when the cell is the last unknown of a run
 - Interval feasibility using the min/max sum of k distinct digits
 - Lone cells with no clue only ever constrain themselves to 1..9

Compatible with:
  from .puzzle import KakuroPuzzle, Run, ACROSS, DOWN
"""

from typing import List, Optional, Tuple
from collections import Counter

from .puzzle import ACROSS, DOWN, KakuroPuzzle, Run, ValueCell, CellTypeError


# MIN_SUM[k] / MAX_SUM[k]: smallest / largest sum of k distinct digits from 1..9
MIN_SUM: List[int] = [k * (k + 1) // 2 for k in range(10)]
MAX_SUM: List[int] = [k * (19 - k) // 2 for k in range(10)]

ALL_DIGITS = 0b1111111110  # bits 1..9

Domain = Tuple[int, int]  # (bitmask, number of legal digits)


def mask_to_digits(mask: int, descending: bool = True) -> List[int]:
    """Expand a domain bitmask into its digits"""
    order = range(9, 0, -1) if descending else range(1, 10)
    return [d for d in order if mask & (1 << d)]


def mask_size(mask: int) -> int:
    return bin(mask & ALL_DIGITS).count("1")


# -----------------------------------------------------------------------------
# Constraint Checking
# -----------------------------------------------------------------------------
class ConstraintChecker:
    """Computes legal digits for cells and validates runs."""

    # ---------- small helpers ----------

    @staticmethod
    def _sum_feasible(run_sum: int, digit: int, unknown_others: int, target: Optional[int]) -> bool:
        """
        Interval feasibility for a run:
          After placing `digit`, the `unknown_others` cells still open must be
          able to make up the difference with distinct digits.
        """
        if target is None:
            return True
        if unknown_others >= len(MIN_SUM):
            return False
        base = run_sum + digit
        return base + MIN_SUM[unknown_others] <= target <= base + MAX_SUM[unknown_others]

    @staticmethod
    def _scan_run(puzzle: KakuroPuzzle, row: int, col: int, direction: str) -> Tuple[Optional[int], int, int, int]:
        """
        Walk the run through (row, col).

        Returns (target, sum of assigned digits, unknown cells other than
        (row, col), bitmask of assigned digits).
        """
        target = puzzle.run_target(row, col, direction)
        total = 0
        unknown = 0
        used = 0
        for r, c in puzzle.run_cells(row, col, direction):
            digit = puzzle.get(r, c).digit
            if digit is None:
                unknown += 1
            else:
                total += digit
                used |= 1 << digit
        return target, total, unknown - 1, used

    # ---------- domains ----------

    @staticmethod
    def compute_domain(puzzle: KakuroPuzzle, row: int, col: int) -> Domain:
        """
        Legal digits for an unknown value cell.

        An empty mask means the current partial assignment is a dead end.
        """
        cell = puzzle.get(row, col)
        if not isinstance(cell, ValueCell):
            raise CellTypeError(f"[constraints] Cell ({row},{col}) is a clue")
        if cell.digit is not None:
            raise ValueError(f"[constraints] Cell ({row},{col}) already holds {cell.digit}")

        row_target, row_sum, row_unknown, row_used = ConstraintChecker._scan_run(puzzle, row, col, ACROSS)
        col_target, col_sum, col_unknown, col_used = ConstraintChecker._scan_run(puzzle, row, col, DOWN)
        illegal = row_used | col_used

        # Last open cell of a run: its value is whatever the run still lacks
        forced = None
        if row_target is not None and row_unknown == 0:
            forced = row_target - row_sum
            if not 1 <= forced <= 9:
                return 0, 0
        if col_target is not None and col_unknown == 0:
            required = col_target - col_sum
            if not 1 <= required <= 9:
                return 0, 0
            if forced is not None and forced != required:
                return 0, 0
            forced = required

        candidates = [forced] if forced is not None else range(9, 0, -1)
        mask = 0
        count = 0
        for digit in candidates:
            if illegal & (1 << digit):
                continue
            if not ConstraintChecker._sum_feasible(row_sum, digit, row_unknown, row_target):
                continue
            if not ConstraintChecker._sum_feasible(col_sum, digit, col_unknown, col_target):
                continue
            mask |= 1 << digit
            count += 1
        return mask, count

    # ---------- whole-run checks ----------

    @staticmethod
    def run_problems(puzzle: KakuroPuzzle, run: Run) -> List[str]:
        """Reasons the run's current digits cannot be part of a solution"""
        problems = []
        digits = puzzle.digits_in(run.cells)
        dupes = sorted(d for d, n in Counter(digits).items() if n > 1)
        if dupes:
            problems.append(f"repeats {', '.join(map(str, dupes))}")
        if run.target is None:
            return problems

        if len(run) > 9:
            problems.append(f"{len(run)} cells cannot hold distinct digits")
            return problems

        total = sum(digits)
        open_cells = len(run) - len(digits)
        if open_cells == 0:
            if total != run.target:
                problems.append(f"sums to {total}, needs {run.target}")
        elif total + MIN_SUM[open_cells] > run.target:
            problems.append(f"already at {total} with {open_cells} open, target {run.target} too small")
        elif total + MAX_SUM[open_cells] < run.target:
            problems.append(f"only {total} with {open_cells} open, target {run.target} unreachable")
        return problems

    @staticmethod
    def run_satisfied(puzzle: KakuroPuzzle, run: Run) -> bool:
        """Complete, distinct and summing to the target"""
        digits = puzzle.digits_in(run.cells)
        if len(digits) != len(run) or len(set(digits)) != len(digits):
            return False
        return run.target is None or sum(digits) == run.target

    @staticmethod
    def find_violations(puzzle: KakuroPuzzle) -> List[str]:
        """Human-readable list of every run that is already broken"""
        violations = []
        for run in puzzle.get_runs():
            for problem in ConstraintChecker.run_problems(puzzle, run):
                r, c = run.cells[0]
                violations.append(f"{run.direction} run at ({r},{c}): {problem}")
        return violations

    @staticmethod
    def is_consistent(puzzle: KakuroPuzzle) -> bool:
        """
        Can the current digits still be extended to a solution, as far as each
        run on its own can tell? Raises MalformedPuzzleError for unclued runs.
        """
        return all(
            not ConstraintChecker.run_problems(puzzle, run)
            for run in puzzle.get_runs()
        )

    @staticmethod
    def is_solved(puzzle: KakuroPuzzle) -> bool:
        """Check every run is complete and correct"""
        return puzzle.is_complete() and all(
            ConstraintChecker.run_satisfied(puzzle, run)
            for run in puzzle.get_runs()
        )
