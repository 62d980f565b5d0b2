"""
Diagnostics: understand WHY a puzzle fails

Structure analysis flags runs that no digits could ever satisfy and cells no
clue governs; failure analysis re-runs the solver and summarises the search.
"""

import time
from collections import Counter
from pathlib import Path
from typing import Dict, Optional

from .puzzle import KakuroPuzzle, ClueCell, MalformedPuzzleError
from .constraints import ConstraintChecker, MIN_SUM, MAX_SUM
from .solver import KakuroSolver, SolveTimeoutError


def analyze_puzzle_structure(puzzle: KakuroPuzzle, verbose: bool = True) -> Dict:
    """Analyze the puzzle structure for potential issues"""
    clues = [
        (r, c)
        for r in range(puzzle.rows)
        for c in range(puzzle.cols)
        if isinstance(puzzle.get(r, c), ClueCell)
    ]
    report = {
        'rows': puzzle.rows,
        'cols': puzzle.cols,
        'clue_cells': len(clues),
        'value_cells': len(puzzle.value_cells()),
        'given_digits': len(puzzle.value_cells()) - len(puzzle.unknown_cells()),
        'runs': 0,
        'run_lengths': {},
        'impossible_runs': [],
        'malformed': None,
        'violations': [],
    }

    if verbose:
        print("\n" + "=" * 70)
        print("PUZZLE STRUCTURE ANALYSIS")
        print("=" * 70)
        print(f"\nGrid: {puzzle.rows}x{puzzle.cols}")
        print(f"Clue cells: {report['clue_cells']}")
        print(f"Value cells: {report['value_cells']} ({report['given_digits']} given)")

    try:
        runs = puzzle.get_runs()
    except MalformedPuzzleError as e:
        report['malformed'] = str(e)
        if verbose:
            print(f"\n⚠ MALFORMED: {e}")
        return report

    report['runs'] = len(runs)
    report['run_lengths'] = dict(sorted(Counter(len(run) for run in runs).items()))

    # Check target feasibility per run length
    for run in runs:
        if run.target is None:
            continue
        n = len(run)
        if n > 9 or not MIN_SUM[n] <= run.target <= MAX_SUM[n]:
            report['impossible_runs'].append({
                'direction': run.direction,
                'start': list(run.cells[0]),
                'length': n,
                'target': run.target,
            })

    report['violations'] = ConstraintChecker.find_violations(puzzle)

    if verbose:
        print(f"Runs: {report['runs']}")
        print("\n--- RUN LENGTHS ---")
        for length, count in report['run_lengths'].items():
            print(f"  length {length}: {count}x")
        print("\n--- TARGET FEASIBILITY ---")
        if report['impossible_runs']:
            for item in report['impossible_runs']:
                print(f"  {item['direction']} run at {tuple(item['start'])}: "
                      f"{item['length']} cells cannot sum to {item['target']} ⚠ IMPOSSIBLE!")
        else:
            print("  All targets reachable ✓")
        if report['violations']:
            print("\n--- GIVENS ---")
            for violation in report['violations']:
                print(f"  ⚠ {violation}")

    return report


def analyze_failure(puzzle_path: str, timeout: Optional[float] = 60) -> Dict:
    """Solve a puzzle file and explain the outcome."""
    puzzle = KakuroPuzzle.load(puzzle_path)
    solver = KakuroSolver(puzzle, verbose=False)

    print(f"\n{'=' * 80}")
    print(f"ANALYZING: {Path(puzzle_path).name}")
    print(f"{'=' * 80}")
    structure = analyze_puzzle_structure(puzzle)

    start = time.time()
    timed_out = False
    malformed = structure['malformed']
    solved = False
    if malformed is None:
        try:
            solved = solver.solve(timeout_seconds=timeout)
        except SolveTimeoutError:
            timed_out = True
    elapsed = time.time() - start

    print(f"\n{'=' * 80}")
    if solved:
        print(f"✓ SOLVED in {elapsed:.2f}s")
    elif malformed:
        print("✗ NOT SOLVED: puzzle is malformed")
    elif timed_out:
        print(f"✗ TIMEOUT after {elapsed:.2f}s - search space not exhausted")
    else:
        print(f"✗ NO SOLUTION after {elapsed:.2f}s")
        if structure['impossible_runs']:
            print("   Cause: some run targets cannot be reached by any digits")
        elif structure['violations']:
            print("   Cause: the given digits already break a run")
        else:
            print("   Cause: search exhausted - runs are individually possible but jointly not")

    if not malformed:
        print(f"\nStats:")
        print(f"  Iterations: {solver.stats['iterations']}")
        print(f"  Backtracks: {solver.stats['backtracks']}")
        print(f"  Contradictions: {solver.stats['contradictions']}")
    print(f"{'=' * 80}\n")

    return {
        'solved': solved,
        'timed_out': timed_out,
        'malformed': malformed,
        'elapsed': elapsed,
        'completion': puzzle.get_completion_percentage(),
        'stats': dict(solver.stats),
    }
