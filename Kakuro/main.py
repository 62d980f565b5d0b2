#!/usr/bin/env python3
"""
Kakuro Solver - Main Entry Point

Usage:
    python -m Kakuro.main data/puzzles/puzzle.txt
    python -m Kakuro.main --all [data/puzzles]
    python -m Kakuro.main --new <rows> <cols> <out.txt>
    python -m Kakuro.main --analyze <puzzle.txt>
    python -m Kakuro.main  # Solves PUZZLE_PATH, or everything in PUZZLE_DIR
"""

import sys
import os
from pathlib import Path

from .puzzle import KakuroPuzzle, KakuroError, MalformedPuzzleError, PuzzleFormatError
from .solver import KakuroSolver, SolveTimeoutError
from .output import SolutionFormatter, ConsoleProgress
from .diagnostics import analyze_puzzle_structure

# ============================================================================
# CONFIGURATION
# ============================================================================
PUZZLE_PATH = "data/puzzles/example.txt"   # Puzzle to solve by default
PUZZLE_DIR = "data/puzzles"                # Searched by --all
OUTPUT_DIR = "data/solutions"              # Base output directory
SOLVE_ALL = False                          # Set True to solve all puzzles

REPORT_INTERVAL_SECONDS = 5.0
# How often the partial board is printed while searching

TIMEOUT_SECONDS = None
# Maximum time to spend on a single puzzle (None = no limit)

VERBOSE = True
# ============================================================================

PROJECT_ROOT = Path(__file__).parent.parent


def _resolve(path) -> Path:
    path = Path(path)
    return path if path.is_absolute() else PROJECT_ROOT / path


def solve_puzzle(input_path: str, output_dir: str = None, verbose: bool = VERBOSE,
                 report_interval: float = REPORT_INTERVAL_SECONDS,
                 timeout_seconds: float = TIMEOUT_SECONDS):
    """
    Solve a single puzzle and save results.

    Args:
        input_path: Path to the puzzle text file
        output_dir: Directory for output files (default: OUTPUT_DIR/<puzzle_name>/)
        verbose: Print detailed solving progress
        report_interval: Seconds between progress prints
        timeout_seconds: Maximum solving time in seconds (None = unlimited)

    Returns:
        (solved, puzzle, solver); puzzle and solver are None if loading failed
    """
    puzzle_name = Path(input_path).stem

    if output_dir is None:
        output_dir = _resolve(OUTPUT_DIR) / puzzle_name

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\n{'='*60}")
    print(f"Loading puzzle: {input_path}")
    print(f"Output directory: {output_dir}")
    print(f"{'='*60}")

    try:
        puzzle = KakuroPuzzle.load(str(input_path))
    except (OSError, PuzzleFormatError) as e:
        print(f"\nError while loading {input_path}: {e}")
        return False, None, None

    progress = ConsoleProgress(show_grid=verbose)
    solver = KakuroSolver(puzzle, progress=progress, report_interval=report_interval, verbose=verbose)

    if verbose:
        print("\nSolver Configuration:")
        print(f"  Report interval: {report_interval}s")
        print(f"  Timeout: {'none' if timeout_seconds is None else f'{timeout_seconds}s'}")
        print(SolutionFormatter.format_grid_visualization(puzzle))

    # solve() clears the givens on failure, the analysis needs them
    as_given = puzzle.copy()

    try:
        print("\n💡 Tip: Press Ctrl+C at any time to stop solving\n")
        solved = solver.solve(timeout_seconds=timeout_seconds)

    except KeyboardInterrupt:
        print(f"\n\n{'='*60}")
        print("⚠ Solving interrupted by user (Ctrl+C)")
        print(f"{'='*60}")
        solver._print_stats()
        return False, puzzle, solver

    except SolveTimeoutError as e:
        print(f"\n{'='*60}")
        print(f"TIMEOUT: {e}")
        print(f"{'='*60}")
        return False, puzzle, solver

    except MalformedPuzzleError as e:
        print(f"\n{'='*60}")
        print(f"MALFORMED PUZZLE: {e}")
        print(f"{'='*60}")
        return False, puzzle, solver

    # ---------------------------
    # Post-solve output
    # ---------------------------
    if solved:
        print(f"\n{'='*60}")
        print("SUCCESS! Puzzle solved ✓")
        print(f"{'='*60}")

        json_output = output_dir / "solution.json"
        text_output = output_dir / "solution.txt"
        board_output = output_dir / f"{puzzle_name}.solved.txt"

        SolutionFormatter.save_solution(puzzle, solver.stats, str(json_output))
        SolutionFormatter.save_human_readable(puzzle, str(text_output))
        puzzle.save(str(board_output))
        print(f"✓ Solved board saved to: {board_output}")

        if verbose:
            print("\n" + SolutionFormatter.format_solution_human_readable(puzzle))
            print(SolutionFormatter.format_grid_visualization(puzzle))
    else:
        print(f"\n{'='*60}")
        print("FAILED: Puzzle has no solution ✗")
        print(f"{'='*60}")
        if verbose:
            analyze_puzzle_structure(as_given)

    return solved, puzzle, solver


def solve_all_puzzles(data_dir: str = None, output_dir: str = None,
                      report_interval: float = REPORT_INTERVAL_SECONDS,
                      timeout_seconds: float = TIMEOUT_SECONDS):
    """
    Solve all puzzles in PUZZLE_DIR (or a specified directory)
    """
    data_path = _resolve(data_dir if data_dir is not None else PUZZLE_DIR)
    if not data_path.exists():
        print(f"Error: Directory not found: {data_path}")
        return []

    puzzle_files = sorted(p for p in data_path.glob("*.txt") if not p.name.endswith(".solved.txt"))
    if not puzzle_files:
        print(f"No puzzles found in {data_path}")
        return []

    print(f"\nFound {len(puzzle_files)} puzzle(s) to solve")
    print(f"  Timeout per puzzle: {'none' if timeout_seconds is None else f'{timeout_seconds}s'}\n")

    results = []

    for i, puzzle_file in enumerate(puzzle_files, 1):
        print(f"\n[{i}/{len(puzzle_files)}] Solving {puzzle_file.name}...")

        solved, puzzle, solver = solve_puzzle(
            str(puzzle_file),
            output_dir=None if output_dir is None else Path(output_dir) / puzzle_file.stem,
            verbose=False,
            report_interval=report_interval,
            timeout_seconds=timeout_seconds
        )

        result = {
            'file': puzzle_file.name,
            'solved': bool(solved),
            'cells': len(puzzle.value_cells()) if puzzle else None,
            'iterations': solver.stats['iterations'] if solver else None,
            'backtracks': solver.stats['backtracks'] if solver else None,
            'elapsed': solver.stats['elapsed_seconds'] if solver else None,
        }
        results.append(result)

        status = "✓ SOLVED" if solved else "✗ FAILED"
        print(f"  {status}")

    # ---------------------------
    # Print summary
    # ---------------------------
    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    solved_count = sum(1 for r in results if r['solved'])
    total_count = len(results)
    solve_rate = (solved_count / total_count * 100) if total_count > 0 else 0

    print(f"Solved: {solved_count}/{total_count} puzzles ({solve_rate:.1f}%)")
    print(f"{'='*60}\n")

    for r in results:
        status = "✓" if r['solved'] else "✗"
        print(f"{status} {r['file']:30s}", end="")
        if r['solved']:
            print(f" - {r['cells']} cells, {r['iterations']} iterations, "
                  f"{r['backtracks']} backtracks, {r['elapsed']:.2f}s")
        else:
            print(" - Failed")

    return results


def create_empty_puzzle(rows: int, cols: int, output_path: str) -> KakuroPuzzle:
    """Write a new board of unknown value cells, ready for editing"""
    puzzle = KakuroPuzzle.empty(rows, cols)
    puzzle.save(output_path)
    print(f"✓ Empty {rows}x{cols} board saved to: {output_path}")
    return puzzle


def _require_file(path_text: str) -> str:
    input_file = _resolve(path_text)
    if not os.path.exists(input_file):
        print(f"Error: File not found: {input_file}")
        sys.exit(1)
    return str(input_file)


def main(argv=None):
    """Main entry point"""
    args = sys.argv[1:] if argv is None else list(argv)

    if args:
        command = args[0]

        if command in ("--all", "-a"):
            solve_all_puzzles(args[1] if len(args) > 1 else None)
            return

        if command in ("--new", "-n"):
            if len(args) < 4:
                print("Usage: python -m Kakuro.main --new <rows> <cols> <out.txt>")
                sys.exit(1)
            try:
                rows, cols = int(args[1]), int(args[2])
                create_empty_puzzle(rows, cols, args[3])
            except ValueError:
                print("Invalid number of rows or columns specified.")
                sys.exit(1)
            return

        if command in ("--analyze", "-c"):
            if len(args) < 2:
                print("Usage: python -m Kakuro.main --analyze <puzzle.txt>")
                sys.exit(1)
            try:
                analyze_puzzle_structure(KakuroPuzzle.load(_require_file(args[1])))
            except KakuroError as e:
                print(f"Error: {e}")
                sys.exit(1)
            return

        solve_puzzle(_require_file(command))

    elif SOLVE_ALL:
        print("SOLVE_ALL mode enabled - solving all puzzles in PUZZLE_DIR")
        solve_all_puzzles()

    else:
        print(f"Using configured PUZZLE_PATH: {PUZZLE_PATH}")
        solve_puzzle(_require_file(PUZZLE_PATH))


if __name__ == "__main__":
    main()
