import json
from typing import Dict, List
from datetime import datetime

import numpy as np

from .puzzle import KakuroPuzzle, ClueCell, ACROSS, format_cell_token
from .constraints import ConstraintChecker
from .solver import ProgressSink


CELL_WIDTH = 7


class SolutionFormatter:
    """Formats puzzle solutions for output"""

    @staticmethod
    def solution_matrix(puzzle: KakuroPuzzle) -> np.ndarray:
        """Digits as an int matrix; clues and unknown cells are 0"""
        grid = np.zeros((puzzle.rows, puzzle.cols), dtype=np.int8)
        for r, c in puzzle.value_cells():
            digit = puzzle.get(r, c).digit
            if digit is not None:
                grid[r, c] = digit
        return grid

    @staticmethod
    def format_solution_json(puzzle: KakuroPuzzle, stats: Dict) -> Dict:
        """
        Format solution as JSON
        """
        runs = puzzle.get_runs()
        digits = SolutionFormatter.solution_matrix(puzzle)

        solution = {
            'puzzle_info': {
                'rows': puzzle.rows,
                'cols': puzzle.cols,
                'value_cells': len(puzzle.value_cells()),
                'filled_cells': int(np.count_nonzero(digits)),
                'total_runs': len(runs),
                'solved': ConstraintChecker.is_solved(puzzle),
                'timestamp': datetime.now().isoformat()
            },
            'solving_stats': stats,
            'grid': [[format_cell_token(cell) for cell in line] for line in puzzle.cells],
            'digits': digits.tolist(),
            'run_validation': []
        }

        for run in runs:
            run_digits = puzzle.digits_in(run.cells)
            solution['run_validation'].append({
                'direction': run.direction,
                'clue': list(run.clue) if run.clue is not None else None,
                'cells': [list(pos) for pos in run.cells],
                'target': run.target,
                'actual_sum': sum(run_digits),
                'satisfied': ConstraintChecker.run_satisfied(puzzle, run)
            })

        return solution

    @staticmethod
    def format_solution_human_readable(puzzle: KakuroPuzzle) -> str:
        """
        Format solution as human-readable text
        """
        runs = puzzle.get_runs()
        lines = []
        lines.append("=" * 60)
        lines.append("KAKURO PUZZLE SOLUTION")
        lines.append("=" * 60)
        lines.append(f"\nPuzzle is {puzzle.rows}x{puzzle.cols} with "
                     f"{len(puzzle.value_cells())} value cells, {len(runs)} runs")
        lines.append(f"Filled {puzzle.get_completion_percentage():.1%} of value cells\n")

        lines.append("RUN VALIDATION:")
        lines.append("-" * 60)

        for run in runs:
            satisfied = "✓" if ConstraintChecker.run_satisfied(puzzle, run) else "✗"
            r, c = run.cells[0]
            digits = "".join(
                str(puzzle.get(rr, cc).digit) if puzzle.get(rr, cc).digit is not None else "·"
                for rr, cc in run.cells
            )
            target = "-" if run.target is None else str(run.target)
            arrow = "→" if run.direction == ACROSS else "↓"
            lines.append(
                f"{arrow} ({r:2d},{c:2d}) len {len(run)}: {digits:9s} "
                f"target {target:>2s} sum {sum(puzzle.digits_in(run.cells)):2d} {satisfied}"
            )

        lines.append("=" * 60)

        return "\n".join(lines)

    @staticmethod
    def _cell_text(cell) -> str:
        if isinstance(cell, ClueCell):
            if cell.is_blocker:
                return "#" * (CELL_WIDTH - 2)
            return format_cell_token(cell)
        return "·" if cell.digit is None else str(cell.digit)

    @staticmethod
    def format_grid_visualization(puzzle: KakuroPuzzle) -> str:
        """
        Create a text-based grid visualization.
        """
        lines = []
        lines.append("\nGRID VISUALIZATION:")
        border = "-" * (puzzle.cols * (CELL_WIDTH + 1) + 1)
        lines.append(border)
        for line in puzzle.cells:
            texts = [SolutionFormatter._cell_text(cell).center(CELL_WIDTH) for cell in line]
            lines.append("|" + "|".join(texts) + "|")
        lines.append(border)
        return "\n".join(lines)

    @staticmethod
    def save_solution(puzzle: KakuroPuzzle, stats: Dict, output_path: str):
        """
        Save solution to JSON file
        """
        solution = SolutionFormatter.format_solution_json(puzzle, stats)

        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(solution, f, indent=2)

        print(f"\n✓ Solution saved to: {output_path}")

    @staticmethod
    def save_human_readable(puzzle: KakuroPuzzle, output_path: str):
        """
        Save human-readable solution to text file
        """
        text = SolutionFormatter.format_solution_human_readable(puzzle)
        text += "\n\n" + SolutionFormatter.format_grid_visualization(puzzle)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)

        print(f"✓ Human-readable solution saved to: {output_path}")


class ConsoleProgress(ProgressSink):
    """Prints the partial board each time the solver reports in"""

    def __init__(self, show_grid: bool = True):
        self.show_grid = show_grid
        self.updates: List[float] = []

    def update_status(self, puzzle: KakuroPuzzle) -> None:
        completion = puzzle.get_completion_percentage()
        self.updates.append(completion)
        print(f"[progress] update {len(self.updates)}: {completion:.1%} filled")
        if self.show_grid:
            print(SolutionFormatter.format_grid_visualization(puzzle))
