"""
Kakuro Puzzle Solver Package

A constraint-propagating backtracking solver for Kakuro puzzles.
"""

from .puzzle import (
    KakuroPuzzle,
    ClueCell,
    ValueCell,
    Run,
    ACROSS,
    DOWN,
    KakuroError,
    MalformedPuzzleError,
    CellTypeError,
    PuzzleFormatError,
)
from .constraints import ConstraintChecker, MIN_SUM, MAX_SUM
from .solver import KakuroSolver, ProgressSink, SolveTimeoutError, solve
from .output import SolutionFormatter, ConsoleProgress

__version__ = "1.0.0"
__all__ = [
    'KakuroPuzzle',
    'ClueCell',
    'ValueCell',
    'Run',
    'ACROSS',
    'DOWN',
    'KakuroError',
    'MalformedPuzzleError',
    'CellTypeError',
    'PuzzleFormatError',
    'ConstraintChecker',
    'MIN_SUM',
    'MAX_SUM',
    'KakuroSolver',
    'ProgressSink',
    'SolveTimeoutError',
    'solve',
    'SolutionFormatter',
    'ConsoleProgress'
]
