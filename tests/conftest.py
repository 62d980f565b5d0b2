# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "Kakuro" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from Kakuro.puzzle import KakuroPuzzle  # noqa: E402


# 3x3, unique solution [[1, 3], [2, 1]]
SMALL_TEXT = "3\n3\n\\\t3\\\t4\\\n\\4\t\t\n\\3\t\t\n"

# 4x4 with blockers and a clue inside the grid, unique solution
#   9 1 .
#   8 3 1
#   6 2 3
CORNER_TEXT = "4\n4\n\\\t23\\\t6\\\t\\\n\\10\t\t\t4\\\n\\12\t\t\t\n\\11\t\t\t\n"
CORNER_SOLUTION = {
    (1, 1): 9, (1, 2): 1,
    (2, 1): 8, (2, 2): 3, (2, 3): 1,
    (3, 1): 6, (3, 2): 2, (3, 3): 3,
}


@pytest.fixture
def small_puzzle():
    return KakuroPuzzle.from_text(SMALL_TEXT)


@pytest.fixture
def corner_puzzle():
    return KakuroPuzzle.from_text(CORNER_TEXT)


@pytest.fixture
def solved_corner_puzzle(corner_puzzle):
    for (r, c), digit in CORNER_SOLUTION.items():
        corner_puzzle.set_digit(r, c, digit)
    return corner_puzzle


@pytest.fixture
def example_path():
    return ROOT / "data" / "puzzles" / "example.txt"
