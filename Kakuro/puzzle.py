"""
Core data structures for Kakuro puzzle representation
"""
from typing import List, Iterator, Optional, Tuple, Union
from dataclasses import dataclass, field


ACROSS = "across"  # horizontal runs, target from sum_right
DOWN = "down"      # vertical runs, target from sum_down
DIRECTIONS = (ACROSS, DOWN)

MAX_RUN_SUM = 45  # 1 + 2 + ... + 9

Position = Tuple[int, int]


# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
class KakuroError(Exception):
    """Base class for every error raised by the Kakuro package"""


class MalformedPuzzleError(KakuroError, RuntimeError):
    """A run has no clue supplying its target sum"""


class CellTypeError(KakuroError, TypeError):
    """An operation was applied to the wrong kind of cell"""


class PuzzleFormatError(KakuroError, ValueError):
    """The persisted text form of a puzzle could not be parsed"""


# -----------------------------------------------------------------------------
# Cells
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ClueCell:
    """A black cell carrying the target of the run below and/or to its right"""
    sum_down: Optional[int] = None
    sum_right: Optional[int] = None

    def __post_init__(self):
        for name in ("sum_down", "sum_right"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise CellTypeError(f"[puzzle] {name} must be an int, got {value!r}")
            if not 1 <= value <= MAX_RUN_SUM:
                raise ValueError(f"[puzzle] {name}={value} outside 1..{MAX_RUN_SUM}")

    @property
    def is_blocker(self) -> bool:
        """A clue with no sums is just a wall"""
        return self.sum_down is None and self.sum_right is None

    def sum_for(self, direction: str) -> Optional[int]:
        """Target this clue supplies for runs in the given direction"""
        if direction == ACROSS:
            return self.sum_right
        if direction == DOWN:
            return self.sum_down
        raise ValueError(f"[puzzle] Unknown direction: {direction!r}")

    def __repr__(self):
        return f"ClueCell(down={self.sum_down}, right={self.sum_right})"


@dataclass
class ValueCell:
    """A white cell that must hold a digit 1-9 once solved"""
    digit: Optional[int] = None  # None while unknown

    def __post_init__(self):
        if self.digit is not None:
            _check_digit(self.digit)

    @property
    def is_known(self) -> bool:
        return self.digit is not None

    def __repr__(self):
        return f"ValueCell({self.digit if self.digit is not None else '?'})"


Cell = Union[ClueCell, ValueCell]


def _check_digit(digit: int) -> None:
    if isinstance(digit, bool) or not isinstance(digit, int):
        raise CellTypeError(f"[puzzle] Digit must be an int, got {digit!r}")
    if not 1 <= digit <= 9:
        raise ValueError(f"[puzzle] Digit {digit} outside 1..9")


@dataclass
class Run:
    """One maximal line of value cells and the clue that governs it"""
    direction: str
    clue: Optional[Position]  # None for an unclaimed single cell
    cells: List[Position] = field(default_factory=list)
    target: Optional[int] = None

    def __len__(self):
        return len(self.cells)

    def __repr__(self):
        start = self.cells[0] if self.cells else None
        return f"Run({self.direction}, start={start}, len={len(self.cells)}, target={self.target})"


# -----------------------------------------------------------------------------
# Text tokens
# -----------------------------------------------------------------------------
def _parse_number(text: str) -> int:
    # int() also takes signs, underscores and non-ASCII digits
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"not a number: {text!r}")
    return int(text)


def parse_cell_token(token: str) -> Cell:
    """
    Parse one tab-separated token of the persisted format.

    ''        -> unknown value cell
    '7'       -> value cell holding 7
    '16\\'    -> clue with a down sum only
    '\\24'    -> clue with a right sum only
    '16\\24'  -> clue with both sums
    '\\'      -> blocker
    """
    text = token.strip()
    if "\\" in text:
        down_text, _, right_text = text.partition("\\")
        try:
            sum_down = _parse_number(down_text) if down_text else None
            sum_right = _parse_number(right_text) if right_text else None
        except ValueError:
            raise PuzzleFormatError(f"[puzzle] Bad clue token: {token!r}") from None
        try:
            return ClueCell(sum_down, sum_right)
        except ValueError as e:
            raise PuzzleFormatError(f"[puzzle] Bad clue token {token!r}: {e}") from None

    if not text:
        return ValueCell()
    try:
        digit = _parse_number(text)
    except ValueError:
        raise PuzzleFormatError(f"[puzzle] Bad value token: {token!r}") from None
    if not 1 <= digit <= 9:
        raise PuzzleFormatError(f"[puzzle] Digit {digit} outside 1..9 in token {token!r}")
    return ValueCell(digit)


def format_cell_token(cell: Cell) -> str:
    """Inverse of parse_cell_token"""
    if isinstance(cell, ClueCell):
        down = "" if cell.sum_down is None else str(cell.sum_down)
        right = "" if cell.sum_right is None else str(cell.sum_right)
        return f"{down}\\{right}"
    return "" if cell.digit is None else str(cell.digit)


# -----------------------------------------------------------------------------
# Puzzle grid
# -----------------------------------------------------------------------------
class KakuroPuzzle:
    """Fixed-size grid of clue and value cells"""

    def __init__(self, rows: int, cols: int, cells: Optional[List[List[Cell]]] = None):
        if rows < 1 or cols < 1:
            raise ValueError(f"[puzzle] Grid must be at least 1x1, got {rows}x{cols}")
        self._rows = rows
        self._cols = cols

        if cells is None:
            cells = [[ValueCell() for _ in range(cols)] for _ in range(rows)]
        if len(cells) != rows or any(len(line) != cols for line in cells):
            raise ValueError(f"[puzzle] Cell rows do not match {rows}x{cols}")
        for line in cells:
            for cell in line:
                if not isinstance(cell, (ClueCell, ValueCell)):
                    raise CellTypeError(f"[puzzle] Not a cell: {cell!r}")
        self.cells: List[List[Cell]] = cells

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    # ---------- construction ----------

    @classmethod
    def empty(cls, rows: int, cols: int) -> "KakuroPuzzle":
        """New board with every cell an unknown value cell"""
        return cls(rows, cols)

    @classmethod
    def from_text(cls, text: str) -> "KakuroPuzzle":
        """Parse the persisted text format"""
        lines = text.splitlines()
        if len(lines) < 2:
            raise PuzzleFormatError("[puzzle] Missing row/column count header")
        try:
            rows = int(lines[0].strip())
            cols = int(lines[1].strip())
        except ValueError:
            raise PuzzleFormatError(f"[puzzle] Bad dimensions: {lines[0]!r}, {lines[1]!r}") from None
        if rows < 1 or cols < 1:
            raise PuzzleFormatError(f"[puzzle] Grid must be at least 1x1, got {rows}x{cols}")
        if len(lines) < rows + 2:
            raise PuzzleFormatError(f"[puzzle] Expected {rows} grid lines, found {len(lines) - 2}")

        cells: List[List[Cell]] = []
        for r in range(rows):
            tokens = lines[r + 2].split("\t")
            if len(tokens) < cols:
                # the editor drops trailing empty cells
                tokens.extend([""] * (cols - len(tokens)))
            if any(t.strip() for t in tokens[cols:]):
                raise PuzzleFormatError(f"[puzzle] Line {r + 3}: more than {cols} cells")
            line: List[Cell] = []
            for c in range(cols):
                try:
                    line.append(parse_cell_token(tokens[c]))
                except PuzzleFormatError as e:
                    raise PuzzleFormatError(f"[puzzle] Line {r + 3}, column {c + 1}: {e}") from None
            cells.append(line)

        if any(line.strip() for line in lines[rows + 2:]):
            raise PuzzleFormatError("[puzzle] Unexpected content after the grid")
        return cls(rows, cols, cells)

    def to_text(self) -> str:
        """Serialize to the persisted text format"""
        out = [str(self._rows), str(self._cols)]
        for line in self.cells:
            out.append("\t".join(format_cell_token(cell) for cell in line))
        return "\n".join(out) + "\n"

    @classmethod
    def load(cls, path: str) -> "KakuroPuzzle":
        """Load puzzle from a text file"""
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_text(f.read())

    def save(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_text())

    def copy(self) -> "KakuroPuzzle":
        cells = [
            [cell if isinstance(cell, ClueCell) else ValueCell(cell.digit) for cell in line]
            for line in self.cells
        ]
        return KakuroPuzzle(self._rows, self._cols, cells)

    # ---------- cell access ----------

    def get(self, row: int, col: int) -> Cell:
        return self.cells[row][col]

    def set(self, row: int, col: int, cell: Cell) -> None:
        if not isinstance(cell, (ClueCell, ValueCell)):
            raise CellTypeError(f"[puzzle] Not a cell: {cell!r}")
        self.cells[row][col] = cell

    def _value_cell(self, row: int, col: int) -> ValueCell:
        cell = self.cells[row][col]
        if not isinstance(cell, ValueCell):
            raise CellTypeError(f"[puzzle] Cell ({row},{col}) is a clue, not a value cell")
        return cell

    def set_digit(self, row: int, col: int, digit: int) -> None:
        """Assign a digit to a value cell"""
        cell = self._value_cell(row, col)
        _check_digit(digit)
        cell.digit = digit

    def clear_digit(self, row: int, col: int) -> None:
        """Reset a value cell to unknown"""
        self._value_cell(row, col).digit = None

    def clear_digits(self) -> None:
        """Reset every value cell to unknown"""
        for cell in self._iter_value_cells():
            cell.digit = None

    def edit_cell(self, row: int, col: int, text: str) -> bool:
        """
        Apply raw user input to a cell.

        Valid input replaces the cell. Anything else leaves an unknown value
        cell behind and returns False so the caller can flag the cell.
        """
        try:
            self.cells[row][col] = parse_cell_token(text)
            return True
        except PuzzleFormatError:
            self.cells[row][col] = ValueCell()
            return False

    # ---------- queries ----------

    def _iter_value_cells(self) -> Iterator[ValueCell]:
        for line in self.cells:
            for cell in line:
                if isinstance(cell, ValueCell):
                    yield cell

    def value_cells(self) -> List[Position]:
        """Positions of all value cells, row-major"""
        return [
            (r, c)
            for r in range(self._rows)
            for c in range(self._cols)
            if isinstance(self.cells[r][c], ValueCell)
        ]

    def unknown_cells(self) -> List[Position]:
        """Positions of value cells without a digit, row-major"""
        return [
            (r, c)
            for r in range(self._rows)
            for c in range(self._cols)
            if isinstance(self.cells[r][c], ValueCell) and self.cells[r][c].digit is None
        ]

    def is_complete(self) -> bool:
        """Check if every value cell holds a digit"""
        return all(cell.digit is not None for cell in self._iter_value_cells())

    def get_completion_percentage(self) -> float:
        """Get fraction of value cells filled"""
        values = list(self._iter_value_cells())
        if not values:
            return 0.0
        return sum(1 for v in values if v.digit is not None) / len(values)

    # ---------- runs ----------

    def _is_value(self, row: int, col: int) -> bool:
        return isinstance(self.cells[row][col], ValueCell)

    def run_bounds(self, row: int, col: int, direction: str) -> Tuple[int, int]:
        """
        Inclusive (start, end) along the direction's axis of the run holding
        (row, col). For ACROSS these are columns, for DOWN rows.
        """
        self._value_cell(row, col)
        if direction == ACROSS:
            start = col
            while start > 0 and self._is_value(row, start - 1):
                start -= 1
            end = col
            while end < self._cols - 1 and self._is_value(row, end + 1):
                end += 1
        elif direction == DOWN:
            start = row
            while start > 0 and self._is_value(start - 1, col):
                start -= 1
            end = row
            while end < self._rows - 1 and self._is_value(end + 1, col):
                end += 1
        else:
            raise ValueError(f"[puzzle] Unknown direction: {direction!r}")
        return start, end

    def _clue_before(self, row: int, col: int, direction: str, start: int) -> Optional[Position]:
        if start == 0:
            return None
        return (row, start - 1) if direction == ACROSS else (start - 1, col)

    def run_target(self, row: int, col: int, direction: str) -> Optional[int]:
        """
        Target sum of the run holding (row, col), read from the clue just
        before the run. A lone cell that no clue claims has no target (None).
        """
        start, end = self.run_bounds(row, col, direction)
        clue_pos = self._clue_before(row, col, direction, start)
        target = None
        if clue_pos is not None:
            target = self.cells[clue_pos[0]][clue_pos[1]].sum_for(direction)

        if target is None and end > start:
            where = "grid edge" if clue_pos is None else f"clue at {clue_pos}"
            raise MalformedPuzzleError(
                f"[puzzle] {direction} run through ({row},{col}) has no sum ({where})"
            )
        return target

    def run_cells(self, row: int, col: int, direction: str) -> List[Position]:
        """Positions of every cell in the run holding (row, col)"""
        start, end = self.run_bounds(row, col, direction)
        if direction == ACROSS:
            return [(row, c) for c in range(start, end + 1)]
        return [(r, col) for r in range(start, end + 1)]

    def get_runs(self) -> List[Run]:
        """
        Scan the grid for every run. Across runs come before down runs that
        start at the same cell.
        """
        runs: List[Run] = []
        for r in range(self._rows):
            for c in range(self._cols):
                if not self._is_value(r, c):
                    continue
                for direction in DIRECTIONS:
                    start, _ = self.run_bounds(r, c, direction)
                    here = c if direction == ACROSS else r
                    if start != here:
                        continue
                    target = self.run_target(r, c, direction)
                    runs.append(Run(
                        direction=direction,
                        clue=None if target is None else self._clue_before(r, c, direction, start),
                        cells=self.run_cells(r, c, direction),
                        target=target,
                    ))
        return runs

    def digits_in(self, positions: List[Position]) -> List[int]:
        """Assigned digits among the given value cells"""
        return [
            self.cells[r][c].digit
            for r, c in positions
            if self.cells[r][c].digit is not None
        ]

    # ---------- comparison ----------

    def __eq__(self, other):
        return (
            isinstance(other, KakuroPuzzle)
            and self._rows == other._rows
            and self._cols == other._cols
            and self.cells == other.cells
        )

    def __repr__(self):
        clues = sum(1 for line in self.cells for cell in line if isinstance(cell, ClueCell))
        values = self._rows * self._cols - clues
        return f"KakuroPuzzle({self._rows}x{self._cols}, clues={clues}, values={values}, filled={self.get_completion_percentage():.0%})"
