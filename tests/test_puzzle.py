# tests/test_puzzle.py
import pytest

from Kakuro.puzzle import (
    ACROSS,
    DOWN,
    CellTypeError,
    ClueCell,
    KakuroPuzzle,
    MalformedPuzzleError,
    PuzzleFormatError,
    ValueCell,
    format_cell_token,
    parse_cell_token,
)

from conftest import CORNER_TEXT, SMALL_TEXT


def test_parse_cell_tokens():
    assert parse_cell_token("") == ValueCell()
    assert parse_cell_token("7") == ValueCell(7)
    assert parse_cell_token("16\\") == ClueCell(sum_down=16)
    assert parse_cell_token("\\24") == ClueCell(sum_right=24)
    assert parse_cell_token("16\\24") == ClueCell(16, 24)
    blocker = parse_cell_token("\\")
    assert isinstance(blocker, ClueCell) and blocker.is_blocker


@pytest.mark.parametrize("token", [
    "0", "10", "x", "-3", "²", "٣",
    "46\\", "\\0", "a\\3", "3\\b", "1_0\\", "\\١٢",
])
def test_parse_rejects_bad_tokens(token):
    with pytest.raises(PuzzleFormatError):
        parse_cell_token(token)


def test_format_is_inverse_of_parse():
    for token in ["", "5", "3\\", "\\17", "12\\34", "\\"]:
        assert format_cell_token(parse_cell_token(token)) == token


def test_cells_validate_their_contents():
    with pytest.raises(ValueError):
        ClueCell(sum_down=46)
    with pytest.raises(ValueError):
        ValueCell(0)
    with pytest.raises(CellTypeError):
        ValueCell(True)
    assert ClueCell(sum_right=9).sum_for(ACROSS) == 9
    assert ClueCell(sum_right=9).sum_for(DOWN) is None


def test_from_text_reads_dimensions_and_cells(corner_puzzle):
    assert corner_puzzle.rows == 4
    assert corner_puzzle.cols == 4
    assert corner_puzzle.get(0, 1) == ClueCell(sum_down=23)
    assert corner_puzzle.get(1, 3) == ClueCell(sum_down=4)
    assert corner_puzzle.get(2, 0) == ClueCell(sum_right=12)
    assert corner_puzzle.get(2, 2) == ValueCell()
    assert len(corner_puzzle.value_cells()) == 8


def test_round_trip_preserves_grid(solved_corner_puzzle):
    text = solved_corner_puzzle.to_text()
    again = KakuroPuzzle.from_text(text)
    assert again == solved_corner_puzzle
    assert again.to_text() == text


def test_round_trip_of_blank_file():
    assert KakuroPuzzle.from_text(CORNER_TEXT).to_text() == CORNER_TEXT


def test_trailing_tabs_and_short_lines_are_accepted():
    # older files carry a tab after every cell
    text = "3\n3\n\\\t3\\\t4\\\t\n\\4\t\t\t\n\\3\n"
    assert KakuroPuzzle.from_text(text) == KakuroPuzzle.from_text(SMALL_TEXT)


@pytest.mark.parametrize("text", [
    "3\n",
    "x\n3\n",
    "3\n3\n\\\t3\\\t4\\\n",
    "1\n2\n\t\t5\n",
    "1\n2\n\t10\n",
    "1\n1\n\n7\n",
])
def test_from_text_rejects_malformed_text(text):
    with pytest.raises(PuzzleFormatError):
        KakuroPuzzle.from_text(text)


def test_load_and_save(tmp_path, solved_corner_puzzle):
    path = tmp_path / "board.txt"
    solved_corner_puzzle.save(str(path))
    assert KakuroPuzzle.load(str(path)) == solved_corner_puzzle


def test_empty_board_is_all_unknown_values():
    puzzle = KakuroPuzzle.empty(2, 3)
    assert len(puzzle.value_cells()) == 6
    assert puzzle.unknown_cells() == puzzle.value_cells()
    assert puzzle.to_text() == "2\n3\n\t\t\n\t\t\n"
    with pytest.raises(ValueError):
        KakuroPuzzle.empty(0, 3)


def test_set_digit_only_on_value_cells(small_puzzle):
    small_puzzle.set_digit(1, 1, 2)
    assert small_puzzle.get(1, 1).digit == 2
    small_puzzle.clear_digit(1, 1)
    assert small_puzzle.get(1, 1).digit is None

    with pytest.raises(CellTypeError):
        small_puzzle.set_digit(0, 1, 3)
    with pytest.raises(ValueError):
        small_puzzle.set_digit(1, 1, 10)
    with pytest.raises(CellTypeError):
        small_puzzle.set(1, 1, 5)


def test_clear_digits_keeps_clues(solved_corner_puzzle):
    solved_corner_puzzle.clear_digits()
    assert solved_corner_puzzle == KakuroPuzzle.from_text(CORNER_TEXT)


def test_copy_is_independent(small_puzzle):
    clone = small_puzzle.copy()
    clone.set_digit(1, 1, 1)
    assert small_puzzle.get(1, 1).digit is None
    assert clone != small_puzzle


def test_completion(small_puzzle):
    assert small_puzzle.get_completion_percentage() == 0.0
    small_puzzle.set_digit(1, 1, 1)
    assert small_puzzle.get_completion_percentage() == 0.25
    assert not small_puzzle.is_complete()


def test_edit_cell_accepts_valid_input(small_puzzle):
    assert small_puzzle.edit_cell(1, 1, "5")
    assert small_puzzle.get(1, 1) == ValueCell(5)
    assert small_puzzle.edit_cell(1, 1, "7\\8")
    assert small_puzzle.get(1, 1) == ClueCell(7, 8)


def test_edit_cell_falls_back_to_unknown(small_puzzle):
    assert not small_puzzle.edit_cell(0, 1, "12")
    assert small_puzzle.get(0, 1) == ValueCell()
    assert not small_puzzle.edit_cell(1, 1, "99\\")
    assert small_puzzle.get(1, 1) == ValueCell()
    assert not small_puzzle.edit_cell(1, 2, "²")
    assert small_puzzle.get(1, 2) == ValueCell()


def test_non_ascii_digit_in_file_is_a_format_error():
    with pytest.raises(PuzzleFormatError):
        KakuroPuzzle.from_text("1\n2\n\\3\t²\n")


def test_run_bounds(corner_puzzle):
    assert corner_puzzle.run_bounds(1, 2, ACROSS) == (1, 2)
    assert corner_puzzle.run_bounds(2, 2, ACROSS) == (1, 3)
    assert corner_puzzle.run_bounds(2, 1, DOWN) == (1, 3)
    assert corner_puzzle.run_bounds(3, 3, DOWN) == (2, 3)
    with pytest.raises(CellTypeError):
        corner_puzzle.run_bounds(0, 1, ACROSS)


def test_run_target(corner_puzzle):
    assert corner_puzzle.run_target(1, 2, ACROSS) == 10
    assert corner_puzzle.run_target(3, 2, ACROSS) == 11
    assert corner_puzzle.run_target(3, 1, DOWN) == 23
    assert corner_puzzle.run_target(2, 3, DOWN) == 4


def test_run_without_clue_is_malformed():
    puzzle = KakuroPuzzle.from_text("2\n3\n\\\t\t\n\\\t3\\\t\\\n")
    with pytest.raises(MalformedPuzzleError):
        puzzle.run_target(0, 1, ACROSS)

    edge = KakuroPuzzle.from_text("1\n2\n\t\n")
    with pytest.raises(MalformedPuzzleError):
        edge.run_target(0, 0, ACROSS)


def test_lone_unclaimed_cell_has_no_target():
    puzzle = KakuroPuzzle.from_text("1\n3\n\\6\t\t\n")
    assert puzzle.run_bounds(0, 1, DOWN) == (0, 0)
    assert puzzle.run_target(0, 1, DOWN) is None
    assert puzzle.run_target(0, 1, ACROSS) == 6


def test_get_runs_order_and_contents(corner_puzzle):
    runs = corner_puzzle.get_runs()
    summary = [(run.direction, run.cells[0], len(run), run.target) for run in runs]
    assert summary == [
        (ACROSS, (1, 1), 2, 10),
        (DOWN, (1, 1), 3, 23),
        (DOWN, (1, 2), 3, 6),
        (ACROSS, (2, 1), 3, 12),
        (DOWN, (2, 3), 2, 4),
        (ACROSS, (3, 1), 3, 11),
    ]
    assert runs[4].clue == (1, 3)
