# tests/test_output.py
import json

import numpy as np

from Kakuro.output import ConsoleProgress, SolutionFormatter
from Kakuro.solver import solve


def test_solution_matrix(solved_corner_puzzle):
    grid = SolutionFormatter.solution_matrix(solved_corner_puzzle)
    assert grid.shape == (4, 4)
    assert grid[0].tolist() == [0, 0, 0, 0]
    assert grid[2].tolist() == [0, 8, 3, 1]
    assert np.count_nonzero(grid) == 8


def test_solution_json(corner_puzzle):
    assert solve(corner_puzzle)
    data = SolutionFormatter.format_solution_json(corner_puzzle, {'iterations': 3})

    info = data['puzzle_info']
    assert info['solved'] is True
    assert info['value_cells'] == 8
    assert info['filled_cells'] == 8
    assert info['total_runs'] == 6
    assert data['solving_stats'] == {'iterations': 3}
    assert data['grid'][0] == ["\\", "23\\", "6\\", "\\"]
    assert data['digits'][3] == [0, 6, 2, 3]
    assert all(run['satisfied'] for run in data['run_validation'])
    # everything must be plain JSON
    json.dumps(data)


def test_unsolved_json_marks_runs(corner_puzzle):
    data = SolutionFormatter.format_solution_json(corner_puzzle, {})
    assert data['puzzle_info']['solved'] is False
    assert not any(run['satisfied'] for run in data['run_validation'])
    first = data['run_validation'][0]
    assert first['direction'] == 'across'
    assert first['clue'] == [1, 0]
    assert first['target'] == 10
    assert first['actual_sum'] == 0


def test_human_readable(solved_corner_puzzle):
    text = SolutionFormatter.format_solution_human_readable(solved_corner_puzzle)
    assert "KAKURO PUZZLE SOLUTION" in text
    assert "6 runs" in text
    assert "✗" not in text
    assert text.count("✓") == 6


def test_grid_visualization(small_puzzle):
    text = SolutionFormatter.format_grid_visualization(small_puzzle)
    lines = text.strip().splitlines()
    assert lines[0] == "GRID VISUALIZATION:"
    assert "#####" in lines[2]
    assert "3\\" in lines[2]
    assert "·" in lines[3]
    assert len(set(len(line) for line in lines[1:])) == 1


def test_save_outputs(tmp_path, solved_corner_puzzle):
    json_path = tmp_path / "solution.json"
    text_path = tmp_path / "solution.txt"
    SolutionFormatter.save_solution(solved_corner_puzzle, {'iterations': 1}, str(json_path))
    SolutionFormatter.save_human_readable(solved_corner_puzzle, str(text_path))

    data = json.loads(json_path.read_text(encoding='utf-8'))
    assert data['puzzle_info']['solved'] is True
    assert "GRID VISUALIZATION" in text_path.read_text(encoding='utf-8')


def test_console_progress(small_puzzle, capsys):
    progress = ConsoleProgress(show_grid=False)
    assert solve(small_puzzle, progress)
    out = capsys.readouterr().out
    assert progress.updates[-1] == 1.0
    assert "[progress] update 1: 100.0% filled" in out
