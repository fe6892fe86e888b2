import io
import logging
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

import sudoku_cli
from sudoku import Difficulty, count_solutions, parse_grid


PUZZLE_TEXT = (
    "530070000\n"
    "600195000\n"
    "098000060\n"
    "800060003\n"
    "400803001\n"
    "700020006\n"
    "060000280\n"
    "000419005\n"
    "000080079\n"
)

SOLUTION_LINE = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


def run(argv, stdin=""):
    out = io.StringIO()
    with redirect_stdout(out), mock.patch("sys.stdin", io.StringIO(stdin)):
        code = sudoku_cli.main(argv)
    return code, out.getvalue()


class ParseArgsTest(unittest.TestCase):
    def test_generate_defaults(self):
        args = sudoku_cli.parse_args(["generate"])
        self.assertIs(args.difficulty, Difficulty.MEDIUM)
        self.assertFalse(args.solution)
        self.assertIsNone(args.seed)

    def test_difficulty_names_and_numbers(self):
        self.assertIs(sudoku_cli.parse_args(["generate", "-d", "hard"]).difficulty, Difficulty.HARD)
        self.assertIs(sudoku_cli.parse_args(["generate", "-d", "1"]).difficulty, Difficulty.EASY)

    def test_unknown_difficulty_exits(self):
        with self.assertRaises(SystemExit), redirect_stdout(io.StringIO()), \
                mock.patch("sys.stderr", io.StringIO()):
            sudoku_cli.parse_args(["generate", "-d", "expert"])

    def test_command_required(self):
        with self.assertRaises(SystemExit), mock.patch("sys.stderr", io.StringIO()):
            sudoku_cli.parse_args([])


class LoggingSetupTest(unittest.TestCase):
    def test_verbose_sets_debug_level(self):
        with mock.patch("sudoku_cli.main_only_quicksetup_rootlogger") as setup:
            run(["-v", "solve", "--compact"], stdin=PUZZLE_TEXT)
        setup.assert_called_once_with(level=logging.DEBUG)

    def test_default_level_is_info(self):
        with mock.patch("sudoku_cli.main_only_quicksetup_rootlogger") as setup:
            run(["solve", "--compact"], stdin=PUZZLE_TEXT)
        setup.assert_called_once_with(level=logging.INFO)


class GenerateCommandTest(unittest.TestCase):
    def test_compact_puzzle_is_unique(self):
        code, out = run(["--seed", "4", "generate", "-d", "easy", "--compact"])
        self.assertEqual(code, sudoku_cli.EXIT_SUCCESS)
        line = out.strip()
        self.assertEqual(len(line), 81)
        grid = parse_grid(line)
        self.assertEqual(count_solutions(grid, 2), 1)
        self.assertLessEqual(line.count("0"), 30)

    def test_solution_follows_puzzle(self):
        code, out = run(["--seed", "6", "generate", "--compact", "--solution"])
        self.assertEqual(code, sudoku_cli.EXIT_SUCCESS)
        puzzle_line, solution_line = out.split()
        self.assertNotIn("0", solution_line)
        for p, s in zip(puzzle_line, solution_line):
            if p != "0":
                self.assertEqual(p, s)

    def test_seed_makes_output_repeatable(self):
        _, first = run(["--seed", "11", "generate", "-d", "2"])
        _, second = run(["--seed", "11", "generate", "-d", "2"])
        self.assertEqual(first, second)
        self.assertIn("|", first)


class SolveCommandTest(unittest.TestCase):
    def test_solves_from_stdin(self):
        code, out = run(["solve", "--compact"], stdin=PUZZLE_TEXT)
        self.assertEqual(code, sudoku_cli.EXIT_SUCCESS)
        self.assertEqual(out.strip(), SOLUTION_LINE)

    def test_solves_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "puzzle.txt")
            with open(path, "w") as f:
                f.write(PUZZLE_TEXT.replace("0", "."))
            code, out = run(["solve", path])
        self.assertEqual(code, sudoku_cli.EXIT_SUCCESS)
        self.assertEqual(parse_grid(out), parse_grid(SOLUTION_LINE))

    def test_unsolvable_puzzle(self):
        text = "012345678" + "900000000" + "0" * 63
        code, out = run(["solve"], stdin=text)
        self.assertEqual(code, sudoku_cli.EXIT_UNSOLVABLE)
        self.assertEqual(out.strip(), "No solution")

    def test_malformed_input(self):
        with self.assertLogs("sudoku_cli", level="ERROR"):
            code, out = run(["solve"], stdin="12345")
        self.assertEqual(code, sudoku_cli.EXIT_BAD_INPUT)
        self.assertEqual(out, "")

    def test_undecodable_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "puzzle.txt")
            with open(path, "wb") as f:
                f.write(b"\xff\xfe" + b"0" * 81)
            with self.assertLogs("sudoku_cli", level="ERROR"):
                code, out = run(["solve", path])
        self.assertEqual(code, sudoku_cli.EXIT_BAD_INPUT)
        self.assertEqual(out, "")

    def test_dead_end_at_last_cell(self):
        # Reference solution with a second 9 in column 8 and six cells blanked
        grid = [list(SOLUTION_LINE[i:i + 9]) for i in range(0, 81, 9)]
        grid[7][8] = "9"
        for r, c in ((0, 0), (3, 5), (3, 8), (4, 5), (4, 8), (8, 8)):
            grid[r][c] = "0"
        code, out = run(["solve"], stdin="\n".join("".join(row) for row in grid))
        self.assertEqual(code, sudoku_cli.EXIT_UNSOLVABLE)
        self.assertEqual(out.strip(), "No solution")

    def test_missing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertLogs("sudoku_cli", level="ERROR"):
                code, _ = run(["solve", os.path.join(tmp, "missing.txt")])
        self.assertEqual(code, sudoku_cli.EXIT_BAD_INPUT)


if __name__ == "__main__":
    unittest.main()
