"""Command-line front end: generate puzzles and solve them from text."""
import argparse
import logging
import random
import sys

from cardinal_pythonlib.argparse_func import RawDescriptionArgumentDefaultsHelpFormatter  # noqa
from cardinal_pythonlib.logs import main_only_quicksetup_rootlogger

from sudoku import (
    REMOVALS_BY_DIFFICULTY,
    Difficulty,
    Sudoku,
    SudokuError,
    format_grid,
    parse_grid,
)

log = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_UNSOLVABLE = 1
EXIT_BAD_INPUT = 2


def _difficulty(value):
    try:
        return Difficulty.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _render(grid, compact):
    if compact:
        return "".join(str(v) for row in grid for v in row)
    return format_grid(grid)


def _read_puzzle(source):
    if source == "-":
        return sys.stdin.read()
    with open(source, "rt", encoding="utf-8") as f:
        return f.read()


def cmd_generate(args, rng):
    sudoku = Sudoku.create(args.difficulty, rng=rng)
    puzzle = sudoku.get_grid()
    blanks = sum(row.count(0) for row in puzzle)
    log.info("Generated %s puzzle with %d of %d targeted blanks",
             args.difficulty.name.lower(), blanks, REMOVALS_BY_DIFFICULTY[args.difficulty])

    print(_render(puzzle, args.compact))
    if args.solution:
        print()
        print(_render(sudoku.get_solution(), args.compact))
    return EXIT_SUCCESS


def cmd_solve(args, rng):
    try:
        sudoku = Sudoku(parse_grid(_read_puzzle(args.puzzle)))
    except (SudokuError, OSError, UnicodeDecodeError) as e:
        log.error("Could not read puzzle from %s: %s", args.puzzle, e)
        return EXIT_BAD_INPUT

    log.debug("Solving:\n%s", sudoku)
    if not sudoku.solve():
        print("No solution")
        return EXIT_UNSOLVABLE
    print(_render(sudoku.get_grid(), args.compact))
    return EXIT_SUCCESS


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="sudoku",
        description="Generate and solve 9x9 Sudoku puzzles by backtracking",
        formatter_class=RawDescriptionArgumentDefaultsHelpFormatter)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug messages")
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed for the random generator (repeatable puzzles)")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    parser_generate = subparsers.add_parser(
        "generate", help="Generate a puzzle with a unique solution")
    parser_generate.add_argument(
        "-d", "--difficulty", type=_difficulty, default=Difficulty.MEDIUM,
        help="easy, medium or hard (or 1, 2, 3)")
    parser_generate.add_argument(
        "--solution", action="store_true", help="Also print the solution")
    parser_generate.add_argument(
        "--compact", action="store_true", help="Print each grid as one 81-digit line")
    parser_generate.set_defaults(func=cmd_generate)

    parser_solve = subparsers.add_parser(
        "solve", help="Solve a puzzle read from a file or stdin")
    parser_solve.add_argument(
        "puzzle", nargs="?", default="-",
        help="File holding the puzzle, '-' for stdin; '0' or '.' for blanks")
    parser_solve.add_argument(
        "--compact", action="store_true", help="Print the solution as one 81-digit line")
    parser_solve.set_defaults(func=cmd_solve)

    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    main_only_quicksetup_rootlogger(level=logging.DEBUG if args.verbose
                                    else logging.INFO)

    rng = random.Random(args.seed) if args.seed is not None else None
    return args.func(args, rng)


if __name__ == "__main__":
    sys.exit(main())
