"""
Sudoku generator and backtracking solver.

The grid is a 9x9 list of lists of ints, 0 meaning an empty cell. Every
search function works on the grid in place and undoes its tentative
placements on backtrack. The ``Sudoku`` class holds one grid and forwards
to the module-level functions.
"""
import enum
import logging
import random

log = logging.getLogger(__name__)

SIZE = 9
BOX = 3
DIGITS = tuple(range(1, SIZE + 1))

# Solutions needed to tell a unique puzzle from an ambiguous one.
UNIQUENESS_LIMIT = 2


class SudokuError(ValueError):
    """Base class for malformed input."""


class InvalidGridShape(SudokuError):
    pass


class InvalidDigit(SudokuError):
    pass


class Difficulty(enum.IntEnum):
    EASY = 1
    MEDIUM = 2
    HARD = 3

    @classmethod
    def parse(cls, value):
        """Accept a Difficulty, 1/2/3 or a level name such as 'easy'."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip()
            if name.isdigit():
                return cls.parse(int(name))
            try:
                return cls[name.upper()]
            except KeyError:
                raise ValueError(f"Unknown difficulty: {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"Unknown difficulty: {value!r}") from None
        raise ValueError(f"Unknown difficulty: {value!r}")


# Cells to blank for each level. Rejected removals are not retried, so these
# are upper bounds on the number of blanks in a generated puzzle.
REMOVALS_BY_DIFFICULTY = {
    Difficulty.EASY: 30,
    Difficulty.MEDIUM: 40,
    Difficulty.HARD: 50,
}


# ----------------------------
# Grid utilities
# ----------------------------

def empty_grid():
    return [[0 for _ in range(SIZE)] for _ in range(SIZE)]


def copy_grid(grid):
    return [list(row) for row in grid]


def find_empty(grid):
    for i in range(SIZE):
        for j in range(SIZE):
            if grid[i][j] == 0:
                return (i, j)  # row, col
    return None


def validate_grid(grid):
    """Return a list-of-lists copy of grid, checked to be 9 rows of 9 digits 0-9.

    Raises InvalidGridShape or InvalidDigit. Rows may be any iterable; each is
    read exactly once. Duplicate values are allowed here; such a grid is legal
    input that simply may have no solution.
    """
    if isinstance(grid, (str, bytes)):
        raise InvalidGridShape("Grid must be a sequence of rows, not a string")
    try:
        raw_rows = list(grid)
    except TypeError:
        raise InvalidGridShape(f"Grid must be a sequence of rows, got {type(grid).__name__}") from None
    if len(raw_rows) != SIZE:
        raise InvalidGridShape(f"Grid must have {SIZE} rows, got {len(raw_rows)}")

    rows = []
    for r, row in enumerate(raw_rows):
        if isinstance(row, (str, bytes)):
            raise InvalidGridShape(f"Row {r} must be a sequence of ints, not a string")
        try:
            cells = list(row)
        except TypeError:
            raise InvalidGridShape(f"Row {r} is not a sequence") from None
        if len(cells) != SIZE:
            raise InvalidGridShape(f"Row {r} must have {SIZE} cells, got {len(cells)}")
        for c, value in enumerate(cells):
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= SIZE:
                raise InvalidDigit(f"Cell ({r}, {c}) holds {value!r}; expected an int 0-{SIZE}")
        rows.append(cells)
    return rows


def format_grid(grid):
    # One "------+-------+------" style rule between bands of BOX rows
    box_width = 2 * BOX - 1
    rule = "-+-".join("-" * box_width for _ in range(SIZE // BOX))

    lines = []
    for row_index in range(SIZE):
        cells = [str(v) if v != 0 else "." for v in grid[row_index]]
        boxes = [" ".join(cells[i:i + BOX]) for i in range(0, SIZE, BOX)]
        lines.append(" | ".join(boxes))
        if row_index % BOX == BOX - 1 and row_index != SIZE - 1:
            lines.append(rule)
    return "\n".join(lines)


def parse_grid(text):
    """Read a grid from text.

    Digits fill the grid row by row; '0' and '.' are blanks. Whitespace and
    the box-drawing characters '|', '-' and '+' are ignored, so both the
    output of format_grid and a bare 81-character string parse.
    """
    values = []
    for ch in text:
        if ch.isspace() or ch in "|-+":
            continue
        if ch == ".":
            values.append(0)
        elif ch in "0123456789":
            values.append(int(ch))
        else:
            raise InvalidDigit(f"Unexpected character {ch!r} in grid text")

    if len(values) != SIZE * SIZE:
        raise InvalidGridShape(f"Expected {SIZE * SIZE} cells, got {len(values)}")
    return [values[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]


# ----------------------------
# Validity checker
# ----------------------------

def is_valid(grid, row, col, num):
    # Check row and column
    for i in range(SIZE):
        if grid[row][i] == num or grid[i][col] == num:
            return False

    # Check box
    box_row = row // BOX * BOX
    box_col = col // BOX * BOX
    for i in range(box_row, box_row + BOX):
        for j in range(box_col, box_col + BOX):
            if grid[i][j] == num:
                return False
    return True


# ----------------------------
# Backtracking search
# ----------------------------

def _search(grid, candidates, on_complete):
    """Depth-first search over the first empty cell in row-major order.

    ``candidates()`` gives the trial order for one cell. ``on_complete()`` is
    called on every complete grid and returns True to stop the whole search.
    Returns True when the search was stopped, False once every branch below
    this cell has been exhausted (the cell is then empty again).
    """
    find = find_empty(grid)
    if not find:
        return on_complete()
    row, col = find

    for num in candidates():
        if is_valid(grid, row, col, num):
            grid[row][col] = num
            if _search(grid, candidates, on_complete):
                return True
            grid[row][col] = 0  # Backtrack
    return False


def _ascending():
    return DIGITS


def _stop():
    return True


def solve(grid):
    """Solve grid in place, trying 1-9 in order. On failure grid is left as it was."""
    return _search(grid, _ascending, _stop)


def fill_grid(grid, rng=None):
    """Complete grid in place with a random valid solution."""
    rng = rng or random

    def shuffled():
        nums = list(DIGITS)
        rng.shuffle(nums)
        return nums

    return _search(grid, shuffled, _stop)


def count_solutions(grid, limit=UNIQUENESS_LIMIT):
    """Count solutions of grid, stopping as soon as ``limit`` are found.

    The result never exceeds ``limit``; it answers "is this grid unique"
    rather than "how many solutions are there". grid is used as scratch
    space and may be left holding a solution, so pass a copy.
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
    count = 0

    def found():
        nonlocal count
        count += 1
        return count >= limit

    _search(grid, _ascending, found)
    return count


# ----------------------------
# Puzzle generator
# ----------------------------

def generate_puzzle(difficulty=Difficulty.MEDIUM, rng=None):
    """Return (puzzle, solution) where puzzle has exactly one solution."""
    rng = rng or random
    difficulty = Difficulty.parse(difficulty)
    squares_to_remove = REMOVALS_BY_DIFFICULTY[difficulty]

    solution = empty_grid()
    fill_grid(solution, rng)
    puzzle = copy_grid(solution)

    # Create a list of all cells and shuffle them
    cells = [(r, c) for r in range(SIZE) for c in range(SIZE)]
    rng.shuffle(cells)

    squares_removed = 0
    for r, c in cells:
        if squares_removed >= squares_to_remove:
            break

        backup = puzzle[r][c]
        puzzle[r][c] = 0

        if count_solutions(copy_grid(puzzle), UNIQUENESS_LIMIT) != 1:
            puzzle[r][c] = backup
        else:
            squares_removed += 1

    log.debug("Removed %d of %d cells for %s puzzle",
              squares_removed, squares_to_remove, difficulty.name.lower())
    return puzzle, solution


class Sudoku:
    def __init__(self, grid=None):
        if grid is None:
            self.board = empty_grid()
        else:
            self.board = validate_grid(grid)
        self.solution = None

    @classmethod
    def create(cls, difficulty=Difficulty.MEDIUM, rng=None):
        puzzle, solution = generate_puzzle(difficulty, rng)
        sudoku = cls(puzzle)
        sudoku.solution = solution
        return sudoku

    def solve(self):
        return solve(self.board)

    def fill_grid(self, rng=None):
        return fill_grid(self.board, rng)

    def is_valid(self, row, col, num):
        return is_valid(self.board, row, col, num)

    def count_solutions(self, limit=UNIQUENESS_LIMIT):
        return count_solutions(copy_grid(self.board), limit)

    def has_unique_solution(self):
        return self.count_solutions(UNIQUENESS_LIMIT) == 1

    def get_grid(self):
        return copy_grid(self.board)

    @property
    def grid(self):
        return self.get_grid()

    def get_solution(self):
        """The solution recorded by create(), or None for hand-built grids."""
        if self.solution is None:
            return None
        return copy_grid(self.solution)

    def __str__(self):
        return format_grid(self.board)
