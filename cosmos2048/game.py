import random
from dataclasses import dataclass, field
from enum import Enum

SIZE = 4
WINNING_VALUE = 2048

Grid = list[list[int]]


class Direction(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value) -> "Direction | None":
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class MergeEvent:
    row: int
    col: int
    value: int


@dataclass
class MoveResult:
    grid: Grid
    moved: bool
    gained: int
    merges: list[MergeEvent] = field(default_factory=list)


def create_board() -> Grid:
    return [[0] * SIZE for _ in range(SIZE)]


def spawn_random_tile(grid: Grid, rng: random.Random | None = None) -> Grid:
    """
    Return a copy of the grid with a 2 (90%) or 4 (10%) placed on a random
    empty cell. A full grid is returned as is.
    """

    rng = rng or random
    places = []
    for i in range(SIZE):
        for j in range(SIZE):
            if grid[i][j] == 0:
                places.append((i, j))
    if len(places) == 0:
        return grid
    x, y = rng.choice(places)
    num = rng.choices([2, 4], [0.9, 0.1])[0]
    new = [row[:] for row in grid]
    new[x][y] = num
    return new


def _reduce_left(line: list[int]) -> tuple[list[int], int, list[tuple[int, int]]]:
    tiles = [e for e in line if e != 0]
    out = []
    gained = 0
    merged = []
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            value = tiles[i] * 2
            merged.append((len(out), value))
            out.append(value)
            gained += value
            i += 2
        else:
            out.append(tiles[i])
            i += 1
    return out + [0] * (SIZE - len(out)), gained, merged


def _reduce(line: list[int], reverse: bool) -> tuple[list[int], int, list[tuple[int, int]]]:
    if not reverse:
        return _reduce_left(line)
    out, gained, merged = _reduce_left(line[::-1])
    return out[::-1], gained, [(SIZE - 1 - idx, value) for idx, value in merged]


def move(grid: Grid, direction: "Direction | str") -> MoveResult:
    """
    Slide and merge every line of the grid towards `direction`.

    Each tile merges at most once per move. Merge events are reported in the
    coordinates of the resulting grid. An unknown direction is a no-op.
    """

    d = Direction.parse(direction)
    if d is None:
        return MoveResult(grid, False, 0, [])

    vertical = d in (Direction.UP, Direction.DOWN)
    reverse = d in (Direction.RIGHT, Direction.DOWN)
    lines = [list(col) for col in zip(*grid)] if vertical else [row[:] for row in grid]

    new_lines = []
    gained = 0
    moved = False
    merges = []
    for i, line in enumerate(lines):
        out, line_gained, line_merges = _reduce(line, reverse)
        if out != line:
            moved = True
        gained += line_gained
        for idx, value in line_merges:
            if vertical:
                merges.append(MergeEvent(idx, i, value))
            else:
                merges.append(MergeEvent(i, idx, value))
        new_lines.append(out)

    new_grid = [list(row) for row in zip(*new_lines)] if vertical else new_lines
    return MoveResult(new_grid, moved, gained, merges)


def can_move(grid: Grid) -> bool:
    for i in range(SIZE):
        for j in range(SIZE):
            if grid[i][j] == 0:
                return True
            if i + 1 < SIZE and grid[i][j] == grid[i + 1][j]:
                return True
            if j + 1 < SIZE and grid[i][j] == grid[i][j + 1]:
                return True
    return False


def has_won(grid: Grid) -> bool:
    return any(WINNING_VALUE in row for row in grid)


def initialize_game(rng: random.Random | None = None) -> Grid:
    grid = create_board()
    grid = spawn_random_tile(grid, rng)
    grid = spawn_random_tile(grid, rng)
    return grid


class Game:
    """2048 game session"""

    state: Grid
    score: int
    moves: int
    won: bool

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng
        self.state = initialize_game(rng)
        self.score = 0
        self.moves = 0
        self.won = False

    def move(self, direction: "Direction | str") -> MoveResult:
        """
        Play a move in the game. A tile is spawned only if the move changed
        the board. Play continues after reaching 2048.
        """

        result = move(self.state, direction)
        if result.moved:
            self.state = spawn_random_tile(result.grid, self.rng)
            self.score += result.gained
            self.moves += 1
            if has_won(self.state):
                self.won = True
        return result

    def clone(self) -> "Game":
        g = Game.__new__(Game)
        g.rng = self.rng
        g.state = [row[:] for row in self.state]
        g.score = self.score
        g.moves = self.moves
        g.won = self.won
        return g

    def valid(self, direction: "Direction | str") -> bool:
        return move(self.state, direction).moved

    def alive(self) -> bool:
        return can_move(self.state)

    @property
    def over(self) -> bool:
        return not self.alive()

    @property
    def max_tile(self) -> int:
        return max(max(row) for row in self.state)

    def display(self):
        for row in self.state:
            print(row)
