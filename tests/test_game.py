import random

import pytest

from cosmos2048.game import (
    Direction,
    Game,
    MergeEvent,
    can_move,
    create_board,
    has_won,
    initialize_game,
    move,
    spawn_random_tile,
)

DIRECTIONS = ["left", "right", "up", "down"]


def grid_with_row(row, index=0):
    grid = create_board()
    grid[index] = list(row)
    return grid


def random_grid(rng, fill=0.6):
    return [
        [rng.choice([2, 4, 8, 16, 32]) if rng.random() < fill else 0 for _ in range(4)]
        for _ in range(4)
    ]


def mirror(grid):
    return [row[::-1] for row in grid]


def transpose(grid):
    return [list(col) for col in zip(*grid)]


class TestMoveLine:
    def test_merge_then_slide(self):
        result = move(grid_with_row([2, 2, 4, 0]), "left")
        assert result.grid[0] == [4, 4, 0, 0]
        assert result.gained == 4
        assert result.moved
        assert result.merges == [MergeEvent(0, 0, 4)]

    def test_only_adjacent_after_filtering(self):
        result = move(grid_with_row([2, 0, 2, 2]), "left")
        assert result.grid[0] == [4, 2, 0, 0]
        assert result.gained == 4

    def test_single_merge_per_cell(self):
        result = move(grid_with_row([2, 2, 2, 2]), "left")
        assert result.grid[0] == [4, 4, 0, 0]
        assert result.gained == 8
        assert result.merges == [MergeEvent(0, 0, 4), MergeEvent(0, 1, 4)]

    @pytest.mark.parametrize(
        "row,expected,gained",
        [
            ([0, 0, 0, 0], [0, 0, 0, 0], 0),
            ([2, 4, 8, 16], [2, 4, 8, 16], 0),
            ([4, 2, 2, 4], [4, 4, 4, 0], 4),
            ([2, 2, 4, 4], [4, 8, 0, 0], 12),
            ([2, 4, 4, 4], [2, 8, 4, 0], 8),
            ([0, 0, 0, 2], [2, 0, 0, 0], 0),
        ],
    )
    def test_left_rows(self, row, expected, gained):
        result = move(grid_with_row(row), "left")
        assert result.grid[0] == expected
        assert result.gained == gained

    def test_right_reports_mirrored_column(self):
        result = move(grid_with_row([0, 4, 2, 2], index=2), "right")
        assert result.grid[2] == [0, 0, 4, 4]
        assert result.gained == 4
        assert result.merges == [MergeEvent(2, 3, 4)]

    def test_up_reports_row_and_column(self):
        grid = create_board()
        grid[1][3] = 8
        grid[3][3] = 8
        result = move(grid, Direction.UP)
        assert [row[3] for row in result.grid] == [16, 0, 0, 0]
        assert result.merges == [MergeEvent(0, 3, 16)]

    def test_down_reports_row_and_column(self):
        grid = create_board()
        grid[0][1] = 2
        grid[1][1] = 2
        grid[2][1] = 2
        result = move(grid, "down")
        assert [row[1] for row in result.grid] == [0, 0, 2, 4]
        assert result.merges == [MergeEvent(3, 1, 4)]

    def test_merge_events_match_result_cells(self):
        rng = random.Random(7)
        for _ in range(50):
            grid = random_grid(rng)
            for d in DIRECTIONS:
                result = move(grid, d)
                for m in result.merges:
                    assert result.grid[m.row][m.col] == m.value


class TestMoveContract:
    def test_unknown_direction_is_noop(self):
        grid = grid_with_row([2, 2, 0, 0])
        result = move(grid, "diagonal")
        assert result.grid is grid
        assert not result.moved
        assert result.gained == 0
        assert result.merges == []

    def test_input_not_mutated(self):
        grid = grid_with_row([2, 2, 4, 0])
        snapshot = [row[:] for row in grid]
        for d in DIRECTIONS:
            move(grid, d)
        assert grid == snapshot

    def test_slide_without_merge_is_a_move(self):
        result = move(grid_with_row([0, 2, 0, 0]), "left")
        assert result.moved
        assert result.merges == []

    def test_blocked_move(self):
        result = move(grid_with_row([2, 4, 0, 0]), "left")
        assert not result.moved

    def test_conservation(self):
        rng = random.Random(1)
        for _ in range(100):
            grid = random_grid(rng)
            for d in DIRECTIONS:
                result = move(grid, d)
                assert sum(map(sum, result.grid)) == sum(map(sum, grid))
                assert result.gained == sum(m.value for m in result.merges)

    def test_noop_is_idempotent(self):
        rng = random.Random(2)
        for _ in range(100):
            grid = random_grid(rng, fill=0.9)
            for d in DIRECTIONS:
                result = move(grid, d)
                if not result.moved:
                    assert move(result.grid, d).grid == result.grid

    def test_left_compacts(self):
        rng = random.Random(3)
        for _ in range(100):
            result = move(random_grid(rng), "left")
            for row in result.grid:
                tiles = [v for v in row if v]
                assert row == tiles + [0] * (4 - len(tiles))

    def test_symmetry(self):
        rng = random.Random(4)
        for _ in range(100):
            grid = random_grid(rng)
            assert move(grid, "right").grid == mirror(move(mirror(grid), "left").grid)
            assert move(grid, "up").grid == transpose(move(transpose(grid), "left").grid)
            assert move(grid, "down").grid == transpose(
                move(transpose(grid), "right").grid
            )


class TestSpawn:
    def test_spawn_only_fills_empty_cell(self):
        rng = random.Random(5)
        for _ in range(100):
            grid = random_grid(rng)
            if all(all(row) for row in grid):
                continue
            new = spawn_random_tile(grid, rng)
            changed = [
                (i, j) for i in range(4) for j in range(4) if new[i][j] != grid[i][j]
            ]
            assert len(changed) == 1
            i, j = changed[0]
            assert grid[i][j] == 0
            assert new[i][j] in (2, 4)

    def test_full_grid_unchanged(self):
        grid = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]
        assert spawn_random_tile(grid) is grid

    def test_seeded_spawn_is_reproducible(self):
        grid = create_board()
        assert spawn_random_tile(grid, random.Random(9)) == spawn_random_tile(
            grid, random.Random(9)
        )

    def test_mostly_twos(self):
        rng = random.Random(6)
        values = []
        for _ in range(2000):
            new = spawn_random_tile(create_board(), rng)
            values.append(max(map(max, new)))
        fours = values.count(4) / len(values)
        assert 0.05 < fours < 0.15

    def test_initialize_game_seeds_two_tiles(self):
        grid = initialize_game(random.Random(8))
        tiles = [v for row in grid for v in row if v]
        assert len(tiles) == 2
        assert set(tiles) <= {2, 4}


class TestTerminal:
    def test_full_without_pairs(self):
        grid = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]
        assert not can_move(grid)

    def test_full_with_vertical_pair(self):
        grid = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [2, 8, 16, 32]]
        assert can_move(grid)

    def test_empty_cell(self):
        assert can_move(grid_with_row([2, 4, 8, 16]))

    def test_matches_move_outcome(self):
        rng = random.Random(10)
        for _ in range(300):
            grid = random_grid(rng, fill=0.97)
            assert can_move(grid) == any(move(grid, d).moved for d in DIRECTIONS)

    def test_has_won(self):
        grid = grid_with_row([2048, 0, 0, 0], index=3)
        assert has_won(grid)
        assert not has_won(grid_with_row([1024, 1024, 0, 0]))


class TestGame:
    def test_new_game(self):
        game = Game(random.Random(0))
        assert sum(1 for row in game.state for v in row if v) == 2
        assert game.score == 0
        assert game.alive()

    def test_move_accumulates_score_and_spawns(self):
        game = Game(random.Random(0))
        game.state = grid_with_row([2, 2, 0, 0])
        result = game.move("left")
        assert result.moved
        assert game.score == 4
        assert game.moves == 1
        assert sum(1 for row in game.state for v in row if v) == 2

    def test_invalid_move_changes_nothing(self):
        game = Game(random.Random(0))
        game.state = grid_with_row([2, 4, 0, 0])
        before = game.state
        result = game.move("left")
        assert not result.moved
        assert game.state is before
        assert game.moves == 0

    def test_win_latches(self):
        game = Game(random.Random(0))
        game.state = grid_with_row([1024, 1024, 0, 0])
        game.move("left")
        assert game.won
        assert game.max_tile == 2048
        game.state = grid_with_row([2, 2, 0, 0])
        game.move("left")
        assert game.won

    def test_clone_is_independent(self):
        game = Game(random.Random(0))
        clone = game.clone()
        clone.state[0][0] = 4096
        assert game.state[0][0] != 4096

    def test_over(self):
        game = Game(random.Random(0))
        game.state = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]
        assert game.over
        assert not any(game.valid(d) for d in Direction)
