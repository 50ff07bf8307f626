"""
Tests for domain/engine.py - the snake state machine.
"""

import random
import sys
import os
from unittest.mock import Mock

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from domain.constants import (
    UP, DOWN, LEFT, RIGHT,
    RUNNING, PAUSED, GAME_OVER,
    FOOD_REWARD, GRID_SIZE, INITIAL_DIRECTION, MAX_FOOD_ATTEMPTS,
)
from domain.engine import GameEngine
from domain.game_state import GameState
from domain.snake import Snake


def make_engine(snake, direction=RIGHT, food=(0, 0), grid_size=GRID_SIZE, seed=1234):
    """Build an engine and force it into a known position."""
    engine = GameEngine(grid_size=grid_size, rng=random.Random(seed))
    engine.snake = Snake(snake)
    engine.direction = direction
    engine.pending_direction = direction
    engine.food = food
    return engine


class TestInitialState:
    """Tests for a freshly constructed engine."""

    def test_engine_starts_running_at_origin(self):
        """A new engine has the single-segment snake at the board centre."""
        engine = GameEngine(rng=random.Random(1))

        assert list(engine.snake.positions) == [(10, 10)]
        assert engine.direction == INITIAL_DIRECTION
        assert engine.pending_direction == INITIAL_DIRECTION
        assert engine.score == 0
        assert engine.phase == RUNNING
        assert engine.tick == 0

    def test_initial_food_is_on_board_and_off_snake(self):
        """The first food lands inside the board and not on the snake."""
        engine = GameEngine(rng=random.Random(2))

        assert engine.food is not None
        assert engine.in_bounds(engine.food)
        assert engine.food != (10, 10)

    def test_grid_size_too_small_raises(self):
        """Boards smaller than 2x2 are rejected at construction time."""
        with pytest.raises(ValueError):
            GameEngine(grid_size=1)


class TestMovement:
    """Tests for plain movement without food."""

    def test_step_shifts_every_segment(self):
        """Every segment moves one cell along the body; length is unchanged."""
        engine = make_engine([(5, 5), (4, 5), (3, 5)], direction=RIGHT, food=(0, 0))

        state = engine.step()

        assert list(state.snake) == [(6, 5), (5, 5), (4, 5)]
        assert len(state.snake) == 3
        assert state.score == 0
        assert state.phase == RUNNING

    @pytest.mark.parametrize("direction,expected", [
        (UP, (5, 4)),
        (DOWN, (5, 6)),
        (LEFT, (4, 5)),
        (RIGHT, (6, 5)),
    ])
    def test_single_segment_moves_in_direction(self, direction, expected):
        """A one-cell snake moves by exactly the direction vector."""
        engine = make_engine([(5, 5)], direction=direction, food=(0, 0))

        state = engine.step()

        assert list(state.snake) == [expected]

    def test_step_commits_pending_direction(self):
        """The buffered direction becomes the committed one after a tick."""
        engine = make_engine([(5, 5), (4, 5)], direction=RIGHT, food=(0, 0))

        engine.set_direction(UP)
        assert engine.direction == RIGHT

        state = engine.step()

        assert state.snake[0] == (5, 4)
        assert engine.direction == UP
        assert engine.pending_direction == UP

    def test_step_increments_tick(self):
        """Each successful step advances the tick counter."""
        engine = make_engine([(5, 5)], food=(0, 0))

        engine.step()
        engine.step()

        assert engine.tick == 2

    def test_step_returns_snapshot(self):
        """step() returns a GameState equal to get_current_state()."""
        engine = make_engine([(5, 5)], food=(0, 0))

        state = engine.step()

        assert isinstance(state, GameState)
        assert state == engine.get_current_state()


class TestWallCollision:
    """Tests for leaving the board."""

    def test_left_wall_ends_game(self):
        """Heading left from x=0 ends the game and leaves the state untouched."""
        engine = make_engine([(0, 5)], direction=LEFT, food=(7, 7))

        state = engine.step()

        assert state.phase == GAME_OVER
        assert list(state.snake) == [(0, 5)]
        assert state.food == (7, 7)
        assert state.score == 0

    @pytest.mark.parametrize("head,direction", [
        ((19, 3), RIGHT),
        ((3, 0), UP),
        ((3, 19), DOWN),
    ])
    def test_every_wall_ends_game(self, head, direction):
        """All four borders are walls."""
        engine = make_engine([head], direction=direction, food=(7, 7))

        state = engine.step()

        assert state.phase == GAME_OVER
        assert list(state.snake) == [head]

    def test_wall_collision_keeps_score_and_tick(self):
        """Score and tick are not changed by the fatal tick."""
        engine = make_engine([(19, 5), (18, 5)], direction=RIGHT, food=(0, 0))
        engine.score = 30
        engine.tick = 12

        state = engine.step()

        assert state.score == 30
        assert state.tick == 12
        assert state.direction == RIGHT


class TestSelfCollision:
    """Tests for running into the snake's own body."""

    def test_reversal_into_neck_is_rejected(self):
        """Reversal requests are rejected, so the snake keeps going straight."""
        engine = make_engine([(5, 5), (5, 6)], direction=DOWN, food=(0, 0))

        assert engine.set_direction(UP) is False
        assert engine.pending_direction == DOWN

    def test_head_into_second_segment_ends_game(self):
        """A tick whose new head is the second segment is fatal."""
        engine = make_engine([(5, 5), (5, 6)], direction=UP, food=(0, 0))
        # Force the buffered direction the way a stale buffer would
        engine.pending_direction = DOWN

        state = engine.step()

        assert state.phase == GAME_OVER
        assert list(state.snake) == [(5, 5), (5, 6)]

    def test_loop_into_body_ends_game(self):
        """Curling round into a body segment ends the game."""
        body = [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)]
        engine = make_engine(body, direction=LEFT, food=(0, 0))
        engine.set_direction(DOWN)

        state = engine.step()

        assert state.phase == GAME_OVER
        assert list(state.snake) == body

    def test_moving_into_current_tail_cell_is_fatal(self):
        """Collision is checked against the pre-move body, tail included."""
        body = [(5, 5), (6, 5), (6, 6), (5, 6)]
        engine = make_engine(body, direction=LEFT, food=(0, 0))
        engine.set_direction(DOWN)

        state = engine.step()

        assert state.phase == GAME_OVER


class TestFood:
    """Tests for eating and placing food."""

    def test_eating_scenario(self):
        """Snake at (10,10) heading right onto food at (11,10) grows and scores."""
        engine = make_engine([(10, 10)], direction=RIGHT, food=(11, 10))

        state = engine.step()

        assert list(state.snake) == [(11, 10), (10, 10)]
        assert state.score == FOOD_REWARD == 10
        assert state.food not in {(11, 10), (10, 10)}
        assert state.phase == RUNNING

    def test_new_food_never_on_grown_snake(self):
        """Across many seeds the new food avoids every segment of the grown snake."""
        body = [(x, 0) for x in range(10, 0, -1)]
        for seed in range(50):
            engine = make_engine(body, direction=RIGHT, food=(11, 0), seed=seed)

            state = engine.step()

            assert state.food is not None
            assert state.food not in state.snake
            assert len(state.snake) == len(body) + 1

    def test_generate_food_avoids_snake(self):
        """generate_food() never returns an occupied cell."""
        engine = make_engine([(x, y) for x in range(20) for y in range(10)], food=None)

        for _ in range(100):
            food = engine.generate_food()
            assert food[1] >= 10

    def test_generate_food_finds_last_free_cell(self):
        """On a nearly full board the only free cell is chosen."""
        body = [(x, y) for y in range(4) for x in range(4) if (x, y) != (2, 3)]
        engine = make_engine(body, food=None, grid_size=4)
        engine.rng = random.Random(0)

        food = engine.generate_food()

        assert food == (2, 3)

    def test_generate_food_uses_rejection_sampling_first(self):
        """An empty-ish board accepts the first free random draw."""
        engine = make_engine([(0, 0)], food=None)

        # First draw hits the snake at (0, 0), second is free
        engine.rng = Mock()
        engine.rng.randrange.side_effect = [0, 0, 3, 4]

        assert engine.generate_food() == (3, 4)
        assert engine.rng.randrange.call_count == 4
        engine.rng.choice.assert_not_called()

    def test_generate_food_returns_none_on_full_board(self):
        """A full board has nowhere to put food."""
        body = [(x, y) for y in range(2) for x in range(2)]
        engine = make_engine(body, food=None, grid_size=2)

        assert engine.generate_food() is None

    def test_filling_board_ends_game(self):
        """Eating the last free cell ends the game with no food left."""
        engine = make_engine([(1, 0), (1, 1), (0, 1)], direction=LEFT, food=(0, 0), grid_size=2)

        state = engine.step()

        assert state.phase == GAME_OVER
        assert state.food is None
        assert state.score == FOOD_REWARD
        assert len(state.snake) == 4

    def test_generate_food_falls_back_after_max_attempts(self):
        """After MAX_FOOD_ATTEMPTS rejected draws the free-cell list is sampled."""
        engine = make_engine([(0, 0)], food=None)
        engine.rng = Mock()
        engine.rng.randrange.return_value = 0
        engine.rng.choice.side_effect = lambda cells: cells[-1]

        assert engine.generate_food() == (19, 19)
        assert engine.rng.randrange.call_count == 2 * MAX_FOOD_ATTEMPTS
        free_cells = engine.rng.choice.call_args[0][0]
        assert len(free_cells) == GRID_SIZE * GRID_SIZE - 1
        assert (0, 0) not in free_cells


class TestSetDirection:
    """Tests for the pending-direction buffer."""

    def test_opposite_direction_rejected(self):
        """The exact opposite of the committed direction is ignored."""
        engine = make_engine([(5, 5), (4, 5)], direction=RIGHT)

        assert engine.set_direction(LEFT) is False
        assert engine.pending_direction == RIGHT

    def test_perpendicular_direction_buffered(self):
        """A perpendicular turn is buffered but not committed yet."""
        engine = make_engine([(5, 5), (4, 5)], direction=RIGHT)

        assert engine.set_direction(UP) is True
        assert engine.pending_direction == UP
        assert engine.direction == RIGHT

    def test_same_direction_overwrites_buffer(self):
        """Last valid request before a tick wins, even if it is the current heading."""
        engine = make_engine([(5, 5), (4, 5)], direction=RIGHT)

        engine.set_direction(UP)
        engine.set_direction(RIGHT)

        assert engine.pending_direction == RIGHT

    def test_double_turn_cannot_reverse(self):
        """UP then LEFT while heading RIGHT: LEFT is checked against RIGHT and rejected."""
        engine = make_engine([(5, 5), (4, 5)], direction=RIGHT, food=(0, 0))

        engine.set_direction(UP)
        engine.set_direction(LEFT)

        assert engine.pending_direction == UP
        state = engine.step()
        assert state.phase == RUNNING
        assert state.snake[0] == (5, 4)

    def test_opposite_request_after_valid_one_keeps_buffer(self):
        """DOWN then UP while heading DOWN keeps DOWN; the tick hits the second segment."""
        engine = make_engine([(5, 5), (5, 6)], direction=DOWN, food=(0, 0))

        engine.set_direction(DOWN)
        engine.set_direction(UP)

        assert engine.pending_direction == DOWN
        state = engine.step()
        assert state.phase == GAME_OVER
        assert list(state.snake) == [(5, 5), (5, 6)]

    @pytest.mark.parametrize("bad", [(1, 1), (0, 0), (2, 0), "UP", None, [1, 0]])
    def test_invalid_direction_ignored(self, bad):
        """Anything other than a unit direction tuple is a silent no-op."""
        engine = make_engine([(5, 5)], direction=RIGHT)

        assert engine.set_direction(bad) is False
        assert engine.pending_direction == RIGHT

    def test_direction_buffered_while_paused(self):
        """Requests made while paused are buffered and applied after resuming."""
        engine = make_engine([(5, 5), (4, 5)], direction=RIGHT, food=(0, 0))
        engine.toggle_pause()

        assert engine.set_direction(DOWN) is True
        assert engine.step().snake[0] == (5, 5)

        engine.toggle_pause()
        assert engine.step().snake[0] == (5, 6)

    def test_reversal_rejected_while_paused(self):
        """Pausing does not relax the reversal rule."""
        engine = make_engine([(5, 5), (4, 5)], direction=RIGHT, food=(0, 0))
        engine.toggle_pause()

        assert engine.set_direction(LEFT) is False
        assert engine.pending_direction == RIGHT

        engine.toggle_pause()
        state = engine.step()
        assert state.phase == RUNNING
        assert state.snake[0] == (6, 5)

    def test_direction_ignored_after_game_over(self):
        """Requests made after game over are dropped."""
        engine = make_engine([(0, 5)], direction=LEFT, food=(7, 7))
        engine.step()

        assert engine.set_direction(UP) is False
        assert engine.pending_direction == LEFT


class TestPause:
    """Tests for toggle_pause()."""

    def test_pause_and_resume(self):
        """toggle_pause() flips between RUNNING and PAUSED."""
        engine = make_engine([(5, 5)])

        assert engine.toggle_pause() == PAUSED
        assert engine.phase == PAUSED
        assert engine.toggle_pause() == RUNNING
        assert engine.phase == RUNNING

    def test_step_is_noop_while_paused(self):
        """Paused engines do not move."""
        engine = make_engine([(5, 5)], food=(0, 0))
        engine.toggle_pause()

        before = engine.get_current_state()
        after = engine.step()

        assert after == before

    def test_pause_ignored_after_game_over(self):
        """toggle_pause() cannot leave GAME_OVER."""
        engine = make_engine([(0, 5)], direction=LEFT, food=(7, 7))
        engine.step()

        assert engine.toggle_pause() == GAME_OVER
        assert engine.phase == GAME_OVER

    def test_step_is_noop_after_game_over(self):
        """No tick processing happens after the game is over."""
        engine = make_engine([(0, 5)], direction=LEFT, food=(7, 7))
        engine.step()

        before = engine.get_current_state()
        assert engine.step() == before


class TestReset:
    """Tests for reset()."""

    def test_reset_from_game_over(self):
        """reset() restores the starting position with fresh food."""
        engine = make_engine([(0, 5), (1, 5), (2, 5)], direction=LEFT, food=(7, 7))
        engine.score = 50
        engine.step()
        assert engine.phase == GAME_OVER

        state = engine.reset()

        assert list(state.snake) == [(10, 10)]
        assert state.direction == INITIAL_DIRECTION
        assert state.pending_direction == INITIAL_DIRECTION
        assert state.score == 0
        assert state.tick == 0
        assert state.phase == RUNNING
        assert state.food is not None
        assert state.food not in state.snake

    def test_reset_from_paused(self):
        """reset() is valid from any phase."""
        engine = make_engine([(3, 3)])
        engine.toggle_pause()

        assert engine.reset().phase == RUNNING

    def test_reset_uses_board_centre(self):
        """The origin follows the board size."""
        engine = GameEngine(grid_size=8, rng=random.Random(3))

        assert list(engine.reset().snake) == [(4, 4)]

    def test_reset_food_disjoint_from_snake_for_many_seeds(self):
        """Fresh food never lands on the origin."""
        for seed in range(100):
            engine = GameEngine(grid_size=2, rng=random.Random(seed))
            assert engine.food != (1, 1)


class TestSnapshots:
    """Tests for get_current_state()."""

    def test_snapshot_is_detached_from_engine(self):
        """Later ticks do not change an earlier snapshot."""
        engine = make_engine([(5, 5), (4, 5)], food=(0, 0))
        snapshot = engine.get_current_state()

        engine.step()

        assert list(snapshot.snake) == [(5, 5), (4, 5)]
        assert snapshot.tick == 0

    def test_snapshot_fields(self):
        """The snapshot carries everything needed to render the game."""
        engine = make_engine([(5, 5)], direction=UP, food=(1, 2))
        engine.score = 20

        state = engine.get_current_state()

        assert state.snake == ((5, 5),)
        assert state.food == (1, 2)
        assert state.direction == UP
        assert state.score == 20
        assert state.phase == RUNNING
        assert state.grid_size == GRID_SIZE
