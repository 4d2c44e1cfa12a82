import os, sys
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest

import game_logic
from game_logic import (
    CAR_HEIGHT, CAR_SPEED, CAR_WIDTH, LANE_LENGTH, MAX_POSITION, PLAYER_Y,
    Game, Obstacle, PlayerCar, intersect, move_player,
)
from input_state import Intent, NEUTRAL

RECT_PAIRS = [
    ((0, 0, 10, 10), (5, 5, 15, 15)),
    ((0, 0, 10, 10), (20, 0, 30, 10)),
    ((0, 0, 10, 10), (0, 20, 10, 30)),
    ((0, 0, 10, 10), (10, 10, 20, 20)),
    ((0, 0, 100, 100), (40, 40, 60, 60)),
    ((0, 0, 10, 10), (11, 11, 20, 20)),
]


@pytest.mark.parametrize("a,b", RECT_PAIRS)
def test_intersect_is_symmetric(a, b):
    assert intersect(a, b) == intersect(b, a)


def test_identical_rects_collide():
    rect = (175, PLAYER_Y, 175 + CAR_WIDTH, PLAYER_Y + CAR_HEIGHT)
    assert intersect(rect, rect)


def test_disjoint_rects_do_not_collide():
    assert not intersect((0, 0, 10, 10), (20, 20, 30, 30))


def test_separation_on_one_axis_is_enough():
    assert not intersect((0, 0, 10, 10), (20, 0, 30, 10))
    assert not intersect((0, 0, 10, 10), (0, 20, 10, 30))


def test_touching_edges_collide():
    assert intersect((0, 0, 10, 10), (10, 0, 20, 10))


def test_contained_rect_collides():
    assert intersect((0, 0, 100, 100), (40, 40, 60, 60))


def test_player_starts_centred():
    assert PlayerCar().position == game_logic.LANE_WIDTH / 2 - CAR_WIDTH / 2


def test_player_clamped_at_left_edge():
    assert move_player(0, [Intent(-1, 1.0), NEUTRAL]) == 0
    assert move_player(3, [Intent(-1, 1.0), NEUTRAL]) == 0


def test_player_clamped_at_right_edge():
    assert move_player(MAX_POSITION - 1, [Intent(1, 1.0), Intent(1, 3.0)]) == MAX_POSITION


def test_digital_and_tilt_compound():
    assert move_player(100, [Intent(1, 1.0), Intent(1, 0.5)]) == pytest.approx(100 + CAR_SPEED * 1.5)
    assert move_player(100, [Intent(1, 1.0), Intent(-1, 2.0)]) == pytest.approx(100 - CAR_SPEED)


def test_each_pass_is_clamped_independently():
    # left digital is clamped at 0 before the tilt pass moves right
    assert move_player(2, [Intent(-1, 1.0), Intent(1, 1.0)]) == CAR_SPEED


def test_obstacle_motion_normalised_to_reference_frame():
    obs = Obstacle(1, 0)
    obs.update(32, 5)
    assert obs.vertical_position == pytest.approx(-100 + 10)


def test_obstacle_motion_is_frame_rate_independent():
    fast, slow = Obstacle(1, 0), Obstacle(2, 0)
    for _ in range(100):
        fast.update(10, 5)
    for _ in range(20):
        slow.update(50, 5)
    assert fast.vertical_position == pytest.approx(slow.vertical_position)
    assert fast.vertical_position == pytest.approx(-100 + 5 * 1000 / 16)


def _displacement_over_one_second(step_ms):
    game = Game()
    game.start("medium")
    game.difficulty.spawn_interval_ms = 10 ** 9
    obs = Obstacle(99, 0, -100)
    game.obstacles.append(obs)
    for t in range(0, 1000 + step_ms, step_ms):
        game.tick(t)
    return obs.vertical_position + 100


def test_game_displacement_is_frame_rate_independent(monkeypatch):
    monkeypatch.setattr(game_logic, "SPEED_INCREMENT", 0)
    fine = _displacement_over_one_second(10)
    coarse = _displacement_over_one_second(50)
    assert fine == pytest.approx(coarse)
    assert fine == pytest.approx(5 * 1000 / 16)


def test_obstacle_rect_follows_position():
    obs = Obstacle(1, 30, 200)
    assert obs.rect == (30, 200, 30 + CAR_WIDTH, 200 + CAR_HEIGHT)
    assert not obs.off_screen
    obs.vertical_position = LANE_LENGTH + 0.5
    assert obs.off_screen
