import os, sys, random
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest

from game_logic import (
    DIFFICULTIES, MAX_POSITION, MIN_SPAWN_INTERVAL, SPAWN_Y,
    DifficultyState, Game, ScoreState, maybe_spawn,
)


class FixedRng:
    def __init__(self, value):
        self.value = value

    def randrange(self, stop):
        return self.value


def test_no_spawn_within_interval():
    assert maybe_spawn(1000, 0, 1500, FixedRng(10)) is None
    assert maybe_spawn(1500, 0, 1500, FixedRng(10)) is None


def test_spawn_after_interval():
    obs = maybe_spawn(1501, 0, 1500, FixedRng(120), obstacle_id=7)
    assert obs.id == 7
    assert obs.lateral_offset == 120
    assert obs.vertical_position == SPAWN_Y


def test_spawn_offsets_stay_in_lane():
    rng = random.Random(1234)
    offsets = [maybe_spawn(10, 0, 5, rng).lateral_offset for _ in range(500)]
    assert all(0 <= x < MAX_POSITION for x in offsets)
    assert len(set(offsets)) > 50


def test_difficulty_ramps_every_tick():
    diff = DifficultyState(5, 1500)
    diff.advance()
    assert diff.speed == pytest.approx(5.001)
    assert diff.spawn_interval_ms == pytest.approx(1499.9)


def test_spawn_interval_floors():
    diff = DifficultyState(5, MIN_SPAWN_INTERVAL + 0.05)
    diff.advance()
    assert diff.spawn_interval_ms == MIN_SPAWN_INTERVAL
    diff.advance()
    assert diff.spawn_interval_ms == MIN_SPAWN_INTERVAL
    assert diff.speed > 5


def test_difficulty_scale():
    diff = DifficultyState(3, 2000)
    diff.advance(scale=2.0)
    assert diff.speed == pytest.approx(3.002)
    assert diff.spawn_interval_ms == pytest.approx(1999.8)


def test_score_accumulates_with_speed():
    score = ScoreState()
    score.add(5)
    score.add(5)
    assert score.value == pytest.approx(0.5)
    assert score.display == 0
    for _ in range(20):
        score.add(8)
    assert score.value == pytest.approx(8.5)
    assert score.display == 8


def test_presets():
    assert DIFFICULTIES["easy"] == (3, 2000)
    assert DIFFICULTIES["medium"] == (5, 1500)
    assert DIFFICULTIES["hard"] == (8, 1000)


@pytest.mark.parametrize("preset", list(DIFFICULTIES))
def test_run_progression_is_monotonic(preset):
    game = Game(rng=random.Random(7))
    game.start(preset)
    speeds, intervals, scores = [], [], []
    t = 0
    while not game.snapshot().ended and t < 60000:
        result = game.tick(t)
        speeds.append(game.difficulty.speed)
        intervals.append(game.difficulty.spawn_interval_ms)
        scores.append(result.score)
        t += 16
    assert all(b >= a for a, b in zip(speeds, speeds[1:]))
    assert all(b <= a for a, b in zip(intervals, intervals[1:]))
    assert all(i >= MIN_SPAWN_INTERVAL for i in intervals)
    assert all(b >= a for a, b in zip(scores, scores[1:]))


def test_frame_coupled_progression_ignores_delta():
    game = Game()
    game.start("medium")
    game.tick(0)
    assert game.score.value == pytest.approx(0.25)
    assert game.difficulty.speed == pytest.approx(5.001)


def test_time_scaled_progression_follows_delta():
    game = Game(frame_coupled=False)
    game.start("medium")
    game.tick(0)
    assert game.score.value == 0
    assert game.difficulty.speed == 5
    game.tick(32)
    assert game.score.value == pytest.approx(5 * 0.05 * 2)
    assert game.difficulty.speed == pytest.approx(5.002)
    assert game.difficulty.spawn_interval_ms == pytest.approx(1499.8)
