import math
import numbers
import random
from collections import namedtuple
from collections.abc import Mapping

from absl import logging

from input_state import InputAggregator

# --- Lane Layout ---
LANE_WIDTH = 400
LANE_LENGTH = 600           # obstacles past this are off screen
CAR_WIDTH = 50
CAR_HEIGHT = 90
PLAYER_Y = LANE_LENGTH - CAR_HEIGHT - 20
MAX_POSITION = LANE_WIDTH - CAR_WIDTH

# --- Motion ---
CAR_SPEED = 5               # steering distance per tick at magnitude 1
SPAWN_Y = -100
FRAME_REFERENCE_MS = 16.0   # ~60Hz, normalises obstacle motion

# --- Game Difficulty ---
SPEED_INCREMENT = 0.001
INTERVAL_DECREMENT = 0.1
MIN_SPAWN_INTERVAL = 500

# --- Scoring ---
SCORE_COEFFICIENT = 0.05

# --- Run States ---
IDLE = "idle"
RUNNING = "running"
ENDED = "ended"

RunConfig = namedtuple("RunConfig", ["speed", "spawn_interval_ms"])

DIFFICULTIES = {
    "easy": RunConfig(speed=3, spawn_interval_ms=2000),
    "medium": RunConfig(speed=5, spawn_interval_ms=1500),
    "hard": RunConfig(speed=8, spawn_interval_ms=1000),
}

ObstacleView = namedtuple("ObstacleView", ["lateral_offset", "vertical_position"])


class TickResult(namedtuple("TickResult", ["player_position", "obstacles", "score", "ended"])):
    __slots__ = ()

    @property
    def display_score(self):
        return int(math.floor(self.score))


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def intersect(a, b):
    """Axis-aligned overlap of two (x1, y1, x2, y2) rects; touching edges overlap."""
    ax1, ay1, ax2, ay2 = a
    bx1, by1, bx2, by2 = b
    return not (ay1 > by2 or ax2 < bx1 or ay2 < by1 or ax1 > bx2)


def resolve_preset(preset):
    if isinstance(preset, str):
        try:
            return DIFFICULTIES[preset]
        except KeyError:
            raise ValueError(f"Unknown difficulty preset: {preset!r}") from None
    if isinstance(preset, Mapping):
        config = RunConfig(preset["speed"], preset["spawn_interval_ms"])
    else:
        config = RunConfig(*preset)
    for name, value in zip(config._fields, config):
        if isinstance(value, bool) or not isinstance(value, numbers.Real) or not value > 0:
            raise ValueError(f"Preset {name} must be a positive number, got {value!r}")
    return config


def move_player(position, intents):
    for intent in intents:
        position += intent.direction * CAR_SPEED * intent.magnitude
        position = clamp(position, 0, MAX_POSITION)
    return position


class PlayerCar:
    def __init__(self):
        self.position = LANE_WIDTH / 2 - CAR_WIDTH / 2

    @property
    def rect(self):
        return (self.position, PLAYER_Y, self.position + CAR_WIDTH, PLAYER_Y + CAR_HEIGHT)


class Obstacle:
    def __init__(self, obstacle_id, lateral_offset, vertical_position=SPAWN_Y):
        self.id = obstacle_id
        self.lateral_offset = lateral_offset
        self.vertical_position = vertical_position
        self.width = CAR_WIDTH
        self.height = CAR_HEIGHT

    def update(self, delta_ms, speed):
        self.vertical_position += speed * (delta_ms / FRAME_REFERENCE_MS)

    @property
    def rect(self):
        x, y = self.lateral_offset, self.vertical_position
        return (x, y, x + self.width, y + self.height)

    @property
    def off_screen(self):
        return self.vertical_position > LANE_LENGTH

    def view(self):
        return ObstacleView(self.lateral_offset, self.vertical_position)


def maybe_spawn(now_ms, last_spawn_ms, interval_ms, rng=random, obstacle_id=0):
    if now_ms - last_spawn_ms <= interval_ms:
        return None
    # Overlap with recent obstacles is allowed
    return Obstacle(obstacle_id, rng.randrange(MAX_POSITION))


class DifficultyState:
    def __init__(self, speed, spawn_interval_ms):
        self.speed = speed
        self.spawn_interval_ms = spawn_interval_ms

    def advance(self, scale=1.0):
        self.speed += SPEED_INCREMENT * scale
        if self.spawn_interval_ms > MIN_SPAWN_INTERVAL:
            self.spawn_interval_ms = max(MIN_SPAWN_INTERVAL,
                                         self.spawn_interval_ms - INTERVAL_DECREMENT * scale)


class ScoreState:
    def __init__(self):
        self.value = 0.0

    def add(self, speed, scale=1.0):
        self.value += speed * SCORE_COEFFICIENT * scale

    @property
    def display(self):
        return int(math.floor(self.value))


class FrameScheduler:
    """Stand-in for a display refresh: callbacks queued now run on the next frame."""

    def __init__(self):
        self._callbacks = {}
        self._next_handle = 1

    def request_frame(self, callback):
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self._callbacks.pop(handle, None)

    @property
    def pending(self):
        return len(self._callbacks)

    def run_frame(self, timestamp_ms):
        due = sorted(self._callbacks.items())
        self._callbacks.clear()
        for _, callback in due:
            callback(timestamp_ms)


class Game:
    def __init__(self, rng=None, scheduler=None, frame_coupled=True):
        self.rng = rng or random.Random()
        self.scheduler = scheduler or FrameScheduler()
        self.frame_coupled = frame_coupled
        self.inputs = InputAggregator()
        self.state = IDLE
        self.final_score = None
        self._frame_handle = None
        self.reset()

    def reset(self, config=None):
        config = config or DIFFICULTIES["medium"]
        self.config = config
        self.car = PlayerCar()
        self.obstacles = []
        self.score = ScoreState()
        self.difficulty = DifficultyState(config.speed, config.spawn_interval_ms)
        self.last_spawn_ms = 0
        self.last_timestamp = None
        self._next_obstacle_id = 1

    # --- Boundary ---

    def start(self, preset):
        if self.state == RUNNING:
            logging.warning("Start requested while a run is active; ignoring")
            return False
        config = resolve_preset(preset)
        self.restart()
        self.reset(config)
        self.inputs.clear()
        self.state = RUNNING
        logging.info(">>> Run started: speed %s, spawn interval %sms",
                     config.speed, config.spawn_interval_ms)
        self._schedule_next()
        return True

    def stop(self):
        if self.state != RUNNING:
            return
        logging.info(">>> Run stopped")
        self._end_run()

    def restart(self):
        if self.state == RUNNING:
            logging.warning("Restart requested while a run is active; ignoring")
            return
        self._cancel_frame()
        self.state = IDLE
        self.final_score = None
        self.reset()

    def set_input(self, source, value):
        return self.inputs.set_input(source, value)

    def tick(self, timestamp_ms):
        if self.state != RUNNING:
            return self.snapshot()
        if not self._valid_timestamp(timestamp_ms):
            logging.debug("Ignoring timestamp %r", timestamp_ms)
            return self.snapshot()

        if self.last_timestamp is None:
            self.last_timestamp = timestamp_ms
        delta_ms = timestamp_ms - self.last_timestamp
        self.last_timestamp = timestamp_ms

        self.car.position = move_player(self.car.position, self.inputs.intents())
        self._spawn_obstacle(timestamp_ms)
        self._process_obstacles(delta_ms)

        if self.state == RUNNING:
            scale = 1.0 if self.frame_coupled else delta_ms / FRAME_REFERENCE_MS
            self.score.add(self.difficulty.speed, scale)
            self.difficulty.advance(scale)
            self._schedule_next()
        return self.snapshot()

    def snapshot(self):
        return TickResult(
            player_position=self.car.position,
            obstacles=[obs.view() for obs in self.obstacles],
            score=self.score.value,
            ended=self.state == ENDED,
        )

    # --- Per-tick steps ---

    def _valid_timestamp(self, timestamp_ms):
        if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, (int, float)):
            return False
        if not math.isfinite(timestamp_ms) or timestamp_ms < 0:
            return False
        return self.last_timestamp is None or timestamp_ms >= self.last_timestamp

    def _spawn_obstacle(self, now_ms):
        obstacle = maybe_spawn(now_ms, self.last_spawn_ms, self.difficulty.spawn_interval_ms,
                               self.rng, self._next_obstacle_id)
        if obstacle is None:
            return
        self.obstacles.append(obstacle)
        self.last_spawn_ms = now_ms
        self._next_obstacle_id += 1

    def _process_obstacles(self, delta_ms):
        for obs in self.obstacles[:]:
            obs.update(delta_ms, self.difficulty.speed)
            if intersect(self.car.rect, obs.rect):
                self._handle_obstacle_collision(obs)
                return
            if obs.off_screen:
                self.obstacles.remove(obs)

    def _handle_obstacle_collision(self, obs):
        logging.info(">>> Collision with obstacle %d at y=%.1f", obs.id, obs.vertical_position)
        self._end_run()

    def _end_run(self):
        self.state = ENDED
        self._cancel_frame()
        self.final_score = self.score.display
        logging.info(">>> Game over, final score %d", self.final_score)

    # --- Scheduling ---

    def _on_frame(self, timestamp_ms):
        self._frame_handle = None
        self.tick(timestamp_ms)

    def _schedule_next(self):
        if self._frame_handle is None:
            self._frame_handle = self.scheduler.request_frame(self._on_frame)

    def _cancel_frame(self):
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
