import math
import numbers
from collections import namedtuple

from absl import logging

# --- Digital Sources ---
LEFT_KEYS = ("ArrowLeft", "a", "A")
RIGHT_KEYS = ("ArrowRight", "d", "D")
# Recognised so they are not rejected, but they do not steer
IDLE_KEYS = ("ArrowUp", "ArrowDown", "w", "s", "W", "S")
TOUCH_LEFT = "touch_left"
TOUCH_RIGHT = "touch_right"

# --- Tilt ---
TILT = "tilt"
TILT_ENABLED = "tilt_enabled"
TILT_DEADZONE = 2.0     # degrees either side of neutral
TILT_DIVISOR = 10.0     # degrees per unit of magnitude

DIGITAL_SOURCES = LEFT_KEYS + RIGHT_KEYS + IDLE_KEYS + (TOUCH_LEFT, TOUCH_RIGHT)

Intent = namedtuple("Intent", ["direction", "magnitude"])
NEUTRAL = Intent(0, 0.0)


def is_switch_value(value):
    # bool, or a 0/1 integer
    return isinstance(value, bool) or (isinstance(value, int) and value in (0, 1))


def tilt_from_landmarks(wrist, middle_mcp, offset=0.0):
    """Roll of a hand in degrees from two landmarks, positive when leaning right.

    Landmarks only need ``x`` and ``y`` attributes in image coordinates
    (y grows downwards), so an upright hand reads 0.
    """
    dx = middle_mcp.x - wrist.x
    dy = wrist.y - middle_mcp.y
    if dx == 0 and dy == 0:
        return 0.0
    return math.degrees(math.atan2(dx, dy)) - offset


class InputAggregator:
    def __init__(self):
        self.held = dict.fromkeys(DIGITAL_SOURCES, False)
        self.tilt_enabled = False
        self.tilt_angle = 0.0

    def set_input(self, source, value):
        if not isinstance(source, str):
            logging.debug("Ignoring input source of type %s", type(source).__name__)
            return False

        if source in self.held or source == TILT_ENABLED:
            if not is_switch_value(value):
                logging.debug("Ignoring non-boolean value %r for %s", value, source)
                return False
            if source == TILT_ENABLED:
                self.tilt_enabled = bool(value)
                if not self.tilt_enabled:
                    self.tilt_angle = 0.0
            else:
                self.held[source] = bool(value)
            return True

        if source == TILT:
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                logging.debug("Ignoring non-numeric tilt angle %r", value)
                return False
            angle = float(value)
            if not math.isfinite(angle):
                logging.debug("Ignoring non-finite tilt angle %r", value)
                return False
            self.tilt_angle = angle
            return True

        logging.debug("Ignoring unknown input source %r", source)
        return False

    def clear(self):
        for source in self.held:
            self.held[source] = False

    def _any_held(self, sources):
        return any(self.held[s] for s in sources)

    def digital_intent(self):
        left = self._any_held(LEFT_KEYS) or self.held[TOUCH_LEFT]
        right = self._any_held(RIGHT_KEYS) or self.held[TOUCH_RIGHT]
        direction = int(right) - int(left)
        if direction == 0:
            return NEUTRAL
        return Intent(direction, 1.0)

    def tilt_intent(self):
        if not self.tilt_enabled or abs(self.tilt_angle) <= TILT_DEADZONE:
            return NEUTRAL
        direction = 1 if self.tilt_angle > 0 else -1
        return Intent(direction, abs(self.tilt_angle) / TILT_DIVISOR)

    def intents(self):
        # Applied one after the other by the player update, never summed here
        return self.digital_intent(), self.tilt_intent()
